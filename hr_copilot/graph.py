# graph.py

# ========== Imports ==========
import logging
from functools import partial
from typing import List, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langgraph.graph import StateGraph, START, END

from hr_copilot.nodes import classify_query, load_context, retrieve, synthesize, update_history
from hr_copilot.retriever import KnowledgeRetriever
from hr_copilot.state import EmployeeContext, HistoryEntry, State

logger = logging.getLogger(__name__)


def build_graph(retrievers: Sequence[KnowledgeRetriever], llm: BaseChatModel):
    """Compile the linear copilot pipeline with its collaborators bound in."""
    builder = StateGraph(State)

    # ========== Nodes (in execution order) ==========
    # START -> load_context -> classify -> retrieve -> synthesize -> update_history -> END
    builder.add_node("load_context", load_context)
    builder.add_node("classify", classify_query)
    builder.add_node("retrieve", partial(retrieve, retrievers=retrievers))
    builder.add_node("synthesize", partial(synthesize, llm=llm))
    builder.add_node("update_history", update_history)

    # ========== Edges ==========
    # No conditional edges: category is informational only
    builder.add_edge(START, "load_context")
    builder.add_edge("load_context", "classify")
    builder.add_edge("classify", "retrieve")
    builder.add_edge("retrieve", "synthesize")
    builder.add_edge("synthesize", "update_history")
    builder.add_edge("update_history", END)

    return builder.compile()


class HRCopilot:
    """
    Pipeline driver. Built once with its retrievers and chat model and then
    reused across requests; holds no per-request state.
    """

    def __init__(self, retrievers: Sequence[KnowledgeRetriever], llm: BaseChatModel):
        self._retrievers = tuple(retrievers)
        self._llm = llm
        self._graph = build_graph(self._retrievers, llm)

    @classmethod
    def from_env(cls) -> "HRCopilot":
        from hr_copilot.llm import get_llm
        from hr_copilot.retriever import default_retrievers

        return cls(default_retrievers(), get_llm("gen"))

    @property
    def retrievers(self) -> tuple:
        return self._retrievers

    @property
    def graph(self):
        return self._graph

    def run(self, initial_state: State) -> State:
        """Run every step in order. Raises SynthesisError if the backend fails."""
        logger.info(f"pipeline start: {initial_state['query']!r}")
        return self._graph.invoke(initial_state)

    def ask(
        self,
        query: str,
        employee_context: Optional[EmployeeContext] = None,
        conversation_history: Optional[List[HistoryEntry]] = None,
    ) -> State:
        return self.run({
            "query": query,
            "employee_context": employee_context,
            "conversation_history": conversation_history or [],
        })


# ========== Local demo ==========
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    copilot = HRCopilot.from_env()
    out_state = copilot.ask("How many vacation days do I get per year?")
    print("Category:", out_state["category"])
    print("Answer:\n", out_state["final_response"])

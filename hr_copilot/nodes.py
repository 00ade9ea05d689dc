# nodes.py

import logging
from typing import List, Optional, Sequence

from langchain_core.language_models import BaseChatModel

from hr_copilot.errors import SynthesisError
from hr_copilot.retriever import KnowledgeRetriever, is_sentinel, retrieve_all
from hr_copilot.router import classify
from hr_copilot.state import EmployeeContext, HistoryEntry, RetrievedSnippet, State

logger = logging.getLogger(__name__)


# =============================================
# Node: context pass-through
# =============================================

def load_context(state: State) -> dict:
    # Copy the history so the caller's list is never touched
    return {
        "employee_context": state.get("employee_context"),
        "conversation_history": list(state.get("conversation_history") or []),
    }


# =============================================
# Node: classify
# =============================================

def classify_query(state: State) -> dict:
    category = classify(state["query"])
    logger.info(f"category: {category}")
    return {"category": category}


# =============================================
# Node: retrieve (all configured sources)
# =============================================

def retrieve(state: State, retrievers: Sequence[KnowledgeRetriever]) -> dict:
    retrieved = retrieve_all(retrievers, state["query"])
    usable = sum(1 for r in retrieved if not is_sentinel(r["text"]))
    logger.info(f"retrieval: {usable}/{len(retrieved)} sources returned information")
    return {"retrieved": retrieved}


# =============================================
# Node: synthesize response
# =============================================

SYNTHESIS_PROMPT = """
You are an HR Copilot, a friendly assistant that answers employees' HR questions.
Answer the question clearly and concisely using the information below.

# Question
{query}

# Category
{category}

# Employee context
{employee_context}

# Conversation so far
{conversation_history}

# Retrieved information
{retrieved}

# Usable information found
{usable}

# Rules
1. If any retrieved information above is usable, base your answer on it and never say that no information is available.
2. If none of the sources returned usable information, say explicitly that you do not have enough data to answer, and suggest that the employee contact HR for further help.
3. Do not invent policies, numbers or dates that are not in the retrieved information.

# Answer
""".strip()


def _format_employee_context(context: Optional[EmployeeContext]) -> str:
    if not context:
        return "Not provided"
    return "\n".join(f"- {key}: {value}" for key, value in context.items())


def _format_history(history: List[HistoryEntry]) -> str:
    if not history:
        return "No previous conversation"
    return "\n".join(f"{entry['role']}: {entry['content']}" for entry in history)


def _format_retrieved(retrieved: List[RetrievedSnippet]) -> str:
    if not retrieved:
        return "No sources configured"
    return "\n\n".join(f"[{i}] ({r['source_id']})\n{r['text']}" for i, r in enumerate(retrieved, start=1))


def build_prompt(state: State) -> str:
    retrieved = state.get("retrieved", [])
    usable = any(not is_sentinel(r["text"]) for r in retrieved)
    return SYNTHESIS_PROMPT.format(
        query=state["query"],
        category=state.get("category", "GENERAL"),
        employee_context=_format_employee_context(state.get("employee_context")),
        conversation_history=_format_history(state.get("conversation_history", [])),
        retrieved=_format_retrieved(retrieved),
        usable="yes" if usable else "no",
    )


def synthesize(state: State, llm: BaseChatModel) -> dict:
    prompt = build_prompt(state)
    try:
        answer = llm.invoke(prompt).content
    except Exception as e:
        raise SynthesisError(f"Response generation failed: {e}") from e

    return {"final_response": (answer or "").strip()}


# =============================================
# Node: update history
# =============================================

def update_history(state: State) -> dict:
    history = list(state.get("conversation_history") or [])
    history.append({"role": "user", "content": state["query"]})
    history.append({"role": "assistant", "content": state["final_response"]})
    return {"conversation_history": history}

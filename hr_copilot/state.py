# state.py
from typing import Dict, List, Literal, Optional, TypedDict

# Closed set of categories produced by the classifier
Category = Literal["POLICY", "LEAVE", "COMPENSATION", "TRAINING", "GENERAL"]


class EmployeeContext(TypedDict, total=False):
    """Caller-supplied employee information, passed through untouched."""
    department: str
    role: str
    tenure: str


class HistoryEntry(TypedDict):
    role: Literal["user", "assistant"]
    content: str


class RetrievedSnippet(TypedDict):
    source_id: str    # which knowledge source answered
    text: str         # snippet text or a sentinel


class State(TypedDict, total=False):
    """HR Copilot pipeline state"""

    # === Input ===
    query: str                                       # user query, fixed at entry

    # === Context pass-through ===
    employee_context: Optional[EmployeeContext]      # {"department", "role", "tenure"} or None
    conversation_history: List[HistoryEntry]         # caller persists and resupplies this

    # === Classifier ===
    category: Category

    # === Retrieval ===
    retrieved: List[RetrievedSnippet]                # one entry per configured retriever, in order

    # === Synthesis ===
    final_response: str                              # set only when generation succeeded


def to_payload(state: State) -> Dict:
    """Serialize a finished state into the response body fields."""
    return {
        "final_response": state["final_response"],
        "category": state["category"],
        "retrieved": [dict(r) for r in state.get("retrieved", [])],
        "conversation_history": [dict(h) for h in state.get("conversation_history", [])],
    }

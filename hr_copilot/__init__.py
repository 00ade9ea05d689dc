"""HR Copilot: answers employee HR questions from policy and document indexes."""

from hr_copilot.graph import HRCopilot, build_graph
from hr_copilot.retriever import ERROR_SENTINEL, NO_RESULT_SENTINEL, KnowledgeRetriever
from hr_copilot.router import classify
from hr_copilot.tickets import TicketSystem

__version__ = "0.1.0"

__all__ = [
    "HRCopilot",
    "build_graph",
    "KnowledgeRetriever",
    "NO_RESULT_SENTINEL",
    "ERROR_SENTINEL",
    "classify",
    "TicketSystem",
]

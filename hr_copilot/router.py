# router.py

from typing import List, Tuple
from hr_copilot.state import Category, RetrievedSnippet
from hr_copilot.retriever import is_sentinel


# =========================
# Classifier: keyword table
# =========================

# Evaluated top to bottom, first match wins.
# Specific topics come before the generic POLICY rule: "leave policy" -> LEAVE.
CATEGORY_RULES: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    ("LEAVE", ("leave", "vacation", "time off", "holiday", "sick day")),
    ("COMPENSATION", ("salary", "compensation", "payroll", "payslip", "bonus")),
    ("TRAINING", ("training", "development", "course", "certification")),
    ("POLICY", ("policy", "policies", "handbook", "code of conduct")),
)

DEFAULT_CATEGORY: Category = "GENERAL"


def classify(query: str) -> Category:
    """Map a query to a category by case-insensitive keyword matching"""
    text = (query or "").lower()
    if not text.strip():
        return DEFAULT_CATEGORY

    for category, keywords in CATEGORY_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


# =========================
# Escalation (post-processing)
# =========================

ESCALATION_MARKERS = (
    "contact hr",
    "contacting hr",
    "reach out to hr",
    "contact the hr",
    "contact your hr",
    "escalate",
)


def needs_escalation(final_response: str) -> bool:
    text = (final_response or "").lower()
    return any(marker in text for marker in ESCALATION_MARKERS)


def escalation_priority(retrieved: List[RetrievedSnippet]) -> str:
    """No usable source at all -> high, otherwise normal"""
    if any(not is_sentinel(r["text"]) for r in retrieved):
        return "normal"
    return "high"

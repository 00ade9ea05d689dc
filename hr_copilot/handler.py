# handler.py

import json
import logging
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ValidationError, field_validator

from hr_copilot.errors import InputError, SynthesisError
from hr_copilot.graph import HRCopilot
from hr_copilot.router import escalation_priority, needs_escalation
from hr_copilot.state import State, to_payload
from hr_copilot.tickets import TicketSystem

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ("POST",)


# =========================
# Request schema
# =========================

class HistoryMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class CopilotRequest(BaseModel):
    query: str
    # opaque to the pipeline, only its shape (an object) is checked here
    employee_context: Optional[Dict[str, Any]] = None
    conversation_history: List[HistoryMessage] = []

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be empty")
        return v


def parse_request(method: str, body: Any) -> CopilotRequest:
    if (method or "").upper() not in ALLOWED_METHODS:
        raise InputError(f"Method {method} not allowed", status_code=405)

    if isinstance(body, (str, bytes)):
        try:
            body = json.loads(body) if body else {}
        except ValueError as e:
            raise InputError(f"Request body is not valid JSON: {e}")
    if not isinstance(body, dict):
        raise InputError("Request body must be a JSON object")
    if "query" not in body:
        raise InputError("Missing required field: query")

    try:
        return CopilotRequest.model_validate(body)
    except ValidationError as e:
        raise InputError(str(e))


# =========================
# Escalation side effect
# =========================

def _escalate(state: State, tickets: TicketSystem) -> Optional[str]:
    """Open a ticket when the answer hands over to HR. Never raises."""
    if not needs_escalation(state["final_response"]):
        return None
    try:
        return tickets.create_ticket(
            description=f"[{state['category']}] {state['query']}",
            priority=escalation_priority(state.get("retrieved", [])),
        )
    except Exception:
        logger.exception("ticket creation failed, answering without a ticket")
        return None


# =========================
# Entry point
# =========================

def handle_request(
    copilot: HRCopilot,
    tickets: TicketSystem,
    method: str,
    body: Any,
) -> Tuple[int, Dict[str, Any]]:
    """Run one request through the copilot. Returns (status code, JSON body)."""
    try:
        request = parse_request(method, body)
    except InputError as e:
        logger.info(f"rejected request ({e.status_code}): {e}")
        error = "Method Not Allowed" if e.status_code == 405 else "Bad Request"
        return e.status_code, {"error": error, "details": str(e)}

    try:
        state = copilot.run({
            "query": request.query,
            "employee_context": request.employee_context,
            "conversation_history": [m.model_dump() for m in request.conversation_history],
        })
    except SynthesisError as e:
        logger.error(f"synthesis failed: {e}")
        return 500, {"error": "Failed to generate response", "details": str(e)}
    except Exception as e:
        logger.exception("unexpected error while running the copilot")
        return 500, {"error": "Internal Server Error", "details": str(e)}

    payload = to_payload(state)
    ticket_id = _escalate(state, tickets)
    if ticket_id:
        payload["ticketId"] = ticket_id
    return 200, payload

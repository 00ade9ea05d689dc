# tickets.py

import logging
import threading
import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

logger = logging.getLogger(__name__)

Priority = Literal["low", "normal", "high"]
Status = Literal["open", "in_progress", "closed"]

PRIORITIES = ("low", "normal", "high")
STATUSES = ("open", "in_progress", "closed")


@dataclass
class Ticket:
    """An escalation handed over to a human HR contact."""

    id: str
    description: str
    priority: Priority = "normal"
    status: Status = "open"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_at"] = self.created_at.isoformat()
        return data


class TicketSystem:
    """In-memory escalation sink. Nothing is persisted across processes."""

    def __init__(self):
        self._tickets: Dict[str, Ticket] = {}
        self._lock = threading.Lock()

    def create_ticket(self, description: str, priority: Priority = "normal") -> str:
        if priority not in PRIORITIES:
            raise ValueError(f"Unknown priority: {priority}")

        ticket = Ticket(id=f"TKT-{uuid.uuid4().hex[:8]}", description=description, priority=priority)
        with self._lock:
            self._tickets[ticket.id] = ticket
        logger.info(f"ticket created: {ticket.id} ({priority})")
        return ticket.id

    def get_ticket(self, ticket_id: str) -> Ticket:
        with self._lock:
            return self._tickets[ticket_id]

    def list_tickets(self, status: Optional[Status] = None) -> List[Ticket]:
        with self._lock:
            tickets = list(self._tickets.values())
        if status is not None:
            tickets = [t for t in tickets if t.status == status]
        return tickets

    def update_status(self, ticket_id: str, status: Status) -> Ticket:
        if status not in STATUSES:
            raise ValueError(f"Unknown status: {status}")
        with self._lock:
            ticket = self._tickets[ticket_id]
            ticket.status = status
        return ticket

    def __len__(self) -> int:
        with self._lock:
            return len(self._tickets)

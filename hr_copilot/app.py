"""FastAPI application, the HTTP trigger for the HR Copilot.

Endpoints:
    POST /                    Ask the copilot (serverless-style root trigger)
    POST /api/copilot         Same as above
    POST /api/documents/ask   Document QA variant
    GET  /api/tickets         Escalation tickets opened so far
    GET  /api/tickets/{id}    One ticket
    GET  /health              Health check
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from hr_copilot.document_qa import DocumentQA
from hr_copilot.graph import HRCopilot
from hr_copilot.handler import handle_request
from hr_copilot.tickets import TicketSystem

load_dotenv()
logger = logging.getLogger(__name__)

# Every method is routed to the handler so it can answer 405 itself
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or os.getenv("LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def create_app(
    copilot: Optional[HRCopilot] = None,
    tickets: Optional[TicketSystem] = None,
    document_qa: Optional[DocumentQA] = None,
) -> FastAPI:
    """Build the app. Collaborators not passed in are built from the environment at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.copilot is None:
            logger.info("Building HR Copilot pipeline from environment")
            app.state.copilot = HRCopilot.from_env()
        if app.state.document_qa is None:
            app.state.document_qa = DocumentQA.from_env()
        yield

    app = FastAPI(title="HR Copilot", version="0.1.0", lifespan=lifespan)
    app.state.copilot = copilot
    app.state.tickets = tickets if tickets is not None else TicketSystem()
    app.state.document_qa = document_qa

    @app.api_route("/", methods=ALL_METHODS)
    @app.api_route("/api/copilot", methods=ALL_METHODS)
    async def copilot_trigger(request: Request):
        body = await request.body()
        status, payload = await run_in_threadpool(
            handle_request, app.state.copilot, app.state.tickets, request.method, body
        )
        return JSONResponse(payload, status_code=status)

    @app.post("/api/documents/ask")
    async def ask_document(request: Request):
        try:
            body = await request.json()
        except ValueError:
            body = None
        question = body.get("question") if isinstance(body, dict) else None
        if not isinstance(question, str) or not question.strip():
            return JSONResponse({"error": "Bad Request", "details": "Missing required field: question"}, status_code=400)

        try:
            answer = await run_in_threadpool(app.state.document_qa.ask, question)
        except Exception as e:
            logger.exception("document QA failed")
            return JSONResponse({"error": "Internal Server Error", "details": str(e)}, status_code=500)
        return {"answer": answer}

    @app.get("/api/tickets")
    async def list_tickets(status: Optional[str] = None):
        return {"tickets": [t.to_dict() for t in app.state.tickets.list_tickets(status)]}

    @app.get("/api/tickets/{ticket_id}")
    async def get_ticket(ticket_id: str):
        try:
            return app.state.tickets.get_ticket(ticket_id).to_dict()
        except KeyError:
            return JSONResponse({"error": "Not Found", "details": f"Unknown ticket: {ticket_id}"}, status_code=404)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()

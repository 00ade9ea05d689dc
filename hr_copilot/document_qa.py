# document_qa.py
"""
Document question answering over a single vector index.

The retrieval tool is always called once up front and its output is handed to
the agent inline, so the agent never answers without seeing the document.
"""

import logging
import os

from langchain_core.language_models import BaseChatModel
from langchain_core.retrievers import BaseRetriever
from langchain_core.tools import BaseTool
from langgraph.prebuilt import create_react_agent

logger = logging.getLogger(__name__)

NO_DOCUMENT_RESULT = "No relevant information found in the document."

DOCUMENT_QA_SYSTEM_PROMPT = """
You are an AI assistant designed to analyze and summarize a single document.
Do not answer questions unrelated to the document.
The document is already loaded and accessible through the VectorStoreQA tool.
You MUST ALWAYS use the VectorStoreQA tool before answering any question.
DO NOT ask for the document to be provided - it is already available through the tool.
After using the tool, summarize or answer based on the retrieved information.
If the tool doesn't return any relevant information, say so clearly.
""".strip()


class DocumentQATool(BaseTool):
    name: str = "VectorStoreQA"
    description: str = (
        "This tool MUST be used to access the document content. "
        "It retrieves relevant information from the document based on the input query."
    )
    retriever: BaseRetriever

    def _run(self, query: str) -> str:
        logger.info(f"VectorStoreQA called with: {query!r}")
        docs = self.retriever.invoke(query)
        logger.info(f"VectorStoreQA retrieved {len(docs)} documents")
        if not docs:
            return NO_DOCUMENT_RESULT
        return "\n\n".join(doc.page_content for doc in docs)


class DocumentQA:
    """Forced retrieval followed by one agent run."""

    def __init__(self, retriever: BaseRetriever, llm: BaseChatModel):
        self.tool = DocumentQATool(retriever=retriever)
        self.agent = create_react_agent(
            model=llm,
            tools=[self.tool],
            prompt=DOCUMENT_QA_SYSTEM_PROMPT,
        )

    @classmethod
    def from_env(cls) -> "DocumentQA":
        from hr_copilot.db import get_vectorstore
        from hr_copilot.llm import get_llm

        vs = get_vectorstore(os.getenv("QA_INDEX", "chatbot"))
        return cls(vs.as_retriever(), get_llm("agent"))

    def ask(self, question: str) -> str:
        tool_result = self.tool.invoke(question)

        user_message = (
            f"Based on the following information from the document, {question}\n\n"
            f"Document content: {tool_result}"
        )
        result = self.agent.invoke({"messages": [{"role": "user", "content": user_message}]})

        answer = result["messages"][-1].content if result.get("messages") else ""
        logger.info(f"agent answered ({len(answer)} chars)")
        return answer

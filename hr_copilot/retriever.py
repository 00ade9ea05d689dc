# retriever.py

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from langchain_core.vectorstores import VectorStore

from hr_copilot.state import RetrievedSnippet

logger = logging.getLogger(__name__)

NO_RESULT_SENTINEL = "No relevant information found."
ERROR_SENTINEL = "Error retrieving information."


def is_sentinel(text: str) -> bool:
    return text in (NO_RESULT_SENTINEL, ERROR_SENTINEL)


class KnowledgeRetriever:
    """
    Best-effort lookup against a single vector store.

    retrieve() never raises: an empty result becomes NO_RESULT_SENTINEL and
    any failure (network, auth, malformed response) becomes ERROR_SENTINEL.
    """

    def __init__(self, source_id: str, vectorstore: VectorStore, k: int = 3):
        self.source_id = source_id
        self.vectorstore = vectorstore
        self.k = k

    def __repr__(self) -> str:
        return f"KnowledgeRetriever(source_id={self.source_id!r}, k={self.k})"

    def retrieve(self, query: str) -> str:
        query = (query or "").strip()
        if not query:
            return NO_RESULT_SENTINEL

        try:
            docs = self.vectorstore.similarity_search(query, k=self.k)
            contents = [doc.page_content.strip() for doc in docs if (doc.page_content or "").strip()]
        except Exception as e:
            logger.warning(f"[{self.source_id}] retrieval failed: {e}")
            return ERROR_SENTINEL

        if not contents:
            logger.info(f"[{self.source_id}] no matching documents")
            return NO_RESULT_SENTINEL

        logger.info(f"[{self.source_id}] {len(contents)} documents retrieved")
        return "\n\n".join(contents)


def retrieve_all(retrievers: Sequence[KnowledgeRetriever], query: str) -> List[RetrievedSnippet]:
    """Run every retriever and return one snippet per retriever, in configured order."""
    if not retrievers:
        return []
    if len(retrievers) == 1:
        texts = [retrievers[0].retrieve(query)]
    else:
        # executor.map keeps input order regardless of completion order
        with ThreadPoolExecutor(max_workers=len(retrievers)) as pool:
            texts = list(pool.map(lambda r: r.retrieve(query), retrievers))

    return [{"source_id": r.source_id, "text": text} for r, text in zip(retrievers, texts)]


def default_retrievers() -> List[KnowledgeRetriever]:
    """Policy index first, then the secondary document index."""
    from hr_copilot.db import get_vectorstore

    k = int(os.getenv("RETRIEVER_TOP_K", "3"))
    policy_index = os.getenv("POLICY_INDEX", "hr-policies")
    document_index = os.getenv("DOCUMENT_INDEX", "hr-documents")
    return [
        KnowledgeRetriever("policy_index", get_vectorstore(policy_index), k=k),
        KnowledgeRetriever("document_index", get_vectorstore(document_index), k=k),
    ]

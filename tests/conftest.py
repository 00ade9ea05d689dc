import pytest
from langchain_core.documents import Document
from langchain_core.messages import AIMessage

from hr_copilot.graph import HRCopilot
from hr_copilot.retriever import KnowledgeRetriever
from hr_copilot.tickets import TicketSystem


class FakeVectorStore:
    """Stands in for PineconeVectorStore.similarity_search."""

    def __init__(self, texts=None, error=None):
        self.docs = [Document(page_content=t, metadata={"source": f"doc#{i}"}) for i, t in enumerate(texts or [])]
        self.error = error
        self.calls = []

    def similarity_search(self, query, k=4):
        self.calls.append((query, k))
        if self.error is not None:
            raise self.error
        return self.docs[:k]


class RecordingLLM:
    """Chat model double that remembers every prompt it was given."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    def invoke(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.response)


@pytest.fixture
def leave_store():
    return FakeVectorStore(["Employees get 20 days annual leave."])


@pytest.fixture
def empty_store():
    return FakeVectorStore([])


@pytest.fixture
def broken_store():
    return FakeVectorStore(error=ConnectionError("pinecone unreachable"))


@pytest.fixture
def tickets():
    return TicketSystem()


@pytest.fixture
def make_copilot():
    """Build a copilot over (source_id, store) pairs and a recording LLM."""

    def _make(stores, llm):
        retrievers = [KnowledgeRetriever(source_id, store, k=3) for source_id, store in stores]
        return HRCopilot(retrievers, llm)

    return _make

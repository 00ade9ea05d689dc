import time

from langchain_core.documents import Document

from hr_copilot.retriever import (
    ERROR_SENTINEL,
    NO_RESULT_SENTINEL,
    KnowledgeRetriever,
    is_sentinel,
    retrieve_all,
)
from tests.conftest import FakeVectorStore


def test_returns_joined_page_contents():
    store = FakeVectorStore(["First chunk.", "Second chunk."])
    retriever = KnowledgeRetriever("policy_index", store, k=2)
    assert retriever.retrieve("leave") == "First chunk.\n\nSecond chunk."
    assert store.calls == [("leave", 2)]


def test_empty_result_is_not_found_sentinel(empty_store):
    assert KnowledgeRetriever("policy_index", empty_store).retrieve("anything") == NO_RESULT_SENTINEL


def test_blank_query_skips_the_store(leave_store):
    assert KnowledgeRetriever("policy_index", leave_store).retrieve("   ") == NO_RESULT_SENTINEL
    assert leave_store.calls == []


def test_failure_becomes_error_sentinel(broken_store):
    """Errors never leave the retriever."""
    assert KnowledgeRetriever("policy_index", broken_store).retrieve("leave") == ERROR_SENTINEL


def test_malformed_documents_become_error_sentinel():
    class WeirdStore:
        def similarity_search(self, query, k=4):
            return [object()]

    assert KnowledgeRetriever("policy_index", WeirdStore()).retrieve("leave") == ERROR_SENTINEL


def test_sentinels_are_distinct():
    assert NO_RESULT_SENTINEL != ERROR_SENTINEL
    assert is_sentinel(NO_RESULT_SENTINEL)
    assert is_sentinel(ERROR_SENTINEL)
    assert not is_sentinel("Employees get 20 days annual leave.")


def test_retrieve_all_keeps_configured_order(leave_store, empty_store, broken_store):
    retrievers = [
        KnowledgeRetriever("a", broken_store),
        KnowledgeRetriever("b", leave_store),
        KnowledgeRetriever("c", empty_store),
    ]
    result = retrieve_all(retrievers, "leave")
    assert [r["source_id"] for r in result] == ["a", "b", "c"]
    assert [r["text"] for r in result] == [
        ERROR_SENTINEL,
        "Employees get 20 days annual leave.",
        NO_RESULT_SENTINEL,
    ]


def test_retrieve_all_order_ignores_completion_order():
    class SlowStore(FakeVectorStore):
        def similarity_search(self, query, k=4):
            time.sleep(0.05)
            return super().similarity_search(query, k)

    retrievers = [
        KnowledgeRetriever("slow", SlowStore(["slow answer"])),
        KnowledgeRetriever("fast", FakeVectorStore(["fast answer"])),
    ]
    result = retrieve_all(retrievers, "q")
    assert result == [
        {"source_id": "slow", "text": "slow answer"},
        {"source_id": "fast", "text": "fast answer"},
    ]


def test_retrieve_all_with_no_retrievers():
    assert retrieve_all([], "q") == []


def test_respects_top_k():
    store = FakeVectorStore(["one", "two", "three", "four"])
    assert KnowledgeRetriever("p", store, k=2).retrieve("q") == "one\n\ntwo"


def test_whitespace_documents_are_ignored():
    class BlankStore:
        def similarity_search(self, query, k=4):
            return [Document(page_content="   ")]

    assert KnowledgeRetriever("p", BlankStore()).retrieve("q") == NO_RESULT_SENTINEL

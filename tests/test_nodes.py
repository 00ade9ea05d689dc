import pytest

from hr_copilot.errors import SynthesisError
from hr_copilot.nodes import build_prompt, load_context, synthesize, update_history
from hr_copilot.retriever import ERROR_SENTINEL, NO_RESULT_SENTINEL
from tests.conftest import RecordingLLM


def _state(**overrides):
    state = {
        "query": "What is our leave policy?",
        "category": "LEAVE",
        "employee_context": {"department": "Engineering", "role": "Developer", "tenure": "2 years"},
        "conversation_history": [],
        "retrieved": [
            {"source_id": "policy_index", "text": "Employees get 20 days annual leave."},
            {"source_id": "document_index", "text": NO_RESULT_SENTINEL},
        ],
    }
    state.update(overrides)
    return state


def test_load_context_passes_through_without_aliasing():
    history = [{"role": "user", "content": "hi"}]
    context = {"department": "Sales"}
    out = load_context({"query": "q", "employee_context": context, "conversation_history": history})
    assert out["employee_context"] is context
    assert out["conversation_history"] == history
    assert out["conversation_history"] is not history


def test_load_context_defaults():
    assert load_context({"query": "q"}) == {"employee_context": None, "conversation_history": []}


def test_prompt_contains_every_input():
    prompt = build_prompt(_state(conversation_history=[
        {"role": "user", "content": "Hello"},
        {"role": "assistant", "content": "Hi, how can I help?"},
    ]))
    assert "What is our leave policy?" in prompt
    assert "LEAVE" in prompt
    assert "- department: Engineering" in prompt
    assert "- tenure: 2 years" in prompt
    assert "user: Hello" in prompt
    assert "assistant: Hi, how can I help?" in prompt
    assert "[1] (policy_index)\nEmployees get 20 days annual leave." in prompt
    assert f"[2] (document_index)\n{NO_RESULT_SENTINEL}" in prompt


def test_prompt_rules_are_always_present():
    prompt = build_prompt(_state())
    assert "never say that no information is available" in prompt
    assert "do not have enough data" in prompt
    assert "contact HR" in prompt


def test_prompt_flags_usable_information():
    assert "# Usable information found\nyes" in build_prompt(_state())

    no_data = _state(retrieved=[
        {"source_id": "policy_index", "text": NO_RESULT_SENTINEL},
        {"source_id": "document_index", "text": ERROR_SENTINEL},
    ])
    assert "# Usable information found\nno" in build_prompt(no_data)


def test_prompt_without_context_or_history():
    prompt = build_prompt(_state(employee_context=None))
    assert "# Employee context\nNot provided" in prompt
    assert "No previous conversation" in prompt


def test_prompt_tolerates_braces_in_snippets():
    state = _state(retrieved=[{"source_id": "policy_index", "text": "Use the {form} template"}])
    assert "Use the {form} template" in build_prompt(state)


def test_synthesize_calls_backend_once():
    llm = RecordingLLM(response="  You get 20 days of annual leave.  ")
    out = synthesize(_state(), llm)
    assert out == {"final_response": "You get 20 days of annual leave."}
    assert len(llm.prompts) == 1


def test_synthesize_failure_is_fatal():
    llm = RecordingLLM(error=PermissionError("invalid api key"))
    with pytest.raises(SynthesisError, match="invalid api key") as exc_info:
        synthesize(_state(), llm)
    assert isinstance(exc_info.value.__cause__, PermissionError)


def test_update_history_appends_user_then_assistant():
    history = [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]
    out = update_history(_state(conversation_history=history, final_response="20 days."))
    assert out["conversation_history"] == history + [
        {"role": "user", "content": "What is our leave policy?"},
        {"role": "assistant", "content": "20 days."},
    ]
    assert len(history) == 2

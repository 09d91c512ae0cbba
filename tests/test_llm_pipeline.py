import pytest

from conftest import FakeChatModel
from jurisai.api.llm_pipeline import LLM_Pipeline, clean_title, fallback_title, lc_text_from_content
from jurisai.api.prompt_utilities import build_chat_messages


def test_build_chat_messages_order():
    history = [{"role": "user", "content": "Q1"}, {"role": "assistant", "content": "A1"}]
    messages = build_chat_messages("System.", history, "Q2")
    assert messages == [
        {"role": "system", "content": "System."},
        {"role": "user", "content": "Q1"},
        {"role": "assistant", "content": "A1"},
        {"role": "user", "content": "Q2"},
    ]


def test_build_chat_messages_without_system_prompt():
    assert build_chat_messages(None, [], "Hi") == [{"role": "user", "content": "Hi"}]


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Short question", "Short question"),
        ("x" * 40, "x" * 40),
        ("y" * 41, "y" * 40 + "..."),
    ],
)
def test_fallback_title(message, expected):
    assert fallback_title(message) == expected


def test_clean_title_strips_quotes():
    assert clean_title('  "Licenciement abusif"\n') == "Licenciement abusif"


def test_lc_text_from_content_parts():
    parts = [{"type": "text", "text": "Hello "}, {"type": "image_url"}, {"type": "text", "text": "world"}]
    assert lc_text_from_content(parts) == "Hello world"
    assert lc_text_from_content(None) == ""


def test_generate_title_uses_fallback_on_blank_output():
    pipeline = LLM_Pipeline(chat_model=FakeChatModel(), title_model=FakeChatModel(replies=['""']))
    assert pipeline.generate_title("Question sur le bail") == "Question sur le bail"

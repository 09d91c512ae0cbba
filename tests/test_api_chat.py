from uuid import uuid4

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from conftest import API, FakeChatModel, signup
from jurisai.api.llm_pipeline import LLM_Pipeline, get_pipeline, FALLBACK_ASSISTANT_REPLY


@pytest.fixture()
def use_models(app):
    """Install a pipeline built on the given fake models."""

    def install(chat=None, title=None):
        chat = chat or FakeChatModel(replies=["Answer."])
        title = title or FakeChatModel(replies=["Titre"])
        instance = LLM_Pipeline(chat_model=chat, title_model=title)
        app.dependency_overrides[get_pipeline] = lambda: instance
        return chat, title

    return install


def test_first_message_creates_conversation_and_title(user_client, pipeline, chat_model, title_model):
    r = user_client.post(f"{API}/chat/messages", json={"message": "Mon employeur ne me paie plus"})
    assert r.status_code == 200
    data = r.json()
    assert data["title"] == "Rupture de contrat"
    assert data["updatedTitle"] == "Rupture de contrat"
    assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
    assert data["messages"][1]["content"] == "Here is what the law says."

    conversations = user_client.get(f"{API}/chat/conversations").json()["conversations"]
    assert [c["id"] for c in conversations] == [data["conversationId"]]
    assert conversations[0]["title"] == "Rupture de contrat"


def test_follow_up_keeps_title_and_sends_history(user_client, use_models):
    chat, title = use_models(chat=FakeChatModel(replies=["First answer.", "Second answer."]))
    conversation_id = user_client.post(f"{API}/chat/conversations").json()["conversation"]["id"]

    url = f"{API}/chat/conversations/{conversation_id}/messages"
    assert user_client.post(url, json={"message": "Question one"}).status_code == 200
    r = user_client.post(url, json={"message": "Question two"})
    assert r.status_code == 200
    data = r.json()

    assert data["updatedTitle"] is None
    assert data["title"] == "Titre"
    assert len(title.calls) == 1
    assert [m["content"] for m in data["messages"]] == [
        "Question one", "First answer.", "Question two", "Second answer."
    ]

    sent = chat.calls[1]
    assert [type(m) for m in sent] == [HumanMessage, AIMessage, HumanMessage]
    assert sent[-1].content == "Question two"


def test_published_system_prompt_is_sent_first(user_client, admin_client, use_models):
    chat, _ = use_models()
    r = admin_client.post(
        f"{API}/admin/prompt",
        json={"name": "ASSISTANT_JURIDIQUE_GENERAL", "content": "Tu es un assistant juridique.", "status": "published"},
    )
    assert r.status_code == 201

    user_client.post(f"{API}/chat/messages", json={"message": "Bonjour"})
    sent = chat.calls[0]
    assert isinstance(sent[0], SystemMessage)
    assert sent[0].content == "Tu es un assistant juridique."


def test_draft_prompt_is_ignored(user_client, admin_client, use_models):
    chat, _ = use_models()
    admin_client.post(
        f"{API}/admin/prompt",
        json={"name": "ASSISTANT_JURIDIQUE_GENERAL", "content": "Draft prompt."},
    )
    user_client.post(f"{API}/chat/messages", json={"message": "Bonjour"})
    assert not any(isinstance(m, SystemMessage) for m in chat.calls[0])


def test_title_falls_back_to_truncated_message(user_client, use_models):
    use_models(title=FakeChatModel(error=RuntimeError("provider down")))
    message = "Je voudrais savoir comment contester une amende de stationnement"
    r = user_client.post(f"{API}/chat/messages", json={"message": message})
    assert r.status_code == 200
    assert r.json()["title"] == message[:40] + "..."


@pytest.mark.parametrize(
    "chat",
    [FakeChatModel(replies=[""]), FakeChatModel(error=RuntimeError("timeout"))],
    ids=["empty-reply", "provider-error"],
)
def test_assistant_fallback_reply(user_client, use_models, chat):
    use_models(chat=chat)
    r = user_client.post(f"{API}/chat/messages", json={"message": "Hello"})
    assert r.status_code == 200
    messages = r.json()["messages"]
    assert messages[0]["content"] == "Hello"
    assert messages[1]["content"] == FALLBACK_ASSISTANT_REPLY


def test_blank_message_is_rejected(user_client, pipeline):
    r = user_client.post(f"{API}/chat/messages", json={"message": "   "})
    assert r.status_code == 422


def test_conversations_are_private(user_client, make_client, pipeline):
    conversation_id = user_client.post(f"{API}/chat/conversations").json()["conversation"]["id"]

    other = make_client()
    signup(other, email="mallory@example.com", name="Mallory")
    assert other.get(f"{API}/chat/conversations/{conversation_id}").status_code == 404
    r = other.post(f"{API}/chat/conversations/{conversation_id}/messages", json={"message": "hi"})
    assert r.status_code == 404
    assert other.delete(f"{API}/chat/conversations/{conversation_id}").status_code == 200

    assert user_client.get(f"{API}/chat/conversations/{conversation_id}").status_code == 200


def test_delete_is_idempotent(user_client):
    conversation_id = user_client.post(f"{API}/chat/conversations").json()["conversation"]["id"]
    assert user_client.delete(f"{API}/chat/conversations/{conversation_id}").status_code == 200
    assert user_client.delete(f"{API}/chat/conversations/{conversation_id}").status_code == 200
    assert user_client.delete(f"{API}/chat/conversations/{uuid4()}").status_code == 200
    assert user_client.get(f"{API}/chat/conversations/{conversation_id}").status_code == 404


def test_conversations_listed_newest_first(user_client):
    first = user_client.post(f"{API}/chat/conversations").json()["conversation"]
    second = user_client.post(f"{API}/chat/conversations").json()["conversation"]
    assert first["title"] == "New Conversation"

    listed = user_client.get(f"{API}/chat/conversations").json()["conversations"]
    assert [c["id"] for c in listed] == [second["id"], first["id"]]


def test_chat_requires_session(client):
    assert client.get(f"{API}/chat/conversations").status_code == 401

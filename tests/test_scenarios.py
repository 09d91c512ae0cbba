from conftest import API
from jurisai.database.core.article_funcs import create_article
from jurisai.database.entities.conversations import DEFAULT_CONVERSATION_TITLE


def test_signup_login_and_first_chat(make_client, pipeline):
    c = make_client()
    r = c.post(f"{API}/user/signup", json={"name": "A", "email": "a@x.com", "password": "secret1"})
    assert r.status_code == 201
    c.cookies.clear()

    r = c.post(f"{API}/user/login", json={"email": "a@x.com", "password": "secret1"})
    assert r.status_code == 200
    assert c.cookies.get("auth_token")

    conversation_id = c.post(f"{API}/chat/conversations").json()["conversation"]["id"]
    r = c.post(f"{API}/chat/conversations/{conversation_id}/messages", json={"message": "What is a contract?"})
    assert r.status_code == 200
    messages = r.json()["messages"]
    assert messages and messages[-1]["role"] == "assistant"

    title = c.get(f"{API}/chat/conversations/{conversation_id}").json()["title"]
    assert title and title != DEFAULT_CONVERSATION_TITLE


def test_category_and_search_filters_combine(client):
    create_article(title="Consent forms", content="How to collect it.", category=["RGPD"])
    create_article(title="Cookies", content="User CONSENT is required.", category=["RGPD", "Web"])
    create_article(title="Data retention", content="Keep data minimal.", category=["RGPD"])
    create_article(title="Consent to marriage", content="Civil code.", category=["Famille"])

    r = client.get(f"{API}/articles", params={"category": "RGPD", "search": "consent", "page": 1, "limit": 5})
    assert r.status_code == 200
    articles = r.json()["articles"]
    assert {a["title"] for a in articles} == {"Consent forms", "Cookies"}
    for article in articles:
        assert "RGPD" in article["category"]
        assert "consent" in (article["title"] + article["content"]).lower()

from uuid import uuid4

import pytest

from conftest import API, signup, promote
from jurisai.database.core.article_funcs import create_article
from jurisai.database.daos.legal_article_dao import escape_like


@pytest.fixture()
def articles():
    """Three articles, created oldest to newest."""
    return [
        create_article(title="Contrat de travail", content="Période d'essai et préavis.", category=["Travail"]),
        create_article(
            title="Consentement", content="Le RGPD encadre le consentement.", category=["Données", "Travail"]
        ),
        create_article(title="Divorce", content="Procédure amiable.", category=["Famille"], is_universal=True),
    ]


@pytest.fixture()
def writer(make_client):
    c = make_client()
    c.user = signup(c, email="writer@example.com", name="Writer")
    promote(c.user["id"], "redacteur")
    return c


def test_carousel_returns_newest_first(client, articles):
    r = client.get(f"{API}/articles", params={"limit": 2})
    assert r.status_code == 200
    data = r.json()
    assert isinstance(data, list)
    assert [a["title"] for a in data] == ["Divorce", "Consentement"]


def test_carousel_respects_category(client, articles):
    data = client.get(f"{API}/articles", params={"limit": 5, "category": "Travail"}).json()
    assert [a["title"] for a in data] == ["Consentement", "Contrat de travail"]


def test_search_is_case_insensitive_on_title_or_content(client, articles):
    data = client.get(f"{API}/articles", params={"search": "rgpd"}).json()
    assert data["totalArticles"] == 1
    assert data["articles"][0]["title"] == "Consentement"
    assert sorted(data["articles"][0]["category"]) == ["Données", "Travail"]

    data = client.get(f"{API}/articles", params={"search": "DIVORCE"}).json()
    assert [a["title"] for a in data["articles"]] == ["Divorce"]


def test_search_with_wildcards_is_literal(client, articles):
    data = client.get(f"{API}/articles", params={"search": "%"}).json()
    assert data["message"] == "No articles found."
    assert escape_like("50%_off") == "50\\%\\_off"


def test_pagination_envelope(client, articles):
    data = client.get(f"{API}/articles", params={"page": 2, "limit": 2}).json()
    assert data["currentPage"] == 2
    assert data["totalPages"] == 2
    assert data["totalArticles"] == 3
    assert len(data["articles"]) == 1


def test_default_listing_is_first_page(client, articles):
    data = client.get(f"{API}/articles").json()
    assert data["currentPage"] == 1
    assert data["totalArticles"] == 3


def test_empty_result_envelope(client):
    data = client.get(f"{API}/articles", params={"search": "nothing here"}).json()
    assert data == {
        "message": "No articles found.",
        "articles": [],
        "currentPage": 1,
        "totalPages": 0,
        "totalArticles": 0,
    }


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "abc"}])
def test_invalid_paging_is_rejected(client, params):
    assert client.get(f"{API}/articles", params=params).status_code == 422


def test_categories_are_distinct_and_sorted(client, articles):
    r = client.get(f"{API}/articles/categories")
    assert r.status_code == 200
    assert r.json()["categories"] == ["Données", "Famille", "Travail"]


def test_get_article(client, articles):
    r = client.get(f"{API}/articles/{articles[2]['id']}")
    assert r.status_code == 200
    assert r.json()["isUniversal"] is True
    assert client.get(f"{API}/articles/{uuid4()}").status_code == 404


def test_writes_require_article_permission(client, user_client):
    body = {"title": "T", "content": "C", "category": "Travail"}
    assert client.post(f"{API}/articles", json=body).status_code == 401
    assert user_client.post(f"{API}/articles", json=body).status_code == 403


def test_writer_manages_articles(writer, client):
    r = writer.post(
        f"{API}/articles",
        json={"title": "Bail", "content": "Dépôt de garantie.", "category": "Logement", "pdfUrl": "https://x/bail.pdf"},
    )
    assert r.status_code == 201
    article = r.json()
    assert article["category"] == ["Logement"]
    assert article["pdfUrl"] == "https://x/bail.pdf"

    r = writer.put(f"{API}/articles/{article['id']}", json={"title": "Bail d'habitation", "category": ["Logement", "Civil"]})
    assert r.status_code == 200
    assert r.json()["title"] == "Bail d'habitation"
    assert sorted(r.json()["category"]) == ["Civil", "Logement"]

    assert writer.delete(f"{API}/articles/{article['id']}").status_code == 200
    assert client.get(f"{API}/articles/{article['id']}").status_code == 404
    assert writer.delete(f"{API}/articles/{article['id']}").status_code == 404

"""
Service-layer operations for the legal-article knowledge base.

Listing has two shapes:
- carousel: only `limit` given (no `page`, no `search`), a bare list of the
  newest articles;
- paginated: an envelope `{message, articles, currentPage, totalPages, totalArticles}`.
"""

import logging
import math
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy.orm import Session
from jurisai.database.helpers.transactionManagement import transactional
from jurisai.database.daos.legal_article_dao import LegalArticleDao
from jurisai.database.entities.legal_article import LegalArticle

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def serialize_article(article: LegalArticle, categories: list[str]) -> dict:
    return {
        "id": str(article.id),
        "title": article.title,
        "content": article.content,
        "category": categories,
        "isUniversal": article.is_universal,
        "pdfUrl": article.pdf_url,
        "createdAt": article.created_at.isoformat(),
        "updatedAt": article.updated_at.isoformat(),
    }


def _serialize_many(session: Session, dao: LegalArticleDao, articles: list[LegalArticle]) -> list[dict]:
    tags = dao.fetchCategoriesByArticleIds(session, [article.id for article in articles])
    return [serialize_article(article, tags[article.id]) for article in articles]


def _require_article(session: Session, article_id: UUID) -> LegalArticle:
    article = LegalArticleDao().fetchArticleById(session, article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@transactional
def list_articles(
    session: Session,
    category: str | None = None,
    search: str | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> list[dict] | dict:
    """
    List articles, either as a carousel or as a paginated envelope.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    category : str | None
        Exact category tag.
    search : str | None
        Case-insensitive substring of the title or the content; blank means none.
    page : int | None
        1-based page number (default 1).
    limit : int | None
        Page size (default 10), or carousel size.

    Returns
    -------
    list[dict] | dict
        The carousel list, or the paginated envelope.
    """
    dao = LegalArticleDao()
    search = search.strip() if search else None
    category = category or None

    if limit is not None and page is None and not search:
        articles = dao.fetchLatestArticles(session, limit, category)
        logger.debug("Carousel request returned %d articles (limit %d)", len(articles), limit)
        return _serialize_many(session, dao, articles)

    page = page or DEFAULT_PAGE
    limit = limit or DEFAULT_LIMIT
    articles, total = dao.fetchArticlesPage(session, category, search, page, limit)

    if not articles and page == 1:
        return {
            "message": "No articles found.",
            "articles": [],
            "currentPage": page,
            "totalPages": 0,
            "totalArticles": 0,
        }
    return {
        "message": "Articles retrieved successfully.",
        "articles": _serialize_many(session, dao, articles),
        "currentPage": page,
        "totalPages": math.ceil(total / limit),
        "totalArticles": total,
    }


@transactional
def list_all_articles(session: Session) -> list[dict]:
    """Every article, newest first (admin overview)."""
    dao = LegalArticleDao()
    return _serialize_many(session, dao, dao.fetchAllArticles(session))


@transactional
def list_categories(session: Session) -> list[str]:
    return LegalArticleDao().fetchDistinctCategories(session)


@transactional
def get_article(session: Session, article_id: UUID) -> dict:
    article = _require_article(session, article_id)
    tags = LegalArticleDao().fetchCategoriesByArticleIds(session, [article.id])
    return serialize_article(article, tags[article.id])


@transactional
def create_article(
    session: Session,
    title: str,
    content: str,
    category: list[str],
    is_universal: bool = False,
    pdf_url: str = "",
) -> dict:
    """
    Create an article with its category tags.

    Returns
    -------
    dict
        The serialized article.
    """
    dao = LegalArticleDao()
    article = LegalArticle(title=title, content=content, is_universal=is_universal, pdf_url=pdf_url or "")
    dao.createArticle(session, article, category)
    tags = dao.fetchCategoriesByArticleIds(session, [article.id])
    return serialize_article(article, tags[article.id])


@transactional
def update_article(session: Session, article_id: UUID, **fields) -> dict:
    """
    Update an article. Only keys present in `fields` with a non-None value change.

    Accepted keys: title, content, category, is_universal, pdf_url.

    Raises
    ------
    HTTPException
        404 if the article does not exist.
    """
    dao = LegalArticleDao()
    article = _require_article(session, article_id)
    for key in ("title", "content", "is_universal", "pdf_url"):
        if fields.get(key) is not None:
            setattr(article, key, fields[key])
    if fields.get("category") is not None:
        dao.replaceCategories(session, article.id, fields["category"])
    session.flush()
    tags = dao.fetchCategoriesByArticleIds(session, [article.id])
    return serialize_article(article, tags[article.id])


@transactional
def delete_article(session: Session, article_id: UUID) -> None:
    article = _require_article(session, article_id)
    LegalArticleDao().deleteArticle(session, article)

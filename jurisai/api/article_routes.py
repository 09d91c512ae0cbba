"""
FastAPI Router — Legal Articles
===============================

Reads are public; writes require `CAN_MANAGE_ARTICLES`.

- GET    /articles               carousel (only `limit`) or paginated search
- GET    /articles/categories    distinct category tags
- GET    /articles/{id}
- POST   /articles
- PUT    /articles/{id}
- DELETE /articles/{id}
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from jurisai.api.dependencies import AuthContext, check_permission
from jurisai.api.models import ArticleCreate, ArticleUpdate
from jurisai.api.utils import internal_error
from jurisai.database.core.article_funcs import (
    list_articles,
    list_categories,
    get_article,
    create_article,
    update_article,
    delete_article,
)
from jurisai.database.entities.permission import PermissionName

router = APIRouter(prefix="/articles", tags=["articles"])

logger = logging.getLogger(__name__)

can_manage_articles = check_permission(PermissionName.CAN_MANAGE_ARTICLES)


@router.get("")
def get_articles(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: Optional[int] = Query(None, ge=1),
    limit: Optional[int] = Query(None, ge=1),
):
    """List articles.

    - only `limit`: bare list of the newest articles (carousel)
    - otherwise: {message, articles, currentPage, totalPages, totalArticles}
    """
    try:
        return list_articles(category=category, search=search, page=page, limit=limit)
    except Exception as e:
        raise internal_error("Could not retrieve articles", e)


@router.get("/categories")
def get_article_categories():
    try:
        categories = list_categories()
    except Exception as e:
        raise internal_error("Could not retrieve categories", e)
    if not categories:
        return {"message": "No categories found.", "categories": []}
    return {"message": "Categories retrieved successfully.", "categories": categories}


@router.get("/{article_id}")
def get_article_by_id(article_id: UUID):
    try:
        return get_article(article_id=article_id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not retrieve the article", e)


@router.post("", status_code=201)
def new_article(data: ArticleCreate, auth: AuthContext = Depends(can_manage_articles)):
    try:
        article = create_article(
            title=data.title,
            content=data.content,
            category=data.category,
            is_universal=data.is_universal,
            pdf_url=data.pdf_url,
        )
    except Exception as e:
        raise internal_error("Could not create the article", e)
    logger.info("Article %s created by %s", article["id"], auth.id)
    return article


@router.put("/{article_id}")
def edit_article(article_id: UUID, data: ArticleUpdate, auth: AuthContext = Depends(can_manage_articles)):
    try:
        return update_article(article_id=article_id, **data.model_dump(exclude_none=True))
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not update the article", e)


@router.delete("/{article_id}")
def remove_article(article_id: UUID, auth: AuthContext = Depends(can_manage_articles)):
    try:
        delete_article(article_id=article_id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not delete the article", e)
    return {"message": "Article deleted"}

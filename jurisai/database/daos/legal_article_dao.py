"""
LegalArticle DAO

Purpose
-------
Data access for the legal-article knowledge base:
- Filtered, paginated listing (exact category tag, case-insensitive search)
- Newest-first carousel
- Distinct category tags
- CRUD with category tag replacement

Design
------
- Category tags live in `legal_article_category`; a category filter is an
  `IN` subquery on that table.
- Search terms are matched literally: `%`, `_` and the escape character are
  escaped before being used in `ILIKE`.
"""

import logging
from typing import Iterable
from uuid import UUID
from sqlalchemy import asc, desc, func, or_
from sqlalchemy.orm import Session, Query
from jurisai.database.entities.legal_article import LegalArticle, ArticleCategory

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so `term` matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class LegalArticleDao:
    """
    Data Access Object (DAO) for LegalArticle entities and their tags.
    """

    def _filteredQuery(self, session: Session, category: str | None, search: str | None) -> Query:
        query = session.query(LegalArticle)
        if category:
            tagged = session.query(ArticleCategory.article_id).filter(ArticleCategory.name == category)
            query = query.filter(LegalArticle.id.in_(tagged))
        if search:
            pattern = f"%{escape_like(search)}%"
            query = query.filter(
                or_(
                    LegalArticle.title.ilike(pattern, escape=LIKE_ESCAPE),
                    LegalArticle.content.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        return query

    def fetchArticlesPage(
        self,
        session: Session,
        category: str | None,
        search: str | None,
        page: int,
        limit: int,
    ) -> tuple[list[LegalArticle], int]:
        """
        Fetch one page of matching articles, newest first.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        category : str | None
            Exact category tag to match.
        search : str | None
            Case-insensitive substring of the title or the content.
        page, limit : int
            1-based page number and page size.

        Returns
        -------
        tuple[list[LegalArticle], int]
            The page and the total number of matching articles.
        """
        try:
            query = self._filteredQuery(session, category, search)
            total = query.order_by(None).count()
            items = (
                query.order_by(desc(LegalArticle.created_at))
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return items, total
        except Exception as e:
            logger.error("Error in LegalArticleDao.fetchArticlesPage. Error: %s", e)
            raise

    def fetchLatestArticles(self, session: Session, limit: int, category: str | None = None) -> list[LegalArticle]:
        """Newest articles first, optionally restricted to one category tag."""
        query = self._filteredQuery(session, category, None)
        return query.order_by(desc(LegalArticle.created_at)).limit(limit).all()

    def fetchAllArticles(self, session: Session) -> list[LegalArticle]:
        return session.query(LegalArticle).order_by(desc(LegalArticle.created_at)).all()

    def fetchArticleById(self, session: Session, article_id: UUID) -> LegalArticle | None:
        return session.get(LegalArticle, article_id)

    def fetchDistinctCategories(self, session: Session) -> list[str]:
        """Return distinct, non-empty category tags in alphabetical order."""
        rows = (
            session.query(ArticleCategory.name)
            .filter(func.trim(ArticleCategory.name) != "")
            .distinct()
            .order_by(asc(ArticleCategory.name))
            .all()
        )
        return [name for (name,) in rows]

    def fetchCategoriesByArticleIds(self, session: Session, article_ids: Iterable[UUID]) -> dict[UUID, list[str]]:
        """
        Map each article id to its tags.

        Returns
        -------
        dict[UUID, list[str]]
            Every requested id is present; articles without tags map to [].
        """
        ids = list(article_ids)
        mapping: dict[UUID, list[str]] = {article_id: [] for article_id in ids}
        if not ids:
            return mapping
        rows = (
            session.query(ArticleCategory)
            .filter(ArticleCategory.article_id.in_(ids))
            .order_by(asc(ArticleCategory.name))
            .all()
        )
        for row in rows:
            mapping[row.article_id].append(row.name)
        return mapping

    def createArticle(self, session: Session, article: LegalArticle, categories: Iterable[str]) -> LegalArticle:
        try:
            session.add(article)
            session.flush()
            self.replaceCategories(session, article.id, categories)
            return article
        except Exception as e:
            logger.error("Error in LegalArticleDao.createArticle. Error: %s", e)
            raise

    def replaceCategories(self, session: Session, article_id: UUID, categories: Iterable[str]) -> list[str]:
        """
        Replace the tags of an article. Blank and duplicate tags are dropped.
        """
        session.query(ArticleCategory).filter(ArticleCategory.article_id == article_id).delete(
            synchronize_session=False
        )
        tags = []
        for name in categories:
            tag = name.strip()
            if tag and tag not in tags:
                tags.append(tag)
                session.add(ArticleCategory(article_id=article_id, name=tag))
        session.flush()
        return tags

    def deleteArticle(self, session: Session, article: LegalArticle) -> None:
        session.query(ArticleCategory).filter(ArticleCategory.article_id == article.id).delete(
            synchronize_session=False
        )
        session.delete(article)
        session.flush()

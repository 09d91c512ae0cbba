"""
LegalArticle ORM Models
=======================

Knowledge-base articles and their category tags. An article has any number of
tags, stored one per row in ``legal_article_category``.
"""

from jurisai.database.config.connection_engine import declarativeBase
from sqlalchemy import Boolean, DateTime, ForeignKey, TEXT, VARCHAR, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone


class LegalArticle(declarativeBase):
    """
    ORM model for the `legal_article` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    title, content : str
        Article text.
    is_universal : bool
        Flag kept for the frontend; not used by filtering.
    pdf_url : str
        Optional link to a PDF version ("" when absent).
    created_at, updated_at : datetime
        Audit timestamps (UTC).
    """

    __tablename__ = "legal_article"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    title: Mapped[str] = mapped_column(TEXT, nullable=False)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    is_universal: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    pdf_url: Mapped[str] = mapped_column(TEXT, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(self, title: str, content: str, is_universal: bool = False, pdf_url: str = ""):
        now = datetime.now(timezone.utc)
        self.id = uuid.uuid4()
        self.title = title
        self.content = content
        self.is_universal = is_universal
        self.pdf_url = pdf_url
        self.created_at = now
        self.updated_at = now

    def __str__(self) -> str:
        return f"LegalArticle: id:{self.id}, title: {self.title}"


class ArticleCategory(declarativeBase):
    """One category tag of one article."""

    __tablename__ = "legal_article_category"

    article_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("legal_article.id"), primary_key=True)
    name: Mapped[str] = mapped_column(VARCHAR(255), primary_key=True)

    def __init__(self, article_id: UUID, name: str):
        self.article_id = article_id
        self.name = name

"""
PromptTemplate ORM Model
========================

Admin-curated system prompts. The chat flow injects the template named
``GENERAL_ASSISTANT_PROMPT_NAME`` when its status is ``published``.
"""

from enum import Enum
from jurisai.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, DateTime, TEXT, VARCHAR, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone

GENERAL_ASSISTANT_PROMPT_NAME = "ASSISTANT_JURIDIQUE_GENERAL"


class PromptStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class PromptTemplate(declarativeBase):
    """
    ORM model for the `prompt_template` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    name : str
        Unique lookup key.
    content : str
        The system prompt text.
    description, category : str | None
        Free-form metadata for the admin UI.
    status : str
        One of ``PromptStatus``.
    created_by, last_updated_by : UUID | None
        Audit references to `app_user`.
    created_at, updated_at : datetime
        Audit timestamps (UTC).
    """

    __tablename__ = "prompt_template"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)
    content: Mapped[str] = mapped_column(TEXT, nullable=False)
    description: Mapped[str] = mapped_column(TEXT, nullable=True)
    category: Mapped[str] = mapped_column(TEXT, nullable=True)
    status: Mapped[str] = mapped_column(TEXT, nullable=False, default=PromptStatus.DRAFT.value)
    created_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True)
    last_updated_by: Mapped[UUID] = mapped_column(Uuid, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(
        self,
        name: str,
        content: str,
        description: str | None = None,
        category: str | None = None,
        status: str = PromptStatus.DRAFT.value,
        created_by: UUID | None = None,
    ):
        now = datetime.now(timezone.utc)
        self.id = uuid.uuid4()
        self.name = name.strip()
        self.content = content.strip()
        self.description = description
        self.category = category
        self.status = PromptStatus(status).value
        self.created_by = created_by
        self.last_updated_by = created_by
        self.created_at = now
        self.updated_at = now

    def __str__(self) -> str:
        return f"PromptTemplate: {self.name} ({self.status})"

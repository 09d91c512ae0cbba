"""
Conversation ORM Model
=======================

The ``Conversation`` ORM model represents a user-owned conversation record stored
in the ``conversation`` table.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Explicit owner foreign key (``user_id`` → ``app_user.id``); ownership is
  checked by the service layer on every access
- Mutable ``title``, initially ``DEFAULT_CONVERSATION_TITLE`` and replaced
  when the first message arrives
- Timezone-aware ``created_at`` / ``updated_at`` timestamps (UTC)
"""

from jurisai.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, DateTime, TEXT, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone

DEFAULT_CONVERSATION_TITLE = "New Conversation"


class Conversation(declarativeBase):
    """
    ORM model for the `conversation` table.

    Attributes
    ----------
    id : UUID
        Primary key. Unique identifier for the conversation.
    title : str
        Human-readable title of the conversation.
    user_id : UUID
        Foreign key reference to the `app_user` table (the owner).
    created_at : datetime
        Creation timestamp (UTC). Conversations are listed newest first.
    updated_at : datetime
        Timestamp of the last message or rename (UTC).
    """

    __tablename__ = 'conversation'

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)

    title: Mapped[str] = mapped_column(TEXT, nullable=False, default=DEFAULT_CONVERSATION_TITLE)

    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey('app_user.id'), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __init__(self, user_id: UUID, title: str = DEFAULT_CONVERSATION_TITLE, created_at: datetime | None = None):
        """
        Initialize a new Conversation object.

        Parameters
        ----------
        user_id : UUID
            The ID of the user who owns this conversation.
        title : str
            Initial title.
        created_at : datetime | str | None
            Creation timestamp. Accepts datetime or ISO8601 string; defaults to now (UTC).
        """
        self.id = uuid.uuid4()
        self.user_id = user_id
        self.title = title
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        self.created_at = created_at or datetime.now(timezone.utc)
        self.updated_at = self.created_at

    def __str__(self) -> str:
        return (
            f"User: id:{self.user_id}, conversation: {self.title}, time_created: {self.created_at}"
        )

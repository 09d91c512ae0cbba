"""
Message ORM Model
=================

The ``Message`` ORM model represents a single message record within a
conversation. Messages are append-only: they are never edited and are only
deleted together with their conversation.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Foreign key reference to ``conversation.id`` (``conversation_id``)
- Sender role (``user`` | ``assistant`` | ``system``)
- ``sequence``: 0-based position inside the conversation, the storage order
- Timezone-aware ``created_at`` timestamp (UTC)
"""

from enum import Enum
from jurisai.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, DateTime, Integer, TEXT, Uuid, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Message(declarativeBase):
    """
    ORM model for the `message` table.

    Attributes
    ----------
    id : UUID
        Primary key. Unique identifier for the message.
    conversation_id : UUID
        Foreign key reference to the `conversation` table.
    sequence : int
        Position of the message in its conversation.
    role : str
        One of ``MessageRole``.
    content : str
        Text of the message.
    created_at : datetime
        Timestamp when the message was appended.
    """

    __tablename__ = 'message'
    __table_args__ = (UniqueConstraint("conversation_id", "sequence"),)

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)

    conversation_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey('conversation.id'), nullable=False, index=True
    )

    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    role: Mapped[str] = mapped_column(TEXT, nullable=False)

    content: Mapped[str] = mapped_column(TEXT, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    def __init__(self, conversation_id: UUID, sequence: int, role: str, content: str):
        """
        Initialize a new Message object.

        Parameters
        ----------
        conversation_id : UUID
            ID of the conversation this message belongs to.
        sequence : int
            Position of the message in the conversation.
        role : str
            The role of the sender (user/assistant/system).
        content : str
            The content of the message.
        """
        self.id = uuid.uuid4()
        self.conversation_id = conversation_id
        self.sequence = sequence
        self.role = MessageRole(role).value
        self.content = content
        self.created_at = datetime.now(timezone.utc)

    def __str__(self) -> str:
        return (
            f"Conversation: id:{self.conversation_id}, "
            f"role: {self.role}, "
            f"message: {self.content}, "
            f"time_created: {self.created_at}"
        )

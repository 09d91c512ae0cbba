"""
Messages DAO

Purpose
-------
Data-access layer for the `Message` ORM entity. Provides:
- Appending a message at the end of a conversation
- Retrieval by conversation, in storage order
- Bulk deletion when conversations are removed

Design
------
- Requires an active SQLAlchemy `Session` provided by the caller.
- Conversations are append-only: no update or single-message delete.
- The next `sequence` value is computed from the current maximum inside the
  caller's transaction.
"""

import logging
from typing import Iterable
from uuid import UUID
from sqlalchemy import asc, func
from sqlalchemy.orm import Session
from jurisai.database.entities.messages import Message

logger = logging.getLogger(__name__)


class MessagesDao:
    """
    Data Access Object (DAO) for conversation messages.
    """

    def appendMessage(self, session: Session, conversation_id: UUID, role: str, content: str) -> Message:
        """
        Append a message at the end of a conversation.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation_id : UUID
            Conversation to append to.
        role : str
            Sender role.
        content : str
            Message text.

        Returns
        -------
        Message
            The staged message.
        """
        try:
            last = (
                session.query(func.max(Message.sequence))
                .filter(Message.conversation_id == conversation_id)
                .scalar()
            )
            message = Message(
                conversation_id=conversation_id,
                sequence=0 if last is None else last + 1,
                role=role,
                content=content,
            )
            session.add(message)
            session.flush()
            return message
        except Exception as e:
            logger.error("Error in MessagesDao.appendMessage. Error Message: %s", e)
            raise

    def fetchMessagesByConversationId(self, session: Session, conversation_id: UUID) -> list[Message]:
        """
        Fetch all messages in a conversation, in storage order.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation_id : UUID
            Unique identifier of the conversation.

        Returns
        -------
        list[Message]
            Messages ordered by `sequence`.
        """
        try:
            return (
                session.query(Message)
                .filter(Message.conversation_id == conversation_id)
                .order_by(asc(Message.sequence))
                .all()
            )
        except Exception as e:
            logger.error("Error in MessagesDao.fetchMessagesByConversationId. Error Message: %s", e)
            raise

    def deleteMessagesByConversationIds(self, session: Session, conversation_ids: Iterable[UUID]) -> int:
        ids = list(conversation_ids)
        if not ids:
            return 0
        return (
            session.query(Message)
            .filter(Message.conversation_id.in_(ids))
            .delete(synchronize_session=False)
        )

"""
Conversation DAO

Purpose
-------
Provides a thin data-access layer for the `Conversation` ORM entity:
- Create conversations
- Query by owner, or by id scoped to an owner
- Update the title and the `updated_at` timestamp
- Delete a conversation scoped to its owner

Design
------
- Requires an active SQLAlchemy `Session` supplied by the caller (no session
  creation inside the DAO). Transaction boundaries stay in the service layer.
- Every read or delete by id also filters on `user_id`, so a conversation owned
  by someone else behaves exactly like a missing one.

Usage
-----
.. code-block:: python

    from jurisai.database.helpers.transactionManagement import SessionLocal
    from jurisai.database.entities.conversations import Conversation
    from jurisai.database.daos.conversation_dao import ConversationDao

    dao = ConversationDao()
    with SessionLocal() as session:
        conv = Conversation(user_id=user.id)
        dao.createConversation(session, conv)
        session.commit()

        items = dao.fetchConversationsByUserId(session, user_id=user.id)
        same = dao.fetchConversationForOwner(session, conv.id, user.id)
"""

import logging
from datetime import datetime, timezone
from uuid import UUID
from sqlalchemy import desc
from sqlalchemy.orm import Session
from jurisai.database.entities.conversations import Conversation

logger = logging.getLogger(__name__)


class ConversationDao:
    """
    Data Access Object (DAO) for managing Conversation entities.
    """

    def createConversation(self, session: Session, conversation: Conversation) -> Conversation:
        """
        Stage a new conversation record.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        conversation : Conversation
            Conversation entity instance to be added.
        """
        try:
            session.add(conversation)
            session.flush()
            return conversation
        except Exception as e:
            logger.error("Error in ConversationDao.createConversation. Error: %s", e)
            raise

    def fetchConversationsByUserId(self, session: Session, user_id: UUID) -> list[Conversation]:
        """
        Fetch all conversations belonging to a specific user,
        most recently created first.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_id : UUID
            Unique identifier of the user.

        Returns
        -------
        list[Conversation]
            List of conversations for the given user.
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.user_id == user_id)
                .order_by(desc(Conversation.created_at))
                .all()
            )
        except Exception as e:
            logger.error("Error in ConversationDao.fetchConversationsByUserId. Error: %s", e)
            raise

    def fetchConversationForOwner(self, session: Session, conversation_id: UUID, user_id: UUID) -> Conversation | None:
        """
        Fetch a conversation by id, only if it belongs to `user_id`.

        Returns
        -------
        Conversation | None
            None when the id is unknown or owned by another user.
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.id == conversation_id)
                .filter(Conversation.user_id == user_id)
                .one_or_none()
            )
        except Exception as e:
            logger.error("Error in ConversationDao.fetchConversationForOwner. Error: %s", e)
            raise

    def updateConversationTitle(self, session: Session, conversation: Conversation, title: str) -> None:
        conversation.title = title
        conversation.updated_at = datetime.now(timezone.utc)
        session.flush()

    def touchConversation(self, session: Session, conversation_id: UUID) -> None:
        """Set `updated_at` of a conversation to now."""
        session.query(Conversation).filter(Conversation.id == conversation_id).update(
            {Conversation.updated_at: datetime.now(timezone.utc)}, synchronize_session=False
        )

    def deleteConversationForOwner(self, session: Session, conversation_id: UUID, user_id: UUID) -> int:
        """
        Delete a conversation owned by `user_id`.

        Returns
        -------
        int
            Number of deleted rows (0 when nothing matched).
        """
        try:
            return (
                session.query(Conversation)
                .filter(Conversation.id == conversation_id)
                .filter(Conversation.user_id == user_id)
                .delete(synchronize_session=False)
            )
        except Exception as e:
            logger.error("Error in ConversationDao.deleteConversationForOwner. Error: %s", e)
            raise

    def fetchConversationIdsByUserId(self, session: Session, user_id: UUID) -> list[UUID]:
        return [cid for (cid,) in session.query(Conversation.id).filter(Conversation.user_id == user_id).all()]

    def deleteConversationsByUserId(self, session: Session, user_id: UUID) -> int:
        return session.query(Conversation).filter(Conversation.user_id == user_id).delete(synchronize_session=False)

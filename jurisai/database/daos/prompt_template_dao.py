"""
PromptTemplate DAO

Data access for admin-curated system prompts. The chat flow only ever calls
`fetchPublishedByName`; the remaining methods back the admin screens.
"""

import logging
from uuid import UUID
from sqlalchemy import asc, desc
from sqlalchemy.orm import Session
from jurisai.database.entities.prompt_template import PromptTemplate, PromptStatus

logger = logging.getLogger(__name__)


class PromptTemplateDao:
    """
    Data Access Object (DAO) for PromptTemplate entities.
    """

    def createPromptTemplate(self, session: Session, template: PromptTemplate) -> PromptTemplate:
        try:
            session.add(template)
            session.flush()
            return template
        except Exception as e:
            logger.error("Error in PromptTemplateDao.createPromptTemplate. Error: %s", e)
            raise

    def fetchPublishedByName(self, session: Session, name: str) -> PromptTemplate | None:
        """
        Fetch the published template with the given name.

        Names are unique, but the query still orders by `updated_at` so that
        the most recently updated row wins if that constraint is ever relaxed.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        name : str
            Template name.

        Returns
        -------
        PromptTemplate | None
            The template, or None when no published row exists.
        """
        try:
            return (
                session.query(PromptTemplate)
                .filter(PromptTemplate.name == name)
                .filter(PromptTemplate.status == PromptStatus.PUBLISHED.value)
                .order_by(desc(PromptTemplate.updated_at))
                .first()
            )
        except Exception as e:
            logger.error("Error in PromptTemplateDao.fetchPublishedByName. Error: %s", e)
            raise

    def fetchById(self, session: Session, template_id: UUID) -> PromptTemplate | None:
        return session.get(PromptTemplate, template_id)

    def fetchByName(self, session: Session, name: str) -> PromptTemplate | None:
        return session.query(PromptTemplate).filter(PromptTemplate.name == name.strip()).one_or_none()

    def fetchAll(self, session: Session) -> list[PromptTemplate]:
        """Return every template, by category then name."""
        return (
            session.query(PromptTemplate)
            .order_by(asc(PromptTemplate.category), asc(PromptTemplate.name))
            .all()
        )

    def deletePromptTemplate(self, session: Session, template: PromptTemplate) -> None:
        session.delete(template)
        session.flush()

    def clearUserReferences(self, session: Session, user_id: UUID) -> None:
        """Null out audit references to a user that is about to be deleted."""
        session.query(PromptTemplate).filter(PromptTemplate.created_by == user_id).update(
            {PromptTemplate.created_by: None}, synchronize_session=False
        )
        session.query(PromptTemplate).filter(PromptTemplate.last_updated_by == user_id).update(
            {PromptTemplate.last_updated_by: None}, synchronize_session=False
        )

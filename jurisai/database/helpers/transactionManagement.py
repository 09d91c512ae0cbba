"""
Database Transaction Management
===============================

Utilities for managing SQLAlchemy sessions with a context variable and a
decorator-based transaction wrapper.

A service function decorated with ``@transactional`` receives a ``session``
keyword argument. Nested decorated calls reuse the session of the outermost
call, so a whole service operation commits (or rolls back) as one unit, while
two sequential top-level calls commit independently.
"""

from functools import wraps
from sqlalchemy.orm import sessionmaker
import contextvars
from jurisai.database.config.connection_engine import connection_engine

SessionLocal = sessionmaker(bind=connection_engine)
"""Session factory bound to the application engine."""

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and the error re-raised.

    Example
    -------
    >>> @transactional
    ... def rename(session, conversation_id, title):
    ...     ConversationDao().updateConversationTitle(session, conversation_id, title)
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session:
            return func(*args, session=session, **kwargs)

        session = SessionLocal()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func

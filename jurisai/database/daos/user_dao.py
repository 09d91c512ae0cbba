"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides:
- Creation with password hashing
- Lookup by id or email
- Listing for the admin screens
- Field updates (profile, status, password, role)
- Deletion

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller.
- Business logic (validation, authorization) lives in `jurisai.database.core`;
  the DAO focuses on persistence operations and never commits.
- Passwords are hashed using `EncryptionDec.hash_password(...)` before insert.

Error Handling
--------------
- Each method logs the failure and re-raises; upper layers decide the HTTP status.
"""

import logging
from uuid import UUID
from sqlalchemy import asc
from sqlalchemy.orm import Session
from jurisai.database.entities.user import User
from jurisai.crypt.encrypt_decrypt import EncryptionDec

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    """

    def createUser(self, session: Session, user_data: User) -> User:
        """
        Create a new user in the database with a hashed password.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_data : User
            User entity whose `password` still holds the plaintext.

        Returns
        -------
        User
            The staged user.
        """
        try:
            enc = EncryptionDec()
            user_data.password = enc.hash_password(text=user_data.password)
            session.add(user_data)
            session.flush()
            return user_data
        except Exception as e:
            logger.error("Error in UserDao.createUser. Error Message: %s", e)
            raise

    def fetchUserById(self, session: Session, user_id: UUID) -> User | None:
        """Return the user with the given id, or None."""
        try:
            return session.get(User, user_id)
        except Exception as e:
            logger.error("Error in UserDao.fetchUserById. Error Message: %s", e)
            raise

    def fetchUserByEmail(self, session: Session, email: str) -> User | None:
        """
        Fetch a user by email.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        email : str
            Email address of the user (compared after trimming).

        Returns
        -------
        User | None
            The matching user, if any.
        """
        try:
            return session.query(User).filter(User.email == email.strip()).one_or_none()
        except Exception as e:
            logger.error("Error in UserDao.fetchUserByEmail. Error Message: %s", e)
            raise

    def fetchAllUsers(self, session: Session) -> list[User]:
        """Return every user, oldest account first."""
        try:
            return session.query(User).order_by(asc(User.created_at)).all()
        except Exception as e:
            logger.error("Error in UserDao.fetchAllUsers. Error Message: %s", e)
            raise

    def updateStatus(self, session: Session, user: User, status: str) -> bool:
        """
        Set the presence status of a user.

        Returns
        -------
        bool
            True if the status changed.
        """
        if user.status == status:
            return False
        user.status = status
        session.flush()
        return True

    def updatePassword(self, session: Session, user: User, new_password: str) -> None:
        """Hash and store a new password."""
        user.password = EncryptionDec().hash_password(text=new_password)
        session.flush()

    def updateFields(self, session: Session, user: User, **fields) -> User:
        """
        Update the given attributes of a user; `None` values are skipped.

        Raises
        ------
        AttributeError
            If a field is not a column of `User`.
        """
        for key, value in fields.items():
            if value is None:
                continue
            if not hasattr(User, key):
                raise AttributeError(f"User has no field '{key}'")
            setattr(user, key, value)
        session.flush()
        return user

    def deleteUser(self, session: Session, user: User) -> None:
        """Delete a user row. Dependent rows must be removed first."""
        try:
            session.delete(user)
            session.flush()
        except Exception as e:
            logger.error("Error in UserDao.deleteUser. Error Message: %s", e)
            raise

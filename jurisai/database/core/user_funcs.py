"""
Service-layer operations for authentication and user accounts.

All functions are wrapped with the `@transactional` decorator, which manages
SQLAlchemy sessions and transactions automatically. Each function accepts (and
uses) an injected `session: Session` provided by the decorator.

Results are plain dicts built while the session is open, so callers never
touch detached ORM instances. Expected failures (unknown email, wrong
password, duplicate email) are raised as `HTTPException` with the matching
status code; anything else propagates to the router.
"""

import logging
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy.orm import Session
from jurisai.database.helpers.transactionManagement import transactional
from jurisai.database.daos.user_dao import UserDao
from jurisai.database.daos.permission_dao import PermissionDao
from jurisai.database.daos.conversation_dao import ConversationDao
from jurisai.database.daos.message_dao import MessagesDao
from jurisai.database.daos.prompt_template_dao import PromptTemplateDao
from jurisai.database.core.permission_funcs import apply_role_defaults
from jurisai.database.entities.user import User, Role, UserStatus
from jurisai.crypt.encrypt_decrypt import EncryptionDec

logger = logging.getLogger(__name__)


def serialize_user(user: User, permissions: list[str] | None = None) -> dict:
    """
    Public representation of a user. The password hash is never included.
    """
    data = {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "status": user.status,
        "profileImage": user.profile_image,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
        "updatedAt": user.updated_at.isoformat() if user.updated_at else None,
    }
    if permissions is not None:
        data["permissions"] = permissions
    return data


def _require_user(session: Session, user_id: UUID) -> User:
    user = UserDao().fetchUserById(session, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@transactional
def signup_user(session: Session, name: str, email: str, password: str) -> dict:
    """
    Register a new account and mark it online.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    name, email, password : str
        Account details; the password is hashed by the DAO.

    Returns
    -------
    dict
        The serialized user, including its permissions.

    Raises
    ------
    HTTPException
        409 if the email is already registered.
    """
    user_dao = UserDao()
    if user_dao.fetchUserByEmail(session, email) is not None:
        raise HTTPException(status_code=409, detail="Email already registered")

    user = User(name=name.strip(), email=email.strip(), password=password, status=UserStatus.ONLINE.value)
    user_dao.createUser(session, user)
    permissions = apply_role_defaults(user_id=user.id, role=user.role)
    logger.info("New account created: %s", user.id)
    return serialize_user(user, permissions)


@transactional
def login_user(session: Session, email: str, password: str) -> dict:
    """
    Authenticate a user by email and password.

    Returns
    -------
    dict
        The serialized user, with status reset to online.

    Raises
    ------
    HTTPException
        404 if the email is unknown, 401 if the password is wrong.
    """
    user_dao = UserDao()
    user = user_dao.fetchUserByEmail(session, email)
    if user is None:
        raise HTTPException(status_code=404, detail="No account found with this email")
    if not EncryptionDec().check_passwords(password, user.password):
        raise HTTPException(status_code=401, detail="Incorrect password")

    user_dao.updateStatus(session, user, UserStatus.ONLINE.value)
    permissions = PermissionDao().fetchPermissionNamesByUserId(session, user.id)
    return serialize_user(user, permissions)


@transactional
def load_auth_user(session: Session, user_id: UUID) -> dict | None:
    """
    Re-load a user and resolve its permissions from storage.

    Returns
    -------
    dict | None
        `{id, name, email, role, permissions}` or None if the user is gone.
    """
    user = UserDao().fetchUserById(session, user_id)
    if user is None:
        return None
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "role": user.role,
        "permissions": PermissionDao().fetchPermissionNamesByUserId(session, user.id),
    }


@transactional
def get_user_profile(session: Session, user_id: UUID) -> dict:
    user = _require_user(session, user_id)
    return serialize_user(user, PermissionDao().fetchPermissionNamesByUserId(session, user.id))


@transactional
def set_user_status(session: Session, user_id: UUID, status: str) -> dict:
    """
    Set the presence status of a user.

    Raises
    ------
    HTTPException
        400 if `status` is not a `UserStatus` value, 404 if the user is gone.
    """
    if status not in {s.value for s in UserStatus}:
        raise HTTPException(status_code=400, detail=f"Invalid status '{status}'")
    user = _require_user(session, user_id)
    UserDao().updateStatus(session, user, status)
    return serialize_user(user)


@transactional
def update_user_profile(
    session: Session,
    user_id: UUID,
    name: str | None = None,
    email: str | None = None,
    status: str | None = None,
    profile_image: str | None = None,
) -> dict:
    """
    Update the editable profile fields of a user.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    user_id : UUID
        The user being edited.
    name, email, status, profile_image : str | None
        New values; None leaves the field untouched.

    Returns
    -------
    dict
        `{"user": <serialized user>, "previousImage": <str>}`; the previous
        image is returned so the caller can remove it from the object store.

    Raises
    ------
    HTTPException
        409 if the email belongs to another account, 400 on an invalid status.
    """
    user_dao = UserDao()
    user = _require_user(session, user_id)
    if email is not None:
        email = email.strip()
        owner = user_dao.fetchUserByEmail(session, email)
        if owner is not None and owner.id != user.id:
            raise HTTPException(status_code=409, detail="Email already in use")
    if status is not None and status not in {s.value for s in UserStatus}:
        raise HTTPException(status_code=400, detail=f"Invalid status '{status}'")

    previous_image = user.profile_image
    user_dao.updateFields(
        session,
        user,
        name=name.strip() if name else None,
        email=email or None,
        status=status,
        profile_image=profile_image,
    )
    return {"user": serialize_user(user), "previousImage": previous_image}


@transactional
def verify_user_password(session: Session, user_id: UUID, password: str) -> bool:
    user = _require_user(session, user_id)
    return EncryptionDec().check_passwords(password, user.password)


@transactional
def change_user_password(session: Session, user_id: UUID, current_password: str, new_password: str) -> None:
    """
    Replace the password of a user after checking the current one.

    Raises
    ------
    HTTPException
        401 if the current password is wrong.

    The length rules of the new password are checked by the request model (422).
    """
    enc = EncryptionDec()
    user = _require_user(session, user_id)
    if not enc.check_passwords(current_password, user.password):
        raise HTTPException(status_code=401, detail="Current password is incorrect")
    UserDao().updatePassword(session, user, new_password)


@transactional
def logout_user(session: Session, user_id: UUID) -> None:
    user = UserDao().fetchUserById(session, user_id)
    if user is not None:
        UserDao().updateStatus(session, user, UserStatus.OFFLINE.value)


@transactional
def delete_user_account(session: Session, user_id: UUID) -> str:
    """
    Delete a user together with its conversations, messages and permission links.

    Audit references held by prompt templates are cleared.

    Returns
    -------
    str
        The profile image URL of the deleted account, for object-store cleanup.

    Raises
    ------
    HTTPException
        404 if the user does not exist.
    """
    user = _require_user(session, user_id)
    conversation_dao = ConversationDao()
    conversation_ids = conversation_dao.fetchConversationIdsByUserId(session, user.id)
    MessagesDao().deleteMessagesByConversationIds(session, conversation_ids)
    conversation_dao.deleteConversationsByUserId(session, user.id)
    PermissionDao().deleteUserPermissions(session, user.id)
    PromptTemplateDao().clearUserReferences(session, user.id)
    profile_image = user.profile_image
    UserDao().deleteUser(session, user)
    logger.info("Account %s deleted with %d conversations", user_id, len(conversation_ids))
    return profile_image


def validate_role(role: str) -> str:
    """Return `role` if it is a `Role` value, otherwise raise a 400."""
    if role not in {r.value for r in Role}:
        raise HTTPException(status_code=400, detail=f"Invalid role '{role}'")
    return role

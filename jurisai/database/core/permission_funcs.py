"""
Service-layer operations for permissions.

Permissions are resolved from the `user_permission` join table on every
authenticated request; nothing here caches a permission set.
"""

import logging
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy.orm import Session
from jurisai.database.helpers.transactionManagement import transactional
from jurisai.database.daos.permission_dao import PermissionDao
from jurisai.database.daos.user_dao import UserDao
from jurisai.database.entities.permission import PermissionName, ROLE_DEFAULT_PERMISSIONS

logger = logging.getLogger(__name__)


@transactional
def seed_permissions(session: Session) -> list[str]:
    """
    Make sure every `PermissionName` has a row in the `permission` table.

    Returns
    -------
    list[str]
        Names inserted by this call (empty when already seeded).
    """
    created = PermissionDao().seedPermissions(session)
    if created:
        logger.info("Seeded permissions: %s", ", ".join(created))
    return created


@transactional
def list_permissions(session: Session) -> list[dict]:
    return [
        {"id": str(p.id), "name": p.name, "description": p.description}
        for p in PermissionDao().fetchAllPermissions(session)
    ]


@transactional
def apply_role_defaults(session: Session, user_id: UUID, role: str) -> list[str]:
    """
    Reset the permission links of a user to the defaults of `role`.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session (injected by @transactional).
    user_id : UUID
        The user whose links are replaced.
    role : str
        One of the `Role` values.

    Returns
    -------
    list[str]
        The permission names now granted.
    """
    defaults = ROLE_DEFAULT_PERMISSIONS.get(role, frozenset())
    return PermissionDao().replaceUserPermissions(session, user_id, defaults)


@transactional
def set_user_permissions(session: Session, user_id: UUID, names: list[PermissionName]) -> list[str]:
    """
    Replace the permission set of a user with an explicit list.

    Raises
    ------
    HTTPException
        404 if the user does not exist.
    """
    if UserDao().fetchUserById(session, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    return PermissionDao().replaceUserPermissions(session, user_id, names)

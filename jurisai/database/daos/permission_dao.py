"""
Permission DAO

Purpose
-------
Data access for `Permission` and the `user_permission` join table:
- Seed the closed set of permission names
- Resolve a user's permission names
- Replace a user's permission set
- Remove every link of a user (account deletion)
"""

import logging
from typing import Iterable
from uuid import UUID
from sqlalchemy import asc
from sqlalchemy.orm import Session
from jurisai.database.entities.permission import Permission, PermissionName, UserPermission, PERMISSION_DESCRIPTIONS

logger = logging.getLogger(__name__)


class PermissionDao:
    """Data Access Object for permissions and their user links."""

    def seedPermissions(self, session: Session) -> list[str]:
        """
        Insert every `PermissionName` that is missing from the table.

        Returns
        -------
        list[str]
            Names that were inserted.
        """
        existing = {name for (name,) in session.query(Permission.name).all()}
        created = []
        for permission in PermissionName:
            if permission.value not in existing:
                session.add(Permission(permission, PERMISSION_DESCRIPTIONS[permission]))
                created.append(permission.value)
        session.flush()
        return created

    def fetchAllPermissions(self, session: Session) -> list[Permission]:
        return session.query(Permission).order_by(asc(Permission.name)).all()

    def fetchPermissionNamesByUserId(self, session: Session, user_id: UUID) -> list[str]:
        """
        Resolve the permission names granted to a user.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        user_id : UUID
            Unique identifier of the user.

        Returns
        -------
        list[str]
            Sorted permission names.
        """
        try:
            rows = (
                session.query(Permission.name)
                .join(UserPermission, UserPermission.permission_id == Permission.id)
                .filter(UserPermission.user_id == user_id)
                .order_by(asc(Permission.name))
                .all()
            )
            return [name for (name,) in rows]
        except Exception as e:
            logger.error("Error in PermissionDao.fetchPermissionNamesByUserId. Error: %s", e)
            raise

    def replaceUserPermissions(self, session: Session, user_id: UUID, names: Iterable[PermissionName]) -> list[str]:
        """
        Replace the permission links of a user.

        Raises
        ------
        ValueError
            If a name is not a `PermissionName`, or is missing from the table
            (permissions were not seeded).
        """
        wanted = {PermissionName(name).value for name in names}
        permissions = session.query(Permission).filter(Permission.name.in_(wanted)).all() if wanted else []
        missing = wanted - {p.name for p in permissions}
        if missing:
            raise ValueError(f"Unknown permissions: {', '.join(sorted(missing))}")

        self.deleteUserPermissions(session, user_id)
        for permission in permissions:
            session.add(UserPermission(user_id=user_id, permission_id=permission.id))
        session.flush()
        return sorted(wanted)

    def deleteUserPermissions(self, session: Session, user_id: UUID) -> None:
        session.query(UserPermission).filter(UserPermission.user_id == user_id).delete(synchronize_session=False)

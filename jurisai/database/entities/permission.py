"""
Permission ORM Models
=====================

``Permission`` rows name the capabilities that the permission gate checks.
Names form a closed enumeration (``PermissionName``); anything else is rejected
before it reaches the database. ``UserPermission`` is the many-to-many link
between users and permissions.
"""

from enum import Enum
from jurisai.database.config.connection_engine import declarativeBase
from sqlalchemy import ForeignKey, TEXT, VARCHAR, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid


class PermissionName(str, Enum):
    CAN_VIEW_ADMIN_DASHBOARD = "CAN_VIEW_ADMIN_DASHBOARD"
    CAN_MANAGE_USERS = "CAN_MANAGE_USERS"
    CAN_MANAGE_PROMPTS = "CAN_MANAGE_PROMPTS"
    CAN_MANAGE_ARTICLES = "CAN_MANAGE_ARTICLES"


PERMISSION_DESCRIPTIONS = {
    PermissionName.CAN_VIEW_ADMIN_DASHBOARD: "Access the admin dashboard.",
    PermissionName.CAN_MANAGE_USERS: "Create, update and delete user accounts.",
    PermissionName.CAN_MANAGE_PROMPTS: "Curate the system prompt templates.",
    PermissionName.CAN_MANAGE_ARTICLES: "Create, update and delete legal articles.",
}

ROLE_DEFAULT_PERMISSIONS = {
    "admin": frozenset(PermissionName),
    "redacteur": frozenset({PermissionName.CAN_MANAGE_ARTICLES}),
    "user": frozenset(),
}
"""Permissions granted when a user is created or their role changes."""


class Permission(declarativeBase):
    """
    ORM model for the `permission` table.

    Attributes
    ----------
    id : UUID
        Primary key.
    name : str
        Uppercase permission token, one of ``PermissionName``.
    description : str | None
        Human readable description.
    """

    __tablename__ = "permission"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(VARCHAR(64), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(TEXT, nullable=True)

    def __init__(self, name: PermissionName, description: str | None = None):
        self.id = uuid.uuid4()
        self.name = PermissionName(name).value
        self.description = description

    def __str__(self) -> str:
        return f"Permission: {self.name}"


class UserPermission(declarativeBase):
    """Join row granting one permission to one user."""

    __tablename__ = "user_permission"

    user_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("app_user.id"), primary_key=True)
    permission_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("permission.id"), primary_key=True)

    def __init__(self, user_id: UUID, permission_id: UUID):
        self.user_id = user_id
        self.permission_id = permission_id

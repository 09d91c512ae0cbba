"""
User ORM Model
==============

The ``User`` ORM model represents a registered user in the system. It maps to the
``app_user`` table and contains credentials, role, presence status and the
profile image URL.

Key features
~~~~~~~~~~~~
- UUID primary key (``id``)
- Unique email, bcrypt password hash
- Role (``user``, ``redacteur``, ``admin``) and presence status
- Permissions are linked through the ``user_permission`` table
  (see ``jurisai.database.entities.permission``)
"""

from enum import Enum
from jurisai.database.config.connection_engine import declarativeBase
from sqlalchemy import VARCHAR, TEXT, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from uuid import UUID
import uuid
from datetime import datetime, timezone

DEFAULT_PROFILE_IMAGE = "/pdp_none.png"
"""Sentinel profile image; never stored in the object store."""


class Role(str, Enum):
    USER = "user"
    REDACTEUR = "redacteur"
    ADMIN = "admin"


class UserStatus(str, Enum):
    ONLINE = "online"
    IDLE = "idle"
    OFFLINE = "offline"


class User(declarativeBase):
    """
    ORM model for the `app_user` table.

    Attributes
    ----------
    id : UUID
        Primary key. Unique identifier for the user.
    name : str
        Display name.
    email : str
        Email address of the user (unique).
    password : str
        Hashed password of the user.
    role : str
        One of the ``Role`` values.
    status : str
        One of the ``UserStatus`` values.
    profile_image : str
        Public URL of the profile image, or ``DEFAULT_PROFILE_IMAGE``.
    created_at, updated_at : datetime
        Audit timestamps (UTC).
    """

    __tablename__ = "app_user"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)

    name: Mapped[str] = mapped_column(VARCHAR(255), nullable=False)

    email: Mapped[str] = mapped_column(VARCHAR(255), nullable=False, unique=True)

    password: Mapped[str] = mapped_column(TEXT, nullable=False)

    role: Mapped[str] = mapped_column(TEXT, nullable=False, default=Role.USER.value)

    status: Mapped[str] = mapped_column(TEXT, nullable=False, default=UserStatus.OFFLINE.value)

    profile_image: Mapped[str] = mapped_column(TEXT, nullable=False, default=DEFAULT_PROFILE_IMAGE)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __init__(
        self,
        name: str,
        email: str,
        password: str,
        role: str = Role.USER.value,
        status: str = UserStatus.OFFLINE.value,
        profile_image: str = DEFAULT_PROFILE_IMAGE,
    ):
        """
        Initialize a new User object.

        Parameters
        ----------
        name : str
            Display name of the user.
        email : str
            Email address of the user.
        password : str
            Plaintext password; hashed by ``UserDao.createUser``.
        role : str
            Role of the user.
        status : str
            Initial presence status.
        profile_image : str
            Profile image URL.
        """
        now = datetime.now(timezone.utc)
        self.id = uuid.uuid4()
        self.name = name
        self.email = email
        self.password = password
        self.role = role
        self.status = status
        self.profile_image = profile_image
        self.created_at = now
        self.updated_at = now

    def __str__(self) -> str:
        return f"User: id:{self.id}, email: {self.email}, role: {self.role}"

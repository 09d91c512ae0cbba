"""
Pydantic models used for request validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation (422 on malformed bodies) and automatic OpenAPI schema generation.
Field names follow the camelCase used by the frontend; snake_case names are
accepted as well.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from jurisai.crypt.encrypt_decrypt import EncryptionDec, MAX_PASSWORD_BYTES
from jurisai.database.entities.permission import PermissionName

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


def checked_password(value: str) -> str:
    """Reject passwords bcrypt cannot hash (more than `MAX_PASSWORD_BYTES` UTF-8 bytes)."""
    if not EncryptionDec().is_valid_password(value):
        raise ValueError(f"Password must be 6 characters to {MAX_PASSWORD_BYTES} bytes long")
    return value


class FileRec(BaseModel):
    """Metadata for an uploaded file stored on local disk."""
    original: str = Field(..., description="Original filename as provided by the client.", examples=["contract.pdf"])
    path: str = Field(..., description="Server-side storage path.", examples=["uploads/documents/3f2a.pdf"])
    mime: str = Field(..., description="MIME type of the file.", examples=["application/pdf"])


class SignupRequest(BaseModel):
    """
    Represents data required to register a new user.
    """
    name: str = Field(..., min_length=1)
    """Display name."""
    email: str = Field(..., pattern=EMAIL_PATTERN)
    """Email address of the user."""
    password: str = Field(..., min_length=6)
    """Password chosen by the user (6 characters to 72 bytes)."""

    @field_validator("password")
    @classmethod
    def bcrypt_length(cls, value: str) -> str:
        return checked_password(value)


class LoginRequest(BaseModel):
    """
    Represents login credentials for a user.
    """
    email: str = Field(..., pattern=EMAIL_PATTERN)
    """The email of the user"""
    password: str = Field(..., min_length=1)
    """The plaintext password provided for authentication."""


class StatusUpdate(BaseModel):
    status: str


class PasswordCheck(BaseModel):
    password: Optional[str] = None
    """Checked in the route so that a missing value maps to 400."""


class PasswordChange(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6)

    @field_validator("new_password")
    @classmethod
    def bcrypt_length(cls, value: str) -> str:
        return checked_password(value)


class NewMessageRequest(BaseModel):
    """
    A user message sent to a conversation.
    """
    message: str = Field(..., min_length=1)
    """The text of the message."""

    @field_validator("message")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Message must not be empty")
        return value


def as_tags(value):
    """Accept a single tag where a list of tags is expected."""
    if isinstance(value, str):
        return [value]
    return value


class ArticleCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: List[str] = Field(default_factory=list)
    is_universal: bool = Field(False, alias="isUniversal")
    pdf_url: str = Field("", alias="pdfUrl")

    @field_validator("category", mode="before")
    @classmethod
    def single_tag(cls, value):
        return as_tags(value)


class ArticleUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[List[str]] = None
    is_universal: Optional[bool] = Field(None, alias="isUniversal")
    pdf_url: Optional[str] = Field(None, alias="pdfUrl")

    @field_validator("category", mode="before")
    @classmethod
    def single_tag(cls, value):
        return as_tags(value)


class AdminUserCreate(BaseModel):
    """
    An account created from the admin screens.
    """
    name: str = Field(..., min_length=1)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    role: str
    """One of user, redacteur, admin (checked by the service layer)."""

    @field_validator("password")
    @classmethod
    def bcrypt_length(cls, value: str) -> str:
        return checked_password(value)


class PermissionsUpdate(BaseModel):
    permissions: List[PermissionName]
    """Full replacement set; unknown names are rejected with 422."""


class PromptCreate(BaseModel):
    name: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    status: str = "draft"


class PromptUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    status: Optional[str] = None

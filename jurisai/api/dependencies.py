"""
Request dependencies: session resolution and the permission gate.

`get_auth_context` runs before every authenticated route. It reads the session
cookie, verifies the JWT, re-loads the user and resolves its permissions from
storage, and hands the route an explicit `AuthContext` value.

`check_permission(...)` builds a dependency that lets the request through
when the user holds at least one of the required permissions.
"""

import logging
from typing import Iterable, Optional
from uuid import UUID

from fastapi import Cookie, Depends, HTTPException
from pydantic import BaseModel
from jurisai.api.utils import verify_token, InvalidSessionError
from jurisai.database.config.config import settings
from jurisai.database.core.user_funcs import load_auth_user
from jurisai.database.entities.permission import PermissionName

logger = logging.getLogger(__name__)


class AuthContext(BaseModel):
    """The resolved identity of the requesting user."""
    id: UUID
    """Primary key of the user."""
    name: str
    """Display name."""
    email: str
    """Email address."""
    role: str
    """Role at the time of the request."""
    permissions: frozenset[PermissionName] = frozenset()
    """Permissions read from storage for this request."""

    def public(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "permissions": sorted(p.value for p in self.permissions),
        }


def get_auth_context(token: Optional[str] = Cookie(None, alias=settings.COOKIE_NAME)) -> AuthContext:
    """
    Resolve the requesting user from the session cookie.

    Raises
    ------
    HTTPException
        401 if the cookie is missing or empty.
    InvalidSessionError
        If the token is invalid/expired or the user no longer exists; turned
        into a 401 that clears the cookie.
    """
    if not token:
        raise HTTPException(status_code=401, detail="Missing session token")

    claims = verify_token(token)
    if claims is None:
        raise InvalidSessionError("Invalid or expired session")

    try:
        user_id = UUID(claims["sub"])
    except ValueError:
        raise InvalidSessionError("Invalid or expired session")

    user = load_auth_user(user_id=user_id)
    if user is None:
        logger.info("Session refers to a deleted user: %s", user_id)
        raise InvalidSessionError("User not found or session invalid")

    known = {p.value for p in PermissionName}
    return AuthContext(
        id=user["id"],
        name=user["name"],
        email=user["email"],
        role=user["role"],
        permissions=frozenset(PermissionName(name) for name in user["permissions"] if name in known),
    )


def ensure_permission(auth: Optional[AuthContext], required: Iterable[PermissionName]) -> AuthContext:
    """
    Any-of permission check.

    Parameters
    ----------
    auth : AuthContext | None
        The resolved user, if any.
    required : Iterable[PermissionName]
        Acceptable permissions; holding one of them is enough.

    Returns
    -------
    AuthContext
        `auth`, unchanged.

    Raises
    ------
    HTTPException
        401 without a user, 403 when the intersection is empty.
    """
    if auth is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if auth.permissions.isdisjoint(set(required)):
        raise HTTPException(status_code=403, detail="Access denied: insufficient permissions")
    return auth


def check_permission(*required: PermissionName):
    """
    Build a dependency that authenticates the request and applies `ensure_permission`.

    Example
    -------
    >>> @router.get("/dashboard")
    ... def dashboard(auth: AuthContext = Depends(check_permission(PermissionName.CAN_VIEW_ADMIN_DASHBOARD))):
    ...     ...
    """
    wanted = frozenset(required)

    def dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        return ensure_permission(auth, wanted)

    return dependency

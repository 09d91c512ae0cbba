"""
JWT utilities for issuing and verifying session tokens, plus small helpers
shared by the routers.

Functions
---------
create_access_token(data: dict) -> str
    Creates a signed JWT access token with an expiration (`exp`) claim.
verify_token(token: str) -> dict | None
    Verify a JWT's signature & expiration and return its claims if valid.
set_session_cookie(response, token) / clear_session_cookie(response)
    Write or remove the http-only session cookie.
internal_error(message, error) -> HTTPException
    Log an unexpected exception and wrap it in a 500 `{message, cause}`.

Environment contract (from `settings`)
--------------------------------------
SECRET_KEY : str
    HMAC signing key for JWTs.
ALGORITHM : str
    JWT signing algorithm (e.g., "HS256").
ACCESS_TOKEN_EXPIRE_MINUTES : int
    Token lifetime window in minutes.
COOKIE_NAME, COOKIE_SECURE
    Name and `secure` flag of the session cookie.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, Response
from jose import jwt, JWTError
from jurisai.database.config.config import settings

logger = logging.getLogger(__name__)


class InvalidSessionError(Exception):
    """
    Raised when a session cookie is present but unusable (bad signature,
    expired, or pointing at a user that no longer exists).

    The application turns it into a 401 response that also clears the cookie.
    """

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


def create_access_token(data: dict) -> str:
    """
    Create a signed JWT access token.

    Parameters
    ----------
    data : dict
        Claims to embed in the token (`sub`, `email`, `role`, `name`).
        Retrieved by the `verify_token` function.

    Returns
    -------
    str
        Encoded JWT string.

    Notes
    ----------
    - Adds an `exp` (expiration) claim calculated from ACCESS_TOKEN_EXPIRE_MINUTES.
    - Uses `settings.SECRET_KEY` and `settings.ALGORITHM` for signing.
    """
    expiration_time = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    encoding = data.copy()
    # exp is a NumericDate (seconds since epoch)
    expires = int(datetime.now(timezone.utc).timestamp()) + (int(expiration_time) * 60)
    encoding.update({"exp": expires})
    return jwt.encode(encoding, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Optional[dict]:
    """
    Verify a JWT and return its claims.

    Parameters
    ----------
    token : str
        Encoded JWT string from the session cookie.

    Returns
    ----------
    dict | None
        The decoded claims if the token is valid and carries a `sub`, otherwise None.

    Notes
    ----------
    - Decodes and validates the signature and expiration using SECRET_KEY/ALGORITHM.
    - On any JWTError (invalid signature, expired, malformed), returns None.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("Session token rejected: %s", e)
        return None
    if not payload.get("sub"):
        return None
    return payload


def session_claims(user: dict) -> dict:
    """Claims bound into the session token of a serialized user."""
    return {"sub": str(user["id"]), "email": user["email"], "role": user["role"], "name": user["name"]}


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=int(settings.ACCESS_TOKEN_EXPIRE_MINUTES) * 60,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


def internal_error(message: str, error: Exception) -> HTTPException:
    """
    Log an unexpected exception and build the matching 500 response.

    Returns
    -------
    HTTPException
        status 500 with detail `{"message": message, "cause": str(error)}`.
    """
    logger.exception("%s: %s", message, error)
    return HTTPException(status_code=500, detail={"message": message, "cause": str(error)})

"""
FastAPI Router — Accounts & Session
===================================

Endpoints under `/user`:
- signup, login, auth-status, logout
- updateprofile (multipart, optional `profile` image), update-status
- verify-password, change-password, delete-account

The session is an HS256 JWT stored in an http-only cookie. Expected failures
are raised as `HTTPException` by the service layer; anything unexpected is
logged and returned as a 500 `{message, cause}`.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from jurisai.api.aws_bucket_funcs.funcs import save_profile_image, delete_profile_image
from jurisai.api.dependencies import AuthContext, get_auth_context
from jurisai.api.models import SignupRequest, LoginRequest, StatusUpdate, PasswordCheck, PasswordChange
from jurisai.api.utils import (
    create_access_token,
    session_claims,
    set_session_cookie,
    clear_session_cookie,
    internal_error,
)
from jurisai.database.core.user_funcs import (
    signup_user,
    login_user,
    get_user_profile,
    logout_user,
    set_user_status,
    update_user_profile,
    verify_user_password,
    change_user_password,
    delete_user_account,
)
from jurisai.database.entities.user import UserStatus

router = APIRouter(prefix="/user", tags=["user"])
"""Creates the FastAPI router in which we define the account routes"""

logger = logging.getLogger(__name__)


def _session_payload(message: str, user: dict) -> dict:
    return {
        "message": message,
        "id": user["id"],
        "name": user["name"],
        "email": user["email"],
        "profileImage": user["profileImage"],
        "status": user["status"],
        "role": user["role"],
        "permissions": user.get("permissions", []),
    }


@router.post("/signup", status_code=201)
def signup(data: SignupRequest, response: Response):
    """Register a new account and open a session.

    Response:
        201: {message, id, name, email, profileImage, status, role, permissions}
        409: email already registered
    """
    try:
        user = signup_user(name=data.name, email=data.email, password=data.password)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Signup failed", e)
    set_session_cookie(response, create_access_token(session_claims(user)))
    return _session_payload("User created successfully", user)


@router.post("/login")
def login(data: LoginRequest, response: Response):
    """Authenticate a user and set the session cookie.

    Response:
        200: same shape as signup
        404: unknown email
        401: wrong password
    """
    try:
        user = login_user(email=data.email, password=data.password)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Login failed", e)
    set_session_cookie(response, create_access_token(session_claims(user)))
    return _session_payload("Login successful", user)


@router.get("/auth-status")
def auth_status(auth: AuthContext = Depends(get_auth_context)):
    """Return the resolved user and mark them online."""
    try:
        set_user_status(user_id=auth.id, status=UserStatus.ONLINE.value)
        user = get_user_profile(user_id=auth.id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not verify the session", e)
    return _session_payload("Authenticated", user)


@router.get("/logout")
def logout(response: Response, auth: AuthContext = Depends(get_auth_context)):
    """Mark the user offline and clear the session cookie."""
    try:
        logout_user(user_id=auth.id)
    except Exception as e:
        raise internal_error("Logout failed", e)
    clear_session_cookie(response)
    return {"message": "Logged out", "name": auth.name, "email": auth.email, "status": UserStatus.OFFLINE.value}


@router.put("/updateprofile")
def update_profile(
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    profile: Optional[UploadFile] = File(None),
    auth: AuthContext = Depends(get_auth_context),
):
    """Update name, email, status and/or profile image.

    A new image replaces the previous one in the object store; the temporary
    upload is always removed.
    """
    new_image = None
    try:
        if profile is not None and profile.filename:
            new_image = save_profile_image(profile)
        result = update_user_profile(
            user_id=auth.id, name=name or None, email=email or None, status=status or None, profile_image=new_image
        )
    except HTTPException:
        if new_image:
            delete_profile_image(new_image)
        raise
    except Exception as e:
        if new_image:
            delete_profile_image(new_image)
        raise internal_error("Profile not updated", e)

    if new_image and result["previousImage"] != new_image:
        delete_profile_image(result["previousImage"])
    return {"message": "Profile updated", "user": result["user"]}


@router.put("/update-status")
def update_status(data: StatusUpdate, auth: AuthContext = Depends(get_auth_context)):
    """Set the presence status (online, idle, offline)."""
    try:
        user = set_user_status(user_id=auth.id, status=data.status)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Status not updated", e)
    return {"message": "Status updated", "status": user["status"]}


@router.post("/verify-password")
def verify_password(data: PasswordCheck, auth: AuthContext = Depends(get_auth_context)):
    """Check the current password (used before sensitive account actions)."""
    if not data.password:
        raise HTTPException(status_code=400, detail="Password is required")
    try:
        valid = verify_user_password(user_id=auth.id, password=data.password)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Password verification failed", e)
    if not valid:
        raise HTTPException(status_code=401, detail="Incorrect password")
    return {"message": "Password verified"}


@router.put("/change-password")
def change_password(data: PasswordChange, auth: AuthContext = Depends(get_auth_context)):
    try:
        change_user_password(
            user_id=auth.id, current_password=data.current_password, new_password=data.new_password
        )
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Password not updated", e)
    return {"message": "Password updated"}


@router.delete("/delete-account")
def delete_account(response: Response, auth: AuthContext = Depends(get_auth_context)):
    """Delete the account, its conversations and permissions, then clear the cookie."""
    try:
        profile_image = delete_user_account(user_id=auth.id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Account not deleted", e)
    delete_profile_image(profile_image)
    clear_session_cookie(response)
    return {"message": "Account deleted"}

"""
FastAPI Router — Administration
===============================

Endpoints under `/admin`, each behind the permission gate:

- CAN_VIEW_ADMIN_DASHBOARD : auth-status, dashboard
- CAN_MANAGE_USERS         : users CRUD, permission assignment, permission list
- CAN_MANAGE_PROMPTS       : prompt templates CRUD
- CAN_MANAGE_ARTICLES      : articles overview
"""

import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from jurisai.api.aws_bucket_funcs.funcs import save_profile_image, delete_profile_image
from jurisai.api.dependencies import AuthContext, check_permission
from jurisai.api.models import AdminUserCreate, PermissionsUpdate, PromptCreate, PromptUpdate
from jurisai.api.utils import internal_error
from jurisai.database.core.admin_funcs import (
    list_users,
    get_user,
    create_user_by_admin,
    update_user_by_admin,
    delete_user_by_admin,
    create_prompt_template,
    list_prompt_templates,
    get_prompt_template,
    update_prompt_template,
    delete_prompt_template,
)
from jurisai.database.core.article_funcs import list_all_articles
from jurisai.database.core.permission_funcs import list_permissions, set_user_permissions
from jurisai.database.entities.permission import PermissionName

router = APIRouter(prefix="/admin", tags=["admin"])

logger = logging.getLogger(__name__)

can_view_dashboard = check_permission(PermissionName.CAN_VIEW_ADMIN_DASHBOARD)
can_manage_users = check_permission(PermissionName.CAN_MANAGE_USERS)
can_manage_prompts = check_permission(PermissionName.CAN_MANAGE_PROMPTS)
can_manage_articles = check_permission(PermissionName.CAN_MANAGE_ARTICLES)


# -----------------------
# Dashboard
# -----------------------
@router.get("/auth-status")
def admin_auth_status(auth: AuthContext = Depends(can_view_dashboard)):
    return {"success": True, "message": "Admin authenticated", "user": auth.public()}


@router.get("/dashboard")
def dashboard(auth: AuthContext = Depends(can_view_dashboard)):
    return {"message": "Welcome to the admin dashboard!"}


# -----------------------
# Users
# -----------------------
@router.get("/users")
def get_all_users(auth: AuthContext = Depends(can_manage_users)):
    try:
        return {"message": "Users found", "users": list_users()}
    except Exception as e:
        raise internal_error("Could not list users", e)


@router.post("/user", status_code=201)
def create_user(data: AdminUserCreate, auth: AuthContext = Depends(can_manage_users)):
    try:
        user = create_user_by_admin(name=data.name, email=data.email, password=data.password, role=data.role)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Server error while creating the user", e)
    logger.info("User %s created by admin %s", user["id"], auth.id)
    return {"message": "User created successfully", "user": user}


@router.get("/user/{user_id}")
def get_user_by_id(user_id: UUID, auth: AuthContext = Depends(can_manage_users)):
    try:
        return {"message": "User found", "user": get_user(user_id=user_id)}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not load the user", e)


@router.put("/user/{user_id}")
def update_user(
    user_id: UUID,
    name: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    role: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    auth: AuthContext = Depends(can_manage_users),
):
    """Update name, email, role and/or image (multipart field `image`)."""
    new_image = None
    try:
        if image is not None and image.filename:
            new_image = save_profile_image(image)
        result = update_user_by_admin(
            requester_id=auth.id,
            user_id=user_id,
            name=name or None,
            email=email or None,
            role=role or None,
            profile_image=new_image,
        )
    except HTTPException:
        if new_image:
            delete_profile_image(new_image)
        raise
    except Exception as e:
        if new_image:
            delete_profile_image(new_image)
        raise internal_error("Server error while updating the user", e)

    if new_image and result["previousImage"] != new_image:
        delete_profile_image(result["previousImage"])
    return {"message": "User updated successfully", "user": result["user"]}


@router.delete("/user/{user_id}")
def delete_user(user_id: UUID, auth: AuthContext = Depends(can_manage_users)):
    try:
        profile_image = delete_user_by_admin(requester_id=auth.id, user_id=user_id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not delete the user", e)
    delete_profile_image(profile_image)
    return {"message": "User deleted successfully"}


@router.put("/user/{user_id}/permissions")
def update_user_permissions(user_id: UUID, data: PermissionsUpdate, auth: AuthContext = Depends(can_manage_users)):
    try:
        permissions = set_user_permissions(user_id=user_id, names=data.permissions)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not update permissions", e)
    return {"message": "Permissions updated", "permissions": permissions}


@router.get("/permissions")
def get_permissions(auth: AuthContext = Depends(can_manage_users)):
    try:
        return {"message": "OK", "permissions": list_permissions()}
    except Exception as e:
        raise internal_error("Could not list permissions", e)


# -----------------------
# Prompt templates
# -----------------------
@router.post("/prompt", status_code=201)
def create_prompt(data: PromptCreate, auth: AuthContext = Depends(can_manage_prompts)):
    try:
        prompt = create_prompt_template(requester_id=auth.id, **data.model_dump())
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Server error while creating the prompt", e)
    return {"message": "Prompt created successfully", "promptTemplate": prompt}


@router.get("/prompts")
def get_prompts(auth: AuthContext = Depends(can_manage_prompts)):
    try:
        return {"message": "OK", "prompts": list_prompt_templates()}
    except Exception as e:
        raise internal_error("Could not list prompts", e)


@router.get("/prompt/{prompt_id}")
def get_prompt(prompt_id: UUID, auth: AuthContext = Depends(can_manage_prompts)):
    try:
        return {"message": "OK", "prompt": get_prompt_template(template_id=prompt_id)}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Could not load the prompt", e)


@router.put("/prompt/{prompt_id}")
def update_prompt(prompt_id: UUID, data: PromptUpdate, auth: AuthContext = Depends(can_manage_prompts)):
    try:
        prompt = update_prompt_template(
            requester_id=auth.id, template_id=prompt_id, **data.model_dump(exclude_none=True)
        )
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Server error while updating the prompt", e)
    return {"message": "Prompt updated successfully", "prompt": prompt}


@router.delete("/prompt/{prompt_id}")
def delete_prompt(prompt_id: UUID, auth: AuthContext = Depends(can_manage_prompts)):
    try:
        delete_prompt_template(template_id=prompt_id)
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Server error while deleting the prompt", e)
    return {"message": "Prompt deleted successfully"}


# -----------------------
# Articles
# -----------------------
@router.get("/articles")
def admin_get_all_articles(auth: AuthContext = Depends(can_manage_articles)):
    try:
        return {"message": "OK", "articles": list_all_articles()}
    except Exception as e:
        raise internal_error("Could not list articles", e)

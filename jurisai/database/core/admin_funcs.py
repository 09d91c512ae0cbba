"""
Service-layer operations behind the admin screens: user management and
prompt-template curation.

Routers check permissions before calling into this module; the functions
here only enforce data rules (uniqueness, self-protection, valid enums).
"""

import logging
from uuid import UUID
from fastapi import HTTPException
from sqlalchemy.orm import Session
from jurisai.database.helpers.transactionManagement import transactional
from jurisai.database.daos.user_dao import UserDao
from jurisai.database.daos.permission_dao import PermissionDao
from jurisai.database.daos.prompt_template_dao import PromptTemplateDao
from jurisai.database.core.user_funcs import serialize_user, validate_role, delete_user_account
from jurisai.database.core.permission_funcs import apply_role_defaults
from jurisai.database.entities.user import User, Role
from jurisai.database.entities.prompt_template import PromptTemplate, PromptStatus

logger = logging.getLogger(__name__)


# -----------------------
# Users
# -----------------------
@transactional
def list_users(session: Session) -> list[dict]:
    permission_dao = PermissionDao()
    return [
        serialize_user(user, permission_dao.fetchPermissionNamesByUserId(session, user.id))
        for user in UserDao().fetchAllUsers(session)
    ]


@transactional
def get_user(session: Session, user_id: UUID) -> dict:
    user = UserDao().fetchUserById(session, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return serialize_user(user, PermissionDao().fetchPermissionNamesByUserId(session, user.id))


@transactional
def create_user_by_admin(session: Session, name: str, email: str, password: str, role: str) -> dict:
    """
    Create an account on behalf of an administrator.

    Raises
    ------
    HTTPException
        400 on an invalid role, 409 if the email is taken.
    """
    validate_role(role)
    user_dao = UserDao()
    if user_dao.fetchUserByEmail(session, email) is not None:
        raise HTTPException(status_code=409, detail="A user with this email already exists")
    user = User(name=name.strip(), email=email.strip(), password=password, role=role)
    user_dao.createUser(session, user)
    permissions = apply_role_defaults(user_id=user.id, role=role)
    return serialize_user(user, permissions)


@transactional
def update_user_by_admin(
    session: Session,
    requester_id: UUID,
    user_id: UUID,
    name: str | None = None,
    email: str | None = None,
    role: str | None = None,
    profile_image: str | None = None,
) -> dict:
    """
    Update another user's account.

    A role change resets the user's permissions to the new role's defaults.

    Returns
    -------
    dict
        `{"user": <serialized user>, "previousImage": <str>}`.

    Raises
    ------
    HTTPException
        404 unknown user, 403 when an admin removes their own admin role,
        409 email taken, 400 invalid role.
    """
    user_dao = UserDao()
    user = user_dao.fetchUserById(session, user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if role is not None:
        validate_role(role)
        if user.id == requester_id and user.role == Role.ADMIN.value and role != Role.ADMIN.value:
            raise HTTPException(status_code=403, detail="You cannot remove your own admin rights")
    if email is not None:
        owner = user_dao.fetchUserByEmail(session, email)
        if owner is not None and owner.id != user.id:
            raise HTTPException(status_code=409, detail="This email is already used by another user")

    role_changed = role is not None and role != user.role
    previous_image = user.profile_image
    user_dao.updateFields(
        session,
        user,
        name=name.strip() if name else None,
        email=email.strip() if email else None,
        role=role,
        profile_image=profile_image,
    )
    if role_changed:
        permissions = apply_role_defaults(user_id=user.id, role=role)
        logger.info("Role of user %s changed to %s", user.id, role)
    else:
        permissions = PermissionDao().fetchPermissionNamesByUserId(session, user.id)
    return {"user": serialize_user(user, permissions), "previousImage": previous_image}


@transactional
def delete_user_by_admin(session: Session, requester_id: UUID, user_id: UUID) -> str:
    """
    Delete another user's account.

    Returns
    -------
    str
        The profile image of the deleted account.

    Raises
    ------
    HTTPException
        403 on self-deletion, 404 if the user does not exist.
    """
    if requester_id == user_id:
        raise HTTPException(status_code=403, detail="You cannot delete your own account")
    return delete_user_account(user_id=user_id)


# -----------------------
# Prompt templates
# -----------------------
def _user_refs(session: Session, ids: set) -> dict:
    user_dao = UserDao()
    refs = {}
    for user_id in ids:
        if user_id is None:
            continue
        user = user_dao.fetchUserById(session, user_id)
        if user is not None:
            refs[user_id] = {"id": str(user.id), "name": user.name, "email": user.email}
    return refs


def serialize_prompt(template: PromptTemplate, refs: dict) -> dict:
    return {
        "id": str(template.id),
        "name": template.name,
        "content": template.content,
        "description": template.description,
        "category": template.category,
        "status": template.status,
        "createdBy": refs.get(template.created_by),
        "lastUpdatedBy": refs.get(template.last_updated_by),
        "createdAt": template.created_at.isoformat(),
        "updatedAt": template.updated_at.isoformat(),
    }


def _validate_status(status: str) -> str:
    allowed = [s.value for s in PromptStatus]
    if status not in allowed:
        raise HTTPException(status_code=400, detail=f"Invalid status. Allowed statuses: {', '.join(allowed)}")
    return status


def _require_prompt(session: Session, template_id: UUID) -> PromptTemplate:
    template = PromptTemplateDao().fetchById(session, template_id)
    if template is None:
        raise HTTPException(status_code=404, detail="Prompt not found")
    return template


@transactional
def create_prompt_template(
    session: Session,
    requester_id: UUID,
    name: str,
    content: str,
    description: str | None = None,
    category: str | None = None,
    status: str = PromptStatus.DRAFT.value,
) -> dict:
    """
    Create a prompt template authored by `requester_id`.

    Raises
    ------
    HTTPException
        409 if the name is taken, 400 on an invalid status.
    """
    dao = PromptTemplateDao()
    _validate_status(status)
    if dao.fetchByName(session, name) is not None:
        raise HTTPException(status_code=409, detail="A prompt with this name already exists")
    template = PromptTemplate(
        name=name,
        content=content,
        description=description,
        category=category,
        status=status,
        created_by=requester_id,
    )
    dao.createPromptTemplate(session, template)
    return serialize_prompt(template, _user_refs(session, {requester_id}))


@transactional
def list_prompt_templates(session: Session) -> list[dict]:
    templates = PromptTemplateDao().fetchAll(session)
    ids = {t.created_by for t in templates} | {t.last_updated_by for t in templates}
    refs = _user_refs(session, ids)
    return [serialize_prompt(template, refs) for template in templates]


@transactional
def get_prompt_template(session: Session, template_id: UUID) -> dict:
    template = _require_prompt(session, template_id)
    return serialize_prompt(template, _user_refs(session, {template.created_by, template.last_updated_by}))


@transactional
def update_prompt_template(session: Session, requester_id: UUID, template_id: UUID, **fields) -> dict:
    """
    Update a prompt template and record `requester_id` as its last editor.

    Accepted keys: name, content, description, category, status.

    Raises
    ------
    HTTPException
        404 unknown template, 409 name used by another template, 400 invalid status.
    """
    dao = PromptTemplateDao()
    template = _require_prompt(session, template_id)
    if fields.get("status") is not None:
        _validate_status(fields["status"])
    if fields.get("name") is not None:
        fields["name"] = fields["name"].strip()
        other = dao.fetchByName(session, fields["name"])
        if other is not None and other.id != template.id:
            raise HTTPException(status_code=409, detail="Another prompt with this name already exists")
    if fields.get("content") is not None:
        fields["content"] = fields["content"].strip()

    for key in ("name", "content", "description", "category", "status"):
        if fields.get(key) is not None:
            setattr(template, key, fields[key])
    template.last_updated_by = requester_id
    session.flush()
    return serialize_prompt(template, _user_refs(session, {template.created_by, template.last_updated_by}))


@transactional
def delete_prompt_template(session: Session, template_id: UUID) -> None:
    template = _require_prompt(session, template_id)
    PromptTemplateDao().deletePromptTemplate(session, template)

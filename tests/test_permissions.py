from uuid import uuid4

import pytest
from fastapi import HTTPException

from conftest import API, signup, promote
from jurisai.api.dependencies import AuthContext, ensure_permission
from jurisai.database.entities.permission import PermissionName


def _auth(*permissions):
    return AuthContext(id=uuid4(), name="N", email="n@example.com", role="user", permissions=frozenset(permissions))


@pytest.mark.parametrize(
    "held, required, allowed",
    [
        ((), (PermissionName.CAN_MANAGE_USERS,), False),
        ((PermissionName.CAN_MANAGE_USERS,), (PermissionName.CAN_MANAGE_USERS,), True),
        ((PermissionName.CAN_MANAGE_ARTICLES,), (PermissionName.CAN_MANAGE_USERS, PermissionName.CAN_MANAGE_ARTICLES), True),
        ((PermissionName.CAN_MANAGE_PROMPTS,), (PermissionName.CAN_MANAGE_USERS,), False),
    ],
)
def test_ensure_permission_is_any_of(held, required, allowed):
    auth = _auth(*held)
    if allowed:
        assert ensure_permission(auth, required) is auth
    else:
        with pytest.raises(HTTPException) as exc:
            ensure_permission(auth, required)
        assert exc.value.status_code == 403


def test_ensure_permission_without_user():
    with pytest.raises(HTTPException) as exc:
        ensure_permission(None, [PermissionName.CAN_MANAGE_USERS])
    assert exc.value.status_code == 401


def test_admin_routes_are_gated(client, user_client, admin_client):
    assert client.get(f"{API}/admin/dashboard").status_code == 401
    assert user_client.get(f"{API}/admin/dashboard").status_code == 403
    assert admin_client.get(f"{API}/admin/dashboard").status_code == 200

    r = admin_client.get(f"{API}/admin/auth-status")
    assert r.status_code == 200
    assert set(r.json()["user"]["permissions"]) == {p.value for p in PermissionName}


def test_permission_changes_apply_without_new_login(make_client, admin_client):
    writer = make_client()
    writer.user = signup(writer, email="writer@example.com", name="Writer")
    promote(writer.user["id"], "redacteur")

    article = {"title": "Bail", "content": "Le bail d'habitation.", "category": ["Logement"]}
    assert writer.post(f"{API}/articles", json=article).status_code == 201

    r = admin_client.put(f"{API}/admin/user/{writer.user['id']}/permissions", json={"permissions": []})
    assert r.status_code == 200
    assert r.json()["permissions"] == []

    assert writer.post(f"{API}/articles", json=article).status_code == 403


def test_unknown_permission_name_is_rejected(admin_client, user_client):
    r = admin_client.put(
        f"{API}/admin/user/{user_client.user['id']}/permissions", json={"permissions": ["CAN_FLY"]}
    )
    assert r.status_code == 422


def test_permission_catalogue(admin_client):
    r = admin_client.get(f"{API}/admin/permissions")
    assert r.status_code == 200
    names = {p["name"] for p in r.json()["permissions"]}
    assert names == {p.value for p in PermissionName}

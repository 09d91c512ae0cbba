from uuid import uuid4

from conftest import API, signup


def _create_user(admin_client, email="dave@example.com", role="user"):
    return admin_client.post(
        f"{API}/admin/user",
        json={"name": "Dave", "email": email, "password": "secret123", "role": role},
    )


def test_create_user_with_role_defaults(admin_client, make_client):
    r = _create_user(admin_client, role="redacteur")
    assert r.status_code == 201
    user = r.json()["user"]
    assert user["role"] == "redacteur"
    assert user["permissions"] == ["CAN_MANAGE_ARTICLES"]

    r = make_client().post(f"{API}/user/login", json={"email": "dave@example.com", "password": "secret123"})
    assert r.status_code == 200


def test_create_user_validation(admin_client):
    assert _create_user(admin_client).status_code == 201
    assert _create_user(admin_client).status_code == 409
    assert _create_user(admin_client, email="eve@example.com", role="superuser").status_code == 400


def test_list_and_get_users(admin_client, user_client):
    r = admin_client.get(f"{API}/admin/users")
    assert r.status_code == 200
    emails = {u["email"] for u in r.json()["users"]}
    assert emails == {"admin@example.com", "alice@example.com"}

    r = admin_client.get(f"{API}/admin/user/{user_client.user['id']}")
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Alice"
    assert admin_client.get(f"{API}/admin/user/{uuid4()}").status_code == 404


def test_role_change_resets_permissions(admin_client, user_client, s3_calls):
    r = admin_client.put(f"{API}/admin/user/{user_client.user['id']}", data={"role": "admin"})
    assert r.status_code == 200
    assert len(r.json()["user"]["permissions"]) == 4

    r = admin_client.put(f"{API}/admin/user/{user_client.user['id']}", data={"role": "user"})
    assert r.json()["user"]["permissions"] == []


def test_update_user_image_and_email(admin_client, user_client, s3_calls):
    r = admin_client.put(
        f"{API}/admin/user/{user_client.user['id']}",
        data={"email": "alice.new@example.com"},
        files={"image": ("a.png", b"\x89PNG\r\n", "image/png")},
    )
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["email"] == "alice.new@example.com"
    assert user["profileImage"] == s3_calls["saved"][0]

    r = admin_client.put(f"{API}/admin/user/{user_client.user['id']}", data={"email": "admin@example.com"})
    assert r.status_code == 409


def test_admin_cannot_demote_or_delete_self(admin_client, s3_calls):
    admin_id = admin_client.user["id"]
    r = admin_client.put(f"{API}/admin/user/{admin_id}", data={"role": "user"})
    assert r.status_code == 403
    assert admin_client.delete(f"{API}/admin/user/{admin_id}").status_code == 403
    assert admin_client.get(f"{API}/admin/dashboard").status_code == 200


def test_delete_user(admin_client, user_client):
    r = admin_client.delete(f"{API}/admin/user/{user_client.user['id']}")
    assert r.status_code == 200
    assert admin_client.get(f"{API}/admin/user/{user_client.user['id']}").status_code == 404
    assert user_client.get(f"{API}/user/auth-status").status_code == 401


def test_user_management_requires_permission(user_client, make_client):
    other = make_client()
    other.user = signup(other, email="frank@example.com", name="Frank")
    assert user_client.get(f"{API}/admin/users").status_code == 403
    assert user_client.delete(f"{API}/admin/user/{other.user['id']}").status_code == 403


def test_prompt_template_lifecycle(admin_client):
    r = admin_client.post(
        f"{API}/admin/prompt",
        json={"name": "ASSISTANT_JURIDIQUE_GENERAL", "content": "Tu es un juriste.", "category": "chat"},
    )
    assert r.status_code == 201
    prompt = r.json()["promptTemplate"]
    assert prompt["status"] == "draft"
    assert prompt["createdBy"]["email"] == "admin@example.com"

    r = admin_client.post(f"{API}/admin/prompt", json={"name": "ASSISTANT_JURIDIQUE_GENERAL", "content": "x"})
    assert r.status_code == 409
    r = admin_client.post(f"{API}/admin/prompt", json={"name": "OTHER", "content": "x", "status": "live"})
    assert r.status_code == 400

    r = admin_client.put(f"{API}/admin/prompt/{prompt['id']}", json={"status": "published"})
    assert r.status_code == 200
    assert r.json()["prompt"]["status"] == "published"
    assert r.json()["prompt"]["lastUpdatedBy"]["name"] == "Admin"

    r = admin_client.get(f"{API}/admin/prompts")
    assert [p["name"] for p in r.json()["prompts"]] == ["ASSISTANT_JURIDIQUE_GENERAL"]

    assert admin_client.delete(f"{API}/admin/prompt/{prompt['id']}").status_code == 200
    assert admin_client.get(f"{API}/admin/prompt/{prompt['id']}").status_code == 404


def test_prompt_rename_conflict(admin_client):
    first = admin_client.post(f"{API}/admin/prompt", json={"name": "A", "content": "a"}).json()["promptTemplate"]
    admin_client.post(f"{API}/admin/prompt", json={"name": "B", "content": "b"})
    r = admin_client.put(f"{API}/admin/prompt/{first['id']}", json={"name": "B"})
    assert r.status_code == 409
    r = admin_client.put(f"{API}/admin/prompt/{first['id']}", json={"name": "A", "content": "new"})
    assert r.status_code == 200


def test_admin_article_overview(admin_client, user_client):
    admin_client.post(f"{API}/articles", json={"title": "T", "content": "C", "category": ["X"]})
    r = admin_client.get(f"{API}/admin/articles")
    assert r.status_code == 200
    assert [a["title"] for a in r.json()["articles"]] == ["T"]
    assert user_client.get(f"{API}/admin/articles").status_code == 403


def test_create_user_rejects_password_over_bcrypt_limit(admin_client):
    r = admin_client.post(
        f"{API}/admin/user",
        json={"name": "Dave", "email": "dave@example.com", "password": "p" * 80, "role": "user"},
    )
    assert r.status_code == 422

import os
import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient


# ---------------------------------------------------------------------------
# Env vars are set at import time: pytest imports `conftest.py` before the test
# modules, so `jurisai.database.config.config.settings` sees these values.
# ---------------------------------------------------------------------------
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="jurisai_test_"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_ROOT / 'test.db'}")
os.environ.setdefault("UPLOAD_DIR", str(_TEST_ROOT / "uploads"))
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("API_KEY", "test-api-key")
os.environ.setdefault("INIT_MODE", "test")
os.environ.setdefault("BUCKET_NAME", "jurisai-test")

Path(os.environ["UPLOAD_DIR"]).mkdir(parents=True, exist_ok=True)

API = "/api/v1"


class FakeChatModel:
    """Stands in for a LangChain chat model: `.invoke()` returns an object with `.content`."""

    def __init__(self, replies=None, error=None):
        self.replies = list(replies or [])
        self.error = error
        self.calls = []

    def invoke(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        content = self.replies.pop(0) if self.replies else "ok"
        return SimpleNamespace(content=content)


@pytest.fixture(scope="session")
def app():
    """Import the FastAPI app after env is configured."""
    from jurisai.main import app as fastapi_app

    return fastapi_app


@pytest.fixture(autouse=True)
def fresh_database(app):
    """Recreate every table and the permission catalogue for each test."""
    from jurisai.database.config.connection_engine import connection_engine, metadata
    from jurisai.database.core.permission_funcs import seed_permissions

    metadata.drop_all(connection_engine)
    metadata.create_all(connection_engine)
    seed_permissions()
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def chat_model():
    return FakeChatModel(replies=["Here is what the law says."])


@pytest.fixture()
def title_model():
    return FakeChatModel(replies=["Rupture de contrat"])


@pytest.fixture()
def pipeline(app, chat_model, title_model):
    """An `LLM_Pipeline` on fake models, injected in place of the OpenAI one."""
    from jurisai.api.llm_pipeline import LLM_Pipeline, get_pipeline

    instance = LLM_Pipeline(chat_model=chat_model, title_model=title_model)
    app.dependency_overrides[get_pipeline] = lambda: instance
    return instance


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def make_client(app):
    """Each call returns a new client with its own cookie jar (one per user)."""
    return lambda: TestClient(app)


def signup(client, email="alice@example.com", name="Alice", password="secret123"):
    r = client.post(f"{API}/user/signup", json={"name": name, "email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


def promote(user_id, role):
    """Give `role` (and its default permissions) to an existing user."""
    from uuid import UUID, uuid4
    from jurisai.database.core.admin_funcs import update_user_by_admin

    return update_user_by_admin(requester_id=uuid4(), user_id=UUID(user_id), role=role)


@pytest.fixture()
def user_client(make_client):
    c = make_client()
    c.user = signup(c)
    return c


@pytest.fixture()
def admin_client(make_client):
    c = make_client()
    c.user = signup(c, email="admin@example.com", name="Admin")
    promote(c.user["id"], "admin")
    return c


@pytest.fixture()
def s3_calls(monkeypatch):
    """Replace the object-store helpers used by the routers; records every call."""
    from jurisai.api import user_routes, admin_routes

    calls = {"saved": [], "deleted": []}

    def fake_save(f):
        url = f"https://jurisai-test.s3.eu-west-3.amazonaws.com/juris-ai-users/{f.filename}"
        calls["saved"].append(url)
        return url

    def fake_delete(url, s3_client=None):
        calls["deleted"].append(url)
        return True

    for module in (user_routes, admin_routes):
        monkeypatch.setattr(module, "save_profile_image", fake_save)
        monkeypatch.setattr(module, "delete_profile_image", fake_delete)
    return calls

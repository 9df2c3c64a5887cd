"""
SheetChart client - Test Configuration and Fixtures
"""
import json
from typing import Any, Optional
from unittest.mock import MagicMock

import pytest
import requests
from faker import Faker

from routers.page_router import Navigator
from services.api_client import ApiClient
from services.session_service import SessionStore, TokenStorage
from services.store_service import create_store

fake = Faker()

BASE_URL = "http://test/api"


def make_response(status_code: int = 200, body: Any = None) -> requests.Response:
    """Build a real requests.Response carrying a JSON body"""
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = b"" if body is None else json.dumps(body).encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    resp.url = BASE_URL
    return resp


def user_payload(role: str = "user", **overrides) -> dict:
    payload = {
        "_id": fake.uuid4(),
        "username": fake.user_name(),
        "email": fake.email(),
        "role": role,
        "isActive": True,
        "uploadCount": 3,
        "totalDataSize": 2048,
    }
    payload.update(overrides)
    return payload


def file_payload(file_id: Optional[str] = None, **overrides) -> dict:
    payload = {
        "_id": file_id or fake.uuid4(),
        "filename": "f1a2b3.xlsx",
        "originalName": "sales.xlsx",
        "fileSize": 4096,
        "mimeType": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "uploadedBy": fake.uuid4(),
        "sheets": [
            {
                "name": "Sheet1",
                "headers": ["Region", "Sales"],
                "data": [["North", 10], ["South", 20]],
                "rowCount": 2,
                "columnCount": 2,
            }
        ],
        "isProcessed": True,
        "createdAt": "2024-01-01T00:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def http() -> MagicMock:
    """requests.Session stand-in; responses are set per test with `serve`"""
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def serve(http):
    """Register canned responses by (method, path)"""
    routes = {}

    def handler(method, url, **kwargs):
        path = url[len(BASE_URL):]
        result = routes[(method, path)]
        if isinstance(result, Exception):
            raise result
        return result

    http.request.side_effect = handler

    def add(method: str, path: str, status_code: int = 200, body: Any = None, exc: Optional[Exception] = None):
        routes[(method, path)] = exc or make_response(status_code, body)

    return add


@pytest.fixture
def session_file(tmp_path) -> str:
    return str(tmp_path / "session.json")


@pytest.fixture
def session_store(session_file) -> SessionStore:
    return SessionStore(TokenStorage(session_file))


@pytest.fixture
def api(http, session_store) -> ApiClient:
    return ApiClient(BASE_URL, session_store, http=http)


@pytest.fixture
def navigator() -> MagicMock:
    return MagicMock(wraps=Navigator())


@pytest.fixture
def store(http, navigator, session_file):
    return create_store(navigator=navigator, base_url=BASE_URL, session_file=session_file, http=http)


@pytest.fixture
def logged_in_store(store, session_file):
    """Store holding a token and a loaded user"""
    from services.auth_service import restore_session
    from models.common_models import UserProfile

    store.context.session.set_token("tok-123")
    store.dispatch(restore_session("tok-123"))
    store.auth.user = UserProfile.model_validate(user_payload())
    return store

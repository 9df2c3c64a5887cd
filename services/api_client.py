"""
REST client for the SheetChart server.

One ApiClient per process, grouped by resource:

    api = ApiClient(API_BASE_URL, session_store)
    api.files.list_files(page=1, limit=5)
    api.charts.generate(file_id, 0, "bar", "Region", "Sales")

Every call attaches the bearer token held by the session store. A 401 on
any call other than a credential exchange expires that token and raises
AuthenticationError, even when the token was already dropped by a
concurrent call. Navigation is left to the session observer. Any other
failure is raised unchanged as ApiError / TransportError for the calling
operation to format.
"""

import logging
from typing import Any, Dict, Optional

import requests

from exceptions import ApiError, AuthenticationError, TransportError
from services.session_service import SessionStore

logger = logging.getLogger(__name__)

# a 401 here means bad credentials, not an expired session
CREDENTIAL_EXCHANGE_PATHS = ("/auth/login", "/auth/register")


def _error_message(resp: requests.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    message = body.get("error") or body.get("message")
    return message if isinstance(message, str) and message else None


class ApiClient:
    def __init__(self, base_url: str, session_store: SessionStore, http: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.session_store = session_store
        self.http = http or requests.Session()
        self.http.headers.update({"Accept": "application/json"})

        self.auth = AuthAPI(self)
        self.files = FilesAPI(self)
        self.charts = ChartsAPI(self)
        self.admin = AdminAPI(self)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {}
        token = self.session_store.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug(f"{method} {url} params={params}")
        try:
            resp = self.http.request(method, url, params=params, json=json, files=files, headers=headers)
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise TransportError() from e

        if resp.status_code == 401 and path not in CREDENTIAL_EXCHANGE_PATHS:
            self.session_store.expire()
            raise AuthenticationError(_error_message(resp) or "Authentication failed")

        if not resp.ok:
            raise ApiError(resp.status_code, _error_message(resp))

        if not resp.content:
            return {}
        try:
            body = resp.json()
        except ValueError as e:
            raise ApiError(resp.status_code, None, details={"reason": "malformed response body"}) from e
        return body if isinstance(body, dict) else {"data": body}

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None, files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("POST", path, json=json, files=files)

    def put(self, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Dict[str, Any]:
        return self.request("DELETE", path)


class AuthAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self.client.post("/auth/login", json={"email": email, "password": password})

    def register(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return self.client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    def get_profile(self) -> Dict[str, Any]:
        return self.client.get("/auth/profile")

    def update_profile(self, username: Optional[str] = None, email: Optional[str] = None) -> Dict[str, Any]:
        updates = {k: v for k, v in {"username": username, "email": email}.items() if v is not None}
        return self.client.put("/auth/profile", json=updates)

    def change_password(self, current_password: str, new_password: str) -> Dict[str, Any]:
        return self.client.put(
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    def verify_token(self) -> Dict[str, Any]:
        return self.client.get("/auth/verify")


class FilesAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def upload(self, file_name: str, content: bytes, mime_type: Optional[str] = None) -> Dict[str, Any]:
        part = (file_name, content, mime_type) if mime_type else (file_name, content)
        return self.client.post("/files/upload", files={"file": part})

    def list_files(self, page: Optional[int] = None, limit: Optional[int] = None, search: Optional[str] = None) -> Dict[str, Any]:
        return self.client.get("/files/my-files", params={"page": page, "limit": limit, "search": search})

    def get_file(self, file_id: str) -> Dict[str, Any]:
        return self.client.get(f"/files/{file_id}")

    def delete_file(self, file_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/files/{file_id}")

    def get_stats(self, file_id: str) -> Dict[str, Any]:
        return self.client.get(f"/files/{file_id}/stats")


class ChartsAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def get_chart_types(self) -> Dict[str, Any]:
        return self.client.get("/charts/types")

    def generate(
        self,
        file_id: str,
        sheet_index: int,
        chart_type: str,
        x_axis: str,
        y_axis: str,
        chart_options: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        body = {
            "fileId": file_id,
            "sheetIndex": sheet_index,
            "chartType": chart_type,
            "xAxis": x_axis,
            "yAxis": y_axis,
        }
        if chart_options is not None:
            body["chartOptions"] = chart_options
        return self.client.post("/charts/generate", json=body)

    def get_history(self, file_id: str) -> Dict[str, Any]:
        return self.client.get(f"/charts/file/{file_id}/history")

    def delete_analysis(self, analysis_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/charts/analysis/{analysis_id}")


class AdminAPI:
    def __init__(self, client: ApiClient):
        self.client = client

    def list_users(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.client.get("/admin/users", params={"page": page, "limit": limit, "search": search, "role": role})

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self.client.get(f"/admin/users/{user_id}")

    def update_user_role(self, user_id: str, role: str) -> Dict[str, Any]:
        return self.client.put(f"/admin/users/{user_id}/role", json={"role": role})

    def toggle_user_status(self, user_id: str) -> Dict[str, Any]:
        return self.client.put(f"/admin/users/{user_id}/status")

    def delete_user(self, user_id: str) -> Dict[str, Any]:
        return self.client.delete(f"/admin/users/{user_id}")

    def get_platform_stats(self) -> Dict[str, Any]:
        return self.client.get("/admin/stats")

    def list_all_files(
        self,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        user: Optional[str] = None,
    ) -> Dict[str, Any]:
        return self.client.get("/admin/files", params={"page": page, "limit": limit, "search": search, "user": user})

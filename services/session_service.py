import json
import logging
import os
import re
import threading
import uuid
from typing import Optional

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

SESSION_EXPIRED = "session/expired"
# A fresh credential re-arms the expiry redirect
SESSION_STARTED = ("auth/login/fulfilled", "auth/register/fulfilled")

CLIENT_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_client_id() -> str:
    return uuid.uuid4().hex


def session_file_for(session_dir: Optional[str], client_id: Optional[str]) -> Optional[str]:
    """
    Token file of one browser client, or None when tokens stay in memory.
    Each client gets its own file so sessions never leak between browsers.
    """
    if not session_dir:
        return None
    if not client_id or not CLIENT_ID_PATTERN.match(client_id):
        logger.warning("Malformed client id, session will not be persisted")
        return None
    return os.path.join(session_dir, f"{client_id}.json")


class TokenStorage:
    """
    Durable mirror of one client's bearer token: a small JSON file, so a
    reloaded page or restarted app can resume that client's session.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Optional[str]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        token = data.get("token") if isinstance(data, dict) else None
        return token or None

    def save(self, token: str) -> None:
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({"token": token}, f)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)


class SessionStore:
    """
    Holder of one client's credential token.

    Injected into the API client (reads the token for every request) and
    into the auth operations (write it on login, drop it on logout).
    Accessors are locked because requests run on worker threads.
    """

    def __init__(self, storage: Optional[TokenStorage] = None):
        self._storage = storage
        self._token: Optional[str] = None
        self._lock = threading.Lock()

    def hydrate(self) -> Optional[str]:
        """Load a persisted token, if any, at process start."""
        if self._storage is None:
            return None
        token = self._storage.load()
        with self._lock:
            self._token = token
        if token:
            logger.info("Restored persisted session token")
        return token

    @property
    def token(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set_token(self, token: str) -> None:
        with self._lock:
            self._token = token
            if self._storage is not None:
                self._storage.save(token)

    def clear(self) -> None:
        with self._lock:
            self._token = None
            if self._storage is not None:
                self._storage.clear()

    def expire(self) -> None:
        """Server rejected the credential."""
        logger.warning("Session credential rejected by server, clearing it")
        self.clear()


class SessionObserver:
    """
    Store listener that turns credential expiry into navigation.

    Redirects to the login page once per authenticated session, however
    many in-flight operations come back with 401.
    """

    def __init__(self, navigator, login_path: str = LOGIN_PATH):
        self._navigator = navigator
        self._login_path = login_path
        self._redirected = False

    def __call__(self, action, store) -> None:
        if action.type == SESSION_EXPIRED:
            if self._redirected:
                return
            self._redirected = True
            logger.info(f"Session expired, redirecting to {self._login_path}")
            self._navigator.redirect(self._login_path)
        elif action.type in SESSION_STARTED:
            self._redirected = False

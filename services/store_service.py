import logging
from typing import Optional

import requests

from config import API_BASE_URL
from models.state_models import AdminState, AuthState, ChartsState, FilesState
from services.admin_service import admin_slice
from services.api_client import ApiClient
from services.auth_service import auth_slice, restore_session
from services.charts_service import charts_slice
from services.files_service import files_slice
from services.operation_service import OperationContext, Store
from services.session_service import SessionObserver, SessionStore, TokenStorage

logger = logging.getLogger(__name__)


class AppStore(Store):
    """Root store: auth, files, charts and admin slices over one API client."""

    def __init__(self, api: ApiClient, session: SessionStore):
        super().__init__(
            [auth_slice, files_slice, charts_slice, admin_slice],
            OperationContext(api=api, session=session),
        )

    @property
    def auth(self) -> AuthState:
        return self.state("auth")

    @property
    def files(self) -> FilesState:
        return self.state("files")

    @property
    def charts(self) -> ChartsState:
        return self.state("charts")

    @property
    def admin(self) -> AdminState:
        return self.state("admin")


def create_store(
    navigator=None,
    base_url: str = API_BASE_URL,
    session_file: Optional[str] = None,
    http: Optional[requests.Session] = None,
) -> AppStore:
    """
    Build the store of one browser client.
    With a session_file the token is mirrored there and hydrated from it;
    the file must belong to this client alone (see session_file_for).
    """
    session = SessionStore(TokenStorage(session_file) if session_file else None)
    token = session.hydrate()

    store = AppStore(ApiClient(base_url, session, http=http), session)
    if token:
        store.dispatch(restore_session(token))
    if navigator is not None:
        store.subscribe(SessionObserver(navigator))

    logger.info(f"Store ready against {base_url}")
    return store

import asyncio
from typing import Any, List, Tuple

import streamlit as st

from config import SESSION_DIR
from routers.page_router import Navigator
from services.operation_service import AsyncOperation, OperationResult
from services.session_service import CLIENT_ID_PATTERN, new_client_id, session_file_for
from services.store_service import AppStore, create_store

STORE_KEY = "store"
NAVIGATOR_KEY = "navigator"
VISITS_KEY = "page_visits"
CLIENT_ID_PARAM = "sid"


def _client_id() -> str:
    """Per-browser id kept in the URL, so a reload finds the same token file."""
    client_id = st.query_params.get(CLIENT_ID_PARAM)
    if not client_id or not CLIENT_ID_PATTERN.match(client_id):
        client_id = new_client_id()
        st.query_params[CLIENT_ID_PARAM] = client_id
    return client_id


def init_session_state() -> None:
    if NAVIGATOR_KEY not in st.session_state:
        st.session_state[NAVIGATOR_KEY] = Navigator()
    if STORE_KEY not in st.session_state:
        session_file = session_file_for(SESSION_DIR, _client_id()) if SESSION_DIR else None
        st.session_state[STORE_KEY] = create_store(
            navigator=st.session_state[NAVIGATOR_KEY],
            session_file=session_file,
        )
    if VISITS_KEY not in st.session_state:
        st.session_state[VISITS_KEY] = {}


def get_store() -> AppStore:
    return st.session_state[STORE_KEY]


def get_navigator() -> Navigator:
    return st.session_state[NAVIGATOR_KEY]


def go(path: str) -> None:
    get_navigator().navigate(path)
    forget_visits()
    st.rerun()


def _follow_redirect() -> None:
    if get_navigator().consume_redirect():
        forget_visits()
        st.toast("Your session has expired. Please log in again.", icon="🔒")
        st.rerun()


def run(operation: AsyncOperation, arg: Any = None) -> OperationResult:
    result = asyncio.run(get_store().run(operation, arg))
    _follow_redirect()
    return result


async def _gather(store: AppStore, calls: List[Tuple[AsyncOperation, Any]]) -> List[OperationResult]:
    return await asyncio.gather(*(store.run(op, arg) for op, arg in calls))


def run_all(*calls: Tuple[AsyncOperation, Any]) -> List[OperationResult]:
    """Run independent operations concurrently on one event loop."""
    results = asyncio.run(_gather(get_store(), list(calls)))
    _follow_redirect()
    return results


def first_render(page_key: str) -> bool:
    """True once per navigation to a page; used to load its data."""
    visits = st.session_state[VISITS_KEY]
    path = get_navigator().path
    if visits.get(page_key) == path:
        return False
    visits[page_key] = path
    return True


def forget_visits() -> None:
    st.session_state[VISITS_KEY] = {}


def notify_failure(result: OperationResult, fallback: str) -> None:
    # auth failures are reported once, by the redirect
    if not result.ok and not result.auth_failure:
        st.toast(result.error or fallback, icon="❌")

import streamlit as st

from logging_config import setup_logging
from routers.page_router import Decision, resolve
from services.auth_service import get_profile, sign_out
from views import admin_panel, auth_view, dashboard, file_analysis, file_upload, home
from views.common import forget_visits, get_navigator, get_store, go, init_session_state, run

setup_logging()

st.set_page_config(
    page_title="SheetChart",
    layout="wide"
)

# ========================
# STATE VARIABLES
# ========================
init_session_state()
store = get_store()
navigator = get_navigator()

PAGES = {
    "home": home.render,
    "login": auth_view.render_login,
    "register": auth_view.render_register,
    "dashboard": dashboard.render,
    "upload": file_upload.render,
    "analysis": file_analysis.render,
    "admin": admin_panel.render,
}

# ========================
# NAVIGATION
# ========================
with st.sidebar:
    st.markdown("## SheetChart")
    session = store.auth.session
    if st.button("Home", use_container_width=True):
        go("/")
    if session.is_authenticated:
        if st.button("Dashboard", use_container_width=True):
            go("/dashboard")
        if st.button("Upload", use_container_width=True):
            go("/upload")
        if session.is_admin and st.button("Admin", use_container_width=True):
            go("/admin")
        if session.user:
            st.caption(f"Signed in as {session.user.username} ({session.user.role})")
        if st.button("Log out", use_container_width=True):
            sign_out(store)
            go("/")
    else:
        if st.button("Log in", use_container_width=True):
            go("/login")
        if st.button("Register", use_container_width=True):
            go("/register")

# ========================
# GUARDED PAGE
# ========================
resolution = resolve(navigator.path, store.auth.session)

if resolution.decision.decision == Decision.REDIRECT:
    navigator.navigate(resolution.decision.redirect_to)
    forget_visits()
    st.rerun()

elif resolution.decision.decision == Decision.PENDING:
    # token restored, profile unknown: show nothing guarded until it loads
    with st.spinner("Restoring your session..."):
        result = run(get_profile)
    if result.ok:
        st.rerun()
    st.error(result.error or "Failed to fetch profile")
    if st.button("Retry"):
        st.rerun()

else:
    PAGES[resolution.route.page](**resolution.params)

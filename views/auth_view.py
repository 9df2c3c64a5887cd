import streamlit as st

from models.common_models import LoginRequest, RegisterRequest
from services.auth_service import login, register
from views.common import go, notify_failure, run


def render_login() -> None:
    st.title("Log in")

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        if not email or not password:
            st.toast("Email and password are required", icon="⚠️")
            return
        with st.spinner("Logging in..."):
            result = run(login, LoginRequest(email=email, password=password))
        if result.ok:
            st.toast(f"Welcome back, {result.payload.user.username}!", icon="✅")
            go("/dashboard")
        notify_failure(result, "Login failed")

    if st.button("No account yet? Register"):
        go("/register")


def render_register() -> None:
    st.title("Create an account")

    with st.form("register_form"):
        username = st.text_input("Username")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Register", type="primary")

    if submitted:
        if not username or not email or not password:
            st.toast("All fields are required", icon="⚠️")
            return
        if password != confirm:
            st.toast("Passwords do not match", icon="⚠️")
            return
        with st.spinner("Creating account..."):
            result = run(register, RegisterRequest(username=username, email=email, password=password))
        if result.ok:
            st.toast("Account created!", icon="✅")
            go("/dashboard")
        notify_failure(result, "Registration failed")

    if st.button("Already registered? Log in"):
        go("/login")

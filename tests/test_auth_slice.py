"""
Unit Tests for the auth slice and session persistence
"""
import os

import pytest

from models.common_models import LoginRequest, PasswordChange, ProfileUpdate, RegisterRequest
from services.auth_service import (
    change_password,
    get_profile,
    login,
    register,
    sign_out,
    update_profile,
    verify_token,
)
from services.files_service import fetch_user_files
from services.session_service import TokenStorage, new_client_id, session_file_for
from services.store_service import create_store
from conftest import BASE_URL, user_payload


class TestLogin:
    """Successful login creates the session and persists the token"""

    @pytest.mark.asyncio
    async def test_login_sets_session(self, store, serve, session_file):
        user = user_payload(role="admin")
        serve("POST", "/auth/login", body={"token": "jwt-1", "user": user})

        result = await store.run(login, LoginRequest(email=user["email"], password="secret"))

        assert result.ok
        assert store.auth.token == "jwt-1"
        assert store.auth.user.username == user["username"]
        assert store.auth.session.is_admin
        assert TokenStorage(session_file).load() == "jwt-1"

    @pytest.mark.asyncio
    async def test_token_used_by_following_calls(self, store, serve, http):
        serve("POST", "/auth/register", body={"token": "jwt-2", "user": user_payload()})
        serve("GET", "/files/my-files", body={"items": []})

        await store.run(register, RegisterRequest(username="ann", email="ann@example.com", password="pw"))
        await store.run(fetch_user_files)

        assert http.request.call_args.kwargs["headers"]["Authorization"] == "Bearer jwt-2"

    @pytest.mark.asyncio
    async def test_bad_credentials(self, store, serve, navigator):
        serve("POST", "/auth/login", status_code=400, body={"error": "Invalid credentials"})

        result = await store.run(login, LoginRequest(email="x@y.z", password="bad"))

        assert result.error == "Invalid credentials"
        assert store.auth.error == "Invalid credentials"
        assert not store.auth.is_authenticated
        navigator.redirect.assert_not_called()

    @pytest.mark.asyncio
    async def test_401_on_login_is_a_plain_error(self, store, serve, navigator):
        serve("POST", "/auth/login", status_code=401, body={"error": "Invalid email or password"})

        result = await store.run(login, LoginRequest(email="x@y.z", password="bad"))

        assert not result.auth_failure
        assert store.auth.error == "Invalid email or password"
        navigator.redirect.assert_not_called()


class TestProfile:
    @pytest.mark.asyncio
    async def test_get_profile_loads_user(self, store, serve):
        user = user_payload()
        serve("GET", "/auth/profile", body={"user": user})

        await store.run(get_profile)

        assert store.auth.user.id == user["_id"]
        assert store.auth.user.upload_count == 3

    @pytest.mark.asyncio
    async def test_update_profile_merges_user(self, logged_in_store, serve, http):
        updated = user_payload(username="renamed")
        serve("PUT", "/auth/profile", body={"user": updated})

        await logged_in_store.run(update_profile, ProfileUpdate(username="renamed"))

        assert http.request.call_args.kwargs["json"] == {"username": "renamed"}
        assert logged_in_store.auth.user.username == "renamed"

    @pytest.mark.asyncio
    async def test_change_password_keeps_session(self, logged_in_store, serve):
        user = logged_in_store.auth.user
        serve("PUT", "/auth/change-password", body={"message": "Password changed"})

        result = await logged_in_store.run(change_password, PasswordChange(current_password="a", new_password="b"))

        assert result.ok
        assert logged_in_store.auth.user == user
        assert logged_in_store.auth.token == "tok-123"

    @pytest.mark.asyncio
    async def test_verify_without_user_keeps_current(self, logged_in_store, serve):
        user = logged_in_store.auth.user
        serve("GET", "/auth/verify", body={"valid": True})

        await logged_in_store.run(verify_token)

        assert logged_in_store.auth.user == user


class TestSessionLifecycle:
    """Hydration at start, cleanup on logout"""

    def test_store_hydrates_persisted_token(self, http, session_file, navigator):
        TokenStorage(session_file).save("persisted")

        store = create_store(navigator=navigator, base_url=BASE_URL, session_file=session_file, http=http)

        assert store.auth.token == "persisted"
        assert store.auth.user is None
        assert store.context.session.token == "persisted"

    def test_corrupt_session_file_ignored(self, session_file):
        with open(session_file, "w") as f:
            f.write("{not json")

        assert TokenStorage(session_file).load() is None

    def test_sign_out_clears_everything(self, logged_in_store, session_file):
        assert os.path.exists(session_file)

        sign_out(logged_in_store)

        assert logged_in_store.auth.token is None
        assert logged_in_store.auth.user is None
        assert logged_in_store.context.session.token is None
        assert not os.path.exists(session_file)


class TestClientIsolation:
    """Browser clients sharing one session directory never share a login"""

    def make_client_store(self, http, session_dir, client_id):
        return create_store(base_url=BASE_URL, session_file=session_file_for(session_dir, client_id), http=http)

    @pytest.mark.asyncio
    async def test_login_does_not_authenticate_other_client(self, http, serve, tmp_path):
        session_dir = str(tmp_path)
        serve("POST", "/auth/login", body={"token": "alice-token", "user": user_payload()})
        alice_id, bob_id = new_client_id(), new_client_id()

        alice = self.make_client_store(http, session_dir, alice_id)
        await alice.run(login, LoginRequest(email="alice@example.com", password="pw"))
        bob = self.make_client_store(http, session_dir, bob_id)

        assert bob.auth.token is None
        assert not bob.auth.is_authenticated
        assert self.make_client_store(http, session_dir, alice_id).auth.token == "alice-token"

    def test_sign_out_keeps_other_client_session(self, http, tmp_path):
        session_dir = str(tmp_path)
        alice_id, bob_id = new_client_id(), new_client_id()
        TokenStorage(session_file_for(session_dir, alice_id)).save("alice-token")
        TokenStorage(session_file_for(session_dir, bob_id)).save("bob-token")

        sign_out(self.make_client_store(http, session_dir, bob_id))

        assert TokenStorage(session_file_for(session_dir, alice_id)).load() == "alice-token"
        assert TokenStorage(session_file_for(session_dir, bob_id)).load() is None

    def test_no_session_dir_keeps_token_in_memory(self):
        assert session_file_for(None, new_client_id()) is None

    @pytest.mark.parametrize("client_id", [None, "", "../escape", "ABCDEF"])
    def test_malformed_client_id_not_persisted(self, tmp_path, client_id):
        assert session_file_for(str(tmp_path), client_id) is None

    def test_default_store_writes_no_file(self, http, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        store = create_store(base_url=BASE_URL, http=http)

        store.context.session.set_token("memory-only")

        assert store.context.session.token == "memory-only"
        assert list(tmp_path.iterdir()) == []

"""
Unit Tests for the admin slice
"""
import pytest

from models.common_models import FileListQuery, RoleUpdate, UserListQuery
from services.admin_service import (
    delete_user,
    fetch_all_files,
    fetch_platform_stats,
    fetch_user_details,
    fetch_users,
    toggle_user_status,
    update_user_role,
)
from conftest import file_payload, user_payload


@pytest.fixture
def users():
    return [user_payload(_id="u1"), user_payload(_id="u2")]


@pytest.fixture
def with_users(logged_in_store, serve, users):
    async def _load():
        serve("GET", "/admin/users", body={"users": users, "total": 2, "page": 1, "totalPages": 1})
        await logged_in_store.run(fetch_users, UserListQuery(page=1, limit=20))
        return logged_in_store
    return _load


class TestUsers:
    @pytest.mark.asyncio
    async def test_fetch_users(self, with_users):
        store = await with_users()

        assert [u.id for u in store.admin.users] == ["u1", "u2"]
        assert store.admin.total == 2

    @pytest.mark.asyncio
    async def test_role_update_merges_record(self, with_users, serve, users):
        store = await with_users()
        serve("PUT", "/admin/users/u2/role", body={"user": {**users[1], "role": "admin"}})

        await store.run(update_user_role, RoleUpdate(user_id="u2", role="admin"))

        assert [u.role for u in store.admin.users] == ["user", "admin"]

    @pytest.mark.asyncio
    async def test_toggle_status_updates_selected(self, with_users, serve, users):
        store = await with_users()
        serve("GET", "/admin/users/u1", body={"user": users[0]})
        serve("PUT", "/admin/users/u1/status", body={"user": {**users[0], "isActive": False}})

        await store.run(fetch_user_details, "u1")
        await store.run(toggle_user_status, "u1")

        assert store.admin.selected_user.is_active is False
        assert store.admin.users[0].is_active is False

    @pytest.mark.asyncio
    async def test_delete_user(self, with_users, serve):
        store = await with_users()
        serve("DELETE", "/admin/users/u1", body={})

        await store.run(delete_user, "u1")

        assert [u.id for u in store.admin.users] == ["u2"]
        assert store.admin.total == 1


class TestPlatform:
    @pytest.mark.asyncio
    async def test_stats_and_files(self, logged_in_store, serve):
        serve("GET", "/admin/stats", body={"stats": {"totalUsers": 4, "totalFiles": 9}})
        serve("GET", "/admin/files", body={"files": [file_payload("F")], "total": 9, "page": 1, "totalPages": 1})

        await logged_in_store.run(fetch_platform_stats)
        await logged_in_store.run(fetch_all_files, FileListQuery(page=1))

        assert logged_in_store.admin.stats == {"totalUsers": 4, "totalFiles": 9}
        assert [f.id for f in logged_in_store.admin.files] == ["F"]
        assert logged_in_store.admin.files_total == 9

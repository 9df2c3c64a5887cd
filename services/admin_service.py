from typing import Any, Dict, List, Optional

from models.common_models import FileListQuery, FileRecord, ListEnvelope, RoleUpdate, UserListQuery, UserProfile
from models.state_models import AdminState
from services.operation_service import Action, OperationContext, Slice

admin_slice = Slice("admin", AdminState())


def _user_from(body: Dict[str, Any]) -> UserProfile:
    return UserProfile.model_validate(body.get("user", body))


def _fetch_users(ctx: OperationContext, query: Optional[UserListQuery] = None) -> ListEnvelope[UserProfile]:
    query = query or UserListQuery()
    body = ctx.api.admin.list_users(page=query.page, limit=query.limit, search=query.search, role=query.role)
    return ListEnvelope[UserProfile].model_validate(body)


def _fetch_user_details(ctx: OperationContext, user_id: str) -> UserProfile:
    return _user_from(ctx.api.admin.get_user(user_id))


def _update_user_role(ctx: OperationContext, update: RoleUpdate) -> UserProfile:
    return _user_from(ctx.api.admin.update_user_role(update.user_id, update.role))


def _toggle_user_status(ctx: OperationContext, user_id: str) -> UserProfile:
    return _user_from(ctx.api.admin.toggle_user_status(user_id))


def _delete_user(ctx: OperationContext, user_id: str) -> str:
    ctx.api.admin.delete_user(user_id)
    return user_id


def _fetch_platform_stats(ctx: OperationContext, _: Any = None) -> Dict[str, Any]:
    body = ctx.api.admin.get_platform_stats()
    return body.get("stats", body)


def _fetch_all_files(ctx: OperationContext, query: Optional[FileListQuery] = None) -> ListEnvelope[FileRecord]:
    query = query or FileListQuery()
    body = ctx.api.admin.list_all_files(page=query.page, limit=query.limit, search=query.search, user=query.user)
    return ListEnvelope[FileRecord].model_validate(body)


def _replace_by_id(users: List[UserProfile], user: UserProfile) -> List[UserProfile]:
    return [user if u.id == user.id else u for u in users]


def _set_users(state: AdminState, action: Action) -> None:
    envelope = action.payload
    state.users = list(envelope.items)
    state.total = envelope.total
    state.page = envelope.page
    state.total_pages = envelope.total_pages


def _set_selected(state: AdminState, action: Action) -> None:
    state.selected_user = action.payload


def _merge_user(state: AdminState, action: Action) -> None:
    user = action.payload
    state.users = _replace_by_id(state.users, user)
    if state.selected_user is not None and state.selected_user.id == user.id:
        state.selected_user = user


def _remove_user(state: AdminState, action: Action) -> None:
    user_id = action.payload
    state.users = [u for u in state.users if u.id != user_id]
    if state.selected_user is not None and state.selected_user.id == user_id:
        state.selected_user = None
    state.total = max(state.total - 1, 0)


def _set_stats(state: AdminState, action: Action) -> None:
    state.stats = action.payload


def _set_files(state: AdminState, action: Action) -> None:
    state.files = list(action.payload.items)
    state.files_total = action.payload.total


fetch_users = admin_slice.operation("fetch_users", _fetch_users, "Failed to fetch users", on_fulfilled=_set_users)
fetch_user_details = admin_slice.operation("fetch_user_details", _fetch_user_details, "Failed to fetch user details", on_fulfilled=_set_selected)
update_user_role = admin_slice.operation("update_user_role", _update_user_role, "Failed to update user role", on_fulfilled=_merge_user)
toggle_user_status = admin_slice.operation("toggle_user_status", _toggle_user_status, "Failed to update user status", on_fulfilled=_merge_user)
delete_user = admin_slice.operation("delete_user", _delete_user, "Failed to delete user", on_fulfilled=_remove_user)
fetch_platform_stats = admin_slice.operation("fetch_platform_stats", _fetch_platform_stats, "Failed to fetch platform statistics", on_fulfilled=_set_stats)
fetch_all_files = admin_slice.operation("fetch_all_files", _fetch_all_files, "Failed to fetch files", on_fulfilled=_set_files)

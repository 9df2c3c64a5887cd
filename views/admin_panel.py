import pandas as pd
import streamlit as st

from models.common_models import FileListQuery, RoleUpdate, UserListQuery
from services.admin_service import (
    delete_user,
    fetch_all_files,
    fetch_platform_stats,
    fetch_users,
    toggle_user_status,
    update_user_role,
)
from services.file_upload_service import format_size
from views.common import first_render, get_store, notify_failure, run, run_all

PAGE_SIZE = 20


def _user_row(user, me) -> None:
    name_col, role_col, status_col, role_btn, status_btn, delete_btn = st.columns([3, 1, 1, 1, 1, 1])
    name_col.markdown(f"**{user.username}**  \n{user.email}")
    role_col.write(user.role)
    status_col.write("active" if user.is_active else "disabled")

    # no self-demotion or self-deletion from the panel
    if user.id == me.id:
        return

    new_role = "user" if user.role == "admin" else "admin"
    if role_btn.button(f"Make {new_role}", key=f"role_{user.id}"):
        notify_failure(run(update_user_role, RoleUpdate(user_id=user.id, role=new_role)), "Failed to update user role")
        st.rerun()
    if status_btn.button("Disable" if user.is_active else "Enable", key=f"status_{user.id}"):
        notify_failure(run(toggle_user_status, user.id), "Failed to update user status")
        st.rerun()
    if delete_btn.button("Delete", key=f"delete_user_{user.id}"):
        result = run(delete_user, user.id)
        if result.ok:
            st.toast(f"Deleted {user.username}", icon="🗑️")
        notify_failure(result, "Failed to delete user")
        st.rerun()


def render() -> None:
    store = get_store()
    if first_render("admin"):
        for result in run_all(
            (fetch_platform_stats, None),
            (fetch_users, UserListQuery(page=1, limit=PAGE_SIZE)),
            (fetch_all_files, FileListQuery(page=1, limit=PAGE_SIZE)),
        ):
            notify_failure(result, "Failed to load admin data")

    admin = store.admin
    st.title("Admin Panel")

    # PLATFORM STATS
    st.header("Platform Statistics")
    if admin.stats:
        cols = st.columns(min(len(admin.stats), 4))
        for i, (name, value) in enumerate(admin.stats.items()):
            if isinstance(value, (int, float, str)):
                cols[i % len(cols)].metric(name, value)
    else:
        st.info("No statistics available.")

    # USERS
    st.header("Users")
    search = st.text_input("Search users", key="admin_user_search")
    if st.button("Search"):
        notify_failure(run(fetch_users, UserListQuery(page=1, limit=PAGE_SIZE, search=search or None)), "Failed to fetch users")

    st.caption(f"{admin.total} user(s), page {admin.page} of {admin.total_pages}")
    for user in admin.users:
        _user_row(user, store.auth.user)

    # FILES
    st.header("All Files")
    st.caption(f"{admin.files_total} file(s)")
    if admin.files:
        st.dataframe(
            pd.DataFrame([
                {
                    "Name": f.display_name,
                    "Size": format_size(f.file_size),
                    "Owner": f.uploaded_by.get("username") if isinstance(f.uploaded_by, dict) else f.uploaded_by,
                    "Uploaded": f.created_at,
                }
                for f in admin.files
            ]),
            use_container_width=True,
        )

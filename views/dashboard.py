import pandas as pd
import streamlit as st

from models.common_models import FileListQuery
from services.file_upload_service import format_size
from services.files_service import delete_file, fetch_user_files
from views.common import first_render, get_store, go, notify_failure, run

RECENT_LIMIT = 5


def render() -> None:
    store = get_store()
    if first_render("dashboard"):
        notify_failure(run(fetch_user_files, FileListQuery(page=1, limit=RECENT_LIMIT)), "Failed to fetch files")

    user = store.auth.user
    files_state = store.files

    st.title(f"Welcome back, {user.username}! 👋")
    st.caption("Here's what's happening with your data analysis projects")

    c1, c2, c3 = st.columns(3)
    c1.metric("Total Files", files_state.total)
    c2.metric("Total Uploads", user.upload_count)
    c3.metric("Data Size", f"{user.total_data_size / (1024 * 1024):.2f} MB")

    if st.button("Upload New File", type="primary"):
        go("/upload")

    st.header("Recent Files")
    if files_state.is_loading:
        st.info("Loading files...")
        return
    if not files_state.files:
        st.info("No files yet. Upload Excel files (.xls, .xlsx, .csv) up to 10MB.")
        return

    for record in files_state.files[:RECENT_LIMIT]:
        name_col, info_col, open_col, delete_col = st.columns([4, 3, 1, 1])
        name_col.markdown(f"**{record.display_name}**")
        info_col.caption(f"{format_size(record.file_size)} | {len(record.sheets)} sheet(s) | {record.created_at or ''}")
        if open_col.button("Analyze", key=f"open_{record.id}"):
            go(f"/analysis/{record.id}")
        if delete_col.button("Delete", key=f"delete_{record.id}"):
            result = run(delete_file, record.id)
            if result.ok:
                st.toast(f"Deleted {record.display_name}", icon="🗑️")
                st.rerun()
            notify_failure(result, "Failed to delete file")

    if store.files.total_pages > 1:
        st.caption(f"Showing the latest {RECENT_LIMIT} of {store.files.total} files.")

    with st.expander("All listed files as a table"):
        st.dataframe(
            pd.DataFrame([
                {"Name": f.display_name, "Size": format_size(f.file_size), "Processed": f.is_processed}
                for f in files_state.files
            ]),
            use_container_width=True,
        )

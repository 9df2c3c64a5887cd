import streamlit as st

from exceptions import UploadValidationError
from services.file_upload_service import build_upload_request, format_size
from services.files_service import upload_file
from views.common import get_store, go, run


def render() -> None:
    st.title("Upload File")
    st.markdown("Upload your Excel file (.xls, .xlsx, .csv) to start analyzing data and generating charts.  \nMaximum file size: 10MB")

    uploaded_file = st.file_uploader("Upload your Excel file", type=["xls", "xlsx", "csv"])
    if uploaded_file is None:
        return

    content = uploaded_file.getvalue()
    try:
        request = build_upload_request(uploaded_file.name, content, uploaded_file.type)
    except UploadValidationError as e:
        # never reaches the files slice
        st.toast(e.message, icon="⚠️")
        return

    st.info(f"📄 **{request.file_name}** | {format_size(request.size)}")

    busy = get_store().files.is_loading
    if st.button("Upload & Process File", type="primary", disabled=busy):
        with st.spinner("Uploading..."):
            result = run(upload_file, request)
        if result.ok:
            st.toast("File uploaded successfully!", icon="✅")
            go("/dashboard")
        elif not result.auth_failure:
            st.toast("Upload failed. Please try again.", icon="❌")
            st.error(result.error)

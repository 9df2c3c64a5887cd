import streamlit as st

from views.common import get_store, go


def render() -> None:
    st.title("SheetChart")
    st.markdown("""
Upload an Excel or CSV file → preview its sheets →
pick a chart type and axes → generate and keep **charts** for every file.
""")

    cols = st.columns(3)
    cols[0].markdown("**Upload**  \nAny `.xls`, `.xlsx` or `.csv` file up to 10MB.")
    cols[1].markdown("**Analyze**  \nPreview each sheet and choose the columns to plot.")
    cols[2].markdown("**Chart**  \nBar, line, pie and more, with a history per file.")

    if get_store().auth.is_authenticated:
        if st.button("Go to dashboard", type="primary"):
            go("/dashboard")
    else:
        left, right = st.columns(2)
        if left.button("Log in", type="primary", use_container_width=True):
            go("/login")
        if right.button("Create an account", use_container_width=True):
            go("/register")

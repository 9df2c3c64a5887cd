import base64

import pandas as pd
import streamlit as st

from models.common_models import GenerateChartRequest
from services.charts_service import (
    clear_current_chart,
    delete_analysis,
    fetch_analysis_history,
    fetch_chart_types,
    generate_chart,
    reset_chart_selection,
    set_selected_chart_type,
    set_selected_x_axis,
    set_selected_y_axis,
)
from services.files_service import fetch_file_details
from services.preview_service import axis_options, get_preview_rows
from services.viz_service import decode_chart_image, render_chart
from views.common import first_render, get_store, go, notify_failure, run, run_all


def _show_chart(chart) -> None:
    image = render_chart(chart)
    if image:
        st.image(base64.b64decode(image), use_container_width=True)
    else:
        st.warning(f"No preview available for '{chart.type}' charts.")
        st.json(chart.model_dump())


def render(file_id: str) -> None:
    store = get_store()
    if first_render("analysis"):
        store.dispatch(clear_current_chart())
        store.dispatch(reset_chart_selection())
        results = run_all(
            (fetch_file_details, file_id),
            (fetch_chart_types, None),
            (fetch_analysis_history, file_id),
        )
        for result in results:
            notify_failure(result, "Failed to load file")

    record = store.files.current_file
    if record is None or record.id != file_id:
        st.error("File could not be loaded.")
        if st.button("Back to dashboard"):
            go("/dashboard")
        return

    st.title(f"File Analysis: {record.display_name}")
    if not record.is_processed:
        st.warning(record.processing_error or "This file has not been processed yet.")
        return
    if not record.sheets:
        st.info("This file has no sheets.")
        return

    # 1. SHEET PREVIEW
    st.header("1. Preview")
    sheet_names = [s.name for s in record.sheets]
    sheet_index = st.selectbox("Select a sheet", range(len(sheet_names)), format_func=lambda i: sheet_names[i])
    sheet = record.sheets[sheet_index]

    preview = get_preview_rows(sheet, n_rows=20)
    st.caption(f"{sheet.row_count} rows × {sheet.column_count} columns (first 20 shown)")
    st.dataframe(pd.DataFrame(preview["rows"], columns=preview["columns"]), use_container_width=True)

    # 2. CHART SELECTION
    st.header("2. Generate Chart")
    charts = store.charts
    type_labels = {t.value: f"{t.label} ({t.dimensions})" for t in charts.chart_types}
    if not type_labels:
        st.info("No chart types available.")
        return

    x_options, y_options = axis_options(sheet)
    c1, c2, c3 = st.columns(3)
    chart_type = c1.selectbox("Chart type", list(type_labels), format_func=lambda v: type_labels[v])
    x_axis = c2.selectbox("X axis", x_options)
    y_axis = c3.selectbox("Y axis", y_options)

    if chart_type != charts.selected_chart_type:
        store.dispatch(set_selected_chart_type(chart_type))
    if x_axis != charts.selected_x_axis:
        store.dispatch(set_selected_x_axis(x_axis))
    if y_axis != charts.selected_y_axis:
        store.dispatch(set_selected_y_axis(y_axis))

    selection = store.charts.selection
    if st.button("Generate Chart", type="primary", disabled=not selection.is_complete or charts.is_loading):
        with st.spinner("Generating chart..."):
            result = run(generate_chart, GenerateChartRequest(
                file_id=file_id,
                sheet_index=sheet_index,
                chart_type=selection.chart_type,
                x_axis=selection.x_axis,
                y_axis=selection.y_axis,
                chart_options=selection.chart_options or None,
            ))
        if result.ok:
            st.toast("Chart generated!", icon="📊")
            # server stored a new analysis record
            notify_failure(run(fetch_analysis_history, file_id), "Failed to fetch analysis history")
        notify_failure(result, "Failed to generate chart")

    if store.charts.current_chart is not None:
        _show_chart(store.charts.current_chart)

    # 3. HISTORY
    st.header("3. Analysis History")
    history = store.charts.analysis_history
    if not history:
        st.info("No charts generated for this file yet.")
        return

    for analysis in history:
        with st.expander(f"{analysis.chart_type}: {analysis.x_axis} vs {analysis.y_axis} ({analysis.created_at or ''})"):
            image = decode_chart_image(analysis.chart_image) if analysis.chart_image else None
            if image is not None:
                st.image(image, use_container_width=True)
            elif analysis.chart_data is not None:
                _show_chart(analysis.chart_data)
            if st.button("Delete", key=f"delete_analysis_{analysis.id}"):
                result = run(delete_analysis, analysis.id)
                if result.ok:
                    st.toast("Analysis deleted", icon="🗑️")
                    st.rerun()
                notify_failure(result, "Failed to delete analysis")

from typing import Any, List

from models.common_models import AnalysisRecord, ChartData, ChartType, GenerateChartRequest
from models.state_models import ChartsState
from services.operation_service import Action, OperationContext, Slice

charts_slice = Slice("charts", ChartsState())


def _fetch_chart_types(ctx: OperationContext, _: Any = None) -> List[ChartType]:
    body = ctx.api.charts.get_chart_types()
    return [ChartType.model_validate(t) for t in body.get("chartTypes", [])]


def _generate_chart(ctx: OperationContext, req: GenerateChartRequest) -> ChartData:
    body = ctx.api.charts.generate(
        req.file_id,
        req.sheet_index,
        req.chart_type,
        req.x_axis,
        req.y_axis,
        req.chart_options,
    )
    return ChartData.model_validate(body["chartData"])


def _fetch_analysis_history(ctx: OperationContext, file_id: str) -> List[AnalysisRecord]:
    body = ctx.api.charts.get_history(file_id)
    return [AnalysisRecord.model_validate(a) for a in body.get("analysisHistory", [])]


def _delete_analysis(ctx: OperationContext, analysis_id: str) -> str:
    ctx.api.charts.delete_analysis(analysis_id)
    return analysis_id


def _set_chart_types(state: ChartsState, action: Action) -> None:
    state.chart_types = action.payload


def _set_current_chart(state: ChartsState, action: Action) -> None:
    state.current_chart = action.payload


def _set_history(state: ChartsState, action: Action) -> None:
    state.analysis_history = action.payload


def _remove_analysis(state: ChartsState, action: Action) -> None:
    state.analysis_history = [a for a in state.analysis_history if a.id != action.payload]


fetch_chart_types = charts_slice.operation("fetch_chart_types", _fetch_chart_types, "Failed to fetch chart types", on_fulfilled=_set_chart_types)
generate_chart = charts_slice.operation("generate_chart", _generate_chart, "Failed to generate chart", on_fulfilled=_set_current_chart)
fetch_analysis_history = charts_slice.operation("fetch_analysis_history", _fetch_analysis_history, "Failed to fetch analysis history", on_fulfilled=_set_history)
delete_analysis = charts_slice.operation("delete_analysis", _delete_analysis, "Failed to delete analysis", on_fulfilled=_remove_analysis)


@charts_slice.reducer
def set_selected_chart_type(state: ChartsState, action: Action) -> None:
    state.selected_chart_type = action.payload


@charts_slice.reducer
def set_selected_x_axis(state: ChartsState, action: Action) -> None:
    state.selected_x_axis = action.payload


@charts_slice.reducer
def set_selected_y_axis(state: ChartsState, action: Action) -> None:
    state.selected_y_axis = action.payload


@charts_slice.reducer
def set_chart_options(state: ChartsState, action: Action) -> None:
    state.chart_options = action.payload or {}


@charts_slice.reducer
def clear_current_chart(state: ChartsState, action: Action) -> None:
    state.current_chart = None


@charts_slice.reducer
def clear_error(state: ChartsState, action: Action) -> None:
    state.error = None


@charts_slice.reducer
def reset_chart_selection(state: ChartsState, action: Action) -> None:
    state.selected_chart_type = ""
    state.selected_x_axis = ""
    state.selected_y_axis = ""
    state.chart_options = {}

from typing import Any, Dict, List, Optional
from pydantic import BaseModel

from models.common_models import (
    AnalysisRecord,
    ChartData,
    ChartSpec,
    ChartType,
    FileRecord,
    UserProfile,
)
from models.session_models import Session


class SliceState(BaseModel):
    """Fields every slice carries for the async operation lifecycle."""
    is_loading: bool = False
    error: Optional[str] = None
    # operations of this slice that reached pending but no terminal phase yet
    outstanding: int = 0


class AuthState(SliceState):
    user: Optional[UserProfile] = None
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def session(self) -> Session:
        return Session(user=self.user, token=self.token)


class FilesState(SliceState):
    files: List[FileRecord] = []
    current_file: Optional[FileRecord] = None
    file_stats: Optional[Dict[str, Any]] = None
    total: int = 0
    page: int = 1
    total_pages: int = 1
    search_query: str = ""


class ChartsState(SliceState):
    chart_types: List[ChartType] = []
    current_chart: Optional[ChartData] = None
    analysis_history: List[AnalysisRecord] = []
    selected_chart_type: str = ""
    selected_x_axis: str = ""
    selected_y_axis: str = ""
    chart_options: Dict[str, Any] = {}

    @property
    def selection(self) -> ChartSpec:
        return ChartSpec(
            chart_type=self.selected_chart_type,
            x_axis=self.selected_x_axis,
            y_axis=self.selected_y_axis,
            chart_options=self.chart_options,
        )


class AdminState(SliceState):
    users: List[UserProfile] = []
    selected_user: Optional[UserProfile] = None
    stats: Dict[str, Any] = {}
    total: int = 0
    page: int = 1
    total_pages: int = 1
    files: List[FileRecord] = []
    files_total: int = 0

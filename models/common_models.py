from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class WireModel(BaseModel):
    """Server payloads are camelCase; attributes stay snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(WireModel):
    id: str = Field(alias="_id")
    username: str = ""
    email: str = ""
    role: Literal["user", "admin"] = "user"
    is_active: bool = True
    upload_count: int = 0
    total_data_size: int = 0
    created_at: Optional[str] = None


class FileSheet(WireModel):
    name: str
    headers: List[str] = []
    data: List[List[Any]] = []
    row_count: int = 0
    column_count: int = 0


class FileRecord(WireModel):
    id: str = Field(alias="_id")
    filename: str = ""
    original_name: str = ""
    file_size: int = 0
    mime_type: Optional[str] = None
    uploaded_by: Any = None        # id, or populated user object on admin listings
    sheets: List[FileSheet] = []
    is_processed: bool = False
    processing_error: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.original_name or self.filename


class ChartType(WireModel):
    value: str
    label: str
    dimensions: Literal["2D", "3D"] = "2D"


class ChartData(WireModel):
    type: str
    data: Dict[str, Any] = {}
    options: Dict[str, Any] = {}


class ChartSpec(WireModel):
    chart_type: str = ""
    x_axis: str = ""
    y_axis: str = ""
    chart_options: Dict[str, Any] = {}

    @property
    def is_complete(self) -> bool:
        return bool(self.chart_type and self.x_axis and self.y_axis)


class AnalysisRecord(WireModel):
    id: str = Field(alias="_id")
    chart_type: str
    x_axis: str = ""
    y_axis: str = ""
    chart_data: Optional[ChartData] = None
    created_at: Optional[str] = None
    chart_image: Optional[str] = None


class ListEnvelope(WireModel, Generic[T]):
    # Older endpoints name the list after the resource instead of "items"
    items: List[T] = Field(
        default_factory=list,
        validation_alias=AliasChoices("items", "files", "users"),
    )
    total: int = 0
    page: int = 1
    total_pages: int = 1


class AuthPayload(WireModel):
    token: str
    user: UserProfile


# Operation arguments
class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str


class UploadRequest(BaseModel):
    file_name: str
    content: bytes
    mime_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


class FileListQuery(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    search: Optional[str] = None
    user: Optional[str] = None     # admin listing only


class UserListQuery(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    search: Optional[str] = None
    role: Optional[str] = None


class RoleUpdate(BaseModel):
    user_id: str
    role: Literal["user", "admin"]


class GenerateChartRequest(BaseModel):
    file_id: str
    sheet_index: int = 0
    chart_type: str
    x_axis: str
    y_axis: str
    chart_options: Optional[Dict[str, Any]] = None

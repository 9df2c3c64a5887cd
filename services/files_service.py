from typing import Any, Dict, Optional

from models.common_models import FileListQuery, FileRecord, ListEnvelope, UploadRequest
from models.state_models import FilesState
from services.operation_service import Action, OperationContext, Slice

files_slice = Slice("files", FilesState())


def _file_from(body: Dict[str, Any]) -> FileRecord:
    return FileRecord.model_validate(body.get("file", body))


def _upload_file(ctx: OperationContext, upload: UploadRequest) -> FileRecord:
    return _file_from(ctx.api.files.upload(upload.file_name, upload.content, upload.mime_type))


def _fetch_user_files(ctx: OperationContext, query: Optional[FileListQuery] = None) -> ListEnvelope[FileRecord]:
    query = query or FileListQuery()
    body = ctx.api.files.list_files(page=query.page, limit=query.limit, search=query.search)
    return ListEnvelope[FileRecord].model_validate(body)


def _fetch_file_details(ctx: OperationContext, file_id: str) -> FileRecord:
    return _file_from(ctx.api.files.get_file(file_id))


def _delete_file(ctx: OperationContext, file_id: str) -> str:
    ctx.api.files.delete_file(file_id)
    return file_id


def _get_file_stats(ctx: OperationContext, file_id: str) -> Dict[str, Any]:
    body = ctx.api.files.get_stats(file_id)
    return body.get("stats", body)


def _prepend_file(state: FilesState, action: Action) -> None:
    state.files.insert(0, action.payload)
    state.total += 1


def _replace_files(state: FilesState, action: Action) -> None:
    envelope = action.payload
    state.files = list(envelope.items)
    state.total = envelope.total
    state.page = envelope.page
    state.total_pages = envelope.total_pages


def _set_current(state: FilesState, action: Action) -> None:
    state.current_file = action.payload


def _remove_file(state: FilesState, action: Action) -> None:
    file_id = action.payload
    state.files = [f for f in state.files if f.id != file_id]
    if state.current_file is not None and state.current_file.id == file_id:
        state.current_file = None
    state.total = max(state.total - 1, 0)


def _set_stats(state: FilesState, action: Action) -> None:
    state.file_stats = action.payload


upload_file = files_slice.operation("upload_file", _upload_file, "File upload failed", on_fulfilled=_prepend_file)
fetch_user_files = files_slice.operation("fetch_user_files", _fetch_user_files, "Failed to fetch files", on_fulfilled=_replace_files)
fetch_file_details = files_slice.operation("fetch_file_details", _fetch_file_details, "Failed to fetch file details", on_fulfilled=_set_current)
delete_file = files_slice.operation("delete_file", _delete_file, "Failed to delete file", on_fulfilled=_remove_file)
get_file_stats = files_slice.operation("get_file_stats", _get_file_stats, "Failed to fetch file statistics", on_fulfilled=_set_stats)


@files_slice.reducer
def set_current_file(state: FilesState, action: Action) -> None:
    state.current_file = action.payload


@files_slice.reducer
def set_search_query(state: FilesState, action: Action) -> None:
    state.search_query = action.payload
    state.page = 1


@files_slice.reducer
def set_page(state: FilesState, action: Action) -> None:
    state.page = action.payload


@files_slice.reducer
def clear_error(state: FilesState, action: Action) -> None:
    state.error = None


@files_slice.reducer
def clear_files(state: FilesState, action: Action) -> None:
    state.files = []
    state.current_file = None
    state.file_stats = None
    state.total = 0
    state.page = 1
    state.total_pages = 1

"""
Unit Tests for the files slice
Tests for: list replacement, upload prepend, delete, details, stats, sync reducers
"""
import pytest

from models.common_models import FileListQuery, FileRecord, UploadRequest
from services.files_service import (
    clear_files,
    delete_file,
    fetch_file_details,
    fetch_user_files,
    get_file_stats,
    set_current_file,
    set_page,
    set_search_query,
    upload_file,
)
from conftest import file_payload


@pytest.fixture
def listed(logged_in_store, serve):
    """Store whose files slice holds records A and B"""
    async def _load():
        serve("GET", "/files/my-files", body={
            "items": [file_payload("A"), file_payload("B")],
            "total": 2,
            "page": 1,
            "totalPages": 1,
        })
        await logged_in_store.run(fetch_user_files, FileListQuery(page=1, limit=5))
        return logged_in_store
    return _load


class TestFetchUserFiles:
    """Envelope is mirrored verbatim into state"""

    @pytest.mark.asyncio
    async def test_envelope_replaces_list(self, listed):
        store = await listed()

        assert [f.id for f in store.files.files] == ["A", "B"]
        assert store.files.total == 2
        assert store.files.page == 1
        assert store.files.total_pages == 1

    @pytest.mark.asyncio
    async def test_resource_keyed_envelope_accepted(self, logged_in_store, serve):
        serve("GET", "/files/my-files", body={"files": [file_payload("C")], "total": 7, "page": 2, "totalPages": 4})

        await logged_in_store.run(fetch_user_files)

        assert [f.id for f in logged_in_store.files.files] == ["C"]
        assert (logged_in_store.files.total, logged_in_store.files.page, logged_in_store.files.total_pages) == (7, 2, 4)

    @pytest.mark.asyncio
    async def test_query_params_forwarded(self, logged_in_store, serve, http):
        serve("GET", "/files/my-files", body={"items": []})

        await logged_in_store.run(fetch_user_files, FileListQuery(page=3, limit=10, search="sales"))

        assert http.request.call_args.kwargs["params"] == {"page": 3, "limit": 10, "search": "sales"}


class TestUploadFile:
    """Uploaded record goes to the front of the list"""

    @pytest.mark.asyncio
    async def test_upload_prepends_and_counts(self, listed, serve):
        store = await listed()
        serve("POST", "/files/upload", body={"file": file_payload("NEW", originalName="q3.csv")})

        result = await store.run(upload_file, UploadRequest(file_name="q3.csv", content=b"a,b\n", mime_type="text/csv"))

        assert result.ok
        assert [f.id for f in store.files.files] == ["NEW", "A", "B"]
        assert store.files.total == 3
        assert store.files.files[0].display_name == "q3.csv"

    @pytest.mark.asyncio
    async def test_upload_failure_keeps_list(self, listed, serve):
        store = await listed()
        serve("POST", "/files/upload", status_code=400, body={"error": "Invalid file format"})

        result = await store.run(upload_file, UploadRequest(file_name="q3.csv", content=b"a,b\n"))

        assert result.error == "Invalid file format"
        assert store.files.total == 2


class TestDeleteFile:
    """Delete removes exactly one record"""

    @pytest.mark.asyncio
    async def test_delete_removes_and_decrements(self, listed, serve):
        store = await listed()
        serve("DELETE", "/files/A", body={"message": "deleted"})

        await store.run(delete_file, "A")

        assert [f.id for f in store.files.files] == ["B"]
        assert store.files.total == 1

    @pytest.mark.asyncio
    async def test_delete_clears_current_selection(self, listed, serve):
        store = await listed()
        store.dispatch(set_current_file(store.files.files[0]))
        serve("DELETE", "/files/A", body={})

        await store.run(delete_file, "A")

        assert store.files.current_file is None

    @pytest.mark.asyncio
    async def test_delete_other_keeps_current_selection(self, listed, serve):
        store = await listed()
        store.dispatch(set_current_file(store.files.files[0]))
        serve("DELETE", "/files/B", body={})

        await store.run(delete_file, "B")

        assert store.files.current_file.id == "A"


class TestDetailsAndStats:
    """Single-record merges"""

    @pytest.mark.asyncio
    async def test_fetch_details_sets_current(self, logged_in_store, serve):
        serve("GET", "/files/X", body={"file": file_payload("X")})

        await logged_in_store.run(fetch_file_details, "X")

        current = logged_in_store.files.current_file
        assert isinstance(current, FileRecord)
        assert current.sheets[0].headers == ["Region", "Sales"]
        assert current.sheets[0].row_count == 2

    @pytest.mark.asyncio
    async def test_stats_stored(self, logged_in_store, serve):
        serve("GET", "/files/X/stats", body={"stats": {"sheetCount": 1, "totalRows": 2}})

        await logged_in_store.run(get_file_stats, "X")

        assert logged_in_store.files.file_stats == {"sheetCount": 1, "totalRows": 2}


class TestSyncReducers:
    """Reducers without a server round-trip"""

    def test_search_resets_page(self, store):
        store.dispatch(set_page(4))
        store.dispatch(set_search_query("budget"))

        assert store.files.search_query == "budget"
        assert store.files.page == 1

    @pytest.mark.asyncio
    async def test_clear_files(self, listed):
        store = await listed()

        store.dispatch(clear_files())

        assert store.files.files == []
        assert store.files.total == 0
        assert store.files.total_pages == 1

# ==============================================
# Tests for ScopedFileStore
# ==============================================

import json
from pathlib import Path

import pytest

from conftest import CastMember, Movie, MovieDetails, Watchlist
from dvutility.decoding import DynamicValue, Integer, Mapping
from dvutility.exceptions import (
    DirectoryUnavailableError,
    InconsistentStorageError,
    SerializationError,
    StorageError,
)
from dvutility.persistence import (
    OperationStatus,
    ScopedFileStore,
    StaticDirectoryResolver,
    StorageDirectory,
)

CACHE = StorageDirectory.CACHE
DURABLE = StorageDirectory.DURABLE


@pytest.fixture
def unresolvable_store():
    """A store whose directories never resolve."""
    return ScopedFileStore(resolver=StaticDirectoryResolver({}))


class TestStoreRetrieve:
    def test_store_then_retrieve_dataclass(self, store):
        movie = Movie(title="Heat", year=1995, rating=8.3, genres=["Crime"])
        store.store(movie, CACHE, "a.json")
        assert store.retrieve("a.json", CACHE, Movie) == movie

    def test_store_then_retrieve_to_dict_model(self, store):
        watchlist = Watchlist(owner="sam", movie_ids=[550, 680])
        store.store(watchlist, DURABLE, "watchlist.json")
        assert store.retrieve("watchlist.json", DURABLE, Watchlist) == watchlist

    def test_store_then_retrieve_native(self, store):
        store.store({"page": 1, "results": [1, 2]}, CACHE, "page.json")
        assert store.retrieve("page.json", CACHE, dict) == {"page": 1, "results": [1, 2]}

    def test_retrieve_as_dynamic_value(self, store):
        store.store({"id": 7}, CACHE, "dyn.json")
        result = store.retrieve("dyn.json", CACHE, DynamicValue)
        assert result == Mapping({"id": Integer(7)})

    def test_retrieve_unknown_name_is_none(self, store):
        assert store.retrieve("never.json", CACHE, dict) is None

    def test_retrieve_wrong_type_is_none(self, store):
        store.store([1, 2, 3], CACHE, "list.json")
        assert store.retrieve("list.json", CACHE, dict) is None
        assert store.retrieve("list.json", CACHE, Movie) is None

    def test_retrieve_corrupt_file_is_none(self, store):
        path = store.resolve_directory_path(CACHE)
        path.mkdir(parents=True)
        (path / "bad.json").write_bytes(b"{truncated")
        assert store.retrieve("bad.json", CACHE, dict) is None
        result = store.try_retrieve("bad.json", CACHE, dict)
        assert result.status is OperationStatus.FAILED
        assert isinstance(result.error, SerializationError)

    def test_directories_are_separate(self, store):
        store.store({"a": 1}, DURABLE, "x.json")
        assert store.file_exists("x.json", DURABLE)
        assert not store.file_exists("x.json", CACHE)
        assert store.retrieve("x.json", CACHE, dict) is None

    def test_stored_bytes_are_utf8_json(self, store):
        store.store({"title": "Amélie"}, CACHE, "utf8.json")
        raw = (store.resolve_directory_path(CACHE) / "utf8.json").read_bytes()
        assert json.loads(raw.decode("utf-8")) == {"title": "Amélie"}

    def test_indent_option(self, resolver):
        store = ScopedFileStore(resolver=resolver, indent=2)
        store.store({"a": 1}, CACHE, "pretty.json")
        text = (resolver.resolve(CACHE) / "pretty.json").read_text(encoding="utf-8")
        assert text == '{\n  "a": 1\n}'

    def test_indent_defaults_to_configured_value(self, resolver, monkeypatch):
        monkeypatch.setenv("DVUTILITY_JSON_INDENT", "2")
        store = ScopedFileStore(resolver=resolver)
        assert store.indent == 2
        store.store({"a": 1}, CACHE, "pretty.json")
        text = (resolver.resolve(CACHE) / "pretty.json").read_text(encoding="utf-8")
        assert text == '{\n  "a": 1\n}'

    def test_nested_models_round_trip(self, store):
        details = MovieDetails(
            movie=Movie(title="Heat", year=1995, genres=["Crime"]),
            cast=[
                CastMember(name="Al Pacino", character="Vincent Hanna"),
                CastMember(name="Robert De Niro", character="Neil McCauley"),
            ],
            lead=CastMember(name="Al Pacino", character="Vincent Hanna"),
            watchlist=Watchlist(owner="sam", movie_ids=[949]),
        )
        store.store(details, DURABLE, "details.json")

        restored = store.retrieve("details.json", DURABLE, MovieDetails)
        assert restored == details
        assert isinstance(restored.movie, Movie)
        assert isinstance(restored.cast[1], CastMember)
        assert isinstance(restored.watchlist, Watchlist)

    def test_nested_optional_fields_may_be_null(self, store):
        details = MovieDetails(movie=Movie(title="Up", year=2009))
        store.store(details, CACHE, "up.json")
        assert store.retrieve("up.json", CACHE, MovieDetails) == details


class TestOverwrite:
    def test_second_store_replaces_first(self, store):
        store.store({"version": 1}, CACHE, "a.json")
        store.store({"version": 2}, CACHE, "a.json")
        assert store.list_files(CACHE) == ["a.json"]
        assert store.retrieve("a.json", CACHE, dict) == {"version": 2}

    def test_failed_serialization_keeps_old_file(self, store, caplog):
        store.store({"version": 1}, CACHE, "a.json")
        store.store({"bad": object()}, CACHE, "a.json")
        assert store.retrieve("a.json", CACHE, dict) == {"version": 1}
        assert "store:" in caplog.text

    def test_nan_is_not_written(self, store):
        result = store.try_store({"x": float("nan")}, CACHE, "nan.json")
        assert result.failed
        assert not store.file_exists("nan.json", CACHE)

    def test_write_failure_after_removal_is_reported(self, store, monkeypatch):
        store.store({"version": 1}, CACHE, "a.json")

        def fail(path, data):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "write_bytes", fail)
        result = store.try_store({"version": 2}, CACHE, "a.json")
        assert result.status is OperationStatus.FAILED
        assert isinstance(result.error, StorageError)
        # Old file was already removed before the write failed
        assert not store.file_exists("a.json", CACHE)


class TestFileNames:
    def test_absolute_name_stays_inside_directory(self, store):
        base = store.resolve_directory_path(CACHE)
        result = store.try_store({"a": 1}, CACHE, "/abs.json")
        assert result.ok
        assert result.value == base / "abs.json"
        assert (base / "abs.json").exists()
        assert store.file_exists("/abs.json", CACHE)
        assert store.retrieve("/abs.json", CACHE, dict) == {"a": 1}

    def test_absolute_name_never_touches_outside_file(self, store, tmp_path):
        outside = tmp_path / "outside.json"
        outside.write_text('{"keep": true}', encoding="utf-8")

        assert not store.file_exists(str(outside), CACHE)
        assert store.retrieve(str(outside), CACHE, dict) is None
        assert store.remove(str(outside), CACHE) is False
        store.store({"keep": False}, CACHE, str(outside))

        assert outside.read_text(encoding="utf-8") == '{"keep": true}'

    def test_separator_into_existing_subdirectory(self, store):
        base = store.resolve_directory_path(CACHE)
        (base / "movies").mkdir(parents=True)
        store.store({"id": 550}, CACHE, "movies/550.json")
        assert (base / "movies" / "550.json").exists()
        assert store.retrieve("movies/550.json", CACHE, dict) == {"id": 550}

    def test_separator_into_missing_subdirectory_fails(self, store):
        store.store({"id": 550}, CACHE, "movies/550.json")
        result = store.try_store({"id": 550}, CACHE, "movies/550.json")
        assert result.status is OperationStatus.FAILED
        assert not store.file_exists("movies/550.json", CACHE)

    @pytest.mark.parametrize("name", ["", "/", "."])
    def test_directory_itself_is_never_addressed(self, store, name):
        store.store({"a": 1}, CACHE, "a.json")
        base = store.resolve_directory_path(CACHE)

        assert store.try_store({"b": 2}, CACHE, name).failed
        assert store.remove(name, CACHE) is False
        assert store.file_exists(name, CACHE) is False
        assert store.retrieve(name, CACHE, dict) is None

        assert base.is_dir()
        assert store.list_files(CACHE) == ["a.json"]


class TestRemove:
    def test_remove_existing_file(self, store):
        store.store({"a": 1}, CACHE, "a.json")
        assert store.remove("a.json", CACHE) is True
        assert not store.file_exists("a.json", CACHE)

    def test_remove_missing_file_is_noop(self, store):
        assert store.remove("missing.json", CACHE) is False

    def test_remove_with_unresolvable_directory_is_noop(self, unresolvable_store):
        assert unresolvable_store.remove("a.json", CACHE) is False

    def test_unremovable_existing_file_is_inconsistent(self, store, monkeypatch):
        store.store({"a": 1}, CACHE, "a.json")

        def fail(path):
            raise PermissionError("read-only filesystem")

        monkeypatch.setattr("dvutility.persistence.file_store._remove_entry", fail)
        with pytest.raises(InconsistentStorageError) as exc_info:
            store.remove("a.json", CACHE)
        assert exc_info.value.path.name == "a.json"
        assert isinstance(exc_info.value.cause, PermissionError)


class TestClear:
    def test_clear_removes_everything(self, store):
        names = ["a.json", "b.json", "c.json"]
        for name in names:
            store.store({"name": name}, CACHE, name)
        store.store({"keep": True}, DURABLE, "a.json")

        store.clear(CACHE)

        for name in names:
            assert not store.file_exists(name, CACHE)
        assert store.file_exists("a.json", DURABLE)

    def test_clear_removes_subdirectories(self, store):
        base = store.resolve_directory_path(CACHE)
        (base / "nested").mkdir(parents=True)
        (base / "nested" / "x.json").write_text("{}")
        result = store.try_clear(CACHE)
        assert result.ok
        assert result.value == 1
        assert store.list_files(CACHE) == []

    def test_clear_missing_directory_does_not_raise(self, store):
        store.clear(CACHE)
        assert store.try_clear(CACHE).status is OperationStatus.EMPTY

    def test_clear_empty_directory(self, store):
        store.resolve_directory_path(CACHE).mkdir(parents=True)
        assert store.try_clear(CACHE).status is OperationStatus.EMPTY

    def test_clear_unresolvable_directory(self, unresolvable_store):
        unresolvable_store.clear(CACHE)
        assert unresolvable_store.try_clear(CACHE).status is OperationStatus.EMPTY

    def test_clear_stops_at_first_failure(self, store, monkeypatch):
        for name in ("a.json", "b.json"):
            store.store({}, CACHE, name)

        def fail(path):
            raise PermissionError("denied")

        monkeypatch.setattr("dvutility.persistence.file_store._remove_entry", fail)
        store.clear(CACHE)
        result = store.try_clear(CACHE)
        assert result.failed
        assert store.list_files(CACHE) == ["a.json", "b.json"]


class TestUnresolvableDirectory:
    def test_store_is_silent(self, unresolvable_store):
        unresolvable_store.store({"a": 1}, CACHE, "a.json")
        result = unresolvable_store.try_store({"a": 1}, CACHE, "a.json")
        assert result.failed
        assert isinstance(result.error, DirectoryUnavailableError)

    def test_retrieve_is_none(self, unresolvable_store):
        assert unresolvable_store.retrieve("a.json", CACHE, dict) is None
        assert unresolvable_store.try_retrieve("a.json", CACHE, dict).status is OperationStatus.EMPTY

    def test_file_exists_is_false(self, unresolvable_store):
        assert unresolvable_store.file_exists("a.json", CACHE) is False

    def test_list_files_is_empty(self, unresolvable_store):
        assert unresolvable_store.list_files(CACHE) == []


class TestStrictResults:
    def test_try_store_returns_path(self, store):
        result = store.try_store({"a": 1}, CACHE, "a.json")
        assert result.ok
        assert result.value == store.resolve_directory_path(CACHE) / "a.json"

    def test_raise_for_status(self, unresolvable_store):
        result = unresolvable_store.try_store({"a": 1}, CACHE, "a.json")
        with pytest.raises(DirectoryUnavailableError):
            result.raise_for_status()

    def test_directory_resolved_on_every_call(self, tmp_path):
        paths = {CACHE: tmp_path / "first"}
        resolver = StaticDirectoryResolver(paths)
        store = ScopedFileStore(resolver=resolver)
        store.store({"a": 1}, CACHE, "a.json")

        resolver.paths[CACHE] = tmp_path / "second"
        assert not store.file_exists("a.json", CACHE)
        assert (tmp_path / "first" / "a.json").exists()

# ==============================================
# ScopedFileStore
# ==============================================
#
# PURPOSE:
#   Persist single JSON-serialized objects as individual files inside
#   one of the two storage directories (DURABLE / CACHE).
#
# ERROR POLICY:
#   Two tiers.
#   1. Best effort: store / retrieve / clear never raise. A directory
#      that cannot be resolved, a missing file or undecodable bytes
#      all come back as "nothing" (None / no effect).
#   2. Inconsistent: remove() on a file that exists but cannot be
#      deleted raises InconsistentStorageError.
#
#   Every best-effort method is backed by a try_* method returning an
#   OperationResult, for callers that want to see what went wrong.
#
# CLASS: ScopedFileStore
# ----------------------
#   Stateless apart from its resolver. Paths are resolved on every
#   call, nothing is cached between calls.
#
#   Methods:
#   --------
#   - resolve_directory_path(directory) -> Path | None
#   - store(obj, directory, file_name) -> None
#   - retrieve(file_name, directory, type_) -> T | None
#   - clear(directory) -> None
#   - remove(file_name, directory) -> bool
#   - file_exists(file_name, directory) -> bool
#   - list_files(directory) -> list[str]
#
# CONCURRENCY:
#   None. store() removes the old file before writing the new one, so
#   a crash in between loses both. Concurrent calls on the same file
#   race; callers serialize access themselves.
#
# ==============================================

import logging
import os
import shutil
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar

from ..exceptions import (
    DirectoryUnavailableError,
    InconsistentStorageError,
    SerializationError,
    StorageError,
)
from .directories import DirectoryResolver, StorageDirectory
from .results import OperationResult
from .serialization import decode_object, encode_object

logger = logging.getLogger(__name__)

T = TypeVar("T")


def join_file_name(base: Path, file_name: str) -> Optional[Path]:
    """
    Append `file_name` to `base`, the way a path component is appended.

    Unlike `base / file_name`, an absolute name never replaces `base`.
    Separators inside the name are kept as given. A name that names no
    file below `base` ("", "/", ".") yields None.
    """
    if not file_name:
        return None
    path = Path(str(base) + os.sep + file_name)
    if path == Path(base):
        return None
    return path


def _remove_entry(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class ScopedFileStore:
    """
    File-backed key/value persistence scoped to a StorageDirectory.

    Files created:
    - <durable dir>/<file_name>  → user data that cannot be recreated
    - <cache dir>/<file_name>    → regenerable data
    """

    def __init__(self, resolver: Optional[DirectoryResolver] = None, indent: Optional[int] = None):
        """
        Initialize the store.

        Args:
            resolver: Maps StorageDirectory to paths, defaults to the
                      configured UserDirectoryResolver
            indent: JSON indent for stored files, defaults to the
                    configured json_indent (compact when unset)
        """
        if resolver is None or indent is None:
            from ..config import build_resolver, get_config

            config = get_config()
            if resolver is None:
                resolver = build_resolver(config)
            if indent is None:
                indent = config.store.json_indent
        self.resolver = resolver
        self.indent = indent

    @classmethod
    def from_config(cls, config=None) -> "ScopedFileStore":
        from ..config import build_resolver, get_config

        config = config or get_config()
        return cls(resolver=build_resolver(config), indent=config.store.json_indent)

    def resolve_directory_path(self, directory: StorageDirectory) -> Optional[Path]:
        return self.resolver.resolve(directory)

    def _file_path(self, file_name: str, directory: StorageDirectory) -> Optional[Path]:
        base = self.resolve_directory_path(directory)
        if base is None:
            return None
        return join_file_name(base, file_name)

    # ----------------------------------------------
    # store
    # ----------------------------------------------

    def try_store(self, obj: Any, directory: StorageDirectory, file_name: str) -> OperationResult:
        """
        Serialize `obj` and write it to `file_name`, replacing any old file.

        Returns:
            SUCCESS with the written path, or FAILED with the error
        """
        base = self.resolve_directory_path(directory)
        if base is None:
            return OperationResult.failure(DirectoryUnavailableError(directory))

        # Serialize first so a bad object never touches the old file
        try:
            data = encode_object(obj, indent=self.indent)
        except SerializationError as e:
            return OperationResult.failure(e)

        path = join_file_name(base, file_name)
        if path is None:
            return OperationResult.failure(StorageError("Empty file name"))

        try:
            base.mkdir(parents=True, exist_ok=True)
            if path.exists():
                _remove_entry(path)
            path.write_bytes(data)
        except OSError as e:
            return OperationResult.failure(StorageError(f"Cannot write {path}: {e}"))

        logger.debug("Stored %d bytes to %s", len(data), path)
        return OperationResult.success(path)

    def store(self, obj: Any, directory: StorageDirectory, file_name: str) -> None:
        """Best-effort store; failures are logged, never raised."""
        result = self.try_store(obj, directory, file_name)
        if result.failed:
            logger.warning("store: %s", result.error)

    # ----------------------------------------------
    # retrieve
    # ----------------------------------------------

    def try_retrieve(self, file_name: str, directory: StorageDirectory, type_: Type[T]) -> OperationResult:
        """
        Read `file_name` and decode it as `type_`.

        Returns:
            SUCCESS with the decoded value, EMPTY when the directory or
            file is missing, FAILED when reading or decoding fails
        """
        path = self._file_path(file_name, directory)
        if path is None or not path.exists():
            return OperationResult.empty()

        try:
            data = path.read_bytes()
        except OSError as e:
            return OperationResult.failure(StorageError(f"Cannot read {path}: {e}"))

        try:
            return OperationResult.success(decode_object(data, type_))
        except SerializationError as e:
            return OperationResult.failure(e)

    def retrieve(self, file_name: str, directory: StorageDirectory, type_: Type[T]) -> Optional[T]:
        """Best-effort retrieve; returns None when nothing usable is stored."""
        result = self.try_retrieve(file_name, directory, type_)
        if result.failed:
            logger.debug("retrieve %s: %s", file_name, result.error)
        return result.value if result.ok else None

    # ----------------------------------------------
    # clear / remove / exists
    # ----------------------------------------------

    def try_clear(self, directory: StorageDirectory) -> OperationResult:
        """
        Remove every entry directly under the directory.

        Stops at the first entry that cannot be removed.

        Returns:
            SUCCESS with the number of removed entries, EMPTY when there
            was nothing to list, FAILED with the first removal error
        """
        base = self.resolve_directory_path(directory)
        if base is None:
            return OperationResult.empty()

        try:
            entries = list(base.iterdir())
        except OSError as e:
            logger.debug("clear: cannot list %s: %s", base, e)
            return OperationResult.empty()

        if not entries:
            return OperationResult.empty()

        removed = 0
        for entry in entries:
            try:
                _remove_entry(entry)
            except OSError as e:
                return OperationResult.failure(StorageError(f"Cannot remove {entry}: {e}"))
            removed += 1

        logger.debug("Cleared %d entries from %s", removed, base)
        return OperationResult.success(removed)

    def clear(self, directory: StorageDirectory) -> None:
        """Best-effort clear; failures are swallowed."""
        result = self.try_clear(directory)
        if result.failed:
            logger.debug("clear: %s", result.error)

    def remove(self, file_name: str, directory: StorageDirectory) -> bool:
        """
        Remove a single file if it exists.

        Returns:
            True if a file was removed, False if there was nothing to remove

        Raises:
            InconsistentStorageError: file exists but could not be removed
        """
        path = self._file_path(file_name, directory)
        if path is None or not path.exists():
            return False

        try:
            _remove_entry(path)
        except OSError as e:
            logger.error("remove: existing file %s could not be removed: %s", path, e)
            raise InconsistentStorageError(path, e) from e
        return True

    def file_exists(self, file_name: str, directory: StorageDirectory) -> bool:
        path = self._file_path(file_name, directory)
        if path is None:
            return False
        return path.exists()

    def list_files(self, directory: StorageDirectory) -> List[str]:
        """Names of the entries directly under the directory, sorted."""
        base = self.resolve_directory_path(directory)
        if base is None:
            return []
        try:
            return sorted(entry.name for entry in base.iterdir())
        except OSError:
            return []

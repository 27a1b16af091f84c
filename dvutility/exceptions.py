"""
Custom exceptions for dvutility.

Decoding errors carry the traversal path of the node that failed so callers
can point at the offending part of a document.
"""

from typing import Optional, Sequence, Tuple, Union

PathComponent = Union[str, int]


def format_path(path: Sequence[PathComponent]) -> str:
    """Render a traversal path as ``$.user.tags[2]``."""
    rendered = "$"
    for component in path:
        if isinstance(component, int):
            rendered += f"[{component}]"
        else:
            rendered += f".{component}"
    return rendered


class DVUtilityError(Exception):
    """Base exception for all dvutility errors."""
    pass


# ==============================================
# Decoding
# ==============================================

class DecodingError(DVUtilityError):
    """Raised when a JSON node cannot be decoded."""

    def __init__(self, path: Sequence[PathComponent], description: str):
        self.path: Tuple[PathComponent, ...] = tuple(path)
        self.description = description
        super().__init__(f"{description} (at {format_path(self.path)})")

    @property
    def path_string(self) -> str:
        return format_path(self.path)


class TypeMismatchError(DecodingError):
    """The node exists but has a different shape than the one requested."""

    def __init__(self, path: Sequence[PathComponent], expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(path, f"Expected {expected} but found {actual}")


class DataCorruptedError(DecodingError):
    """No container view or scalar candidate matched the node."""

    NO_CONTAINER = "no_container"
    NO_SCALAR = "no_scalar"
    MALFORMED = "malformed"

    def __init__(
        self,
        path: Sequence[PathComponent],
        description: str,
        reason: str = NO_CONTAINER,
    ):
        self.reason = reason
        super().__init__(path, description)


# ==============================================
# Persistence
# ==============================================

class StorageError(DVUtilityError):
    """Raised when a file store operation fails."""
    pass


class SerializationError(StorageError):
    """Raised when an object cannot be encoded to or decoded from JSON."""
    pass


class DirectoryUnavailableError(StorageError):
    """Raised when a storage directory cannot be resolved to a path."""

    def __init__(self, directory, message: Optional[str] = None):
        self.directory = directory
        super().__init__(message or f"No filesystem path available for {directory}")


class InconsistentStorageError(StorageError):
    """
    A file confirmed to exist could not be removed.

    Normal filesystem semantics guarantee removal of an existing, accessible
    file, so this points at an environment the caller cannot repair.
    """

    def __init__(self, path, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Could not remove existing file {path}: {cause}")

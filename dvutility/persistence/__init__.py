# ==============================================
# PERSISTENCE
# ==============================================
#
# This package stores JSON-serialized objects as individual files
# in the user's durable or cache directory.
#
# Modules:
# --------
# - directories.py   → StorageDirectory enum and path resolvers
# - serialization.py → Encode objects to JSON bytes / decode them back
# - results.py       → OperationResult for the strict try_* methods
# - file_store.py    → ScopedFileStore (store / retrieve / clear / remove)
#
# ==============================================

from .directories import (
    DirectoryResolver,
    StaticDirectoryResolver,
    StorageDirectory,
    UserDirectoryResolver,
)
from .file_store import ScopedFileStore
from .results import OperationResult, OperationStatus
from .serialization import decode_object, encode_object

__all__ = [
    "DirectoryResolver",
    "StaticDirectoryResolver",
    "StorageDirectory",
    "UserDirectoryResolver",
    "ScopedFileStore",
    "OperationResult",
    "OperationStatus",
    "decode_object",
    "encode_object",
]

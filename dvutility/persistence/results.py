from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class OperationStatus(Enum):
    """
    Outcome of a file store operation.

    - SUCCESS: the operation did what was asked
    - EMPTY: nothing to do or nothing found (missing directory / file)
    - FAILED: the operation hit an error, see OperationResult.error
    """
    SUCCESS = "success"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class OperationResult:
    """Structured outcome returned by the ScopedFileStore.try_* methods."""
    status: OperationStatus
    value: Any = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status is OperationStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is OperationStatus.FAILED

    def raise_for_status(self) -> "OperationResult":
        """Re-raise the captured error, for callers that want failures surfaced."""
        if self.error is not None:
            raise self.error
        return self

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(OperationStatus.SUCCESS, value=value)

    @classmethod
    def empty(cls) -> "OperationResult":
        return cls(OperationStatus.EMPTY)

    @classmethod
    def failure(cls, error: Exception) -> "OperationResult":
        return cls(OperationStatus.FAILED, error=error)

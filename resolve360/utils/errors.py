# resolve360/utils/errors.py
from enum import Enum
from typing import Optional


class StoreErrorKind(str, Enum):
    VALIDATION = "validation"
    TRANSIENT = "transient"
    NOT_FOUND = "not_found"
    FATAL = "fatal"


class StoreError(Exception):
    """Raised by the persistence layer with a structured error kind."""

    def __init__(self, kind: StoreErrorKind, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.operation = operation

    @property
    def is_transient(self) -> bool:
        return self.kind == StoreErrorKind.TRANSIENT

    def __str__(self) -> str:
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class LifecycleError(Exception):
    pass


class LifecyclePermissionError(LifecycleError):
    """The actor may not change the status of this issue."""


class InvalidTransitionError(LifecycleError):
    """The requested status change is not allowed by the active policy."""


class ImageValidationError(ValueError):
    pass


class ImageUploadError(Exception):
    pass

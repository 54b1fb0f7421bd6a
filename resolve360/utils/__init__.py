from .errors import (
    StoreError,
    StoreErrorKind,
    LifecycleError,
    LifecyclePermissionError,
    InvalidTransitionError,
    ImageValidationError,
    ImageUploadError
)
from .retry import retry_transient
from .file_upload import save_issue_image
from .logging_config import setup_logging

__all__ = [
    "StoreError",
    "StoreErrorKind",
    "LifecycleError",
    "LifecyclePermissionError",
    "InvalidTransitionError",
    "ImageValidationError",
    "ImageUploadError",
    "retry_transient",
    "save_issue_image",
    "setup_logging"
]

"""Custom exception classes for the image pipeline."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORAGE,
    ERROR_CODE_TRANSCODE_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
)


class ImageServiceError(Exception):
    """
    Base exception for all image pipeline errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(ImageServiceError):
    """Raised when an upload fails size, extension or MIME checks.

    The individual violation messages are kept in order on `errors`
    and mirrored into `details["errors"]`.
    """

    def __init__(
        self,
        *,
        message: str | None = None,
        errors: list[str] | None = None,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.errors = list(errors or [])
        merged = dict(details or {})
        if self.errors:
            merged.setdefault("errors", self.errors)

        super().__init__(
            message=message or ", ".join(self.errors) or "Invalid image upload",
            error_code=error_code,
            details=merged,
        )


class TranscodeError(ImageServiceError):
    """Raised when the codec cannot decode the input or encode the output."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_TRANSCODE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StorageError(ImageServiceError):
    """Raised when a filesystem write, read or delete fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORAGE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(ImageServiceError):
    """Raised when a requested image is not found."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )

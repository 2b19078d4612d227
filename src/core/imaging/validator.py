"""
Upload validation - size, extension and declared MIME type.

Runs before any decoding so that rejected uploads never reach the codec.
Every check runs; all violations are reported together.
"""

from pathlib import PurePath

from core.models.image import UploadCandidate, ValidationResult
from core.utils.constants import (
    IMAGE_MIME_PREFIX,
    MAX_FILE_SIZE,
    SUPPORTED_EXTENSIONS,
)


class UploadValidator:
    """Checks an UploadCandidate against fixed upload limits."""

    def __init__(
        self,
        *,
        max_file_size: int = MAX_FILE_SIZE,
        supported_extensions: tuple[str, ...] = SUPPORTED_EXTENSIONS,
    ) -> None:
        self.max_file_size = max_file_size
        self.supported_extensions = supported_extensions

    def validate(self, candidate: UploadCandidate) -> ValidationResult:
        errors: list[str] = []

        if candidate.size > self.max_file_size:
            errors.append(f"File size must be less than {self.max_file_size // (1024 * 1024)}MB")

        extension = PurePath(candidate.filename).suffix.lower().lstrip(".")
        if extension not in self.supported_extensions:
            errors.append(
                "Unsupported format. Supported formats: "
                + ", ".join(self.supported_extensions)
            )

        if not candidate.mime_type.lower().startswith(IMAGE_MIME_PREFIX):
            errors.append("File must be an image")

        return ValidationResult(errors=errors)

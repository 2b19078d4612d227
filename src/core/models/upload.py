"""Pydantic models for files carried in upload request bodies."""

import base64
import binascii

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.errors import ValidationError
from core.models.image import UploadCandidate
from core.utils.mime import guess_mime_type

logger = Logger(utc=True)


def decode_file(value: str) -> bytes:
    """
    Decode a base64 file:
    - must not be empty
    - must decode correctly

    Raises:
        ValueError: With a user-facing message
    """
    if not value:
        raise ValueError("file must not be empty")

    try:
        decoded = base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"File validation error: Invalid base64 - {e}")
        raise ValueError("Invalid base64 encoded file") from e

    if not decoded:
        raise ValueError("Decoded file is empty")

    return decoded


def build_candidate(data: bytes, file_name: str, mime_type: str | None) -> UploadCandidate:
    return UploadCandidate(
        data=data,
        filename=file_name,
        mime_type=mime_type or guess_mime_type(data),
        size=len(data),
    )


class UploadFilePayload(BaseModel):
    """One base64-encoded file as sent by the admin client."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    file_name: str = Field(
        ..., min_length=1, max_length=255, description="Original filename"
    )
    mime_type: str | None = Field(
        None,
        max_length=100,
        description="Declared MIME type; sniffed from the content when omitted",
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Size, extension and type are left to the upload validator so that
        every violation is reported together.
        """
        decode_file(value)
        return value

    def to_candidate(self) -> UploadCandidate:
        return build_candidate(base64.b64decode(self.file), self.file_name, self.mime_type)


class BatchFilePayload(BaseModel):
    """A file inside a batch upload.

    Content is only decoded per item (see `to_candidate`), so one bad
    entry fails on its own instead of rejecting the whole request.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field("", description="Base64 encoded image file")
    file_name: str = Field("", max_length=255, description="Original filename")
    mime_type: str | None = Field(None, max_length=100)

    def to_candidate(self) -> UploadCandidate:
        """
        Raises:
            ValidationError: If the content is empty or not valid base64
        """
        try:
            data = decode_file(self.file)
        except ValueError as exc:
            raise ValidationError(
                errors=[str(exc)],
                details={"filename": self.file_name},
            ) from exc

        return build_candidate(data, self.file_name, self.mime_type)

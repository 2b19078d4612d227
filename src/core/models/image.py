"""Shared data contracts for the image pipeline."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from aws_lambda_powertools import Logger
from pydantic import BaseModel, Field, StrictStr, field_validator

from core.utils.constants import (
    DEFAULT_QUALITY,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    MAX_QUALITY,
    MIN_QUALITY,
)

logger = Logger(utc=True)


class OutputFormat(str, Enum):
    """Encodings the transcoder can produce.

    GIF output is a single static frame.
    """

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    GIF = "gif"


class AspectPolicy(str, Enum):
    """How a resize treats the requested bounding box."""

    PRESERVE = "preserve"  # fit inside, never upscale
    CROP_TO_FILL = "crop"  # cover the box, crop overflow


_FORMAT_ALIASES: dict[str, OutputFormat] = {"jpg": OutputFormat.JPEG}


class UploadCandidate(BaseModel):
    """An uploaded file held in memory for the duration of one request."""

    data: bytes = Field(..., repr=False, description="Raw file bytes")
    filename: StrictStr = Field(..., description="Declared original filename")
    mime_type: StrictStr = Field(..., description="Declared MIME type")
    size: int = Field(..., ge=0, description="Byte length")


class ValidationResult(BaseModel):
    """Verdict of the upload validator."""

    errors: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class TranscodeSpec(BaseModel):
    """Target constraints for one transcode.

    Width and height are clamped to the hard maxima, so no request can
    produce an output larger than MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.
    """

    width: int | None = Field(None, ge=1)
    height: int | None = Field(None, ge=1)
    quality: int = Field(DEFAULT_QUALITY, ge=MIN_QUALITY, le=MAX_QUALITY)
    output_format: OutputFormat = OutputFormat.WEBP
    aspect: AspectPolicy = AspectPolicy.PRESERVE

    @field_validator("width")
    @classmethod
    def clamp_width(cls, value: int | None) -> int | None:
        return None if value is None else min(value, MAX_IMAGE_WIDTH)

    @field_validator("height")
    @classmethod
    def clamp_height(cls, value: int | None) -> int | None:
        return None if value is None else min(value, MAX_IMAGE_HEIGHT)

    @field_validator("output_format", mode="before")
    @classmethod
    def resolve_format(cls, value: Any) -> OutputFormat:
        """Map aliases and fall back to WEBP for anything unrecognized."""
        if isinstance(value, OutputFormat):
            return value

        name = str(value).strip().lower()
        if name in _FORMAT_ALIASES:
            return _FORMAT_ALIASES[name]

        try:
            return OutputFormat(name)
        except ValueError:
            logger.warning(
                "Unrecognized output format, falling back to webp",
                extra={"requested_format": value},
            )
            return OutputFormat.WEBP


class ImageInfo(BaseModel):
    """Decoded image properties."""

    width: int
    height: int
    format: str


class TranscodeResult(BaseModel):
    """Encoded output of one transcode plus its diagnostics."""

    data: bytes = Field(..., repr=False)
    metadata: ImageInfo
    original_size: int
    output_size: int
    compression_ratio: float = Field(
        ..., description="Percent size reduction; negative when the output grew"
    )


class VariantInfo(BaseModel):
    """One stored responsive variant."""

    filename: str
    width: int
    height: int
    size: int


class RenderedVariant(VariantInfo):
    """A responsive variant still holding its encoded bytes."""

    data: bytes = Field(..., repr=False)

    def describe(self) -> VariantInfo:
        return VariantInfo(
            filename=self.filename,
            width=self.width,
            height=self.height,
            size=self.size,
        )


class CoverResult(BaseModel):
    """Outcome of processing a single cover image."""

    filename: str
    public_path: str
    variant_paths: dict[str, str] = Field(default_factory=dict)
    variants: dict[str, VariantInfo] = Field(default_factory=dict)
    metadata: ImageInfo
    compression_ratio: float


class GalleryItemSuccess(BaseModel):
    """A gallery image that was processed and stored."""

    status: Literal["processed"] = "processed"
    index: int
    filename: str
    path: str
    metadata: ImageInfo
    compression_ratio: float


class GalleryItemFailure(BaseModel):
    """A gallery image that was rejected; `index` is 1-based."""

    status: Literal["failed"] = "failed"
    index: int
    message: str


class ProcessingReport(BaseModel):
    """Per-item outcomes of a gallery batch, in input order."""

    items: list[GalleryItemSuccess | GalleryItemFailure] = Field(default_factory=list)

    @property
    def results(self) -> list[GalleryItemSuccess]:
        return [item for item in self.items if isinstance(item, GalleryItemSuccess)]

    @property
    def errors(self) -> list[str]:
        return [
            f"File {item.index}: {item.message}"
            for item in self.items
            if isinstance(item, GalleryItemFailure)
        ]

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.items) - self.processed


class DeletionResult(BaseModel):
    """Outcome of deleting one stored image."""

    path: str
    success: bool
    error: str | None = None


class FileStat(BaseModel):
    """Filesystem facts about a stored image."""

    size: int
    created_at: datetime
    modified_at: datetime


class ProbeResult(BaseModel):
    """What is known about a stored image; never raised, only reported."""

    exists: bool
    metadata: ImageInfo | None = None
    size: int | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    error: str | None = None

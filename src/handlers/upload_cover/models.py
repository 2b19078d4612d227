"""Pydantic models for cover upload request/response."""

from pydantic import BaseModel, Field

from core.models.image import CoverResult, DeletionResult, ImageInfo
from core.models.upload import UploadFilePayload
from core.utils.constants import OWNER_ID_PATTERN


class CoverUploadRequest(UploadFilePayload):
    """Validation model for a cover upload request."""

    owner_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=OWNER_ID_PATTERN,
        description="Identifier of the entity the cover belongs to",
    )
    previous_cover: str | None = Field(
        None,
        max_length=500,
        description="Cover path currently stored on the entity, replaced on success",
    )


class CoverUploadOutcome(BaseModel):
    """What the service did: the new cover plus cleanup of the old one."""

    cover: CoverResult
    cleanup: list[DeletionResult] = Field(default_factory=list)


class CoverUploadResponse(BaseModel):
    """Response model for a successful cover upload."""

    success: bool = True
    message: str = Field(..., description="Success message")
    cover_image: str = Field(..., description="Public path of the optimized cover")
    responsive_sizes: dict[str, str] = Field(
        ..., description="Public paths of the responsive variants by name"
    )
    metadata: ImageInfo
    compression_ratio: float
    cleanup: list[DeletionResult] = Field(default_factory=list)

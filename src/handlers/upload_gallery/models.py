"""Pydantic models for gallery upload request/response."""

from pydantic import BaseModel, Field

from core.models.image import GalleryItemSuccess
from core.models.upload import BatchFilePayload
from core.utils.constants import MAX_GALLERY_FILES, OWNER_ID_PATTERN


class GalleryUploadRequest(BaseModel):
    """Validation model for a gallery batch upload."""

    owner_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=OWNER_ID_PATTERN,
        description="Identifier of the entity the images belong to",
    )
    files: list[BatchFilePayload] = Field(
        ...,
        min_length=1,
        max_length=MAX_GALLERY_FILES,
        description=f"Images to add (max {MAX_GALLERY_FILES})",
    )


class GalleryUploadResponse(BaseModel):
    """Batch outcome; `errors` reference 1-based file positions."""

    success: bool = True
    message: str
    processed: int
    failed: int
    results: list[GalleryItemSuccess]
    errors: list[str]

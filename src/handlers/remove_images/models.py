"""Pydantic models for image removal request/response."""

from pydantic import BaseModel, Field, field_validator

from core.models.image import DeletionResult


class RemoveImagesRequest(BaseModel):
    """Validation model for removing stored images."""

    paths: list[str] = Field(..., min_length=1, max_length=50)
    include_variants: bool = Field(
        default=False,
        description="Treat each path as a cover and also remove its responsive variants",
    )

    @field_validator("paths")
    @classmethod
    def validate_paths(cls, value: list[str]) -> list[str]:
        paths = [p.strip() for p in value]
        for path in paths:
            if not path.startswith("/"):
                raise ValueError(f"Image paths must be absolute public paths: {path!r}")
        return paths


class RemoveImagesResponse(BaseModel):
    """Per-path outcome of a removal request."""

    removed: int
    failed: int
    results: list[DeletionResult]

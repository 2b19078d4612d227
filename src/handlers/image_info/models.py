from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class ImageInfoRequest(BaseModel):
    """Validation model for an image info request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    path: StrictStr = Field(
        ...,
        min_length=2,
        max_length=500,
        description="Public path of the stored image, e.g. /uploads/books/x.webp",
    )

    @field_validator("path")
    @classmethod
    def validate_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value

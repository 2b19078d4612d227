"""Typed runtime configuration for the image pipeline."""

import os
from typing import Literal

from pydantic import BaseModel, Field

from core.utils.constants import (
    DEFAULT_ENTITY_TYPE,
    DEFAULT_PUBLIC_ROOT,
    ENV_PUBLIC_ROOT,
    ENV_STORAGE_BACKEND,
    ENV_UPLOAD_ENTITY_TYPE,
    OWNER_ID_PATTERN,
    UPLOADS_PATH_TEMPLATE,
)


class ProcessorSettings(BaseModel):
    """Options for building an ImageProcessor.

    Built once at process start, usually via `from_env()`.
    """

    public_root: str = Field(
        DEFAULT_PUBLIC_ROOT,
        min_length=1,
        description="Directory that public URL paths map onto",
    )
    entity_type: str = Field(
        DEFAULT_ENTITY_TYPE,
        pattern=OWNER_ID_PATTERN,
        description="Folder under /uploads receiving processed images",
    )
    storage_backend: Literal["local", "memory"] = Field(
        "local",
        description="'memory' keeps images in-process for offline development",
    )

    @property
    def uploads_path(self) -> str:
        """Public URL prefix for this entity type, e.g. /uploads/books."""
        return UPLOADS_PATH_TEMPLATE.format(entity_type=self.entity_type)

    @classmethod
    def from_env(cls) -> "ProcessorSettings":
        """Read settings from the environment, keeping defaults for unset variables."""
        values: dict[str, str] = {}

        for field_name, env_name in (
            ("public_root", ENV_PUBLIC_ROOT),
            ("entity_type", ENV_UPLOAD_ENTITY_TYPE),
            ("storage_backend", ENV_STORAGE_BACKEND),
        ):
            raw = os.getenv(env_name)
            if raw:
                values[field_name] = raw.strip()

        return cls(**values)

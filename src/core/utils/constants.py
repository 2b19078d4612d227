"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"

# Codec Errors
ERROR_CODE_TRANSCODE_FAILED = "TRANSCODE_FAILED"
ERROR_CODE_IMAGE_DECODE_FAILED = "IMAGE_DECODE_FAILED"
ERROR_CODE_IMAGE_ENCODE_FAILED = "IMAGE_ENCODE_FAILED"

# Storage Errors
ERROR_CODE_STORAGE = "STORAGE_ERROR"
ERROR_CODE_IMAGE_WRITE_FAILED = "IMAGE_WRITE_FAILED"
ERROR_CODE_IMAGE_READ_FAILED = "IMAGE_READ_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"
ERROR_CODE_INVALID_STORAGE_PATH = "INVALID_STORAGE_PATH"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes

SUPPORTED_EXTENSIONS: Final[tuple[str, ...]] = ("jpeg", "jpg", "png", "webp", "gif")

IMAGE_MIME_PREFIX = "image/"
UNKNOWN_MIME_TYPE = "application/octet-stream"

MAX_GALLERY_FILES = 10


# ============================================================================
# Transcoding Constraints
# ============================================================================

# Hard ceiling on any output dimension, whatever the caller asks for
MAX_IMAGE_WIDTH = 1200
MAX_IMAGE_HEIGHT = 1600

DEFAULT_QUALITY = 85
MIN_QUALITY = 1
MAX_QUALITY = 100

WEBP_METHOD = 6
PNG_COMPRESS_LEVEL = 9

COVER_WIDTH = 400
COVER_HEIGHT = 600
COVER_QUALITY = 90

GALLERY_WIDTH = 800
GALLERY_HEIGHT = 1000
GALLERY_QUALITY = 85

# name -> (width, height); filenames use "_" + name as suffix
RESPONSIVE_PRESETS: Final[dict[str, tuple[int, int]]] = {
    "thumb": (150, 200),
    "small": (300, 400),
    "medium": (600, 800),
    "large": (900, 1200),
}

VARIANT_EXTENSION = "webp"


# ============================================================================
# Storage Layout
# ============================================================================

DEFAULT_PUBLIC_ROOT = "public"
DEFAULT_ENTITY_TYPE = "books"
UPLOADS_PATH_TEMPLATE = "/uploads/{entity_type}"

# Sentinel reference meaning "no custom cover"; never deleted
DEFAULT_PLACEHOLDER_PATH = "/assets/images/default-book.svg"

OWNER_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"
METRICS_NAMESPACE = "ImagePipeline"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_PUBLIC_ROOT = "PUBLIC_ROOT"
ENV_UPLOAD_ENTITY_TYPE = "UPLOAD_ENTITY_TYPE"
ENV_STORAGE_BACKEND = "STORAGE_BACKEND"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"

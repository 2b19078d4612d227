"""
Pytest configuration and fixtures for image pipeline tests.
Provides in-memory images generated with Pillow, upload candidates and
a processor wired to in-memory storage with a fixed clock.
"""

import io
import os
from collections.abc import Callable

import pytest
from PIL import Image

# set before any handler module builds its processor at import time
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-pipeline-tests")

from core.imaging.processor import ImageProcessor  # noqa: E402
from core.imaging.storage_writer import StorageWriter  # noqa: E402
from core.infrastructure.memory.in_memory_storage import InMemoryImageStorage  # noqa: E402
from core.models.image import UploadCandidate  # noqa: E402

FIXED_MILLIS = 1700000000000


def make_image_bytes(
    width: int,
    height: int,
    fmt: str = "JPEG",
    mode: str = "RGB",
) -> bytes:
    """Encode a gradient image so that compression has something to work on."""
    image = Image.new(mode, (width, height))
    if mode in ("RGB", "RGBA"):
        pixels = [
            (x * 255 // max(width - 1, 1), y * 255 // max(height - 1, 1), 128)
            + ((200,) if mode == "RGBA" else ())
            for y in range(height)
            for x in range(width)
        ]
        image.putdata(pixels)

    buffer = io.BytesIO()
    save_kwargs = {"quality": 95} if fmt == "JPEG" else {}
    image.save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """
    Encode a generated image.

    Usage:
        data = image_factory(300, 200, fmt="PNG")
    """
    return make_image_bytes


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Small 120x80 JPEG."""
    return make_image_bytes(120, 80)


@pytest.fixture
def png_bytes() -> bytes:
    """Small 64x64 PNG with alpha."""
    return make_image_bytes(64, 64, fmt="PNG", mode="RGBA")


@pytest.fixture(scope="session")
def large_jpeg_bytes() -> bytes:
    """2000x3000 JPEG, larger than every preset and the hard maxima."""
    image = Image.linear_gradient("L").resize((2000, 3000)).convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


@pytest.fixture
def make_candidate() -> Callable[..., UploadCandidate]:
    """
    Build an UploadCandidate from raw bytes.

    Usage:
        candidate = make_candidate(data, filename="cover.png", mime_type="image/png")
    """

    def _make(
        data: bytes,
        *,
        filename: str = "cover.jpg",
        mime_type: str = "image/jpeg",
        size: int | None = None,
    ) -> UploadCandidate:
        return UploadCandidate(
            data=data,
            filename=filename,
            mime_type=mime_type,
            size=len(data) if size is None else size,
        )

    return _make


@pytest.fixture
def memory_storage() -> InMemoryImageStorage:
    return InMemoryImageStorage()


@pytest.fixture
def processor(memory_storage) -> ImageProcessor:
    """Processor on in-memory storage whose clock always returns FIXED_MILLIS."""
    return ImageProcessor(
        writer=StorageWriter(memory_storage),
        clock=lambda: FIXED_MILLIS,
    )

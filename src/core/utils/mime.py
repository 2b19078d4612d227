from collections.abc import Mapping

from core.utils.constants import UNKNOWN_MIME_TYPE

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    # RIFF container, the format tag sits at offset 8
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def guess_mime_type(file_data: bytes) -> str:
    """Like detect_mime_type, but returns a generic binary type instead of raising."""
    try:
        return detect_mime_type(file_data)
    except ValueError:
        return UNKNOWN_MIME_TYPE

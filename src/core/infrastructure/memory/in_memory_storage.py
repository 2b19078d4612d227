"""In-process implementation of ImageStorageRepository.

Used for offline development (STORAGE_BACKEND=memory) and as a test double.
Nothing is persisted beyond the lifetime of the instance.
"""

from datetime import datetime, timezone

from aws_lambda_powertools import Logger

from core.models.image import FileStat
from core.repositories.storage_repository import ImageStorageRepository

logger = Logger(utc=True)


class InMemoryImageStorage(ImageStorageRepository):
    """Image storage backed by a dict of key -> (bytes, created, modified)."""

    def __init__(self) -> None:
        self._files: dict[str, tuple[bytes, datetime, datetime]] = {}

    def save_image(self, *, key: str, file_data: bytes) -> str:
        key = self._normalize(key)
        now = datetime.now(timezone.utc)

        created = self._files[key][1] if key in self._files else now
        self._files[key] = (bytes(file_data), created, now)

        logger.debug("Image stored in memory", extra={"key": key, "size": len(file_data)})
        return key

    def load_image(self, *, key: str) -> bytes:
        return self._get(key)[0]

    def remove_image(self, *, key: str) -> None:
        key = self._normalize(key)
        if key not in self._files:
            raise FileNotFoundError(f"No such image: {key}")

        del self._files[key]

    def stat_image(self, *, key: str) -> FileStat:
        data, created, modified = self._get(key)
        return FileStat(size=len(data), created_at=created, modified_at=modified)

    def keys(self) -> list[str]:
        """Stored keys in insertion order."""
        return list(self._files)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._files

    def _get(self, key: str) -> tuple[bytes, datetime, datetime]:
        key = self._normalize(key)
        try:
            return self._files[key]
        except KeyError:
            raise FileNotFoundError(f"No such image: {key}") from None

    @staticmethod
    def _normalize(key: str) -> str:
        return key.lstrip("/")

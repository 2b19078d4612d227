"""
Storage writer - persist, delete and probe images by public path.

Public paths look like ``/uploads/books/cover_7_1700000000000.webp``;
they map onto storage keys relative to the public root.
"""

from aws_lambda_powertools import Logger

from core.imaging.transcoder import describe_image
from core.models.errors import ImageServiceError
from core.models.image import DeletionResult, ProbeResult
from core.repositories.storage_repository import ImageStorageRepository

logger = Logger(utc=True)


def to_storage_key(public_path: str) -> str:
    return public_path.lstrip("/")


class StorageWriter:
    """Image persistence operations on top of an ImageStorageRepository."""

    def __init__(self, storage: ImageStorageRepository) -> None:
        self.storage = storage

    def write(self, data: bytes, path: str) -> str:
        """Store `data` at `path` and return `path`.

        Raises:
            StorageError: If the underlying write fails
        """
        self.storage.save_image(key=to_storage_key(path), file_data=data)
        return path

    def delete(self, paths: list[str]) -> list[DeletionResult]:
        """Delete each path independently, reporting every attempt."""
        results: list[DeletionResult] = []

        for path in paths:
            try:
                self.storage.remove_image(key=to_storage_key(path))
            except FileNotFoundError as exc:
                logger.debug("Image already absent", extra={"path": path})
                results.append(DeletionResult(path=path, success=False, error=str(exc)))
            except (ImageServiceError, OSError) as exc:
                logger.warning(
                    "Failed to delete image",
                    extra={"path": path, "error": str(exc)},
                )
                results.append(DeletionResult(path=path, success=False, error=str(exc)))
            else:
                results.append(DeletionResult(path=path, success=True))

        return results

    def probe(self, path: str) -> ProbeResult:
        """Report existence, metadata, size and timestamps. Never raises."""
        key = to_storage_key(path)

        try:
            data = self.storage.load_image(key=key)
            stats = self.storage.stat_image(key=key)
            metadata = describe_image(data)
        except (FileNotFoundError, ImageServiceError, OSError) as exc:
            logger.debug("Image probe failed", extra={"path": path, "error": str(exc)})
            return ProbeResult(exists=False, error=str(exc))

        return ProbeResult(
            exists=True,
            metadata=metadata,
            size=stats.size,
            created_at=stats.created_at,
            modified_at=stats.modified_at,
        )

"""Local-disk implementation of ImageStorageRepository."""

from pathlib import Path

from aws_lambda_powertools import Logger

from core.models.errors import StorageError
from core.models.image import FileStat
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_READ_FAILED,
    ERROR_CODE_IMAGE_WRITE_FAILED,
    ERROR_CODE_INVALID_STORAGE_PATH,
)
from core.utils.time import from_timestamp

logger = Logger(utc=True)


class LocalImageStorage(ImageStorageRepository):
    """Image storage backed by a directory on the local filesystem."""

    def __init__(self, root: str | Path) -> None:
        """Create storage rooted at `root` (the public directory)."""
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def save_image(self, *, key: str, file_data: bytes) -> str:
        """Write image bytes to disk, creating parent directories first."""
        target = self._resolve(key)

        logger.debug(
            "Writing image",
            extra={"key": key, "size": len(file_data)},
        )

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(file_data)
        except OSError as exc:
            logger.exception("Failed to write image", extra={"key": key})
            raise StorageError(
                message=f"Failed to save image: {exc.strerror or exc}",
                error_code=ERROR_CODE_IMAGE_WRITE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image written", extra={"key": key})
        return key

    def load_image(self, *, key: str) -> bytes:
        target = self._resolve(key)

        try:
            return target.read_bytes()
        except FileNotFoundError:
            raise
        except OSError as exc:
            logger.error("Failed to read image", extra={"key": key})
            raise StorageError(
                message=f"Failed to read image: {exc.strerror or exc}",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"key": key},
            ) from exc

    def remove_image(self, *, key: str) -> None:
        target = self._resolve(key)
        logger.debug("Deleting image", extra={"key": key})

        try:
            target.unlink()
        except FileNotFoundError:
            raise
        except OSError as exc:
            logger.error("Failed to delete image", extra={"key": key})
            raise StorageError(
                message=f"Failed to delete image: {exc.strerror or exc}",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Image deleted", extra={"key": key})

    def stat_image(self, *, key: str) -> FileStat:
        target = self._resolve(key)

        try:
            stats = target.stat()
        except FileNotFoundError:
            raise
        except OSError as exc:
            raise StorageError(
                message=f"Failed to stat image: {exc.strerror or exc}",
                error_code=ERROR_CODE_IMAGE_READ_FAILED,
                details={"key": key},
            ) from exc

        # st_birthtime only exists on some platforms
        created = getattr(stats, "st_birthtime", stats.st_ctime)

        return FileStat(
            size=stats.st_size,
            created_at=from_timestamp(created),
            modified_at=from_timestamp(stats.st_mtime),
        )

    def _resolve(self, key: str) -> Path:
        """Map a storage key onto the root, refusing anything that escapes it."""
        try:
            target = (self._root / key.lstrip("/")).resolve()
        except (ValueError, OSError) as exc:
            # e.g. an embedded NUL byte
            logger.warning("Rejected unresolvable storage key", extra={"key": repr(key)})
            raise StorageError(
                message="Invalid image path",
                error_code=ERROR_CODE_INVALID_STORAGE_PATH,
                details={"key": repr(key)},
            ) from exc

        if target == self._root or self._root not in target.parents:
            logger.warning("Rejected storage key outside root", extra={"key": key})
            raise StorageError(
                message="Invalid image path",
                error_code=ERROR_CODE_INVALID_STORAGE_PATH,
                details={"key": key},
            )

        return target

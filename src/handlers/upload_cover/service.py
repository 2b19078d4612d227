"""Business logic for cover uploads.

Processes the new cover first; only once it is stored is the previous
cover (and its responsive variants) cleaned up.
"""

from aws_lambda_powertools import Logger

from core.imaging.processor import ImageProcessor
from core.models.image import DeletionResult, UploadCandidate
from core.utils.constants import format_file_size

from .models import CoverUploadOutcome

logger = Logger(utc=True)


class CoverUploadService:
    """Application service responsible for replacing an entity's cover."""

    def __init__(self, processor: ImageProcessor) -> None:
        self.processor = processor

    def upload_cover(
        self,
        *,
        owner_id: str,
        candidate: UploadCandidate,
        previous_cover: str | None = None,
    ) -> CoverUploadOutcome:
        """Store a new cover and clean up the one it replaces.

        Args:
            owner_id: Entity owning the cover
            candidate: Uploaded cover file
            previous_cover: Currently stored cover path, if any

        Returns:
            The processed cover and the per-path cleanup report

        Raises:
            ValidationError: If the upload is rejected
            TranscodeError: If the image cannot be decoded or encoded
            StorageError: If the new cover cannot be written
        """
        logger.debug(
            "Starting cover upload",
            extra={
                "owner_id": owner_id,
                "filename": candidate.filename,
                "size": format_file_size(candidate.size),
            },
        )

        cover = self.processor.process_cover(candidate, owner_id)

        cleanup: list[DeletionResult] = []
        if previous_cover:
            cleanup = self.processor.cleanup_cover(previous_cover)

            failed = [result.path for result in cleanup if not result.success]
            if failed:
                logger.warning(
                    "Failed to clean up previous cover files",
                    extra={"owner_id": owner_id, "paths": failed},
                )

        return CoverUploadOutcome(cover=cover, cleanup=cleanup)

"""Business logic for gallery batch uploads."""

from aws_lambda_powertools import Logger

from core.imaging.processor import ImageProcessor
from core.models.errors import ImageServiceError
from core.models.image import ProcessingReport, UploadCandidate

logger = Logger(utc=True)


class GalleryUploadService:
    """Application service adding a batch of images to an entity's gallery."""

    def __init__(self, processor: ImageProcessor) -> None:
        self.processor = processor

    def upload_images(
        self, *, owner_id: str, candidates: list[UploadCandidate | ImageServiceError]
    ) -> ProcessingReport:
        """Process every candidate; failures are reported, not raised."""
        logger.debug(
            "Starting gallery upload",
            extra={"owner_id": owner_id, "count": len(candidates)},
        )

        report = self.processor.process_gallery(candidates, owner_id)

        if report.failed:
            logger.warning(
                "Some images failed to process",
                extra={"owner_id": owner_id, "errors": report.errors},
            )

        return report

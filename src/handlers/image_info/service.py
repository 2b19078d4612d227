"""Business logic for looking up stored image details."""

from aws_lambda_powertools import Logger

from core.imaging.processor import ImageProcessor
from core.models.errors import NotFoundError
from core.models.image import ProbeResult
from core.utils.constants import ERROR_CODE_IMAGE_NOT_FOUND

logger = Logger(utc=True)


class ImageInfoService:
    """Application service reporting on a stored image."""

    def __init__(self, processor: ImageProcessor) -> None:
        self.processor = processor

    def get_image_info(self, path: str) -> ProbeResult:
        """Probe a stored image.

        Raises:
            NotFoundError: If no readable image exists at `path`
        """
        probe = self.processor.probe(path)

        if not probe.exists:
            logger.info("Image not found", extra={"path": path, "reason": probe.error})
            raise NotFoundError(
                message=f"Image not found: {path}",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"path": path},
            )

        return probe

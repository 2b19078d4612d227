"""Business logic for removing stored images.

The default placeholder cover is never deleted; it is dropped from the
request before any storage call.
"""

from aws_lambda_powertools import Logger

from core.imaging.processor import ImageProcessor
from core.models.image import DeletionResult

logger = Logger(utc=True)


class RemoveImagesService:
    """Application service deleting images an entity no longer references."""

    def __init__(self, processor: ImageProcessor) -> None:
        self.processor = processor

    def remove_images(
        self, paths: list[str], *, include_variants: bool = False
    ) -> list[DeletionResult]:
        if not include_variants:
            results = self.processor.cleanup(paths)
        else:
            results = []
            for path in paths:
                results.extend(self.processor.cleanup_cover(path))

        logger.info(
            "Image removal finished",
            extra={
                "requested": len(paths),
                "removed": sum(1 for r in results if r.success),
            },
        )
        return results

"""
Cover and gallery processing.

Coordinates validation, transcoding, responsive variants and storage for
uploaded images, handing back only public paths and diagnostics. Raw
buffers never leave this module.
"""

from collections.abc import Callable
from pathlib import PurePosixPath

from aws_lambda_powertools import Logger

from core.imaging.storage_writer import StorageWriter
from core.imaging.transcoder import ImageTranscoder
from core.imaging.validator import UploadValidator
from core.imaging.variants import VariantGenerator, variant_filename
from core.infrastructure.local.filesystem_storage import LocalImageStorage
from core.infrastructure.memory.in_memory_storage import InMemoryImageStorage
from core.models.errors import ImageServiceError, StorageError, ValidationError
from core.models.image import (
    CoverResult,
    DeletionResult,
    GalleryItemFailure,
    GalleryItemSuccess,
    OutputFormat,
    ProbeResult,
    ProcessingReport,
    TranscodeSpec,
    UploadCandidate,
)
from core.models.settings import ProcessorSettings
from core.repositories.storage_repository import ImageStorageRepository
from core.utils.constants import (
    COVER_HEIGHT,
    COVER_QUALITY,
    COVER_WIDTH,
    DEFAULT_ENTITY_TYPE,
    DEFAULT_PLACEHOLDER_PATH,
    GALLERY_HEIGHT,
    GALLERY_QUALITY,
    GALLERY_WIDTH,
    RESPONSIVE_PRESETS,
    UPLOADS_PATH_TEMPLATE,
)
from core.utils.time import epoch_millis

logger = Logger(utc=True)

COVER_SPEC = TranscodeSpec(
    width=COVER_WIDTH,
    height=COVER_HEIGHT,
    quality=COVER_QUALITY,
    output_format=OutputFormat.WEBP,
)
GALLERY_SPEC = TranscodeSpec(
    width=GALLERY_WIDTH,
    height=GALLERY_HEIGHT,
    quality=GALLERY_QUALITY,
    output_format=OutputFormat.WEBP,
)


def responsive_paths_for(cover_path: str) -> dict[str, str]:
    """Public paths of the responsive variants stored next to a cover."""
    path = PurePosixPath(cover_path)
    return {
        name: str(path.with_name(variant_filename(path.stem, name)))
        for name in RESPONSIVE_PRESETS
    }


class ImageProcessor:
    """Turns uploaded images into stored, optimized WEBP files.

    Construct once per process (see `from_settings`) and pass the instance
    to whatever handles uploads.
    """

    def __init__(
        self,
        *,
        writer: StorageWriter,
        validator: UploadValidator | None = None,
        transcoder: ImageTranscoder | None = None,
        variant_generator: VariantGenerator | None = None,
        uploads_path: str = UPLOADS_PATH_TEMPLATE.format(entity_type=DEFAULT_ENTITY_TYPE),
        placeholder_path: str = DEFAULT_PLACEHOLDER_PATH,
        clock: Callable[[], int] = epoch_millis,
    ) -> None:
        self.writer = writer
        self.validator = validator or UploadValidator()
        self.transcoder = transcoder or ImageTranscoder()
        self.variant_generator = variant_generator or VariantGenerator(self.transcoder)
        self.uploads_path = uploads_path.rstrip("/")
        self.placeholder_path = placeholder_path
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: ProcessorSettings) -> "ImageProcessor":
        storage: ImageStorageRepository
        if settings.storage_backend == "memory":
            storage = InMemoryImageStorage()
        else:
            storage = LocalImageStorage(settings.public_root)

        logger.info(
            "Image processor configured",
            extra={
                "storage_backend": settings.storage_backend,
                "public_root": settings.public_root,
                "uploads_path": settings.uploads_path,
            },
        )

        return cls(writer=StorageWriter(storage), uploads_path=settings.uploads_path)

    def process_cover(self, candidate: UploadCandidate, owner_id: str) -> CoverResult:
        """Validate, optimize and store a cover image with its responsive variants.

        The flow is:
        1. Validate the upload (no decoding on failure)
        2. Transcode the main cover to 400x600 WEBP at quality 90
        3. Render the responsive variants; a variant that fails to
           transcode is skipped
        4. Store the main cover and the variants; if any write fails,
           the files already written by this call are deleted

        Args:
            candidate: The uploaded file
            owner_id: Identifier of the entity owning the cover

        Returns:
            Public paths and diagnostics of the stored cover

        Raises:
            ValidationError: If the upload fails validation
            TranscodeError: If the main cover cannot be decoded or encoded
            StorageError: If writing any file fails
        """
        self._ensure_valid(candidate)

        base_name = f"cover_{owner_id}_{self.clock()}"
        optimized = self.transcoder.transcode(candidate.data, COVER_SPEC)

        filename = f"{base_name}.{COVER_SPEC.output_format.value}"
        public_path = self._public_path(filename)
        variants = self.variant_generator.generate(candidate.data, base_name)

        written: list[str] = []
        variant_paths: dict[str, str] = {}
        try:
            written.append(self.writer.write(optimized.data, public_path))
            for name, variant in variants.items():
                variant_paths[name] = self.writer.write(
                    variant.data, self._public_path(variant.filename)
                )
                written.append(variant_paths[name])
        except StorageError:
            logger.warning(
                "Rolling back partially stored cover",
                extra={"owner_id": owner_id, "paths": written},
            )
            self.writer.delete(written)
            raise

        logger.info(
            "Cover processed",
            extra={
                "owner_id": owner_id,
                "path": public_path,
                "variants": sorted(variant_paths),
                "compression_ratio": optimized.compression_ratio,
            },
        )

        return CoverResult(
            filename=filename,
            public_path=public_path,
            variant_paths=variant_paths,
            variants={name: variant.describe() for name, variant in variants.items()},
            metadata=optimized.metadata,
            compression_ratio=optimized.compression_ratio,
        )

    def process_gallery(
        self,
        candidates: list[UploadCandidate | ImageServiceError],
        owner_id: str,
    ) -> ProcessingReport:
        """Process each gallery image independently, keeping input order.

        A failing image is recorded with its 1-based position and does not
        stop the rest of the batch. An entry may also be the error raised
        while decoding that upload; it is recorded as a failure in place.
        """
        report = ProcessingReport()

        for position, candidate in enumerate(candidates, start=1):
            try:
                if isinstance(candidate, ImageServiceError):
                    raise candidate
                self._ensure_valid(candidate)

                base_name = f"image_{owner_id}_{self.clock()}_{position - 1}"
                optimized = self.transcoder.transcode(candidate.data, GALLERY_SPEC)

                filename = f"{base_name}.{GALLERY_SPEC.output_format.value}"
                path = self.writer.write(optimized.data, self._public_path(filename))
            except ImageServiceError as exc:
                logger.warning(
                    "Gallery image failed",
                    extra={
                        "owner_id": owner_id,
                        "index": position,
                        "error_code": exc.error_code,
                        "error": exc.message,
                    },
                )
                report.items.append(GalleryItemFailure(index=position, message=exc.message))
                continue

            report.items.append(
                GalleryItemSuccess(
                    index=position,
                    filename=filename,
                    path=path,
                    metadata=optimized.metadata,
                    compression_ratio=optimized.compression_ratio,
                )
            )

        logger.info(
            "Gallery processed",
            extra={
                "owner_id": owner_id,
                "processed": report.processed,
                "failed": report.failed,
            },
        )
        return report

    def cleanup(self, paths: list[str]) -> list[DeletionResult]:
        """Delete previously stored images. The default placeholder is never touched."""
        deletable = [path for path in paths if path and path != self.placeholder_path]

        if len(deletable) != len(paths):
            logger.debug("Skipping placeholder or empty paths during cleanup")

        return self.writer.delete(deletable)

    def cleanup_cover(self, cover_path: str) -> list[DeletionResult]:
        """Delete a cover together with its responsive variants."""
        if not cover_path or cover_path == self.placeholder_path:
            return []

        return self.cleanup([cover_path, *responsive_paths_for(cover_path).values()])

    def probe(self, path: str) -> ProbeResult:
        return self.writer.probe(path)

    def _ensure_valid(self, candidate: UploadCandidate) -> None:
        result = self.validator.validate(candidate)
        if not result.is_valid:
            raise ValidationError(
                errors=result.errors,
                details={"filename": candidate.filename},
            )

    def _public_path(self, filename: str) -> str:
        return f"{self.uploads_path}/{filename}"

"""Responsive variant generation from one source image."""

from aws_lambda_powertools import Logger

from core.imaging.transcoder import ImageTranscoder
from core.models.errors import TranscodeError
from core.models.image import OutputFormat, RenderedVariant, TranscodeSpec
from core.utils.constants import DEFAULT_QUALITY, RESPONSIVE_PRESETS, VARIANT_EXTENSION

logger = Logger(utc=True)


def variant_filename(base_name: str, variant: str) -> str:
    """`cover_7_1700000000000` + `thumb` -> `cover_7_1700000000000_thumb.webp`."""
    return f"{base_name}_{variant}.{VARIANT_EXTENSION}"


class VariantGenerator:
    """Renders the fixed responsive preset table (thumb, small, medium, large).

    A preset that fails to transcode is logged and left out; the
    remaining variants are still returned.
    """

    def __init__(
        self,
        transcoder: ImageTranscoder,
        *,
        presets: dict[str, tuple[int, int]] | None = None,
        quality: int = DEFAULT_QUALITY,
    ) -> None:
        self.transcoder = transcoder
        self.presets = dict(presets or RESPONSIVE_PRESETS)
        self.quality = quality

    def generate(self, data: bytes, base_name: str) -> dict[str, RenderedVariant]:
        variants: dict[str, RenderedVariant] = {}

        for name, (width, height) in self.presets.items():
            spec = TranscodeSpec(
                width=width,
                height=height,
                quality=self.quality,
                output_format=OutputFormat.WEBP,
            )

            try:
                result = self.transcoder.transcode(data, spec)
            except TranscodeError:
                logger.exception(
                    "Failed to generate responsive variant",
                    extra={"variant": name, "base_name": base_name},
                )
                continue

            variants[name] = RenderedVariant(
                filename=variant_filename(base_name, name),
                width=result.metadata.width,
                height=result.metadata.height,
                size=result.output_size,
                data=result.data,
            )

        return variants

"""
Image transcoding - decode, bounded resize, re-encode.

Wraps Pillow. Output dimensions never exceed the hard maxima, whatever the
caller requests, and images are never upscaled past their intrinsic size.
"""

import io

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.models.errors import TranscodeError
from core.models.image import (
    AspectPolicy,
    ImageInfo,
    OutputFormat,
    TranscodeResult,
    TranscodeSpec,
)
from core.utils.constants import (
    ERROR_CODE_IMAGE_DECODE_FAILED,
    ERROR_CODE_IMAGE_ENCODE_FAILED,
    MAX_IMAGE_HEIGHT,
    MAX_IMAGE_WIDTH,
    PNG_COMPRESS_LEVEL,
    WEBP_METHOD,
)

logger = Logger(utc=True)

_DECODE_ERRORS = (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError)
_ENCODE_ERRORS = (OSError, ValueError, KeyError)


def compression_ratio(original_size: int, output_size: int) -> float:
    """Percent size reduction, rounded to 2 decimals. Negative when the output grew."""
    if original_size <= 0:
        return 0.0
    return round((original_size - output_size) / original_size * 100, 2)


def describe_image(data: bytes) -> ImageInfo:
    """Decode just enough of `data` to report its dimensions and format.

    Raises:
        TranscodeError: If the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return ImageInfo(
                width=image.width,
                height=image.height,
                format=(image.format or "unknown").lower(),
            )
    except _DECODE_ERRORS as exc:
        raise TranscodeError(
            message=f"Image optimization failed: {exc}",
            error_code=ERROR_CODE_IMAGE_DECODE_FAILED,
        ) from exc


class ImageTranscoder:
    """Re-encodes image bytes according to a TranscodeSpec."""

    def __init__(
        self,
        *,
        max_width: int = MAX_IMAGE_WIDTH,
        max_height: int = MAX_IMAGE_HEIGHT,
    ) -> None:
        self.max_width = max_width
        self.max_height = max_height

    def transcode(self, data: bytes, spec: TranscodeSpec | None = None) -> TranscodeResult:
        """Transcode `data` to the format, size and quality in `spec`.

        The flow is:
        1. Decode and read the intrinsic size
        2. Resize to the requested box, or to the hard maxima if none was given
        3. Encode with the requested quality
        4. Re-decode the output for authoritative metadata

        Raises:
            TranscodeError: If decoding or encoding fails
        """
        spec = spec or TranscodeSpec()
        image = self._decode(data)

        try:
            resized = self._resize(image, spec)
            output = self._encode(resized, spec)
        finally:
            image.close()

        metadata = describe_image(output)
        ratio = compression_ratio(len(data), len(output))

        logger.debug(
            "Image transcoded",
            extra={
                "format": spec.output_format.value,
                "width": metadata.width,
                "height": metadata.height,
                "original_size": len(data),
                "output_size": len(output),
                "compression_ratio": ratio,
            },
        )

        return TranscodeResult(
            data=output,
            metadata=metadata,
            original_size=len(data),
            output_size=len(output),
            compression_ratio=ratio,
        )

    @staticmethod
    def _decode(data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except _DECODE_ERRORS as exc:
            raise TranscodeError(
                message=f"Image optimization failed: {exc}",
                error_code=ERROR_CODE_IMAGE_DECODE_FAILED,
            ) from exc

        return image

    def _resize(self, image: Image.Image, spec: TranscodeSpec) -> Image.Image:
        image = _normalize_mode(image)

        if spec.width or spec.height:
            width = min(spec.width, self.max_width) if spec.width else None
            height = min(spec.height, self.max_height) if spec.height else None

            if spec.aspect is AspectPolicy.CROP_TO_FILL and width and height:
                return _crop_to_fill(image, width, height)
            return _fit_inside(image, width, height)

        if image.width > self.max_width or image.height > self.max_height:
            return _fit_inside(image, self.max_width, self.max_height)

        return image

    @staticmethod
    def _encode(image: Image.Image, spec: TranscodeSpec) -> bytes:
        buffer = io.BytesIO()
        fmt = spec.output_format

        try:
            if fmt is OutputFormat.JPEG:
                if image.mode not in ("RGB", "L"):
                    image = image.convert("RGB")
                image.save(
                    buffer,
                    format="JPEG",
                    quality=spec.quality,
                    progressive=True,
                    optimize=True,
                )
            elif fmt is OutputFormat.PNG:
                # lossless; quality has no effect here
                image.save(
                    buffer,
                    format="PNG",
                    optimize=True,
                    compress_level=PNG_COMPRESS_LEVEL,
                )
            elif fmt is OutputFormat.GIF:
                image.save(buffer, format="GIF")
            else:
                if image.mode not in ("RGB", "RGBA"):
                    image = image.convert("RGBA" if _has_alpha(image) else "RGB")
                image.save(
                    buffer,
                    format="WEBP",
                    quality=spec.quality,
                    method=WEBP_METHOD,
                )
        except _ENCODE_ERRORS as exc:
            raise TranscodeError(
                message=f"Image optimization failed: {exc}",
                error_code=ERROR_CODE_IMAGE_ENCODE_FAILED,
                details={"format": fmt.value},
            ) from exc

        return buffer.getvalue()


def _has_alpha(image: Image.Image) -> bool:
    return image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info


def _normalize_mode(image: Image.Image) -> Image.Image:
    """Bring palette and exotic modes to RGB(A) so resampling is not nearest-neighbour."""
    if image.mode in ("RGB", "RGBA", "L"):
        return image
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


def _fit_inside(image: Image.Image, width: int | None, height: int | None) -> Image.Image:
    """Scale down to fit the box, keeping aspect ratio. Never enlarges."""
    scales = []
    if width:
        scales.append(width / image.width)
    if height:
        scales.append(height / image.height)

    scale = min(scales)
    if scale >= 1:
        return image

    new_width = max(1, round(image.width * scale))
    new_height = max(1, round(image.height * scale))
    if width:
        new_width = min(new_width, width)
    if height:
        new_height = min(new_height, height)

    return image.resize((new_width, new_height), Image.Resampling.LANCZOS)


def _crop_to_fill(image: Image.Image, width: int, height: int) -> Image.Image:
    """Cover the box, cropping overflow around the centre. Never enlarges.

    A source smaller than the box on either axis is only centre-cropped,
    never scaled, so 1000x500 into 400x600 yields 400x500.
    """
    if image.width <= width or image.height <= height:
        box_width = min(width, image.width)
        box_height = min(height, image.height)
        left = (image.width - box_width) // 2
        top = (image.height - box_height) // 2
        return image.crop((left, top, left + box_width, top + box_height))

    return ImageOps.fit(image, (width, height), method=Image.Resampling.LANCZOS)

import base64

import pytest
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError
from core.models.upload import BatchFilePayload, UploadFilePayload


def encode(data: bytes) -> str:
    return base64.b64encode(data).decode()


class TestUploadFilePayload:
    def test_to_candidate_uses_declared_mime(self, jpeg_bytes) -> None:
        payload = UploadFilePayload(
            file=encode(jpeg_bytes), file_name="a.jpg", mime_type="image/jpeg"
        )

        candidate = payload.to_candidate()

        assert candidate.data == jpeg_bytes
        assert candidate.size == len(jpeg_bytes)
        assert candidate.filename == "a.jpg"
        assert candidate.mime_type == "image/jpeg"

    def test_mime_is_sniffed_when_missing(self, png_bytes) -> None:
        payload = UploadFilePayload(file=encode(png_bytes), file_name="a.png")

        assert payload.to_candidate().mime_type == "image/png"

    def test_unknown_content_gets_generic_mime(self) -> None:
        payload = UploadFilePayload(file=encode(b"%PDF-1.4"), file_name="a.pdf")

        assert payload.to_candidate().mime_type == "application/octet-stream"

    @pytest.mark.parametrize("file", ["", "not-base64!!!"])
    def test_invalid_file(self, file) -> None:
        with pytest.raises(PydanticValidationError):
            UploadFilePayload(file=file, file_name="a.jpg")

    def test_file_name_required(self, jpeg_bytes) -> None:
        with pytest.raises(PydanticValidationError):
            UploadFilePayload(file=encode(jpeg_bytes), file_name="")


class TestBatchFilePayload:
    def test_invalid_base64_is_accepted_until_decoded(self) -> None:
        payload = BatchFilePayload(file="@@@", file_name="b.jpg")

        with pytest.raises(ValidationError) as exc_info:
            payload.to_candidate()

        assert exc_info.value.errors == ["Invalid base64 encoded file"]
        assert exc_info.value.details["filename"] == "b.jpg"

    def test_missing_file_fails_on_decode(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            BatchFilePayload(file_name="b.jpg").to_candidate()

        assert exc_info.value.errors == ["file must not be empty"]

    def test_to_candidate_sniffs_mime(self, png_bytes) -> None:
        candidate = BatchFilePayload(file=encode(png_bytes), file_name="c.png").to_candidate()

        assert candidate.data == png_bytes
        assert candidate.mime_type == "image/png"

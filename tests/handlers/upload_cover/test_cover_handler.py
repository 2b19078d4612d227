import json

import pytest

from core.models.errors import StorageError, TranscodeError
from core.utils.constants import DEFAULT_PLACEHOLDER_PATH
from handlers.upload_cover.handler import handler

COVER = "/uploads/books/cover_42_1700000000000.webp"


@pytest.fixture
def processor_in_use(use_processor):
    return use_processor("handlers.upload_cover.handler")


def cover_event(api_event, payload, owner_id="42"):
    return api_event(body=payload, path_params={"owner_id": owner_id})


class TestCoverUploadHandler:
    def test_upload_success(
        self, processor_in_use, api_event, file_payload, large_jpeg_bytes, lambda_context
    ) -> None:
        event = cover_event(api_event, file_payload(large_jpeg_bytes, mime_type="image/jpeg"))

        response = handler(event, lambda_context)

        assert response["statusCode"] == 201
        body = json.loads(response["body"])

        assert body["success"] is True
        assert body["cover_image"] == COVER
        assert set(body["responsive_sizes"]) == {"thumb", "small", "medium", "large"}
        assert body["metadata"]["format"] == "webp"
        assert body["metadata"]["width"] <= 400
        assert body["compression_ratio"] > 0
        assert body["message"] == (
            f"Cover image uploaded and optimized ({body['compression_ratio']}% compression)"
        )
        assert body["cleanup"] == []

    def test_mime_type_is_optional(
        self, processor_in_use, api_event, file_payload, png_bytes, lambda_context
    ) -> None:
        event = cover_event(api_event, file_payload(png_bytes, file_name="cover.png"))

        response = handler(event, lambda_context)

        assert response["statusCode"] == 201

    def test_replaces_previous_cover(
        self,
        processor_in_use,
        memory_storage,
        make_candidate,
        api_event,
        file_payload,
        jpeg_bytes,
        lambda_context,
    ) -> None:
        processor_in_use.clock = lambda: 1
        old = processor_in_use.process_cover(make_candidate(jpeg_bytes), "42")
        processor_in_use.clock = lambda: 2

        event = cover_event(
            api_event, file_payload(jpeg_bytes, previous_cover=old.public_path)
        )
        response = handler(event, lambda_context)

        assert response["statusCode"] == 201
        body = json.loads(response["body"])

        assert body["cover_image"] == "/uploads/books/cover_42_2.webp"
        assert len(body["cleanup"]) == 5
        assert all(item["success"] for item in body["cleanup"])
        assert not any(key.startswith("uploads/books/cover_42_1") for key in memory_storage.keys())

    def test_placeholder_previous_cover_is_kept(
        self, processor_in_use, api_event, file_payload, jpeg_bytes, lambda_context
    ) -> None:
        event = cover_event(
            api_event, file_payload(jpeg_bytes, previous_cover=DEFAULT_PLACEHOLDER_PATH)
        )

        response = handler(event, lambda_context)

        assert json.loads(response["body"])["cleanup"] == []

    def test_invalid_upload_returns_422(
        self, processor_in_use, memory_storage, api_event, file_payload, lambda_context
    ) -> None:
        event = cover_event(api_event, file_payload(b"%PDF-1.4", file_name="doc.pdf"))

        response = handler(event, lambda_context)

        assert response["statusCode"] == 422
        body = json.loads(response["body"])
        assert body["error"] == "VALIDATION_FAILED"
        assert body["details"]["errors"] == [
            "Unsupported format. Supported formats: jpeg, jpg, png, webp, gif",
            "File must be an image",
        ]
        assert memory_storage.keys() == []

    def test_undecodable_image_returns_422(
        self, processor_in_use, api_event, file_payload, lambda_context
    ) -> None:
        event = cover_event(
            api_event,
            file_payload(b"not an image", file_name="a.jpg", mime_type="image/jpeg"),
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 422
        assert json.loads(response["body"])["error"] == "IMAGE_DECODE_FAILED"

    def test_storage_failure_returns_500(
        self, processor_in_use, monkeypatch, api_event, file_payload, jpeg_bytes, lambda_context
    ) -> None:
        def fail(*args, **kwargs):
            raise StorageError(message="Failed to save image: disk full")

        monkeypatch.setattr(processor_in_use.writer, "write", fail)
        event = cover_event(api_event, file_payload(jpeg_bytes))

        response = handler(event, lambda_context)

        assert response["statusCode"] == 500
        body = json.loads(response["body"])
        assert body["error"] == "STORAGE_ERROR"
        assert body["message"] == "Failed to save image: disk full"

    def test_transcode_error_maps_code(
        self, processor_in_use, monkeypatch, api_event, file_payload, jpeg_bytes, lambda_context
    ) -> None:
        def fail(*args, **kwargs):
            raise TranscodeError(message="Image optimization failed: encoder missing")

        monkeypatch.setattr(processor_in_use.transcoder, "transcode", fail)

        response = handler(cover_event(api_event, file_payload(jpeg_bytes)), lambda_context)

        assert response["statusCode"] == 422
        assert json.loads(response["body"])["error"] == "TRANSCODE_FAILED"

    def test_invalid_json_body(self, processor_in_use, lambda_context) -> None:
        event = {"httpMethod": "POST", "body": "{not json", "pathParameters": {"owner_id": "42"}}

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Invalid JSON body"

    @pytest.mark.parametrize("raw_body", ["[]", '[{"file": "x"}]', "null", "42"])
    def test_non_object_body(self, processor_in_use, lambda_context, raw_body) -> None:
        event = {"httpMethod": "POST", "body": raw_body, "pathParameters": {"owner_id": "42"}}

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["message"] == "Request body must be a JSON object"

    def test_missing_file(self, processor_in_use, api_event, lambda_context) -> None:
        response = handler(cover_event(api_event, {"file_name": "a.jpg"}), lambda_context)

        assert response["statusCode"] == 400
        details = json.loads(response["body"])["details"]["errors"]
        assert details == [{"field": "file", "message": "This field is required"}]

    def test_invalid_owner_id(
        self, processor_in_use, api_event, file_payload, jpeg_bytes, lambda_context
    ) -> None:
        event = cover_event(api_event, file_payload(jpeg_bytes), owner_id="../42")

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400

    def test_invalid_base64(self, processor_in_use, api_event, lambda_context) -> None:
        event = cover_event(api_event, {"file": "@@@", "file_name": "a.jpg"})

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        details = json.loads(response["body"])["details"]["errors"]
        assert details[0]["message"] == "File must be a valid Base64-encoded string"

    def test_options_preflight(self, lambda_context) -> None:
        response = handler({"httpMethod": "OPTIONS"}, lambda_context)

        assert response["statusCode"] == 204

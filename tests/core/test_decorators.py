import json
from http import HTTPStatus
from types import SimpleNamespace
from typing import Any, cast

import pytest

from core.models.errors import NotFoundError, StorageError, ValidationError
from core.utils.decorators import api_gateway_handler
from core.utils.response import JsonDict, ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    """Parse JSON body from API Gateway response."""
    body = resp.get("body")
    if not body:
        return {}
    return cast(dict[str, Any], json.loads(body))


def raising(exc: Exception):
    @api_gateway_handler
    def handler(event: Any, context: Any) -> JsonDict:
        raise exc

    return handler


def test_api_handler_success() -> None:
    @api_gateway_handler
    def handler(event: Any, context: Any) -> JsonDict:
        return ResponseBuilder.ok({"msg": "ok"}, request_id=context.aws_request_id)

    resp = handler({}, SimpleNamespace(aws_request_id="req-ok"))

    parsed = parse_body(resp)
    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["msg"] == "ok"
    assert parsed["request_id"] == "req-ok"


def test_options_preflight() -> None:
    @api_gateway_handler
    def handler(event: Any, context: Any) -> JsonDict:  # pragma: no cover
        raise AssertionError("Should not be called")

    resp = handler({"httpMethod": "OPTIONS"}, SimpleNamespace())

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert "Access-Control-Allow-Origin" in resp["headers"]


def test_value_error_returns_400_with_friendly_message() -> None:
    resp = raising(ValueError("Invalid input data"))({}, SimpleNamespace(aws_request_id="r"))
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.BAD_REQUEST
    assert parsed["message"] == "Invalid input data"
    assert parsed["request_id"] == "r"


def test_technical_value_error_is_rewritten() -> None:
    resp = raising(ValueError("bad things happened in module x"))({}, SimpleNamespace())

    assert parse_body(resp)["message"] == (
        "The provided data is invalid. Please check your input and try again."
    )


@pytest.mark.parametrize(
    "exc,status",
    [
        (KeyError("owner_id"), HTTPStatus.BAD_REQUEST),
        (TypeError("wrong type"), HTTPStatus.BAD_REQUEST),
        (PermissionError("no access"), HTTPStatus.FORBIDDEN),
        (FileNotFoundError("missing"), HTTPStatus.NOT_FOUND),
        (MemoryError("too big"), HTTPStatus.REQUEST_ENTITY_TOO_LARGE),
        (OSError("disk gone"), HTTPStatus.SERVICE_UNAVAILABLE),
        (RuntimeError("boom"), HTTPStatus.INTERNAL_SERVER_ERROR),
    ],
)
def test_exception_status_mapping(exc, status) -> None:
    resp = raising(exc)({}, SimpleNamespace())

    assert resp["statusCode"] == status


def test_memory_error_mentions_limit() -> None:
    parsed = parse_body(raising(MemoryError())({}, SimpleNamespace()))

    assert "Maximum size is 5MB" in parsed["message"]


def test_unhandled_pipeline_error_keeps_code() -> None:
    exc = StorageError(message="Failed to save image: disk full", error_code="IMAGE_WRITE_FAILED")

    resp = raising(exc)({}, SimpleNamespace())
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.INTERNAL_SERVER_ERROR
    assert parsed["error"] == "IMAGE_WRITE_FAILED"
    assert parsed["message"] == "Failed to save image: disk full"


def test_unexpected_exception_returns_generic_500() -> None:
    resp = raising(RuntimeError("boom"))({}, SimpleNamespace(aws_request_id="req-500"))
    parsed = parse_body(resp)

    assert parsed["message"] == (
        "We're experiencing technical difficulties. Please try again in a few moments."
    )
    assert parsed["request_id"] == "req-500"
    assert parsed["error"] == "INTERNAL_ERROR"


def test_unhandled_validation_error_returns_422_with_details() -> None:
    exc = ValidationError(errors=["File must be an image"])

    resp = raising(exc)({}, SimpleNamespace())
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
    assert parsed["error"] == "VALIDATION_FAILED"
    assert parsed["details"] == {"errors": ["File must be an image"]}


def test_unhandled_not_found_returns_404() -> None:
    resp = raising(NotFoundError(message="Image not found: /a.webp"))({}, SimpleNamespace())

    assert resp["statusCode"] == HTTPStatus.NOT_FOUND
    assert parse_body(resp)["message"] == "Image not found: /a.webp"

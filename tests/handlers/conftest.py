import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from core.imaging.processor import ImageProcessor


@pytest.fixture
def lambda_context():
    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )


@pytest.fixture
def use_processor(monkeypatch, processor) -> Callable[[str], ImageProcessor]:
    """
    Swap the module-level processor of a handler for the in-memory one.

    Usage:
        use_processor("handlers.upload_cover.handler")
    """

    def _use(module_path: str) -> ImageProcessor:
        monkeypatch.setattr(f"{module_path}.processor", processor)
        return processor

    return _use


@pytest.fixture
def file_payload() -> Callable[..., dict[str, Any]]:
    """Build one JSON file entry as sent by the admin client."""

    def _payload(data: bytes, file_name: str = "cover.jpg", **extra: Any) -> dict[str, Any]:
        return {
            "file": base64.b64encode(data).decode("utf-8"),
            "file_name": file_name,
            **extra,
        }

    return _payload


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    def _event(
        *,
        method: str = "POST",
        body: dict[str, Any] | None = None,
        path_params: dict[str, str] | None = None,
        query_params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return {
            "httpMethod": method,
            "path": "/v1/test",
            "pathParameters": path_params,
            "queryStringParameters": query_params,
            "body": json.dumps(body) if body is not None else None,
            "headers": {"Content-Type": "application/json"},
        }

    return _event

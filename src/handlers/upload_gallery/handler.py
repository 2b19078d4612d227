"""
Lambda handler responsible for gallery image batch uploads.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.imaging.processor import ImageProcessor
from core.models.errors import ImageServiceError
from core.models.image import UploadCandidate
from core.models.settings import ProcessorSettings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import GalleryUploadRequest, GalleryUploadResponse
from .service import GalleryUploadService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

processor = ImageProcessor.from_settings(ProcessorSettings.from_env())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle gallery batch uploads.

    Each file is processed independently. The response is 200 even when
    some files fail; failures are listed in `errors` by 1-based position.

    Args:
        event: API Gateway Lambda proxy event; body holds `files`
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received gallery upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    try:
        body = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as exc:
        logger.exception("Invalid JSON body received", exc_info=exc)
        return ResponseBuilder.bad_request(message="Invalid JSON body")

    if not isinstance(body, dict):
        logger.error("Request body is not a JSON object", extra={"type": type(body).__name__})
        return ResponseBuilder.bad_request(message="Request body must be a JSON object")

    path_params = event.get("pathParameters") or {}
    if path_params.get("owner_id"):
        body["owner_id"] = path_params["owner_id"]

    try:
        request = validate_request(GalleryUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    candidates: list[UploadCandidate | ImageServiceError] = []
    for payload in request.files:
        try:
            candidates.append(payload.to_candidate())
        except ImageServiceError as exc:
            candidates.append(exc)

    service = GalleryUploadService(processor)
    report = service.upload_images(owner_id=request.owner_id, candidates=candidates)

    metrics.add_metric(
        name="GalleryImagesProcessed", unit=MetricUnit.Count, value=report.processed
    )
    metrics.add_metric(name="GalleryImagesFailed", unit=MetricUnit.Count, value=report.failed)

    message = f"{report.processed} images uploaded successfully"
    if report.failed:
        message += f", {report.failed} failed"

    response = GalleryUploadResponse(
        message=message,
        processed=report.processed,
        failed=report.failed,
        results=report.results,
        errors=report.errors,
    )

    return ResponseBuilder.ok(response.model_dump(mode="json"))

"""
Lambda handler responsible for deleting stored images.
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.imaging.processor import ImageProcessor
from core.models.settings import ProcessorSettings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import RemoveImagesRequest, RemoveImagesResponse
from .service import RemoveImagesService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

processor = ImageProcessor.from_settings(ProcessorSettings.from_env())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image removal requests.

    Every path is attempted; a missing file or failed delete is reported
    in `results` and never aborts the rest.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received image removal request",
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

    try:
        request = validate_request(RemoveImagesRequest, body)
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = RemoveImagesService(processor)
    results = service.remove_images(
        request.paths,
        include_variants=request.include_variants,
    )

    removed = sum(1 for result in results if result.success)
    response = RemoveImagesResponse(
        removed=removed,
        failed=len(results) - removed,
        results=results,
    )

    return ResponseBuilder.ok(response.model_dump(mode="json"))

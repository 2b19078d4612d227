"""
Lambda handler responsible for cover image upload and optimization.
"""

import json
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.imaging.processor import ImageProcessor
from core.models.errors import StorageError, TranscodeError, ValidationError
from core.models.settings import ProcessorSettings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import CoverUploadRequest, CoverUploadResponse
from .service import CoverUploadService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

processor = ImageProcessor.from_settings(ProcessorSettings.from_env())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle cover upload requests.

    The handler decodes the base64-encoded cover, runs it through the
    image processor and returns the public paths of the optimized cover
    and its responsive variants. The caller persists those paths on the
    owning entity.

    Expected API Gateway event structure:
    {
        "pathParameters": {"owner_id": "..."},
        "body": "{...}"            # JSON: file, file_name, mime_type?, previous_cover?
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload payload
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received cover upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
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
        request = validate_request(CoverUploadRequest, body)
    except PydanticValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = CoverUploadService(processor)

    try:
        outcome = service.upload_cover(
            owner_id=request.owner_id,
            candidate=request.to_candidate(),
            previous_cover=request.previous_cover,
        )

    except ValidationError as exc:
        logger.warning(
            "Cover upload rejected",
            extra={"owner_id": request.owner_id, "errors": exc.errors},
        )
        return ResponseBuilder.validation_error(
            message=exc.message,
            details={"errors": exc.errors},
        )

    except TranscodeError as exc:
        logger.exception(
            "Cover could not be transcoded",
            extra={"owner_id": request.owner_id},
        )
        return ResponseBuilder.error(
            status=HTTPStatus.UNPROCESSABLE_ENTITY,
            error=exc.error_code,
            message=exc.message,
        )

    except StorageError as exc:
        logger.exception(
            "Storage error during cover upload",
            extra={"owner_id": request.owner_id},
        )
        return ResponseBuilder.internal_error(exc.message, error=exc.error_code)

    cover = outcome.cover
    response = CoverUploadResponse(
        message=f"Cover image uploaded and optimized ({cover.compression_ratio}% compression)",
        cover_image=cover.public_path,
        responsive_sizes=cover.variant_paths,
        metadata=cover.metadata,
        compression_ratio=cover.compression_ratio,
        cleanup=outcome.cleanup,
    )

    return ResponseBuilder.created(response.model_dump(mode="json"))

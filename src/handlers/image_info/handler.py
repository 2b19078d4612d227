"""
Lambda handler returning metadata about a stored image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError

from core.imaging.processor import ImageProcessor
from core.models.errors import NotFoundError
from core.models.settings import ProcessorSettings
from core.utils.constants import METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors, validate_request

from .models import ImageInfoRequest
from .service import ImageInfoService

logger = Logger(utc=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)

processor = ImageProcessor.from_settings(ProcessorSettings.from_env())


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Return existence, dimensions, size and timestamps of a stored image."""
    logger.info(
        "Received image info request",
        extra={
            "http_method": event.get("httpMethod"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    query_params = event.get("queryStringParameters") or {}

    try:
        request = validate_request(ImageInfoRequest, {"path": query_params.get("path")})
    except ValidationError as exc:
        logger.error(
            "Request validation failed",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.bad_request(
            message="Invalid request params",
            details={"errors": sanitize_validation_errors(exc.errors())},
        )

    service = ImageInfoService(processor)

    try:
        probe = service.get_image_info(request.path)
    except NotFoundError as exc:
        return ResponseBuilder.not_found(exc.message)

    return ResponseBuilder.ok({"path": request.path, **probe.model_dump(mode="json")})

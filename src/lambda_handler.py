"""AWS Lambda handler for API Gateway requests.

API Gateway events are passed to the FastAPI application through the Mangum
ASGI adapter.
"""

import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_fastapi_app, initialize_lambda_environment

logger = logging.getLogger(__name__)

# Build the app during cold start (skipped in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()
    app = get_fastapi_app()
    mangum_handler = Mangum(app, lifespan="off")
else:
    app = None  # type: ignore
    mangum_handler = None  # type: ignore


def is_api_gateway_event(event: dict[str, Any]) -> bool:
    """Determine if the event came from API Gateway (REST or HTTP API).

    Args:
        event: The Lambda event payload

    Returns:
        True if the payload carries an API Gateway request context
    """
    request_context = event.get("requestContext")
    if not isinstance(request_context, dict):
        return False
    return "http" in request_context or "httpMethod" in event


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway requests.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        API Gateway proxy response
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    if not is_api_gateway_event(event):
        logger.warning("Unsupported event type, expected an API Gateway request")
        return {
            "statusCode": 400,
            "body": '{"success": false, "error": "Unsupported event type"}',
        }

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": '{"success": false, "error": "Internal server error"}',
        }

"""
Lambda handler for the usage alert threshold.

- POST .../alerts  {"threshold": number > 0}  set the threshold
- GET  .../alerts                             read the threshold

Environment variables:
- USER_DATA_TABLE: per-user settings table
- COGNITO_USER_POOL_ID: pool whose tokens are accepted

Dependencies: backend.lambdas.lambda_utils
System role: Lambda entry point for alert settings
"""

import logging
import math
import time
from typing import Any, Dict

from backend.core.exceptions import (
    EnergyMonitorException,
    MethodNotAllowedError,
    NotFoundError,
    ValidationError,
)
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_token_validator, get_user_data_repository
from backend.lambdas.lambda_utils.http import (
    ApiRequest,
    cors_headers,
    empty_response,
    error_response,
    json_response,
    message_response,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = cors_headers(
    "OPTIONS,POST,GET,DELETE",
    "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token,X-Id-Token",
    credentials=False,
)

THRESHOLD_TTL_SECONDS = 365 * 24 * 60 * 60
REQUIRED_SETTINGS = ("cognito.user_pool_id", "storage.user_data_table")


def set_threshold(body: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Store the user's alert threshold.

    Args:
        body: Request body with threshold
        user_id: Authenticated user

    Returns:
        Dict: Proxy response
    """
    threshold = body.get("threshold")
    if (
        isinstance(threshold, bool)
        or not isinstance(threshold, (int, float))
        or not math.isfinite(threshold)
        or threshold <= 0
    ):
        raise ValidationError("Invalid threshold value", field="threshold")

    get_user_data_repository().set_threshold(
        user_id,
        threshold,
        ttl=int(time.time()) + THRESHOLD_TTL_SECONDS,
    )
    logger.info("Threshold set", extra={"user_id": user_id, "threshold": threshold})
    return message_response(200, "Threshold set successfully", CORS_HEADERS)


def get_threshold(user_id: str) -> Dict[str, Any]:
    """
    Read the user's alert threshold.

    Args:
        user_id: Authenticated user

    Returns:
        Dict: Proxy response with {"threshold"}
    """
    item = get_user_data_repository().get(user_id)
    if not item or item.get("threshold") is None:
        raise NotFoundError("No threshold found")
    return json_response(200, {"threshold": item["threshold"]}, CORS_HEADERS)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for alert settings.

    Args:
        event: API Gateway proxy event (v1 or v2)
        context: Lambda context object

    Returns:
        Dict: API Gateway proxy response
    """
    try:
        request = ApiRequest.from_event(event)
        if request.method == "OPTIONS":
            return empty_response(CORS_HEADERS)

        init_function(*REQUIRED_SETTINGS)
        claims = get_token_validator().validate_headers(request.headers)

        if request.method == "POST":
            return set_threshold(request.json_body(), claims.user_id)
        if request.method == "GET":
            return get_threshold(claims.user_id)
        raise MethodNotAllowedError("Method not allowed")

    except EnergyMonitorException as e:
        logger.warning("handler - %s: %s", type(e).__name__, e)
        return error_response(e, CORS_HEADERS)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("handler - Unexpected error: %s", e)
        return message_response(500, "Internal server error", CORS_HEADERS)

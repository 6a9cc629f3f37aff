"""
Lambda handler for WebSocket $connect and $disconnect routes.

Keeps one row per open connection so notifications can find every
browser session of a user. Rows expire after a day in case a disconnect
is never delivered.

Environment variables:
- CONNECTIONS_TABLE: connections table keyed by ConnectionId
- COGNITO_USER_POOL_ID: pool whose tokens are accepted

Dependencies: backend.boundary.aws.dynamodb, backend.lambdas.lambda_utils
System role: Lambda entry point for WebSocket session tracking
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict

from backend.core.exceptions import (
    EnergyMonitorException,
    TokenValidationError,
    ValidationError,
)
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_connection_repository, get_token_validator
from backend.lambdas.lambda_utils.http import cors_headers, message_response

logger = logging.getLogger(__name__)

CORS_HEADERS = cors_headers("GET,POST,OPTIONS", "Content-Type,Authorization,X-Id-Token")
CONNECTION_TTL_SECONDS = 24 * 60 * 60
REQUIRED_SETTINGS = ("cognito.user_pool_id", "storage.connections_table")


def handle_connect(connection_id: str, headers: Dict[str, Any]) -> Dict[str, Any]:
    """Validate the caller and record the connection."""
    claims = get_token_validator().validate_headers(headers)
    get_connection_repository().put(
        claims.user_id,
        connection_id,
        ttl=int(time.time()) + CONNECTION_TTL_SECONDS,
        created_at=datetime.now(timezone.utc).isoformat(),
    )
    logger.info(
        "%s:handle_connect - Connection stored",
        __name__,
        extra={"connection_id": connection_id, "user_id": claims.user_id},
    )
    return message_response(200, "Connected successfully", CORS_HEADERS)


def handle_disconnect(connection_id: str) -> Dict[str, Any]:
    """Forget a closed connection."""
    get_connection_repository().delete(connection_id)
    logger.info("%s:handle_disconnect - Connection deleted", __name__, extra={"connection_id": connection_id})
    return message_response(200, "Disconnected successfully", CORS_HEADERS)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for WebSocket lifecycle routes.

    Args:
        event: WebSocket API event
        context: Lambda context object

    Returns:
        Dict: Proxy response
    """
    request_context = event.get("requestContext") or {}
    route_key = request_context.get("routeKey")
    connection_id = request_context.get("connectionId")
    logger.info(
        "%s:handler - Processing request",
        __name__,
        extra={"route_key": route_key, "connection_id": connection_id},
    )

    try:
        if not connection_id:
            raise ValidationError("Missing connection ID")

        init_function(*REQUIRED_SETTINGS)

        if route_key == "$connect":
            return handle_connect(connection_id, event.get("headers") or {})
        if route_key == "$disconnect":
            return handle_disconnect(connection_id)

        logger.error("%s:handler - Unsupported route", __name__, extra={"route_key": route_key})
        return message_response(400, "Unsupported route", CORS_HEADERS)

    except TokenValidationError as e:
        logger.warning("%s:handler - TokenValidationError: %s", __name__, e)
        return message_response(401, e.message, CORS_HEADERS)
    except EnergyMonitorException as e:
        logger.error("%s:handler - %s: %s", __name__, type(e).__name__, e)
        return message_response(500, e.message, CORS_HEADERS)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("%s:handler - Request processing failed: %s", __name__, e)
        return message_response(500, str(e) or "Internal Server Error", CORS_HEADERS)

"""
Lambda handler for energy usage CRUD.

Routes (any stage prefix):
- POST .../energy/input     store one reading, notify the alert topic
- GET  .../energy/history   readings between startDate and endDate
- GET  .../energy/summary   daily/weekly/monthly aggregates
- GET  .../energy/download  all readings as CSV

Environment variables:
- TABLE_NAME: energy usage table
- SNS_TOPIC_ARN: topic notified after each stored reading
- COGNITO_USER_POOL_ID: pool whose tokens are accepted

Dependencies: backend.core.energy, backend.lambdas.lambda_utils
System role: Lambda entry point for the energy API
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from pydantic import ValidationError as PydanticValidationError

from backend.core.energy import (
    aggregate_energy_data,
    parse_period,
    records_to_download_csv,
    summary_window,
)
from backend.core.exceptions import EnergyMonitorException, NotFoundError, ValidationError
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import (
    get_alert_publisher,
    get_energy_repository,
    get_token_validator,
)
from backend.lambdas.lambda_utils.http import (
    ApiRequest,
    cors_headers,
    empty_response,
    error_response,
    message_response,
)
from backend.models.energy import EnergyInputRequest, EnergyRecord

logger = logging.getLogger(__name__)

CORS_HEADERS = cors_headers("POST,GET,OPTIONS", "Content-Type,Authorization,X-Id-Token")

MANUAL_INPUT_TTL = timedelta(days=365)
REQUIRED_SETTINGS = ("cognito.user_pool_id", "storage.table_name", "messaging.sns_topic_arn")


def handle_input(body: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Store a manually entered reading and notify the alert topic.

    Args:
        body: Request body with date, usage and source
        user_id: Authenticated user

    Returns:
        Dict: Proxy response with the stored item
    """
    if any(body.get(name) in (None, "") for name in ("date", "usage", "source")):
        raise ValidationError("Missing required fields: date, usage, source, idToken")
    if isinstance(body["usage"], bool):
        raise ValidationError("usage must be a number", field="usage")
    try:
        reading = EnergyInputRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError("usage must be a number", field="usage") from e

    now = datetime.now(timezone.utc)
    record = EnergyRecord(
        user_id=user_id,
        date=reading.date,
        energy_usage=reading.usage,
        source=reading.source,
        ttl=int((now + MANUAL_INPUT_TTL).timestamp()),
        created_at=now.isoformat(),
    )

    try:
        get_energy_repository().put_record(record)
        get_alert_publisher().publish(
            {"userId": user_id},
            attributes={"userId": user_id, "date": record.date},
        )
    except Exception as e:  # pylint: disable=broad-except
        logger.exception(
            "Error saving reading or publishing notification",
            extra={"user_id": user_id, "error": str(e)},
        )
        return message_response(500, "Failed to save energy usage", CORS_HEADERS)

    logger.info("Reading saved", extra={"user_id": user_id, "reading_date": record.date})
    return message_response(
        200,
        "Energy data saved successfully",
        CORS_HEADERS,
        data=record.to_item(),
    )


def handle_history(query: Dict[str, str], user_id: str) -> Dict[str, Any]:
    """
    Readings of the user between two dates.

    Args:
        query: Query parameters with startDate and endDate
        user_id: Authenticated user

    Returns:
        Dict: Proxy response with the readings
    """
    start_date, end_date = query.get("startDate"), query.get("endDate")
    if not start_date or not end_date:
        raise ValidationError("Missing required query parameters: startDate, endDate")

    try:
        records = get_energy_repository().query_range(user_id, start_date, end_date)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("Error fetching history", extra={"user_id": user_id, "error": str(e)})
        return message_response(500, "Failed to retrieve energy history", CORS_HEADERS)

    return message_response(
        200,
        "Energy history retrieved successfully",
        CORS_HEADERS,
        data=[record.to_item() for record in records],
    )


def handle_summary(query: Dict[str, str], user_id: str) -> Dict[str, Any]:
    """
    Aggregated usage for the period's window ending today.

    Args:
        query: Query parameters with period
        user_id: Authenticated user

    Returns:
        Dict: Proxy response with one entry per bucket
    """
    period = parse_period(query.get("period"))
    start_date, end_date = summary_window(period, datetime.now(timezone.utc).date())

    try:
        records = get_energy_repository().query_range(user_id, start_date, end_date)
        summary = aggregate_energy_data(records, period)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("Error building summary", extra={"user_id": user_id, "error": str(e)})
        return message_response(500, "Failed to retrieve energy summary", CORS_HEADERS)

    return message_response(
        200,
        f"Energy {period.value} summary retrieved successfully",
        CORS_HEADERS,
        data=[entry.model_dump() for entry in summary],
    )


def handle_download(user_id: str) -> Dict[str, Any]:
    """
    All readings of the user as a CSV attachment.

    Args:
        user_id: Authenticated user

    Returns:
        Dict: Proxy response with text/csv body
    """
    try:
        records = get_energy_repository().query_all(user_id)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("Error fetching download data", extra={"user_id": user_id, "error": str(e)})
        return message_response(500, "Failed to download energy data", CORS_HEADERS)

    return {
        "statusCode": 200,
        "headers": {
            **CORS_HEADERS,
            "Content-Type": "text/csv",
            "Content-Disposition": 'attachment; filename="energy-data.csv"',
        },
        "body": records_to_download_csv(records),
    }


def _route(request: ApiRequest, body: Dict[str, Any]) -> Callable[[str], Dict[str, Any]] | None:
    routes = {
        "/energy/input": lambda user_id: handle_input(body, user_id),
        "/energy/history": lambda user_id: handle_history(request.query, user_id),
        "/energy/summary": lambda user_id: handle_summary(request.query, user_id),
        "/energy/download": handle_download,
    }
    for suffix, route in routes.items():
        if request.path_endswith(suffix):
            return route
    return None


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for the energy API.

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
        body = request.json_body()
        claims = get_token_validator().validate_headers(request.headers)

        route = _route(request, body)
        if route is None:
            raise NotFoundError("Not Found")
        return route(claims.user_id)

    except EnergyMonitorException as e:
        logger.warning("handler - %s: %s", type(e).__name__, e)
        return error_response(e, CORS_HEADERS)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("handler - Unexpected error: %s", e)
        return message_response(500, "Internal Server Error", CORS_HEADERS)

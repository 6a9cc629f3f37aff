"""
Lambda handler pushing SNS notifications to WebSocket clients.

Each SNS record carries a JSON message and a `userId` message attribute.
The message is posted to every open connection of that user; stale
connections are removed. A failing record is logged and does not stop
the rest of the batch.

Environment variables:
- CONNECTIONS_TABLE: connections table with a UserId index
- WEBSOCKET_API_ENDPOINT: management API endpoint of the WebSocket stage

Dependencies: backend.boundary.aws, backend.models.events
System role: Lambda entry point for realtime notifications
"""

import json
import logging
from typing import Any, Dict

from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_connection_repository, get_websocket_notifier
from backend.models.events import SNSRecord

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ("storage.connections_table", "messaging.websocket_api_endpoint")


def notify_user(record: SNSRecord) -> Dict[str, int]:
    """
    Deliver one SNS message to the user's connections.

    Args:
        record: SNS record

    Returns:
        Dict: {"succeeded": n, "stale": n, "failed": n}

    Raises:
        KeyError: No userId attribute
        json.JSONDecodeError: Message is not JSON
    """
    sns = record.Sns
    message = json.loads(sns.Message)
    user_id = sns.MessageAttributes["userId"].Value

    connections = get_connection_repository().for_user(user_id)
    counts = {"succeeded": 0, "stale": 0, "failed": 0}
    if not connections:
        logger.info(
            "%s:notify_user - No active connections",
            __name__,
            extra={"user_id": user_id, "message_id": sns.MessageId},
        )
        return counts

    notifier = get_websocket_notifier()
    for connection in connections:
        connection_id = connection["ConnectionId"]
        try:
            delivered = notifier.send(connection_id, message)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "%s:notify_user - Failed to send WebSocket message: %s: %s",
                __name__,
                type(e).__name__,
                e,
                extra={"connection_id": connection_id},
            )
            counts["failed"] += 1
            continue

        if delivered:
            counts["succeeded"] += 1
        else:
            counts["stale"] += 1
            get_connection_repository().delete(connection_id)

    logger.info(
        "%s:notify_user - Finished processing SNS message",
        __name__,
        extra={"user_id": user_id, "message_id": sns.MessageId, "total_connections": len(connections), **counts},
    )
    return counts


def handler(event: Dict[str, Any], context: Any) -> None:
    """
    Lambda handler for SNS notification fan-out.

    Args:
        event: SNS event
        context: Lambda context object
    """
    records = event.get("Records", [])
    logger.info("handler - Received SNS event", extra={"record_count": len(records)})
    init_function(*REQUIRED_SETTINGS)

    for raw_record in records:
        message_id = (raw_record.get("Sns") or {}).get("MessageId")
        try:
            record = SNSRecord.model_validate(raw_record)
            notify_user(record)
        except Exception as e:  # pylint: disable=broad-except
            logger.error(
                "%s:handler - Failed to process SNS record: %s: %s",
                __name__,
                type(e).__name__,
                e,
                extra={"message_id": message_id},
            )

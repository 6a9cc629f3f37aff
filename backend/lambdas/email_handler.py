"""
Lambda handler sending usage alert emails.

Triggered by the usage-change topic. For each notified user the latest
reading is compared with their alert threshold and an email goes out when
it is exceeded. Errors propagate so SNS redelivers the notification.

Environment variables:
- COGNITO_USER_POOL_ID: pool holding the users' email addresses
- USER_DATA_TABLE: per-user threshold table
- USAGE_TABLE_NAME: energy usage table
- FROM_EMAIL: verified SES sender

Dependencies: backend.boundary.aws, backend.models.events
System role: Lambda entry point for threshold alerting
"""

import json
import logging
from typing import Any, Dict

from backend.configs import get_settings
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import (
    get_cognito_client,
    get_email_client,
    get_energy_repository,
    get_user_data_repository,
)
from backend.models.events import SNSRecord, UsageNotification

logger = logging.getLogger(__name__)

ALERT_SUBJECT = "Energy Usage Alert!"
REQUIRED_SETTINGS = (
    "cognito.user_pool_id",
    "storage.user_data_table",
    "storage.table_name",
    "messaging.from_email",
)


def build_alert_body(usage: Any, reading_date: str, threshold: Any, dashboard_url: str) -> str:
    """Plain text alert email."""
    return (
        "Energy Usage Alert!\n\n"
        f"Your latest energy reading of {usage} kWh (recorded on {reading_date}) "
        f"exceeds your alert threshold of {threshold} kWh.\n\n"
        f"Visit {dashboard_url} to view your complete energy usage history "
        "and manage your alert settings."
    )


def check_user(user_id: str) -> bool:
    """
    Compare a user's latest reading with their threshold.

    Args:
        user_id: Cognito sub

    Returns:
        bool: True when an alert email was sent
    """
    email = get_cognito_client().get_user_email(user_id)
    if not email:
        logger.info("%s:check_user - No email found", __name__, extra={"user_id": user_id})
        return False

    user_data = get_user_data_repository().get(user_id) or {}
    threshold = user_data.get("threshold")
    if not threshold:
        logger.info("%s:check_user - No threshold found", __name__, extra={"user_id": user_id})
        return False

    latest = get_energy_repository().latest(user_id)
    if not latest:
        logger.info("%s:check_user - No usage data found", __name__, extra={"user_id": user_id})
        return False

    usage = latest.get("EnergyUsage")
    if usage is None or usage <= threshold:
        logger.info(
            "%s:check_user - Latest usage within threshold",
            __name__,
            extra={"user_id": user_id, "usage": usage, "threshold": threshold},
        )
        return False

    messaging = get_settings().messaging
    get_email_client().send_text_email(
        source=messaging.from_email,
        to=email,
        subject=ALERT_SUBJECT,
        body=build_alert_body(usage, latest.get("Date", ""), threshold, messaging.dashboard_url),
    )
    logger.info(
        "%s:check_user - Alert email sent",
        __name__,
        extra={"user_id": user_id, "usage": usage, "threshold": threshold},
    )
    return True


def handler(event: Dict[str, Any], context: Any) -> None:
    """
    Lambda handler for threshold alerts.

    Args:
        event: SNS event
        context: Lambda context object

    Raises:
        Exception: Any failure, so SNS retries the delivery
    """
    records = event.get("Records", [])
    logger.info("handler - Received SNS event", extra={"record_count": len(records)})
    init_function(*REQUIRED_SETTINGS)

    for raw_record in records:
        try:
            record = SNSRecord.model_validate(raw_record)
            notification = UsageNotification.model_validate(json.loads(record.Sns.Message))
            check_user(notification.userId)
        except Exception as e:
            logger.error(
                "%s:handler - Error processing SNS record: %s: %s",
                __name__,
                type(e).__name__,
                e,
            )
            raise

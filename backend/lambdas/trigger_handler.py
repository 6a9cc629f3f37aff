"""
Lambda handler ingesting uploaded usage files.

Triggered by S3 object creation under user-uploads/. Each CSV row becomes
an energy usage row for the uploading user; after a file is stored one
notification is published so alerting and the dashboard pick it up.

Environment variables:
- TABLE_NAME: energy usage table
- SNS_TOPIC_ARN: usage-change topic

Dependencies: backend.core.energy.csv_io, backend.boundary.aws
System role: Lambda entry point for file ingestion
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict
from urllib.parse import unquote_plus

from backend.core.energy.csv_io import parse_uploaded_csv
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import (
    get_alert_publisher,
    get_energy_repository,
    get_storage_client,
)
from backend.models.energy import EnergyRecord
from backend.models.events import S3ObjectRef

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "user-uploads"
CSV_SOURCE = "CSV file"
CSV_TTL_SECONDS = 90 * 24 * 60 * 60
REQUIRED_SETTINGS = ("storage.table_name", "messaging.sns_topic_arn")


def parse_s3_record(record: Dict[str, Any]) -> S3ObjectRef:
    """
    Bucket and decoded key of an S3 event record.

    S3 URL-encodes keys in notifications, with spaces as `+`.
    """
    s3_info = record.get("s3", {})
    object_info = s3_info.get("object", {})
    return S3ObjectRef(
        bucket=s3_info.get("bucket", {}).get("name", ""),
        key=unquote_plus(object_info.get("key", "")),
        size=object_info.get("size", 0),
    )


def upload_owner(s3_key: str) -> str | None:
    """
    User id of an upload key.

    Args:
        s3_key: Decoded object key

    Returns:
        str | None: Second path segment of user-uploads/<userId>/.../<name>.csv,
        None for any other key
    """
    parts = s3_key.split("/")
    if len(parts) < 3 or parts[0] != UPLOAD_PREFIX:
        return None
    if not parts[-1].lower().endswith(".csv") or not parts[1]:
        return None
    return parts[1]


def ingest_file(obj: S3ObjectRef, user_id: str) -> int:
    """
    Store every valid row of one uploaded file and announce it.

    Args:
        obj: Uploaded object
        user_id: Owner of the upload

    Returns:
        int: Number of rows stored
    """
    content = get_storage_client().read_text(obj.key, bucket=obj.bucket)
    readings, skipped = parse_uploaded_csv(content)

    repository = get_energy_repository()
    created_at = datetime.now(timezone.utc).isoformat()
    ttl = int(time.time()) + CSV_TTL_SECONDS
    for reading in readings:
        repository.put_record(
            EnergyRecord(
                user_id=user_id,
                date=reading.date,
                energy_usage=reading.usage,
                source=CSV_SOURCE,
                ttl=ttl,
                created_at=created_at,
            )
        )

    get_alert_publisher().publish(
        {"userId": user_id, "recordCount": len(readings), "fileName": obj.key},
        attributes={"userId": user_id},
    )
    logger.info(
        "%s:ingest_file - File ingested",
        __name__,
        extra={"user_id": user_id, "s3_key": obj.key, "stored": len(readings), "skipped": skipped},
    )
    return len(readings)


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for S3 upload events.

    Args:
        event: S3 event with Records array
        context: Lambda context object

    Returns:
        Dict: {"statusCode": 200, "body": ...}

    Raises:
        Exception: Any failure, failing the invocation
    """
    records = event.get("Records", [])
    logger.info("handler - Received S3 event", extra={"record_count": len(records)})
    init_function(*REQUIRED_SETTINGS)

    try:
        for record in records:
            obj = parse_s3_record(record)
            user_id = upload_owner(obj.key)
            if not user_id:
                logger.info(
                    "%s:handler - Skipping object with invalid path",
                    __name__,
                    extra={"s3_key": obj.key},
                )
                continue
            ingest_file(obj, user_id)
    except Exception as e:
        logger.error("%s:handler - Error processing S3 event: %s: %s", __name__, type(e).__name__, e)
        raise

    return {
        "statusCode": 200,
        "body": '{"message": "Successfully processed all records"}',
    }

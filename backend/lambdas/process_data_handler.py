"""
Lambda step exporting the training set.

Dumps every stored reading to a date-sorted `date,usage` CSV in the
bucket, where the training job reads it.

Environment variables:
- TABLE_NAME: energy usage table
- BUCKET_NAME: bucket receiving model/training-<ms>.csv

Dependencies: backend.core.energy.csv_io, backend.boundary.aws
System role: Training pipeline data preparation
"""

import logging
import time
from typing import Any, Dict

from backend.core.energy.csv_io import records_to_training_csv
from backend.core.exceptions import NotFoundError
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_energy_repository, get_storage_client

logger = logging.getLogger(__name__)

TRAINING_PREFIX = "model"
REQUIRED_SETTINGS = ("storage.table_name", "storage.bucket_name")


def handler(event: Dict[str, Any], context: Any) -> Dict[str, str]:
    """
    Export all readings for training.

    Args:
        event: Step input (unused)
        context: Lambda context object

    Returns:
        Dict: {"s3Path": "s3://<bucket>/<key>"}

    Raises:
        NotFoundError: The table holds no readings
    """
    init_function(*REQUIRED_SETTINGS)

    records = get_energy_repository().scan_all()
    if not records:
        raise NotFoundError("No data found in DynamoDB")

    s3_key = f"{TRAINING_PREFIX}/training-{int(time.time() * 1000)}.csv"
    s3_path = get_storage_client().put_text(s3_key, records_to_training_csv(records), content_type="text/csv")

    logger.info(
        "%s:handler - Training data exported",
        __name__,
        extra={"record_count": len(records), "s3_path": s3_path},
    )
    return {"s3Path": s3_path}

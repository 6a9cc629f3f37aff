"""
Lambda handler issuing presigned CSV upload URLs.

GET .../presigned-url returns a URL the browser PUTs a CSV file to. The key
places the file under user-uploads/<sub>/, where the ingestion trigger
picks it up.

Environment variables:
- BUCKET_NAME: uploads bucket
- COGNITO_USER_POOL_ID: pool whose tokens are accepted

Dependencies: backend.boundary.aws.s3_client, backend.lambdas.lambda_utils
System role: Lambda entry point for file upload authorisation
"""

import logging
import secrets
import string
import time
from typing import Any, Dict

from backend.configs import get_settings
from backend.core.exceptions import EnergyMonitorException, NotFoundError
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_storage_client, get_token_validator
from backend.lambdas.lambda_utils.http import (
    ApiRequest,
    cors_headers,
    error_response,
    json_response,
    message_response,
)

logger = logging.getLogger(__name__)

CORS_HEADERS = cors_headers("GET", "Content-Type,X-ID-Token", credentials=False)
UPLOAD_PREFIX = "user-uploads"
REQUIRED_SETTINGS = ("cognito.user_pool_id", "storage.bucket_name")

_ALPHABET = string.ascii_lowercase + string.digits


def build_upload_key(user_id: str, now_ms: int | None = None) -> str:
    """
    Unique key for one upload of a user.

    Args:
        user_id: Cognito sub
        now_ms: Epoch milliseconds (defaults to now)

    Returns:
        str: user-uploads/<sub>/<sub>-<ms>-<random>.csv
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(13))
    return f"{UPLOAD_PREFIX}/{user_id}/{user_id}-{now_ms}-{suffix}.csv"


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for presigned upload URLs.

    Args:
        event: API Gateway proxy event (v1 or v2)
        context: Lambda context object

    Returns:
        Dict: Proxy response with {presignedUrl, fileKey}
    """
    try:
        request = ApiRequest.from_event(event)
        if request.path and not request.path_endswith("/presigned-url"):
            raise NotFoundError("Not found")

        init_function(*REQUIRED_SETTINGS)
        claims = get_token_validator().validate_headers(request.headers)

        file_key = build_upload_key(claims.user_id)
        presigned_url, expires_at = get_storage_client().generate_presigned_upload_url(
            file_key,
            content_type="text/csv",
            expires_in=get_settings().prediction.upload_url_expiry,
        )
        logger.info(
            "Presigned URL generated",
            extra={"user_id": claims.user_id, "s3_key": file_key, "expires_at": expires_at.isoformat()},
        )
        return json_response(
            200,
            {"presignedUrl": presigned_url, "fileKey": file_key},
            CORS_HEADERS,
        )

    except EnergyMonitorException as e:
        logger.warning("handler - %s: %s", type(e).__name__, e)
        return error_response(e, CORS_HEADERS)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("handler - Error generating presigned URL: %s", e)
        return message_response(500, "Error generating presigned URL", CORS_HEADERS)

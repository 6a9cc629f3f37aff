"""
Lambda handler for usage predictions.

GET .../prediction?date=YYYY-MM-DD invokes the user's SageMaker endpoint
with the number of days since the start of its training data and returns
the rounded prediction.

Environment variables:
- USER_DATA_TABLE: per-user table holding sagemakerEndpoint and trainingStartDate
- COGNITO_USER_POOL_ID: pool whose tokens are accepted

Dependencies: backend.boundary.aws.sagemaker_client, backend.lambdas.lambda_utils
System role: Lambda entry point for ML inference
"""

import logging
import math
from datetime import date, datetime
from typing import Any, Dict

from botocore.exceptions import ClientError

from backend.core.exceptions import EnergyMonitorException, ValidationError
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import (
    get_sagemaker_client,
    get_token_validator,
    get_user_data_repository,
)
from backend.lambdas.lambda_utils.http import (
    ApiRequest,
    cors_headers,
    empty_response,
    error_response,
    json_response,
    message_response,
)
from backend.models.prediction import PredictionResponse
from backend.observability.log_utils import redact_headers

logger = logging.getLogger(__name__)

CORS_HEADERS = cors_headers("GET,OPTIONS", "Content-Type,X-Id-Token,Authorization")
REQUIRED_SETTINGS = ("cognito.user_pool_id", "storage.user_data_table")

RETRAIN_MESSAGE = "Prediction model needs to be retrained. Please try again in a few minutes."
NO_MODEL_MESSAGE = (
    "No trained model found. Please upload at least 100 energy consumption records "
    "to train the prediction model."
)


def parse_prediction_date(value: str | None) -> date:
    """
    Parse the requested date.

    Raises:
        ValidationError: Missing or not YYYY-MM-DD
    """
    if not value:
        raise ValidationError("Valid date parameter is required (YYYY-MM-DD)", field="date")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise ValidationError("Valid date parameter is required (YYYY-MM-DD)", field="date") from e


def days_since_start(prediction_date: date, training_start: str | None) -> int:
    """
    Model input: days from the first training reading to the prediction date.

    Args:
        prediction_date: Requested date
        training_start: ISO date or timestamp of the first training reading

    Returns:
        int: Day offset (0 when the start is unknown)
    """
    if not training_start:
        return 0
    start = date.fromisoformat(str(training_start)[:10])
    return (prediction_date - start).days


def predict(user_id: str, prediction_date: date, requested: str) -> Dict[str, Any]:
    """
    Run a prediction for one user and date.

    Args:
        user_id: Authenticated user
        prediction_date: Parsed date
        requested: Date as sent by the client

    Returns:
        Dict: Proxy response
    """
    user_data = get_user_data_repository().get(user_id) or {}
    endpoint_name = user_data.get("sagemakerEndpoint")
    if not endpoint_name:
        return json_response(404, {"message": NO_MODEL_MESSAGE, "requiresData": True}, CORS_HEADERS)

    sagemaker = get_sagemaker_client()
    status = sagemaker.endpoint_status(endpoint_name)
    logger.info("Endpoint status", extra={"endpoint_name": endpoint_name, "status": status})
    if not status:
        return json_response(404, {"message": RETRAIN_MESSAGE, "requiresRetrain": True}, CORS_HEADERS)
    if status != "InService":
        return json_response(
            503,
            {
                "message": f"Prediction model is currently {status}. Please try again in a few minutes.",
                "status": status,
            },
            CORS_HEADERS,
        )

    model_input = str(days_since_start(prediction_date, user_data.get("trainingStartDate")))
    raw = sagemaker.invoke(endpoint_name, model_input, content_type="text/csv")

    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        logger.error("Invalid prediction value", extra={"raw_response": raw})
        return message_response(500, "Received invalid prediction value from the model", CORS_HEADERS)

    logger.info(
        "Prediction result",
        extra={"user_id": user_id, "model_input": model_input, "prediction": value},
    )
    return json_response(
        200,
        PredictionResponse(date=requested, prediction=round(value)),
        CORS_HEADERS,
    )


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for predictions.

    Args:
        event: API Gateway proxy event (v1 or v2)
        context: Lambda context object

    Returns:
        Dict: API Gateway proxy response
    """
    try:
        request = ApiRequest.from_event(event)
        logger.info(
            "handler - Prediction requested",
            extra={"method": request.method, "path": request.path, "headers": redact_headers(request.headers)},
        )
        if request.method == "OPTIONS":
            return empty_response(CORS_HEADERS)

        init_function(*REQUIRED_SETTINGS)
        claims = get_token_validator().validate_headers(request.headers)

        requested = request.query.get("date")
        prediction_date = parse_prediction_date(requested)
        return predict(claims.user_id, prediction_date, requested)

    except EnergyMonitorException as e:
        logger.warning("handler - %s: %s", type(e).__name__, e)
        return error_response(e, CORS_HEADERS)
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "")
        logger.error("handler - SageMaker error", extra={"error_code": code, "error": str(e)})
        if code == "ValidationError":
            return json_response(404, {"message": RETRAIN_MESSAGE, "requiresRetrain": True}, CORS_HEADERS)
        return message_response(
            503,
            "The prediction service is temporarily unavailable. Please try again in a few minutes.",
            CORS_HEADERS,
        )
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("handler - Error making prediction: %s", e)
        return message_response(
            500,
            "Unable to make prediction at this time. Please try again later.",
            CORS_HEADERS,
        )

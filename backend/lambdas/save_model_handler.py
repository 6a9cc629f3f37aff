"""
Lambda step deploying a trained model.

Given a finished training job, creates an endpoint configuration and an
endpoint for the model and publishes the endpoint name in Parameter Store.

Environment variables:
- ENVIRONMENT: deployment environment, part of the parameter name
- PREDICTION_*: endpoint instance settings (see backend.configs.prediction)

Dependencies: backend.boundary.aws.sagemaker_client, backend.boundary.aws.ssm_client
System role: Training pipeline model deployment
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from backend.core.exceptions import NotFoundError, ValidationError
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_parameter_store, get_sagemaker_client

logger = logging.getLogger(__name__)


def deployment_timestamp(now: datetime | None = None) -> str:
    """Name suffix for endpoint resources, e.g. 2024-01-31T12-00-00-000Z."""
    now = now or datetime.now(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def handler(event: Dict[str, Any], context: Any) -> Dict[str, str]:
    """
    Deploy the model of a training job.

    Args:
        event: {"TrainingJobName": ...}
        context: Lambda context object

    Returns:
        Dict: {"endpointName": ...}

    Raises:
        ValidationError: No training job name
        NotFoundError: The job produced no model artifacts
    """
    settings = init_function()
    training_job_name = (event or {}).get("TrainingJobName")
    if not training_job_name:
        raise ValidationError("Missing TrainingJobName", field="TrainingJobName")

    logger.info("%s:handler - Save model started", __name__, extra={"training_job_name": training_job_name})

    sagemaker = get_sagemaker_client()
    if not sagemaker.model_artifacts(training_job_name):
        raise NotFoundError("No model artifacts found", details={"training_job_name": training_job_name})

    prediction = settings.prediction
    timestamp = deployment_timestamp()
    endpoint_name = sagemaker.create_endpoint(
        model_name=training_job_name,
        endpoint_config_name=f"{prediction.config_prefix}-{timestamp}",
        endpoint_name=f"{prediction.endpoint_prefix}-{timestamp}",
        instance_type=prediction.instance_type,
        instance_count=prediction.instance_count,
        variant_name=prediction.variant_name,
    )

    parameter_name = prediction.endpoint_parameter.format(environment=settings.environment)
    get_parameter_store().put_string(parameter_name, endpoint_name)

    logger.info(
        "%s:handler - Save model completed",
        __name__,
        extra={"training_job_name": training_job_name, "endpoint_name": endpoint_name, "parameter": parameter_name},
    )
    return {"endpointName": endpoint_name}

"""
SageMaker client.

Endpoint status checks and inference for the prediction function;
training job inspection and endpoint creation for model deployment.

Dependencies: boto3, botocore
System role: Managed ML inference and deployment
"""

import logging

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class SageMakerEndpointClient:
    """SageMaker control plane and runtime operations."""

    def __init__(self, region: str = "us-east-1", client=None, runtime_client=None) -> None:
        """
        Initialize SageMaker clients.

        Args:
            region: AWS region
            client: Preconfigured boto3 sagemaker client
            runtime_client: Preconfigured boto3 sagemaker-runtime client
        """
        self._client = client or boto3.client("sagemaker", region_name=region)
        self._runtime = runtime_client or boto3.client("sagemaker-runtime", region_name=region)

    def endpoint_status(self, endpoint_name: str) -> str | None:
        """
        Status of an endpoint.

        Args:
            endpoint_name: Endpoint name

        Returns:
            str | None: e.g. "InService", "Creating"; None when the endpoint
            does not exist or cannot be described
        """
        try:
            response = self._client.describe_endpoint(EndpointName=endpoint_name)
        except ClientError as e:
            logger.error(
                "Error checking endpoint status",
                extra={"endpoint_name": endpoint_name, "error": str(e)},
            )
            return None
        return response.get("EndpointStatus")

    def invoke(self, endpoint_name: str, body: str, content_type: str = "text/csv") -> str:
        """
        Run inference.

        Args:
            endpoint_name: Endpoint name
            body: Request payload
            content_type: Payload MIME type

        Returns:
            str: Raw response body

        Raises:
            ClientError: Endpoint rejected the request
        """
        response = self._runtime.invoke_endpoint(
            EndpointName=endpoint_name,
            ContentType=content_type,
            Body=body.encode("utf-8"),
        )
        return response["Body"].read().decode("utf-8")

    def model_artifacts(self, training_job_name: str) -> str | None:
        """S3 URI of a training job's model artifacts, if any."""
        response = self._client.describe_training_job(TrainingJobName=training_job_name)
        return (response.get("ModelArtifacts") or {}).get("S3ModelArtifacts")

    def create_endpoint(
        self,
        model_name: str,
        endpoint_config_name: str,
        endpoint_name: str,
        instance_type: str,
        instance_count: int = 1,
        variant_name: str = "AllTraffic",
    ) -> str:
        """
        Create an endpoint configuration and an endpoint serving it.

        Returns:
            str: Endpoint name
        """
        logger.info(
            "Creating endpoint configuration",
            extra={"model_name": model_name, "endpoint_config_name": endpoint_config_name},
        )
        self._client.create_endpoint_config(
            EndpointConfigName=endpoint_config_name,
            ProductionVariants=[
                {
                    "InitialInstanceCount": instance_count,
                    "InstanceType": instance_type,
                    "ModelName": model_name,
                    "VariantName": variant_name,
                    "InitialVariantWeight": 1,
                }
            ],
        )

        logger.info("Creating endpoint", extra={"endpoint_name": endpoint_name})
        self._client.create_endpoint(
            EndpointName=endpoint_name,
            EndpointConfigName=endpoint_config_name,
        )
        return endpoint_name

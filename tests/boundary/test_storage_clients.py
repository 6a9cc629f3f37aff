"""
Unit tests for the S3 and SageMaker clients.

Dependencies: pytest, unittest.mock, botocore, backend.boundary.aws
System role: Object storage and ML boundary validation
"""

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock

from botocore.exceptions import ClientError

from backend.boundary.aws.s3_client import S3StorageClient
from backend.boundary.aws.sagemaker_client import SageMakerEndpointClient


class TestS3StorageClient:
    """Test uploads bucket access."""

    def test_presigned_upload_url(self) -> None:
        """Should sign a put_object request for the key and content type."""
        boto_client = MagicMock()
        boto_client.generate_presigned_url.return_value = "https://signed"
        storage = S3StorageClient("bucket", client=boto_client)

        url, expires_at = storage.generate_presigned_upload_url("user-uploads/u1/f.csv", expires_in=300)

        assert url == "https://signed"
        assert expires_at > datetime.now(timezone.utc)
        boto_client.generate_presigned_url.assert_called_once_with(
            ClientMethod="put_object",
            Params={"Bucket": "bucket", "Key": "user-uploads/u1/f.csv", "ContentType": "text/csv"},
            ExpiresIn=300,
        )

    def test_read_text_from_event_bucket(self) -> None:
        boto_client = MagicMock()
        boto_client.get_object.return_value = {"Body": io.BytesIO(b"Date,Usage\n")}

        content = S3StorageClient("bucket", client=boto_client).read_text("k.csv", bucket="other")

        assert content == "Date,Usage\n"
        boto_client.get_object.assert_called_once_with(Bucket="other", Key="k.csv")

    def test_put_text_returns_uri(self) -> None:
        boto_client = MagicMock()

        uri = S3StorageClient("bucket", client=boto_client).put_text("model/training-1.csv", "date,usage")

        assert uri == "s3://bucket/model/training-1.csv"
        assert boto_client.put_object.call_args.kwargs["Body"] == b"date,usage"


class TestSageMakerEndpointClient:
    """Test endpoint status, inference and deployment."""

    def test_endpoint_status(self) -> None:
        control = MagicMock()
        control.describe_endpoint.return_value = {"EndpointStatus": "InService"}

        client = SageMakerEndpointClient(client=control, runtime_client=MagicMock())

        assert client.endpoint_status("ep") == "InService"

    def test_missing_endpoint_has_no_status(self) -> None:
        control = MagicMock()
        control.describe_endpoint.side_effect = ClientError(
            {"Error": {"Code": "ValidationException", "Message": "Could not find endpoint"}},
            "DescribeEndpoint",
        )

        client = SageMakerEndpointClient(client=control, runtime_client=MagicMock())

        assert client.endpoint_status("ep") is None

    def test_invoke_decodes_body(self) -> None:
        runtime = MagicMock()
        runtime.invoke_endpoint.return_value = {"Body": io.BytesIO(b"41.6")}

        client = SageMakerEndpointClient(client=MagicMock(), runtime_client=runtime)

        assert client.invoke("ep", "30") == "41.6"
        runtime.invoke_endpoint.assert_called_once_with(EndpointName="ep", ContentType="text/csv", Body=b"30")

    def test_create_endpoint(self) -> None:
        """Should create the config, then the endpoint serving it."""
        control = MagicMock()
        client = SageMakerEndpointClient(client=control, runtime_client=MagicMock())

        name = client.create_endpoint("job-1", "cfg-1", "ep-1", "ml.t2.medium")

        assert name == "ep-1"
        variant = control.create_endpoint_config.call_args.kwargs["ProductionVariants"][0]
        assert variant == {
            "InitialInstanceCount": 1,
            "InstanceType": "ml.t2.medium",
            "ModelName": "job-1",
            "VariantName": "AllTraffic",
            "InitialVariantWeight": 1,
        }
        control.create_endpoint.assert_called_once_with(EndpointName="ep-1", EndpointConfigName="cfg-1")

    def test_model_artifacts(self) -> None:
        control = MagicMock()
        control.describe_training_job.return_value = {"ModelArtifacts": {"S3ModelArtifacts": "s3://b/model.tar.gz"}}

        client = SageMakerEndpointClient(client=control, runtime_client=MagicMock())

        assert client.model_artifacts("job-1") == "s3://b/model.tar.gz"

"""
S3 client for the uploads and training-data bucket.

Handles presigned URL generation for direct browser uploads, reading
uploaded CSV files and writing the exported training set.

Dependencies: boto3
System role: Object storage operations
"""

from datetime import datetime, timedelta, timezone

import boto3


class S3StorageClient:
    """S3 client bound to one bucket."""

    def __init__(self, bucket: str, region: str = "us-east-1", client=None) -> None:
        """
        Initialize S3 client for a bucket.

        Args:
            bucket: S3 bucket name
            region: AWS region for S3 bucket
            client: Preconfigured boto3 S3 client (created when omitted)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    @property
    def bucket(self) -> str:
        """Bucket name."""
        return self._bucket

    def generate_presigned_upload_url(
        self,
        s3_key: str,
        content_type: str = "text/csv",
        expires_in: int = 300,
    ) -> tuple[str, datetime]:
        """
        Generate presigned URL for uploading a file.

        Args:
            s3_key: S3 object key (path in bucket)
            content_type: MIME type the upload must declare
            expires_in: URL expiry in seconds

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at)

        Raises:
            ClientError: If presigned URL generation fails
        """
        presigned_url = self._s3_client.generate_presigned_url(
            ClientMethod="put_object",
            Params={
                "Bucket": self._bucket,
                "Key": s3_key,
                "ContentType": content_type,
            },
            ExpiresIn=expires_in,
        )
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=expires_in)
        return presigned_url, expires_at

    def read_text(self, s3_key: str, bucket: str | None = None) -> str:
        """
        Download an object and decode it as UTF-8.

        Args:
            s3_key: S3 object key
            bucket: Bucket override (S3 events name their own bucket)

        Returns:
            str: Object content

        Raises:
            ClientError: Object missing or access denied
        """
        response = self._s3_client.get_object(Bucket=bucket or self._bucket, Key=s3_key)
        return response["Body"].read().decode("utf-8")

    def put_text(self, s3_key: str, body: str, content_type: str = "text/csv") -> str:
        """
        Upload text content.

        Args:
            s3_key: Destination key
            body: Content
            content_type: MIME type stored with the object

        Returns:
            str: s3:// URI of the written object
        """
        self._s3_client.put_object(
            Bucket=self._bucket,
            Key=s3_key,
            Body=body.encode("utf-8"),
            ContentType=content_type,
        )
        return f"s3://{self._bucket}/{s3_key}"

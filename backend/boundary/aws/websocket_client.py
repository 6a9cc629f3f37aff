"""
WebSocket API management client.

Posts messages to connected WebSocket clients through API Gateway.

Dependencies: boto3, botocore
System role: Push notifications to browser sessions
"""

import json
import logging

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


class WebSocketNotifier:
    """Sends JSON messages to WebSocket connections."""

    def __init__(self, endpoint_url: str, region: str = "us-east-1", client=None) -> None:
        """
        Initialize notifier.

        Args:
            endpoint_url: https URL of the WebSocket API stage
            region: AWS region
            client: Preconfigured boto3 apigatewaymanagementapi client
        """
        self._endpoint_url = endpoint_url
        self._client = client or boto3.client(
            "apigatewaymanagementapi",
            endpoint_url=endpoint_url,
            region_name=region,
        )

    def send(self, connection_id: str, message) -> bool:
        """
        Post a message to one connection.

        Args:
            connection_id: API Gateway connection ID
            message: JSON-serialisable payload

        Returns:
            bool: True when delivered, False when the connection is gone

        Raises:
            ClientError: Any failure other than a stale connection
        """
        try:
            self._client.post_to_connection(
                ConnectionId=connection_id,
                Data=json.dumps(message).encode("utf-8"),
            )
        except ClientError as e:
            error = e.response.get("Error", {})
            status = e.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
            if error.get("Code") == "GoneException" or status == 410:
                logger.info(
                    "Connection is stale",
                    extra={"connection_id": connection_id, "status_code": status},
                )
                return False
            raise
        return True

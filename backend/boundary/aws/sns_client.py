"""
SNS publisher.

Dependencies: boto3
System role: Usage-change notifications
"""

import json

import boto3


class SNSPublisher:
    """Publishes JSON messages with string attributes to one topic."""

    def __init__(self, topic_arn: str, region: str = "us-east-1", client=None) -> None:
        """
        Initialize publisher.

        Args:
            topic_arn: Destination topic
            region: AWS region
            client: Preconfigured boto3 SNS client
        """
        self._topic_arn = topic_arn
        self._client = client or boto3.client("sns", region_name=region)

    def publish(self, message: dict, attributes: dict[str, str] | None = None) -> str:
        """
        Publish a message.

        Args:
            message: JSON-serialisable message body
            attributes: String message attributes used for subscription filtering

        Returns:
            str: SNS message ID
        """
        response = self._client.publish(
            TopicArn=self._topic_arn,
            Message=json.dumps(message),
            MessageAttributes={
                name: {"DataType": "String", "StringValue": value}
                for name, value in (attributes or {}).items()
            },
        )
        return response.get("MessageId", "")

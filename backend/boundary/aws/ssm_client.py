"""
SSM Parameter Store client.

Dependencies: boto3
System role: Publishing deployed endpoint names
"""

import boto3


class ParameterStoreClient:
    """Writes String parameters."""

    def __init__(self, region: str = "us-east-1", client=None) -> None:
        self._client = client or boto3.client("ssm", region_name=region)

    def put_string(self, name: str, value: str) -> None:
        """Create or overwrite a String parameter."""
        self._client.put_parameter(Name=name, Value=value, Type="String", Overwrite=True)

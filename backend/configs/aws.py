"""
AWS resource configuration.

Region, Cognito user pool and the names of the tables, bucket and topics
each Lambda function talks to. Every value maps to the environment variable
of the same name set on the function.

Dependencies: pydantic, pydantic_settings
System role: Managed-service resource configuration
"""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AWSSettings(BaseSettings):
    """Region shared by all boto3 clients."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION"),
        description="AWS region for all service clients",
    )


class CognitoSettings(BaseSettings):
    """Cognito user pool configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COGNITO_",
        case_sensitive=False,
        extra="ignore",
    )

    user_pool_id: str = Field(default="", description="Cognito user pool ID")
    client_id: str = Field(default="", description="Cognito app client ID")
    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("COGNITO_REGION", "AWS_REGION"),
        description="Region hosting the user pool",
    )

    @property
    def issuer(self) -> str:
        """
        Expected `iss` claim of tokens minted by the user pool.

        Returns:
            str: Issuer URL
        """
        return f"https://cognito-idp.{self.region}.amazonaws.com/{self.user_pool_id}"

    @property
    def jwks_url(self) -> str:
        """URL of the user pool's JSON Web Key Set."""
        return f"{self.issuer}/.well-known/jwks.json"


class StorageSettings(BaseSettings):
    """DynamoDB tables and S3 bucket."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    table_name: str = Field(
        default="",
        validation_alias=AliasChoices("TABLE_NAME", "ENERGY_TABLE", "USAGE_TABLE_NAME"),
        description="Energy usage table (UserId, Date)",
    )
    user_data_table: str = Field(default="", description="Per-user threshold and model table")
    connections_table: str = Field(default="", description="WebSocket connections table")
    connections_user_index: str = Field(
        default="UserIdIndex",
        description="Connections table index keyed by UserId",
    )
    bucket_name: str = Field(default="", description="Bucket for uploads and training data")


class MessagingSettings(BaseSettings):
    """SNS topics, WebSocket API and SES sender."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    sns_topic_arn: str = Field(default="", description="Topic notified on new usage data")
    sns_websocket_topic_arn: str = Field(
        default="",
        description="Topic fanned out to WebSocket clients",
    )
    websocket_api_endpoint: str = Field(
        default="",
        description="https endpoint of the WebSocket API management API",
    )
    from_email: str = Field(default="", description="Verified SES sender address")
    dashboard_url: str = Field(
        default="https://pge.dmitrygrinko.com",
        description="Link included in alert emails",
    )

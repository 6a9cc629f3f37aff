"""
Prediction and upload settings.

Dependencies: pydantic_settings
System role: SageMaker endpoint and presigned URL configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PredictionSettings(BaseSettings):
    """SageMaker endpoint deployment and upload URL settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PREDICTION_",
        case_sensitive=False,
        extra="ignore",
    )

    instance_type: str = Field(default="ml.t2.medium", description="Endpoint instance type")
    instance_count: int = Field(default=1, description="Initial endpoint instance count")
    variant_name: str = Field(default="AllTraffic", description="Production variant name")
    config_prefix: str = Field(default="energy-prediction-config")
    endpoint_prefix: str = Field(default="energy-prediction-endpoint")
    endpoint_parameter: str = Field(
        default="/{environment}/sagemaker/endpoint-url",
        description="SSM parameter receiving the deployed endpoint name",
    )
    upload_url_expiry: int = Field(
        default=300,
        description="Presigned upload URL expiry in seconds",
    )

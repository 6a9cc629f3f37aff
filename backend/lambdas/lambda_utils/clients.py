"""
Client factories for Lambda handlers.

Each factory builds its boundary client from settings once per container,
so warm invocations reuse connections. Handlers import these names and
tests patch them on the handler module.

Dependencies: backend.boundary.aws, backend.configs, backend.core.auth
System role: Dependency wiring for the functions
"""

from functools import lru_cache

from backend.boundary.aws import (
    CognitoAuthClient,
    ConnectionRepository,
    EnergyUsageRepository,
    ParameterStoreClient,
    S3StorageClient,
    SageMakerEndpointClient,
    SESEmailClient,
    SNSPublisher,
    UserDataRepository,
    WebSocketNotifier,
)
from backend.configs import get_settings
from backend.core.auth import CognitoJwtVerifier, TokenClaimValidator


@lru_cache
def get_token_validator() -> TokenClaimValidator:
    """Claim validator for the configured user pool."""
    return TokenClaimValidator(get_settings().cognito.issuer)


@lru_cache
def get_jwt_verifier() -> CognitoJwtVerifier:
    """Signature verifier for ID tokens of the configured app client."""
    cognito = get_settings().cognito
    return CognitoJwtVerifier(cognito.issuer, cognito.client_id, jwks_url=cognito.jwks_url)


@lru_cache
def get_cognito_client() -> CognitoAuthClient:
    """Cognito client for the configured pool and app client."""
    settings = get_settings()
    return CognitoAuthClient(
        settings.cognito.user_pool_id,
        settings.cognito.client_id,
        region=settings.cognito.region,
    )


@lru_cache
def get_energy_repository() -> EnergyUsageRepository:
    """Usage table repository."""
    settings = get_settings()
    return EnergyUsageRepository(settings.storage.table_name, region=settings.aws.region)


@lru_cache
def get_user_data_repository() -> UserDataRepository:
    """User settings table repository."""
    settings = get_settings()
    return UserDataRepository(settings.storage.user_data_table, region=settings.aws.region)


@lru_cache
def get_connection_repository() -> ConnectionRepository:
    """WebSocket connections table repository."""
    settings = get_settings()
    return ConnectionRepository(
        settings.storage.connections_table,
        region=settings.aws.region,
        user_index=settings.storage.connections_user_index,
    )


@lru_cache
def get_storage_client() -> S3StorageClient:
    """Uploads and training data bucket."""
    settings = get_settings()
    return S3StorageClient(settings.storage.bucket_name, region=settings.aws.region)


@lru_cache
def get_alert_publisher() -> SNSPublisher:
    """Publisher for the usage-change topic."""
    settings = get_settings()
    return SNSPublisher(settings.messaging.sns_topic_arn, region=settings.aws.region)


@lru_cache
def get_email_client() -> SESEmailClient:
    """SES client."""
    return SESEmailClient(region=get_settings().aws.region)


@lru_cache
def get_sagemaker_client() -> SageMakerEndpointClient:
    """SageMaker control plane and runtime client."""
    return SageMakerEndpointClient(region=get_settings().aws.region)


@lru_cache
def get_parameter_store() -> ParameterStoreClient:
    """SSM client."""
    return ParameterStoreClient(region=get_settings().aws.region)


@lru_cache
def get_websocket_notifier() -> WebSocketNotifier:
    """WebSocket management API client."""
    settings = get_settings()
    return WebSocketNotifier(settings.messaging.websocket_api_endpoint, region=settings.aws.region)

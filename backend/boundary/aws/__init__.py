"""
AWS boundary modules.

Exports: one client per managed service used by the functions
"""

from .cognito_client import CognitoAuthClient
from .dynamodb import ConnectionRepository, EnergyUsageRepository, UserDataRepository
from .s3_client import S3StorageClient
from .sagemaker_client import SageMakerEndpointClient
from .ses_client import SESEmailClient
from .sns_client import SNSPublisher
from .ssm_client import ParameterStoreClient
from .websocket_client import WebSocketNotifier

__all__ = [
    "CognitoAuthClient",
    "ConnectionRepository",
    "EnergyUsageRepository",
    "ParameterStoreClient",
    "S3StorageClient",
    "SESEmailClient",
    "SNSPublisher",
    "SageMakerEndpointClient",
    "UserDataRepository",
    "WebSocketNotifier",
]

"""
Shared test fixtures and configuration for entire test suite.

Provides: Function environment, settings/client cache resets, Cognito-style
test tokens, API Gateway and SNS event builders
Dependencies: pytest, python-jose
System role: Test infrastructure and fixture management
"""

import base64
import json
import time
from typing import Any, Callable, Dict

import pytest
from jose import jwt

from backend.configs import get_settings
from backend.lambdas.lambda_utils import clients

USER_POOL_ID = "us-east-1_TestPool"
CLIENT_ID = "test-client-id"
ISSUER = f"https://cognito-idp.us-east-1.amazonaws.com/{USER_POOL_ID}"
USER_ID = "user-123"

FUNCTION_ENV = {
    "AWS_REGION": "us-east-1",
    "ENVIRONMENT": "test",
    "COGNITO_USER_POOL_ID": USER_POOL_ID,
    "COGNITO_CLIENT_ID": CLIENT_ID,
    "TABLE_NAME": "EnergyUsage",
    "USER_DATA_TABLE": "UserData",
    "CONNECTIONS_TABLE": "Connections",
    "BUCKET_NAME": "energy-uploads",
    "SNS_TOPIC_ARN": "arn:aws:sns:us-east-1:123456789012:energy-alerts",
    "SNS_WEBSOCKET_TOPIC_ARN": "arn:aws:sns:us-east-1:123456789012:energy-websocket",
    "WEBSOCKET_API_ENDPOINT": "https://ws.example.com/dev",
    "FROM_EMAIL": "alerts@example.com",
}

_CLIENT_FACTORIES = (
    clients.get_token_validator,
    clients.get_jwt_verifier,
    clients.get_cognito_client,
    clients.get_energy_repository,
    clients.get_user_data_repository,
    clients.get_connection_repository,
    clients.get_storage_client,
    clients.get_alert_publisher,
    clients.get_email_client,
    clients.get_sagemaker_client,
    clients.get_parameter_store,
    clients.get_websocket_notifier,
)


def _clear_caches() -> None:
    get_settings.cache_clear()
    for factory in _CLIENT_FACTORIES:
        factory.cache_clear()


@pytest.fixture(autouse=True)
def function_env(monkeypatch):
    """
    Environment of a deployed function, with fresh settings per test.

    Logging setup is marked done so pytest's capture handlers stay in place.
    """
    for name, value in FUNCTION_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setattr("backend.observability.logger._configured", True)
    _clear_caches()
    yield FUNCTION_ENV
    _clear_caches()


@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Build an unsigned-looking but well-formed Cognito token.

    Claims are only decoded (never verified) by the HTTP functions, so an
    HS256 signature is enough.
    """

    def _make(token_use: str = "id", **overrides: Any) -> str:
        claims: Dict[str, Any] = {
            "sub": USER_ID,
            "iss": ISSUER,
            "exp": int(time.time()) + 3600,
            "token_use": token_use,
        }
        if token_use == "id":
            claims["email"] = "user@example.com"
            claims["aud"] = CLIENT_ID
        claims.update(overrides)
        claims = {key: value for key, value in claims.items() if value is not None}
        return jwt.encode(claims, "test-secret", algorithm="HS256")

    return _make


@pytest.fixture
def auth_headers(make_token) -> Dict[str, str]:
    """Headers of an authenticated dashboard request."""
    return {
        "X-Id-Token": make_token("id"),
        "Authorization": f"Bearer {make_token('access')}",
    }


@pytest.fixture
def api_event() -> Callable[..., Dict[str, Any]]:
    """Build a REST API (payload v1) proxy event."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: Dict[str, str] | None = None,
        query: Dict[str, str] | None = None,
        body: Any = None,
        base64_body: bool = False,
    ) -> Dict[str, Any]:
        raw_body = body if body is None or isinstance(body, str) else json.dumps(body)
        if raw_body is not None and base64_body:
            raw_body = base64.b64encode(raw_body.encode("utf-8")).decode("ascii")
        return {
            "httpMethod": method,
            "path": path,
            "headers": headers or {},
            "queryStringParameters": query,
            "body": raw_body,
            "isBase64Encoded": base64_body,
            "requestContext": {"requestId": "req-1"},
        }

    return _make


@pytest.fixture
def sns_event() -> Callable[..., Dict[str, Any]]:
    """Build an SNS Lambda event from (message, attributes) pairs."""

    def _make(*messages: tuple[Dict[str, Any], Dict[str, str]]) -> Dict[str, Any]:
        return {
            "Records": [
                {
                    "EventSource": "aws:sns",
                    "Sns": {
                        "MessageId": f"msg-{index}",
                        "Message": json.dumps(message),
                        "Timestamp": "2024-01-15T12:00:00.000Z",
                        "MessageAttributes": {
                            name: {"Type": "String", "Value": value}
                            for name, value in attributes.items()
                        },
                    },
                }
                for index, (message, attributes) in enumerate(messages)
            ]
        }

    return _make


@pytest.fixture
def response_body() -> Callable[[Dict[str, Any]], Any]:
    """Decode the JSON body of a proxy response."""
    return lambda response: json.loads(response["body"])

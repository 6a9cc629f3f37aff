"""
Lambda authorizer for the WebSocket API.

Browsers cannot set headers on a WebSocket handshake, so the ID token
arrives in the `auth` query parameter. The token's signature is verified
against the user pool key set and the caller's identity is passed on to
the integration as authorizer context.

Environment variables:
- COGNITO_USER_POOL_ID: issuing user pool
- COGNITO_CLIENT_ID: expected token audience

Dependencies: backend.core.auth.jwks_verifier
System role: Lambda entry point for WebSocket authorisation
"""

import logging
from typing import Any, Dict

from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_jwt_verifier

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ("cognito.user_pool_id", "cognito.client_id")


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Authorize a WebSocket connect request.

    Args:
        event: API Gateway request authorizer event
        context: Lambda context object

    Returns:
        Dict: {"isAuthorized": bool, "context": {userId, email}}
    """
    try:
        init_function(*REQUIRED_SETTINGS)
        token = (event.get("queryStringParameters") or {}).get("auth")
        claims = get_jwt_verifier().verify(token)

        logger.info("%s:handler - Token verified", __name__, extra={"user_id": claims.get("sub")})
        return {
            "isAuthorized": True,
            "context": {"userId": claims.get("sub"), "email": claims.get("email")},
        }
    except Exception as e:  # pylint: disable=broad-except
        logger.error("%s:handler - Authorization failed: %s: %s", __name__, type(e).__name__, e)
        return {"isAuthorized": False, "context": {}}

"""
Lambda handler for account management.

Routes (POST, JSON bodies):
- .../auth/signup           {email, password}
- .../auth/verify           {email, code}
- .../auth/login            {email, password}
- .../auth/refresh          refreshToken cookie (or body field)
- .../auth/logout
- .../auth/forgot-password  {email}
- .../auth/password-reset   {email, code, newPassword}
- .../auth/resend-code      {email}

The refresh token never reaches page scripts: login sets it as an
HttpOnly cookie scoped to /auth and refresh reads it back from there.

Environment variables:
- COGNITO_USER_POOL_ID, COGNITO_CLIENT_ID: user pool app client

Dependencies: backend.boundary.aws.cognito_client, backend.boundary.aws.ses_client
System role: Lambda entry point for authentication
"""

import logging
from typing import Any, Callable, Dict, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from backend.core.exceptions import (
    EnergyMonitorException,
    NotFoundError,
    TokenValidationError,
    ValidationError,
)
from backend.lambdas.lambda_utils.bootstrap import init_function
from backend.lambdas.lambda_utils.clients import get_cognito_client, get_email_client
from backend.lambdas.lambda_utils.http import (
    ApiRequest,
    cors_headers,
    empty_response,
    error_response,
    json_response,
    message_response,
)
from backend.models.auth import (
    CognitoTokens,
    CredentialsRequest,
    EmailRequest,
    ResetPasswordRequest,
    VerifyEmailRequest,
)

logger = logging.getLogger(__name__)

REQUIRED_SETTINGS = ("cognito.user_pool_id", "cognito.client_id")

REFRESH_COOKIE = "refreshToken"
REFRESH_COOKIE_MAX_AGE = 30 * 24 * 60 * 60
COOKIE_ATTRIBUTES = "HttpOnly; Secure; SameSite=Strict; Path=/auth"

ModelT = TypeVar("ModelT", bound=BaseModel)


def response_headers(request: ApiRequest) -> Dict[str, str]:
    """
    CORS headers for a credentialed request.

    Browsers refuse a wildcard origin together with credentials, so the
    caller's origin is echoed back when present.
    """
    headers = cors_headers("POST,OPTIONS", "Content-Type,Authorization")
    origin = request.headers.get("origin")
    if origin:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


def refresh_cookie(token: str, max_age: int = REFRESH_COOKIE_MAX_AGE) -> str:
    """Set-Cookie value carrying the refresh token."""
    return f"{REFRESH_COOKIE}={token}; {COOKIE_ATTRIBUTES}; Max-Age={max_age}"


def parse_body(request: ApiRequest, model: Type[ModelT]) -> ModelT:
    """
    Validate the JSON body against a request model.

    Raises:
        ValidationError: Body missing required fields
    """
    try:
        return model.model_validate(request.json_body())
    except PydanticValidationError as e:
        missing = sorted({str(error["loc"][0]) for error in e.errors() if error.get("loc")})
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            details={"fields": missing},
        ) from e


def token_body(tokens: CognitoTokens) -> Dict[str, str]:
    return {"accessToken": tokens.access_token, "idToken": tokens.id_token}


def signup(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    body = parse_body(request, CredentialsRequest)
    get_cognito_client().sign_up(body.email, body.password)
    logger.info("%s:signup - User registered", __name__)
    return message_response(
        200,
        "User registered successfully. Please check your email for the verification code.",
        headers,
    )


def verify(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    """Confirm the account, then let SES deliver alert emails to it."""
    body = parse_body(request, VerifyEmailRequest)
    get_cognito_client().verify_email(body.email, body.code)
    get_email_client().register_email(body.email)
    logger.info("%s:verify - Email verified", __name__)
    return message_response(200, "Email verified successfully", headers)


def login(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    body = parse_body(request, CredentialsRequest)
    tokens = get_cognito_client().login(body.email, body.password)
    logger.info("%s:login - Login succeeded", __name__)
    return json_response(200, token_body(tokens), headers, cookies=[refresh_cookie(tokens.refresh_token)])


def refresh(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    """Issue new access and ID tokens from the refresh cookie."""
    token = request.cookies.get(REFRESH_COOKIE) or request.json_body().get(REFRESH_COOKIE)
    if not token:
        raise TokenValidationError("No refresh token provided")
    tokens = get_cognito_client().refresh(token)
    return json_response(200, token_body(tokens), headers)


def logout(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    return json_response(
        200,
        {"message": "Logged out successfully"},
        headers,
        cookies=[refresh_cookie("", max_age=0)],
    )


def forgot_password(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    body = parse_body(request, EmailRequest)
    get_cognito_client().forgot_password(body.email)
    return message_response(200, "Password reset code sent to your email", headers)


def reset_password(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    body = parse_body(request, ResetPasswordRequest)
    get_cognito_client().reset_password(body.email, body.code, body.newPassword)
    return message_response(200, "Password reset successfully", headers)


def resend_code(request: ApiRequest, headers: Dict[str, str]) -> Dict[str, Any]:
    body = parse_body(request, EmailRequest)
    get_cognito_client().resend_confirmation_code(body.email)
    return message_response(200, "Verification code resent successfully", headers)


ROUTES: Dict[str, Callable[[ApiRequest, Dict[str, str]], Dict[str, Any]]] = {
    "/auth/signup": signup,
    "/auth/verify": verify,
    "/auth/login": login,
    "/auth/refresh": refresh,
    "/auth/logout": logout,
    "/auth/forgot-password": forgot_password,
    "/auth/password-reset": reset_password,
    "/auth/resend-code": resend_code,
}


def handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for authentication routes.

    Args:
        event: API Gateway proxy event (v1 or v2)
        context: Lambda context object

    Returns:
        Dict: API Gateway proxy response
    """
    headers = cors_headers("POST,OPTIONS", "Content-Type,Authorization")
    try:
        request = ApiRequest.from_event(event)
        headers = response_headers(request)
        if request.method == "OPTIONS":
            return empty_response(headers)

        init_function(*REQUIRED_SETTINGS)

        route = next(
            (func for suffix, func in ROUTES.items() if request.path_endswith(suffix)),
            None,
        )
        if route is None or request.method != "POST":
            raise NotFoundError("Not Found")

        logger.info("handler - Auth request", extra={"route": route.__name__})
        return route(request, headers)

    except EnergyMonitorException as e:
        logger.warning("handler - %s: %s", type(e).__name__, e)
        return error_response(e, headers)
    except Exception as e:  # pylint: disable=broad-except
        logger.exception("handler - Unexpected error: %s", e)
        return message_response(500, "Internal server error", headers)

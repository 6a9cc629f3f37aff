"""
Cognito user pool client.

Account lifecycle (sign up, confirm, login, refresh, password reset)
through the app client's USER_PASSWORD_AUTH flow, plus the admin lookup
of a user's email used by alerting. Provider error codes are translated
to AuthServiceError with the status the auth function answers with.

Dependencies: boto3, botocore
System role: Identity provider operations
"""

import logging

import boto3
from botocore.exceptions import ClientError

from backend.core.exceptions import AuthServiceError
from backend.models.auth import CognitoTokens

logger = logging.getLogger(__name__)

# (operation, provider error code) -> (client message, HTTP status)
ERROR_MESSAGES: dict[tuple[str, str], tuple[str, int]] = {
    ("sign_up", "UsernameExistsException"): ("User already exists", 409),
    ("verify_email", "CodeMismatchException"): ("Invalid verification code", 400),
    ("login", "NotAuthorizedException"): ("Invalid credentials", 401),
    ("login", "UserNotConfirmedException"): ("Please verify your email first", 403),
    ("refresh", "NotAuthorizedException"): ("Invalid refresh token", 401),
    ("forgot_password", "UserNotFoundException"): ("User not found", 404),
    ("forgot_password", "LimitExceededException"): (
        "Too many attempts. Please try again later",
        429,
    ),
    ("reset_password", "CodeMismatchException"): ("Invalid verification code", 400),
    ("reset_password", "ExpiredCodeException"): ("Verification code has expired", 400),
    ("reset_password", "InvalidPasswordException"): (
        "Password does not meet requirements",
        400,
    ),
}


def _translate(operation: str, error: ClientError) -> Exception:
    code = error.response.get("Error", {}).get("Code", "")
    known = ERROR_MESSAGES.get((operation, code))
    if known:
        message, status_code = known
        return AuthServiceError(message, code=code, status_code=status_code)
    return error


class CognitoAuthClient:
    """Cognito operations for one user pool app client."""

    def __init__(
        self,
        user_pool_id: str,
        client_id: str,
        region: str = "us-east-1",
        client=None,
    ) -> None:
        """
        Initialize Cognito client.

        Args:
            user_pool_id: User pool ID
            client_id: App client ID
            region: AWS region of the pool
            client: Preconfigured boto3 cognito-idp client
        """
        self._user_pool_id = user_pool_id
        self._client_id = client_id
        self._client = client or boto3.client("cognito-idp", region_name=region)

    def sign_up(self, email: str, password: str) -> None:
        """
        Register a user whose username is their email.

        Raises:
            AuthServiceError: User already exists
        """
        try:
            self._client.sign_up(
                ClientId=self._client_id,
                Username=email,
                Password=password,
                UserAttributes=[{"Name": "email", "Value": email}],
            )
        except ClientError as e:
            raise _translate("sign_up", e) from e

    def verify_email(self, email: str, code: str) -> None:
        """
        Confirm sign-up with the emailed code.

        Raises:
            AuthServiceError: Wrong code
        """
        try:
            self._client.confirm_sign_up(
                ClientId=self._client_id,
                Username=email,
                ConfirmationCode=code,
            )
        except ClientError as e:
            raise _translate("verify_email", e) from e

    def login(self, email: str, password: str) -> CognitoTokens:
        """
        Authenticate with email and password.

        Returns:
            CognitoTokens: Access, ID and refresh tokens

        Raises:
            AuthServiceError: Bad credentials, unconfirmed user or incomplete result
        """
        try:
            response = self._client.initiate_auth(
                AuthFlow="USER_PASSWORD_AUTH",
                ClientId=self._client_id,
                AuthParameters={"USERNAME": email, "PASSWORD": password},
            )
        except ClientError as e:
            raise _translate("login", e) from e

        result = response.get("AuthenticationResult") or {}
        if not (result.get("AccessToken") and result.get("IdToken") and result.get("RefreshToken")):
            raise AuthServiceError("Invalid authentication result", status_code=500)

        return CognitoTokens(
            access_token=result["AccessToken"],
            id_token=result["IdToken"],
            refresh_token=result["RefreshToken"],
        )

    def refresh(self, refresh_token: str) -> CognitoTokens:
        """
        Exchange a refresh token for new access and ID tokens.

        Raises:
            AuthServiceError: Refresh token rejected or incomplete result
        """
        try:
            response = self._client.initiate_auth(
                AuthFlow="REFRESH_TOKEN_AUTH",
                ClientId=self._client_id,
                AuthParameters={"REFRESH_TOKEN": refresh_token},
            )
        except ClientError as e:
            raise _translate("refresh", e) from e

        result = response.get("AuthenticationResult") or {}
        if not (result.get("AccessToken") and result.get("IdToken")):
            raise AuthServiceError("Invalid refresh result", status_code=500)

        return CognitoTokens(access_token=result["AccessToken"], id_token=result["IdToken"])

    def forgot_password(self, email: str) -> None:
        """
        Send a password reset code.

        Raises:
            AuthServiceError: Unknown user or rate limited
        """
        try:
            self._client.forgot_password(ClientId=self._client_id, Username=email)
        except ClientError as e:
            raise _translate("forgot_password", e) from e

    def reset_password(self, email: str, code: str, new_password: str) -> None:
        """
        Set a new password with the reset code.

        Raises:
            AuthServiceError: Wrong or expired code, weak password
        """
        try:
            self._client.confirm_forgot_password(
                ClientId=self._client_id,
                Username=email,
                ConfirmationCode=code,
                Password=new_password,
            )
        except ClientError as e:
            raise _translate("reset_password", e) from e

    def resend_confirmation_code(self, email: str) -> None:
        """Send the sign-up confirmation code again."""
        try:
            self._client.resend_confirmation_code(ClientId=self._client_id, Username=email)
        except ClientError as e:
            logger.error("Error resending confirmation code", extra={"error": str(e)})
            raise

    def get_user_email(self, username: str) -> str | None:
        """
        Email attribute of a user.

        Args:
            username: Username or sub

        Returns:
            str | None: Email, or None when the user has none
        """
        response = self._client.admin_get_user(UserPoolId=self._user_pool_id, Username=username)
        for attribute in response.get("UserAttributes", []):
            if attribute.get("Name") == "email":
                return attribute.get("Value") or None
        return None

"""
Unit tests for the Cognito client.

Dependencies: pytest, unittest.mock, botocore, backend.boundary.aws.cognito_client
System role: Identity provider error translation validation
"""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from backend.boundary.aws.cognito_client import CognitoAuthClient
from backend.core.exceptions import AuthServiceError


def _client_error(code: str, operation: str = "InitiateAuth") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def boto_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def cognito(boto_client) -> CognitoAuthClient:
    return CognitoAuthClient("us-east-1_TestPool", "client-id", client=boto_client)


class TestCognitoAuthClient:
    """Test account operations and error translation."""

    def test_sign_up_sends_email_attribute(self, cognito, boto_client) -> None:
        """Should register the email as username and attribute."""
        cognito.sign_up("a@example.com", "Secret123!")

        boto_client.sign_up.assert_called_once_with(
            ClientId="client-id",
            Username="a@example.com",
            Password="Secret123!",
            UserAttributes=[{"Name": "email", "Value": "a@example.com"}],
        )

    @pytest.mark.parametrize(
        "method, boto_method, args, code, message, status",
        [
            ("sign_up", "sign_up", ("a", "b"), "UsernameExistsException", "User already exists", 409),
            ("verify_email", "confirm_sign_up", ("a", "1"), "CodeMismatchException", "Invalid verification code", 400),
            ("login", "initiate_auth", ("a", "b"), "NotAuthorizedException", "Invalid credentials", 401),
            ("login", "initiate_auth", ("a", "b"), "UserNotConfirmedException", "Please verify your email first", 403),
            ("refresh", "initiate_auth", ("t",), "NotAuthorizedException", "Invalid refresh token", 401),
            ("forgot_password", "forgot_password", ("a",), "UserNotFoundException", "User not found", 404),
            (
                "forgot_password",
                "forgot_password",
                ("a",),
                "LimitExceededException",
                "Too many attempts. Please try again later",
                429,
            ),
            (
                "reset_password",
                "confirm_forgot_password",
                ("a", "1", "p"),
                "ExpiredCodeException",
                "Verification code has expired",
                400,
            ),
            (
                "reset_password",
                "confirm_forgot_password",
                ("a", "1", "p"),
                "InvalidPasswordException",
                "Password does not meet requirements",
                400,
            ),
        ],
    )
    def test_known_errors_are_translated(
        self, cognito, boto_client, method, boto_method, args, code, message, status
    ) -> None:
        """Should map provider error codes to client messages and statuses."""
        getattr(boto_client, boto_method).side_effect = _client_error(code)

        with pytest.raises(AuthServiceError) as exc_info:
            getattr(cognito, method)(*args)

        assert exc_info.value.message == message
        assert exc_info.value.status_code == status
        assert exc_info.value.code == code

    def test_unknown_error_propagates(self, cognito, boto_client) -> None:
        """Should re-raise provider errors it has no message for."""
        boto_client.sign_up.side_effect = _client_error("InternalErrorException")

        with pytest.raises(ClientError):
            cognito.sign_up("a", "b")

    def test_login_returns_tokens(self, cognito, boto_client) -> None:
        boto_client.initiate_auth.return_value = {
            "AuthenticationResult": {"AccessToken": "acc", "IdToken": "id", "RefreshToken": "ref"}
        }

        tokens = cognito.login("a@example.com", "pw")

        assert (tokens.access_token, tokens.id_token, tokens.refresh_token) == ("acc", "id", "ref")
        assert boto_client.initiate_auth.call_args.kwargs["AuthFlow"] == "USER_PASSWORD_AUTH"

    def test_login_incomplete_result(self, cognito, boto_client) -> None:
        """Should fail when the provider omits a token."""
        boto_client.initiate_auth.return_value = {"AuthenticationResult": {"AccessToken": "acc", "IdToken": "id"}}

        with pytest.raises(AuthServiceError) as exc_info:
            cognito.login("a@example.com", "pw")

        assert exc_info.value.message == "Invalid authentication result"
        assert exc_info.value.status_code == 500

    def test_refresh_uses_refresh_flow(self, cognito, boto_client) -> None:
        boto_client.initiate_auth.return_value = {"AuthenticationResult": {"AccessToken": "acc", "IdToken": "id"}}

        tokens = cognito.refresh("ref")

        assert tokens.refresh_token is None
        kwargs = boto_client.initiate_auth.call_args.kwargs
        assert kwargs["AuthFlow"] == "REFRESH_TOKEN_AUTH"
        assert kwargs["AuthParameters"] == {"REFRESH_TOKEN": "ref"}

    def test_get_user_email(self, cognito, boto_client) -> None:
        boto_client.admin_get_user.return_value = {
            "UserAttributes": [{"Name": "sub", "Value": "u1"}, {"Name": "email", "Value": "a@example.com"}]
        }

        assert cognito.get_user_email("u1") == "a@example.com"
        boto_client.admin_get_user.assert_called_once_with(UserPoolId="us-east-1_TestPool", Username="u1")

    def test_get_user_email_without_attribute(self, cognito, boto_client) -> None:
        boto_client.admin_get_user.return_value = {"UserAttributes": []}

        assert cognito.get_user_email("u1") is None

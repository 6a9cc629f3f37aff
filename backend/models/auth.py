"""
Authentication request and response schemas.

Dependencies: pydantic
System role: Auth API contracts
"""

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Body of signup and login."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class VerifyEmailRequest(BaseModel):
    """Body of email confirmation."""

    email: str = Field(min_length=1)
    code: str = Field(min_length=1)


class EmailRequest(BaseModel):
    """Body of forgot-password and resend-code."""

    email: str = Field(min_length=1)


class ResetPasswordRequest(BaseModel):
    """Body of password reset confirmation."""

    email: str = Field(min_length=1)
    code: str = Field(min_length=1)
    newPassword: str = Field(min_length=1)


class CognitoTokens(BaseModel):
    """Tokens returned by the user pool."""

    access_token: str
    id_token: str
    refresh_token: str | None = None


class TokenClaims(BaseModel):
    """Claims needed from a validated ID/access token pair."""

    user_id: str = Field(description="ID token `sub`")
    email: str | None = None
    id_token_exp: float
    access_token_exp: float

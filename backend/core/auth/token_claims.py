"""
ID/access token pair validation.

Every HTTP function (energy, user data, prediction, presigned URL) and the
WebSocket connect route authenticate the same way: the client sends its
Cognito ID token in `X-Id-Token` and its access token as a Bearer
`Authorization` header. The claims of both are decoded without signature
verification and checked for subject, expiry and issuer.

Dependencies: python-jose
System role: Request authentication shared by all user-facing functions
"""

import logging
import math
import time
from collections.abc import Callable, Mapping
from typing import Any

from jose import jwt
from jose.exceptions import JWTError

from backend.core.exceptions import TokenValidationError, ValidationError
from backend.models.auth import TokenClaims

logger = logging.getLogger(__name__)

ID_TOKEN_HEADER = "x-id-token"
AUTHORIZATION_HEADER = "authorization"

MISSING_TOKENS = "Unauthorized. Missing required tokens."
INVALID_TOKENS = "Unauthorized. Invalid tokens."
EXPIRED_TOKENS = "Unauthorized. Tokens expired or invalid."
INVALID_ISSUER = "Unauthorized. Invalid token issuer."


def extract_tokens(headers: Mapping[str, Any] | None) -> tuple[str | None, str | None]:
    """
    Pull the ID and access tokens out of request headers.

    Header names are matched case-insensitively. A `Bearer ` prefix on the
    authorization header is stripped.

    Args:
        headers: Request headers

    Returns:
        tuple: (id_token, access_token), either may be None

    Raises:
        ValidationError: Headers are not a mapping
    """
    if headers is None:
        return None, None
    if not isinstance(headers, Mapping):
        raise ValidationError("Invalid headers")

    lowered = {str(key).lower(): value for key, value in headers.items()}
    id_token = lowered.get(ID_TOKEN_HEADER) or None
    access_token = lowered.get(AUTHORIZATION_HEADER) or None
    if access_token:
        access_token = access_token.replace("Bearer ", "", 1).strip() or None
    return id_token, access_token


def _decode(token: str) -> dict[str, Any] | None:
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    return claims if isinstance(claims, dict) and claims else None


def _expiry(claims: dict[str, Any]) -> float | None:
    """NumericDate `exp` claim, or None when absent or not a number."""
    value = claims.get("exp")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value if math.isfinite(value) and value > 0 else None


class TokenClaimValidator:
    """Validates the claims of a Cognito ID/access token pair."""

    def __init__(self, issuer: str, clock: Callable[[], float] = time.time) -> None:
        """
        Initialize validator for one user pool.

        Args:
            issuer: Expected `iss` of both tokens
            clock: Source of the current epoch time
        """
        self._issuer = issuer
        self._clock = clock

    def validate(self, id_token: str | None, access_token: str | None) -> TokenClaims:
        """
        Validate a token pair and return the caller's identity.

        Args:
            id_token: Cognito ID token
            access_token: Cognito access token

        Returns:
            TokenClaims: User id (ID token `sub`) and expiries

        Raises:
            TokenValidationError: Missing, undecodable, expired or foreign tokens
        """
        if not id_token or not access_token:
            logger.warning(
                "Missing tokens",
                extra={"has_id_token": bool(id_token), "has_access_token": bool(access_token)},
            )
            raise TokenValidationError(MISSING_TOKENS)

        id_claims = _decode(id_token)
        access_claims = _decode(access_token)
        if id_claims is None or access_claims is None:
            logger.warning(
                "Undecodable tokens",
                extra={
                    "id_token_decoded": id_claims is not None,
                    "access_token_decoded": access_claims is not None,
                },
            )
            raise TokenValidationError(INVALID_TOKENS)

        now = self._clock()
        subject = id_claims.get("sub")
        id_exp = _expiry(id_claims)
        access_exp = _expiry(access_claims)
        if (
            not subject
            or not isinstance(subject, str)
            or id_exp is None
            or access_exp is None
            or id_exp < now
            or access_exp < now
        ):
            logger.warning(
                "Tokens expired or incomplete",
                extra={
                    "has_sub": bool(subject),
                    "id_token_exp": str(id_claims.get("exp")),
                    "access_token_exp": str(access_claims.get("exp")),
                    "now": now,
                },
            )
            raise TokenValidationError(EXPIRED_TOKENS)

        if id_claims.get("iss") != self._issuer or access_claims.get("iss") != self._issuer:
            logger.warning(
                "Token issuer mismatch",
                extra={
                    "expected_issuer": self._issuer,
                    "id_token_issuer": id_claims.get("iss"),
                    "access_token_issuer": access_claims.get("iss"),
                },
            )
            raise TokenValidationError(INVALID_ISSUER)

        email = id_claims.get("email")
        return TokenClaims(
            user_id=subject,
            email=email if isinstance(email, str) else None,
            id_token_exp=id_exp,
            access_token_exp=access_exp,
        )

    def validate_headers(self, headers: Mapping[str, Any] | None) -> TokenClaims:
        """
        Extract the token pair from request headers and validate it.

        Args:
            headers: Request headers

        Returns:
            TokenClaims: Validated identity

        Raises:
            ValidationError: Headers could not be read
            TokenValidationError: Token validation failed
        """
        id_token, access_token = extract_tokens(headers)
        return self.validate(id_token, access_token)

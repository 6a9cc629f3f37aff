"""
Cognito ID token signature verification.

Used by the WebSocket authorizer, which (unlike the HTTP functions) does
verify signatures: the key set is downloaded from the user pool once per
process and every token is checked for signature, issuer, audience and
token use.

Dependencies: python-jose, requests, tenacity
System role: Cryptographic verification of Cognito ID tokens
"""

import logging
from typing import Any

import requests
from jose import jwt
from jose.exceptions import JWTError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from backend.core.exceptions import TokenValidationError

logger = logging.getLogger(__name__)


class CognitoJwtVerifier:
    """Verifies RS256 ID tokens issued by one Cognito user pool."""

    def __init__(
        self,
        issuer: str,
        client_id: str,
        jwks_url: str | None = None,
        token_use: str = "id",
        timeout: float = 5.0,
    ) -> None:
        """
        Initialize verifier.

        Args:
            issuer: User pool issuer URL
            client_id: App client ID expected in the `aud` claim
            jwks_url: Key set URL (defaults to the issuer's well-known path)
            token_use: Expected `token_use` claim
            timeout: HTTP timeout for the key set download in seconds
        """
        self._issuer = issuer
        self._client_id = client_id
        self._jwks_url = jwks_url or f"{issuer}/.well-known/jwks.json"
        self._token_use = token_use
        self._timeout = timeout
        self._jwks: dict[str, Any] | None = None

    @retry(
        retry=retry_if_exception_type(requests.RequestException),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, max=2),
        reraise=True,
    )
    def _fetch_jwks(self) -> dict[str, Any]:
        response = requests.get(self._jwks_url, timeout=self._timeout)
        response.raise_for_status()
        return response.json()

    @property
    def jwks(self) -> dict[str, Any]:
        """User pool key set, downloaded on first use."""
        if self._jwks is None:
            logger.info("Fetching JWKS", extra={"jwks_url": self._jwks_url})
            self._jwks = self._fetch_jwks()
        return self._jwks

    def verify(self, token: str) -> dict[str, Any]:
        """
        Verify a token and return its claims.

        Args:
            token: Encoded JWT

        Returns:
            dict: Verified claims

        Raises:
            TokenValidationError: Signature, issuer, audience, expiry or token use invalid
        """
        if not token:
            raise TokenValidationError("No token provided")

        try:
            claims = jwt.decode(
                token,
                self.jwks,
                algorithms=["RS256"],
                audience=self._client_id,
                issuer=self._issuer,
                options={"verify_at_hash": False},
            )
        except JWTError as e:
            raise TokenValidationError(f"Token verification failed: {e}") from e

        if claims.get("token_use") != self._token_use:
            raise TokenValidationError(
                f"Unexpected token use: {claims.get('token_use')}",
                details={"expected": self._token_use},
            )
        return claims

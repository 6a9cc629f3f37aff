"""
Token validation.

Exports: TokenClaimValidator, CognitoJwtVerifier, extract_tokens
"""

from .jwks_verifier import CognitoJwtVerifier
from .token_claims import TokenClaimValidator, extract_tokens

__all__ = ["CognitoJwtVerifier", "TokenClaimValidator", "extract_tokens"]

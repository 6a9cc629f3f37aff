"""
Core business logic module.

Contains the exception hierarchy, shared token validation and the energy
aggregation and CSV routines. Nothing here talks to AWS.
"""

from backend.core.exceptions import (
    AuthServiceError,
    ConfigurationError,
    EnergyMonitorException,
    MethodNotAllowedError,
    NotFoundError,
    TokenValidationError,
    ValidationError,
)

__all__ = [
    "AuthServiceError",
    "ConfigurationError",
    "EnergyMonitorException",
    "MethodNotAllowedError",
    "NotFoundError",
    "TokenValidationError",
    "ValidationError",
]

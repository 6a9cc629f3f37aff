"""
Common response models.

Message envelope shared by the HTTP functions.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class MessageResponse(BaseModel):
    """Plain message response, optionally carrying data."""

    message: str
    data: Any | None = None


class ErrorResponse(BaseModel):
    """Error response schema."""

    message: str = Field(description="Error message")

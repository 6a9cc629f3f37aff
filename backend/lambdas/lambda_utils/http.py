"""
API Gateway proxy event and response helpers.

Normalises REST (payload v1) and HTTP API (payload v2) events into one
request view and builds proxy responses with CORS headers.

Dependencies: backend.core.exceptions
System role: HTTP adapter shared by the API-facing functions
"""

import base64
import json
import logging
from dataclasses import dataclass, field
from http.cookies import CookieError, SimpleCookie
from typing import Any

from backend.core.exceptions import EnergyMonitorException, ValidationError
from backend.models.common import ErrorResponse, MessageResponse

logger = logging.getLogger(__name__)


def cors_headers(methods: str, allow_headers: str = "Content-Type", credentials: bool = True) -> dict[str, str]:
    """
    CORS headers for browser callers.

    Args:
        methods: Comma-separated allowed methods
        allow_headers: Comma-separated allowed request headers
        credentials: Include Access-Control-Allow-Credentials

    Returns:
        dict: Response headers
    """
    headers = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": methods,
        "Access-Control-Allow-Headers": allow_headers,
    }
    if credentials:
        headers["Access-Control-Allow-Credentials"] = "true"
    return headers


def json_response(
    status_code: int,
    body: Any,
    headers: dict[str, str] | None = None,
    cookies: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build a proxy response with a JSON body.

    Args:
        status_code: HTTP status
        body: JSON-serialisable body (pydantic models are dumped)
        headers: Response headers
        cookies: Set-Cookie values

    Returns:
        dict: API Gateway proxy response
    """
    if hasattr(body, "model_dump"):
        body = body.model_dump(exclude_none=True)
    response: dict[str, Any] = {
        "statusCode": status_code,
        "headers": dict(headers or {}),
        "body": json.dumps(body, default=str),
    }
    if cookies:
        # v1 payloads only honour one Set-Cookie header; v2 reads `cookies`
        response["headers"]["Set-Cookie"] = cookies[0]
        response["multiValueHeaders"] = {"Set-Cookie": cookies}
        response["cookies"] = cookies
    return response


def message_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
    data: Any = None,
) -> dict[str, Any]:
    """Proxy response carrying `{"message": ..., "data": ...}`."""
    return json_response(status_code, MessageResponse(message=message, data=data), headers)


def error_response(error: EnergyMonitorException, headers: dict[str, str] | None = None) -> dict[str, Any]:
    """Proxy response for a domain exception."""
    return json_response(error.status_code, ErrorResponse(message=error.message), headers)


def empty_response(headers: dict[str, str] | None = None) -> dict[str, Any]:
    """200 with empty body, used for CORS preflight."""
    return {"statusCode": 200, "headers": dict(headers or {}), "body": ""}


@dataclass
class ApiRequest:
    """Version-independent view of an API Gateway proxy event."""

    method: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    query: dict[str, str] = field(default_factory=dict)
    raw_body: str | None = None
    cookies: dict[str, str] = field(default_factory=dict)
    request_context: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_event(cls, event: dict[str, Any]) -> "ApiRequest":
        """
        Build a request from a v1 or v2 proxy event.

        Args:
            event: Lambda event

        Returns:
            ApiRequest: Normalised request

        Raises:
            ValidationError: Headers are not an object
        """
        context = event.get("requestContext") or {}
        http_context = context.get("http")
        if http_context:
            method = http_context.get("method", "")
            path = event.get("rawPath") or http_context.get("path", "")
        else:
            method = event.get("httpMethod", "")
            path = event.get("path", "")

        raw_headers = event.get("headers") or {}
        if not isinstance(raw_headers, dict):
            raise ValidationError("Invalid headers")
        headers = {str(key).lower(): value for key, value in raw_headers.items() if value is not None}

        body = event.get("body")
        if body and event.get("isBase64Encoded"):
            body = base64.b64decode(body).decode("utf-8")

        cookie_values = list(event.get("cookies") or [])
        if headers.get("cookie"):
            cookie_values.append(headers["cookie"])

        return cls(
            method=method.upper(),
            path=path,
            headers=headers,
            query=dict(event.get("queryStringParameters") or {}),
            raw_body=body,
            cookies=_parse_cookies(cookie_values),
            request_context=context,
        )

    def json_body(self) -> dict[str, Any]:
        """
        Parse the body as a JSON object (empty body gives {}).

        Raises:
            ValidationError: Body is not a JSON object
        """
        if not self.raw_body:
            return {}
        try:
            body = json.loads(self.raw_body)
        except json.JSONDecodeError as e:
            raise ValidationError("Invalid JSON body") from e
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return body

    def path_endswith(self, suffix: str) -> bool:
        """True when the path ends with suffix, ignoring a trailing slash."""
        return self.path.rstrip("/").endswith(suffix)


def _parse_cookies(values: list[str]) -> dict[str, str]:
    cookies: dict[str, str] = {}
    for value in values:
        jar = SimpleCookie()
        try:
            jar.load(value)
        except CookieError:
            logger.warning("Ignoring malformed cookie header")
            continue
        cookies.update({name: morsel.value for name, morsel in jar.items()})
    return cookies

"""Authorised JSON API client.

Thin wrapper over ``httpx.AsyncClient`` that attaches a bearer token,
defaults to JSON bodies, logs traffic at debug level and turns error
responses into ``ApiError``. No retries.
"""

import json
from typing import Any

import httpx
import structlog

from sitekit.core.constants import DEFAULT_API_ERROR_MESSAGE
from sitekit.core.errors import ApiError


logger = structlog.get_logger()

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

OCTET_STREAM_HEADERS = {
    "Accept": "application/octet-stream",
    "Content-Type": "application/octet-stream",
}


def _error_message(body: str | None) -> str:
    """Pick the ``message`` field of a JSON error body, else the raw body."""
    if not body:
        return DEFAULT_API_ERROR_MESSAGE
    try:
        message = json.loads(body).get("message")
    except (ValueError, AttributeError):
        return body
    return message if message is not None else body


class ApiClient:
    """HTTP client for an upstream API on behalf of an authenticated user."""

    def __init__(
        self,
        access_token: str,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        log: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            access_token: Bearer token for the authenticated user
            base_url: Optional base URL that relative paths resolve against
            transport: Optional httpx transport (tests pass a MockTransport)
            log: Optional structlog logger
        """
        self.access_token = access_token
        self.base_url = base_url or ""
        self.transport = transport
        self._log = log or logger

    async def get(self, url: str, **options: Any) -> Any:
        return await self._json_request("GET", url, **options)

    async def post(self, url: str, body: Any = None, **options: Any) -> Any:
        """POST ``body`` as JSON; dicts passed as ``data=`` are form-encoded."""
        return await self._json_request("POST", url, json=body, **options)

    async def put(self, url: str, body: Any = None, **options: Any) -> Any:
        return await self._json_request("PUT", url, json=body, **options)

    async def patch(self, url: str, body: Any, **options: Any) -> Any:
        return await self._json_request("PATCH", url, json=body, **options)

    async def delete(self, url: str, **options: Any) -> Any:
        return await self._json_request("DELETE", url, **options)

    async def head(self, url: str, **options: Any) -> httpx.Response:
        return await self._authorised_request("HEAD", url, **options)

    async def download(self, url: str, **options: Any) -> httpx.Response:
        headers = {**OCTET_STREAM_HEADERS, **options.pop("headers", {})}
        return await self._authorised_request("GET", url, headers=headers, **options)

    async def upload(
        self, url: str, files: dict[str, Any], **options: Any
    ) -> httpx.Response:
        """POST multipart ``files``; httpx sets the multipart content type."""
        return await self._authorised_request("POST", url, files=files, **options)

    async def _json_request(self, method: str, url: str, **options: Any) -> Any:
        if options.get("data") is not None or options.get("json") is None:
            options.pop("json", None)
        headers = {**JSON_HEADERS, **options.pop("headers", {})}
        if options.get("data") is not None:
            headers.pop("Content-Type", None)

        response = await self._authorised_request(
            method, url, headers=headers, **options
        )
        if response.status_code == httpx.codes.NO_CONTENT:
            return None

        payload = response.json()
        self._log.debug("api_response_body", json=payload)
        return payload

    async def _authorised_request(
        self, method: str, url: str, **options: Any
    ) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            **options.pop("headers", {}),
        }

        self._log.debug("api_request", method=method, url=url, headers=headers)

        async with httpx.AsyncClient(
            base_url=self.base_url, transport=self.transport
        ) as client:
            response = await client.request(method, url, headers=headers, **options)
            await response.aread()

        self._log.debug(
            "api_response",
            url=url,
            status=response.status_code,
            headers=dict(response.headers),
        )

        if response.is_success:
            return response

        body = response.text
        self._log.error(
            "api_request_failed",
            body=body,
            method=method,
            status=response.status_code,
            status_text=response.reason_phrase,
            url=url,
        )
        raise ApiError(
            _error_message(body),
            status_code=response.status_code,
            details={"url": url, "method": method},
        )

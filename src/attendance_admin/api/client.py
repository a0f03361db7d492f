#!/usr/bin/env python3
"""Generic HTTP Client for the Attendance Platform Admin API.

This module provides a reusable HTTP client that handles the common
concerns of talking to the platform:

    - Connection pooling via shared aiohttp session
    - JSON request/response handling (empty bodies are allowed)
    - Structured {code, message} error bodies mapped to typed exceptions
    - Retry with exponential backoff for reads on 5xx and network errors

Design Philosophy:
    This client knows HOW to talk to the platform, but not WHAT to fetch.
    Resource endpoints live in AdminApi, which composes this client.

    Mutations (POST/PATCH/DELETE) are sent exactly once.

Usage:
    async with AdminApiClient() as client:
        sites = await client.get("/api/admin/sites")
        await client.post(
            "/api/admin/manager-site-assignments",
            json_body={"managerUserId": 7, "siteId": 3},
        )
"""
import asyncio
import json
import logging
import os
from typing import Any, Optional

import aiohttp
from dotenv import load_dotenv

from .exceptions import (
    APIError,
    ConfigurationError,
    ConnectionError,
    NetworkError,
    NotFoundError,
    ServerError,
    TimeoutError,
    UNEXPECTED_ERROR_FORMAT,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 3
MAX_BACKOFF_SECONDS = 30.0


class AdminApiClient:
    """Async HTTP client for the attendance platform API.

    Use as an async context manager so the session is always closed:

        async with AdminApiClient(base_url="http://localhost:8080") as client:
            data = await client.get("/api/admin/employees")

    Attributes:
        base_url: Base URL for API requests, without trailing slash
        timeout: Total request timeout in seconds
        max_retries: Attempts for GET requests
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL. Falls back to ATTENDANCE_API_BASE_URL.
            timeout: Request timeout. Falls back to ATTENDANCE_API_TIMEOUT.
            max_retries: GET attempts. Falls back to ATTENDANCE_API_MAX_RETRIES.

        Raises:
            ConfigurationError: If no base URL is configured or a numeric
                setting cannot be parsed.
        """
        self.base_url = (base_url or os.getenv("ATTENDANCE_API_BASE_URL", "")).rstrip("/")
        if not self.base_url:
            raise ConfigurationError(
                "Base URL is required. Provide base_url parameter or set "
                "ATTENDANCE_API_BASE_URL environment variable.",
                missing_keys=["ATTENDANCE_API_BASE_URL"],
            )

        try:
            self.timeout = float(
                timeout if timeout is not None
                else os.getenv("ATTENDANCE_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
            )
            self.max_retries = int(
                max_retries if max_retries is not None
                else os.getenv("ATTENDANCE_API_MAX_RETRIES", DEFAULT_MAX_RETRIES)
            )
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid numeric client setting: {e}",
                cause=e,
            )
        self.max_retries = max(1, self.max_retries)

        # Session is created in __aenter__, closed in __aexit__
        self._session: Optional[aiohttp.ClientSession] = None

    # ----------------------------------------
    # Context Manager Protocol
    # ----------------------------------------

    async def __aenter__(self) -> "AdminApiClient":
        """Enter async context: create the HTTP session."""
        self._session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=10, limit_per_host=10),
            timeout=aiohttp.ClientTimeout(total=self.timeout, connect=10),
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context: close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None

    # ----------------------------------------
    # Low-Level Request Methods
    # ----------------------------------------

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_body: Optional[dict] = None,
    ) -> Any:
        """Make a single HTTP request (no retry logic).

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: API endpoint path (e.g., "/api/admin/sites")
            params: Query parameters
            json_body: JSON request body

        Returns:
            Parsed JSON body, or None when the response has no JSON body

        Raises:
            APIError: If response status is not 2xx
            RuntimeError: If called outside of async context manager
            ConnectionError: If connection to server fails
            TimeoutError: If request times out
        """
        if not self._session:
            raise RuntimeError(
                "AdminApiClient must be used as async context manager: "
                "async with AdminApiClient(...) as client:"
            )

        url = f"{self.base_url}{endpoint}"

        try:
            async with self._session.request(
                method=method,
                url=url,
                headers={"Accept": "application/json"},
                params=params,
                json=json_body,
            ) as response:
                body = await response.text(errors="replace")

                if response.status >= 400:
                    raise self._create_api_error(
                        status=response.status,
                        method=method,
                        endpoint=endpoint,
                        response_body=body,
                    )

                if "application/json" not in response.headers.get("Content-Type", ""):
                    return None
                return self._parse_json(body)

        except aiohttp.ClientConnectionError as e:
            raise ConnectionError(
                f"Failed to connect to {self.base_url}",
                host=self.base_url,
                cause=e,
            )

        except asyncio.TimeoutError as e:
            raise TimeoutError(
                f"Request to {endpoint} timed out",
                timeout_seconds=self.timeout,
                cause=e,
            )

        except aiohttp.ClientError as e:
            raise NetworkError(
                f"Network error during {method} {endpoint}: {e}",
                cause=e,
            )

    @staticmethod
    def _parse_json(body: str) -> Any:
        """Parse a response body, treating empty or malformed JSON as no body."""
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError:
            return None

    def _create_api_error(
        self,
        status: int,
        method: str,
        endpoint: str,
        response_body: str,
    ) -> APIError:
        """Create the APIError subclass for a failed response.

        A structured body keeps the server's code and message. Anything else
        becomes UNEXPECTED_ERROR_FORMAT with a status-only message.
        """
        payload = self._parse_json(response_body)
        if (
            isinstance(payload, dict)
            and isinstance(payload.get("code"), str)
            and isinstance(payload.get("message"), str)
        ):
            code = payload["code"]
            message = payload["message"]
        else:
            code = UNEXPECTED_ERROR_FORMAT
            message = f"Request failed ({status})"

        kwargs = dict(
            status_code=status,
            code=code,
            endpoint=endpoint,
            method=method,
            response_body=response_body,
        )
        if status == 404:
            return NotFoundError(message, **kwargs)
        if status >= 500:
            return ServerError(message, **kwargs)
        return APIError(message, **kwargs)

    async def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
    ) -> Any:
        """Make a read request with exponential backoff on transient failures.

        - 5xx Server Errors: Exponential backoff retry
        - Network errors: Exponential backoff retry
        - Any other APIError: fail immediately
        """
        backoff_delay = 1.0

        for attempt in range(1, self.max_retries + 1):
            try:
                return await self._request(method, endpoint, params)

            except (ServerError, NetworkError) as e:
                if attempt >= self.max_retries:
                    raise
                logger.warning(
                    f"{method} {endpoint} failed: {e}. Retrying in {backoff_delay}s "
                    f"(attempt {attempt}/{self.max_retries})"
                )
                await asyncio.sleep(backoff_delay)
                backoff_delay = min(backoff_delay * 2, MAX_BACKOFF_SECONDS)

        raise APIError(
            "Request failed after all retries",
            status_code=0,
            endpoint=endpoint,
            method=method,
        )

    # ----------------------------------------
    # High-Level Request Methods
    # ----------------------------------------

    async def get(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """Make a GET request (retried on transient failures)."""
        return await self._request_with_retry("GET", endpoint, params=params)

    async def post(
        self,
        endpoint: str,
        json_body: dict,
        params: Optional[dict] = None,
    ) -> Any:
        """Make a POST request (sent once)."""
        return await self._request("POST", endpoint, params=params, json_body=json_body)

    async def patch(
        self,
        endpoint: str,
        json_body: dict,
        params: Optional[dict] = None,
    ) -> Any:
        """Make a PATCH request (sent once)."""
        return await self._request("PATCH", endpoint, params=params, json_body=json_body)

    async def delete(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """Make a DELETE request (sent once)."""
        return await self._request("DELETE", endpoint, params=params)

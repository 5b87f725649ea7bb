"""Cloudflare GraphQL Analytics API client for cfreport."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from cfreport._constants import DEFAULT_HTTP_TIMEOUT_SECONDS, GRAPHQL_ENDPOINT

logger = logging.getLogger(__name__)

# (query, variables) -> response ``data`` payload
Fetcher = Callable[[str, dict[str, Any]], Any]


class AnalyticsApiError(Exception):
    """Base exception for analytics API errors."""

    pass


class AnalyticsConnectionError(AnalyticsApiError):
    """Raised when the API endpoint cannot be reached or times out."""

    pass


class AnalyticsHttpError(AnalyticsApiError):
    """Raised when the API answers with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class AnalyticsQueryError(AnalyticsApiError):
    """Raised when the query executed but the response lists errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.errors = errors or []


class AnalyticsEmptyResponseError(AnalyticsApiError):
    """Raised when the response carries no ``data`` payload."""

    pass


class AnalyticsClient:
    """Minimal GraphQL client for the Cloudflare Analytics API.

    The API token is sent as a bearer credential and never included in
    exception messages or log records.
    """

    def __init__(
        self,
        api_token: str,
        endpoint: str = GRAPHQL_ENDPOINT,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            api_token: Cloudflare API token with Analytics read permission
            endpoint: GraphQL endpoint URL
            timeout: Request timeout in seconds (ignored when *http_client* is given)
            http_client: Pre-built httpx client, e.g. one with a mock transport
        """
        self.endpoint = endpoint
        self._api_token = api_token
        self._client = http_client or httpx.Client(timeout=timeout)

    def __repr__(self) -> str:
        return f"AnalyticsClient(endpoint={self.endpoint!r})"

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> AnalyticsClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def query(self, query: str, variables: dict[str, Any] | None = None) -> Any:
        """Execute a GraphQL query and return its ``data`` payload.

        Raises:
            AnalyticsConnectionError: If the request could not be completed
            AnalyticsHttpError: On a non-2xx status
            AnalyticsQueryError: If the response lists one or more errors
            AnalyticsEmptyResponseError: If the response has no data payload
        """
        headers = {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }
        payload = {"query": query, "variables": variables or {}}

        try:
            resp = self._client.post(self.endpoint, json=payload, headers=headers)
        except httpx.TimeoutException:
            raise AnalyticsConnectionError(  # noqa: B904
                f"Cloudflare API request timed out: {self.endpoint}"
            )
        except httpx.HTTPError as e:
            raise AnalyticsConnectionError(  # noqa: B904
                f"Cannot reach Cloudflare API at {self.endpoint}: {type(e).__name__}"
            )

        if not resp.is_success:
            raise AnalyticsHttpError(
                f"Cloudflare API HTTP {resp.status_code}: {resp.reason_phrase}",
                status_code=resp.status_code,
            )

        try:
            body = resp.json()
        except ValueError:
            raise AnalyticsEmptyResponseError(  # noqa: B904
                "Cloudflare API returned a non-JSON response"
            )
        if not isinstance(body, dict):
            raise AnalyticsEmptyResponseError("Empty response from Cloudflare API")

        errors = body.get("errors") or []
        if not isinstance(errors, list):
            errors = [errors]
        if errors:
            messages = [
                str(e.get("message", "Unknown error")) if isinstance(e, dict) else str(e)
                for e in errors
            ]
            logger.debug("GraphQL query returned %d error(s)", len(errors))
            raise AnalyticsQueryError("; ".join(messages), errors=errors)

        data = body.get("data")
        if not data:
            raise AnalyticsEmptyResponseError("Empty response from Cloudflare API")

        return data


def create_fetcher(
    api_token: str,
    endpoint: str = GRAPHQL_ENDPOINT,
    timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
) -> Fetcher:
    """Return a fetch callable bound to *api_token*.

    Each call opens and closes its own HTTP client, so the fetcher holds no
    connection state between reports.
    """

    def fetch(query: str, variables: dict[str, Any]) -> Any:
        with AnalyticsClient(api_token, endpoint=endpoint, timeout=timeout) as client:
            return client.query(query, variables)

    return fetch

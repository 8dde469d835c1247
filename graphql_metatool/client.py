"""
Async GraphQL client for the single configured endpoint.

Requests are POSTed as ``{"query": ..., "variables": ...}`` JSON. The
``data`` member of the response is returned; transport failures, HTTP
error statuses and GraphQL ``errors`` raise :class:`GraphQLRequestError`.
"""

from typing import Any, Dict, Optional

import httpx

from .config import Settings
from .exceptions import GraphQLRequestError
from .logging_config import get_logger

logger = get_logger("client")


class GraphQLClient:
    """Minimal GraphQL-over-HTTP client."""

    def __init__(
        self,
        endpoint: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            endpoint: GraphQL endpoint URL
            headers: Headers sent with every request
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = endpoint
        self.headers = dict(headers or {})
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphQLClient":
        return cls(
            settings.graphql_endpoint,
            headers=settings.headers,
            timeout=settings.request_timeout,
        )

    async def request(
        self, query: str, variables: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Execute a query or mutation and return its ``data``.

        Args:
            query: GraphQL document
            variables: Variable values, omitted from the payload when None

        Raises:
            GraphQLRequestError: On transport, HTTP or GraphQL errors
        """
        payload: Dict[str, Any] = {"query": query}
        if variables is not None:
            payload["variables"] = variables

        try:
            async with httpx.AsyncClient(
                headers=self.headers, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"GraphQL transport error for {self.endpoint}: {e}")
            raise GraphQLRequestError(
                str(e) or f"Request to {self.endpoint} failed"
            ) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        errors = body.get("errors") if isinstance(body, dict) else None
        if errors:
            raise GraphQLRequestError(
                _format_errors(errors), errors=errors, status_code=response.status_code
            )

        if response.is_error:
            raise GraphQLRequestError(
                f"GraphQL request failed with HTTP {response.status_code}: "
                f"{response.reason_phrase}",
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            raise GraphQLRequestError(
                "GraphQL endpoint returned a non-JSON response",
                status_code=response.status_code,
            )

        return body.get("data")


def _format_errors(errors: Any) -> str:
    if not isinstance(errors, list):
        return str(errors)
    messages = []
    for error in errors:
        if isinstance(error, dict) and error.get("message"):
            messages.append(str(error["message"]))
        else:
            messages.append(str(error))
    return "; ".join(messages)

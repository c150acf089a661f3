"""ModeFilter API client.

Async HTTP client used by widgets (fetch) and host servers (embed).
Failures never raise: they come back as an ``APIResponse`` carrying the
parsed error envelope.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


@dataclass
class APIError:
    """Parsed error envelope (or a synthesized transport failure)."""

    error_code: str
    message: str
    status_code: int
    details: list[Any] = field(default_factory=list)
    request_id: str | None = None


@dataclass
class APIResponse:
    """Outcome of one API call."""

    success: bool
    data: dict[str, Any] | None = None
    error: APIError | None = None


class ModeFilterAPIClient:
    """HTTP client for the ModeFilter REST API.

    The fetch endpoint is public and guarded by the widget token; the
    embed endpoints need the API key, so ``api_key`` is only required
    for server-side callers.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: ModeFilter API base URL.
            api_key: API key for the embed endpoints.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
        request_id: str | None = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            json: Request body as JSON.
            request_id: Optional correlation id sent as X-Request-ID.

        Returns:
            APIResponse with success status and data or error.
        """
        client = await self._get_client()

        headers = {}
        if request_id:
            headers["X-Request-ID"] = request_id

        try:
            logger.debug(
                "Making API request",
                method=method,
                path=path,
                has_body=json is not None,
            )

            response = await client.request(
                method=method,
                url=path,
                json=json,
                headers=headers,
            )

            if response.status_code >= 400:
                try:
                    error_data = response.json()
                except ValueError:
                    error_data = {}
                return APIResponse(
                    success=False,
                    error=APIError(
                        error_code=error_data.get("error_code", "UNKNOWN_ERROR"),
                        message=error_data.get("message", "Unknown error"),
                        status_code=response.status_code,
                        details=error_data.get("details", []),
                        request_id=error_data.get("request_id"),
                    ),
                )

            return APIResponse(success=True, data=response.json())

        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="TIMEOUT",
                    message=f"Request timed out: {path}",
                    status_code=504,
                ),
            )
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="REQUEST_ERROR",
                    message=f"Request failed: {str(e)}",
                    status_code=500,
                ),
            )

    # =========================================================================
    # Listing Endpoints
    # =========================================================================

    async def fetch_products(
        self,
        body: dict[str, Any],
        request_id: str | None = None,
    ) -> APIResponse:
        """Fetch one page of a widget.

        Args:
            body: Fetch request body (widget attributes plus page,
                selections and the initial-render flag).
            request_id: Optional correlation id.

        Returns:
            APIResponse with the rendered page.
        """
        return await self._request(
            method="POST",
            path="/products/fetch",
            json=body,
            request_id=request_id,
        )

    async def embed(
        self,
        attributes: dict[str, Any],
        catalog: bool = False,
    ) -> APIResponse:
        """Render a widget shell.

        Args:
            attributes: Widget attributes from the host page.
            catalog: Use the catalog-only variant.

        Returns:
            APIResponse with shell HTML, widget attributes and token.
        """
        return await self._request(
            method="POST",
            path="/embed/catalog" if catalog else "/embed",
            json=attributes,
        )

    # =========================================================================
    # Health Endpoints
    # =========================================================================

    async def health_check(self) -> APIResponse:
        """Check API health.

        Returns:
            APIResponse with health status.
        """
        return await self._request(method="GET", path="/health")

"""Orchestrator REST API client.

Async httpx implementation of ``RemoteSource`` against the endpoints the
network dashboard reads:

- ``GET /magma/v1/events/{network_id}/about/count``
- ``GET /magma/v1/networks/{network_id}/prometheus/query_range``
"""

from __future__ import annotations

import ssl
from typing import TYPE_CHECKING, Any

import httpx

from ...core.time import format_utc_iso8601
from ...observability import get_logger
from .source import MagmaAPIError, MagmaConnectionError, MagmaError, MagmaTimeoutError

if TYPE_CHECKING:
    from datetime import datetime

    from ...config.settings import Settings

__all__ = ["MagmaAPIClient"]

log = get_logger("magma")


class MagmaAPIClient:
    """Async client for one orchestrator network.

    Use as an async context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        base_url: str,
        network_id: str,
        *,
        timeout: float = 30.0,
        verify: ssl.SSLContext | bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Parameters
        ----------
        base_url
            API base URL, e.g. ``https://api.magma.local``
        network_id
            Network whose events and metrics are queried
        timeout
            Request timeout in seconds
        verify
            TLS verification: ``True``/``False`` or an SSL context carrying
            the CA bundle and client certificate
        transport
            Custom httpx transport (tests use ``httpx.MockTransport``)
        """
        if not network_id:
            raise ValueError("network_id is required")

        self.base_url = base_url.rstrip("/")
        self.network_id = network_id
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            verify=verify,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(cls, settings: Settings, network_id: str | None = None) -> MagmaAPIClient:
        """Build a client from loaded settings.

        Raises
        ------
        ValueError
            If no network id is given and none is configured
        """
        network = network_id or settings.network_id
        if not network:
            raise ValueError("No network id given and ALERTCHART_NETWORK_ID is not set")

        verify: ssl.SSLContext | bool = True
        if settings.ca_bundle or settings.client_cert:
            verify = ssl.create_default_context(cafile=str(settings.ca_bundle) if settings.ca_bundle else None)
            if settings.client_cert:
                verify.load_cert_chain(*settings.client_cert)

        return cls(settings.api_url, network, timeout=settings.timeout, verify=verify)

    async def __aenter__(self) -> MagmaAPIClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, str]) -> Any:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise MagmaTimeoutError(f"Request to {path} timed out after {self.timeout}s") from e
        except httpx.ConnectError as e:
            raise MagmaConnectionError(f"Orchestrator not reachable: {e}") from e
        except httpx.HTTPError as e:
            raise MagmaError(f"HTTP error on {path}: {e}") from e

        if response.status_code >= 400:
            error_msg = response.text
            try:
                error_msg = response.json().get("message", error_msg)
            except (ValueError, AttributeError):
                pass
            raise MagmaAPIError(
                f"Orchestrator API error ({response.status_code}) on {path}: {error_msg}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MagmaAPIError(f"Invalid JSON from {path}", status_code=response.status_code) from e

    async def count_in_range(self, start: datetime, end: datetime) -> float:
        """Count network events in ``[start, end)``."""
        path = f"/magma/v1/events/{self.network_id}/about/count"
        body = await self._get(
            path,
            {"start": format_utc_iso8601(start), "end": format_utc_iso8601(end)},
        )

        if isinstance(body, bool) or not isinstance(body, (int, float)):
            raise MagmaAPIError(f"Expected a number from {path}, got {type(body).__name__}")

        log.debug("Event count fetched", start=str(start), end=str(end), count=body)
        return body

    async def query_range(
        self,
        start: datetime,
        end: datetime,
        step: str,
        query: str,
    ) -> dict[str, Any]:
        """Run a Prometheus range query scoped to the network."""
        path = f"/magma/v1/networks/{self.network_id}/prometheus/query_range"
        body = await self._get(
            path,
            {
                "query": query,
                "start": format_utc_iso8601(start),
                "end": format_utc_iso8601(end),
                "step": step,
            },
        )

        if not isinstance(body, dict):
            raise MagmaAPIError(f"Expected an object from {path}, got {type(body).__name__}")

        return body

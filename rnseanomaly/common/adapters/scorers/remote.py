"""
Remote Scorer Adapter - HTTP client for a hosted scoring endpoint.
"""

import logging
from typing import Iterable

import httpx
from pydantic import PrivateAttr

from rnseanomaly.common.dataclasses import ScorerConfig, TimeSeries
from rnseanomaly.common.exceptions import ScorerContractViolation, ScorerUnavailable
from rnseanomaly.common.interfaces.scorer import RawLine, Scorer

logger = logging.getLogger(__name__)


class RemoteScorer(Scorer):
    """
    Scorer adapter that calls an external scoring endpoint via HTTP.
    Configured via Pydantic model fields.

    The endpoint receives ``{seed, n, values, config}`` and answers either
    JSON ``{"lines": [...]}`` or newline-delimited JSON.
    """
    endpoint: str
    timeout: float = 30.0
    headers: dict[str, str] = {}

    _client: httpx.AsyncClient | None = PrivateAttr(default=None)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
            )
        return self._client

    async def run(self, seed: int, series: TimeSeries, config: ScorerConfig) -> Iterable[RawLine]:
        client = await self._get_client()

        payload = {
            "seed": seed,
            "n": len(series),
            "values": list(series.values),
            "config": {
                "threshold": config.threshold,
                "window": config.window,
                "smoothing": config.smoothing,
            },
        }

        try:
            response = await client.post(self.endpoint, json=payload)
        except httpx.TransportError as e:
            logger.warning(f"Scorer endpoint {self.endpoint} unreachable: {e}")
            raise ScorerUnavailable(f"Scorer endpoint unreachable: {e}") from e

        if response.status_code >= 500:
            raise ScorerUnavailable(f"Scorer endpoint answered {response.status_code}")
        if response.status_code >= 400:
            raise ScorerContractViolation(
                f"Scorer endpoint rejected the request with {response.status_code}"
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                data = response.json()
            except ValueError as e:
                raise ScorerContractViolation("Scorer endpoint returned invalid JSON") from e
            lines = data.get("lines") if isinstance(data, dict) else data
            if not isinstance(lines, list):
                raise ScorerContractViolation("Scorer response has no 'lines' list")
            return lines

        return response.text.splitlines()

    async def health_check(self) -> bool:
        """Check if the remote endpoint answers at all."""
        try:
            client = await self._get_client()
            response = await client.get(self.endpoint)
            return response.status_code < 500
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

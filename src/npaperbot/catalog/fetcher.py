"""HTTP client that downloads and decodes the full paper catalog.

The source is a JSON object mapping paper identifiers to records such as
``{"P1488R2": {"title": ..., "author": ..., "link": ...}}``.  Every fetch
returns a complete :class:`Catalog`; there are no incremental updates.
Transient transport failures are retried with tenacity before the fetch is
reported as a :class:`FetchError`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config.settings import settings
from ..core.exceptions import DecodeError, FetchError
from ..core.models import Document
from ..utils.logging import get_logger
from .store import Catalog

logger = get_logger(__name__)

USER_AGENT = "npaperbot/0.1.0"


class CatalogFetcher:
    """Fetch the catalog from ``source_address``."""

    def __init__(
        self,
        source_address: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.source_address = source_address or settings.papers_database_uri
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self.max_retries = max_retries if max_retries is not None else settings.fetch_max_retries
        self.client = client or httpx.AsyncClient(
            timeout=self.timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    async def _get_once(self) -> httpx.Response:
        # httpx applies its timeout to each network step; this bounds the whole attempt.
        try:
            return await asyncio.wait_for(self.client.get(self.source_address), self.timeout)
        except asyncio.TimeoutError as e:
            raise httpx.TimeoutException(f"No complete response within {self.timeout}s") from e

    async def _get(self) -> httpx.Response:
        retrying = retry(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=30),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        return await retrying(self._get_once)()

    async def fetch_payload(self) -> Any:
        """Download the source and return the decoded JSON document."""
        logger.debug("Fetching catalog", extra={"source": self.source_address})
        try:
            response = await self._get()
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Catalog source answered with HTTP {e.response.status_code}",
                source=self.source_address,
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"Cannot reach catalog source: {e!r}", source=self.source_address) from e

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Catalog payload is not valid JSON: {e}", source=self.source_address) from e

    def decode(self, payload: Any) -> Catalog:
        """Turn a decoded JSON payload into a catalog."""
        if not isinstance(payload, dict):
            raise DecodeError(
                f"Expected a JSON object of papers, got {type(payload).__name__}",
                source=self.source_address,
            )
        documents: Dict[str, Document] = {}
        for key, record in payload.items():
            if not isinstance(record, dict):
                raise DecodeError(f"Record {key!r} is not an object", source=self.source_address)
            try:
                documents[key] = Document.model_validate(record)
            except ValidationError as e:
                raise DecodeError(f"Record {key!r} is malformed: {e}", source=self.source_address) from e
        return Catalog.from_payload(documents)

    async def fetch(self) -> Catalog:
        """Fetch and decode the complete catalog."""
        return self.decode(await self.fetch_payload())

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "CatalogFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

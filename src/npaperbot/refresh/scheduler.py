"""Periodic refresh of the catalog store.

The scheduler fetches the whole catalog on a fixed period and swaps it
into the :class:`CatalogStore`.  Cycles never overlap: a cycle that is
still fetching when the next tick comes due simply delays that tick.  A
failed fetch leaves the previous catalog in place and is only logged.

Timing uses the ``schedule`` library with a private ``schedule.Scheduler``
instance that is polled from the event loop, so the refresh task runs
next to the chat transport in one asyncio loop.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import schedule

from ..catalog.fetcher import CatalogFetcher
from ..catalog.store import CatalogStore
from ..core.exceptions import DecodeError, FetchError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class RefreshState(Enum):
    """Phases of one refresh cycle."""
    IDLE = "idle"
    FETCHING = "fetching"
    REPLACING = "replacing"


class RefreshScheduler:
    """Keep a :class:`CatalogStore` in sync with the catalog source."""

    def __init__(
        self,
        store: CatalogStore,
        fetcher: CatalogFetcher,
        period: timedelta,
        poll_interval: float = 1.0,
    ) -> None:
        if period <= timedelta(0):
            raise ValueError("Refresh period must be positive")
        self.store = store
        self.fetcher = fetcher
        self.period = period
        self.poll_interval = poll_interval
        self.state = RefreshState.IDLE
        self.last_success: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self._cycle_lock = asyncio.Lock()
        self._stop_event = asyncio.Event()
        self._due = False
        self._timer = schedule.Scheduler()
        self._timer.every(period.total_seconds()).seconds.do(self._mark_due)

    def _mark_due(self) -> None:
        self._due = True

    async def run_once(self) -> bool:
        """Run one fetch-and-replace cycle.

        Returns True when the catalog was replaced.  Failures are logged and
        reported as False so the next cycle can try again; only cancellation
        propagates.
        """
        async with self._cycle_lock:
            self.state = RefreshState.FETCHING
            try:
                catalog = await self.fetcher.fetch()
            except (FetchError, DecodeError) as e:
                self.state = RefreshState.IDLE
                self.last_error = str(e)
                logger.error(
                    f"Catalog refresh failed: {e}",
                    extra={"error_type": type(e).__name__, "source": self.fetcher.source_address},
                )
                return False
            except Exception as e:
                self.state = RefreshState.IDLE
                self.last_error = repr(e)
                logger.exception(
                    "Unexpected error during catalog refresh",
                    extra={"source": self.fetcher.source_address},
                )
                return False
            except BaseException:
                self.state = RefreshState.IDLE
                raise

            self.state = RefreshState.REPLACING
            self.store.replace(catalog)
            self.state = RefreshState.IDLE
            self.last_success = datetime.now(timezone.utc)
            self.last_error = None
            logger.info(
                f"Catalog refreshed successfully. Catalog size: {len(catalog)}",
                extra={"catalog_size": len(catalog)},
            )
            return True

    async def run_forever(self) -> None:
        """Refresh immediately, then once per period until :meth:`stop` is called."""
        logger.info(
            "Starting catalog refresh scheduler",
            extra={"period_seconds": self.period.total_seconds()},
        )
        self._stop_event.clear()
        await self.run_once()
        while not self._stop_event.is_set():
            self._timer.run_pending()
            if self._due:
                self._due = False
                await self.run_once()
                continue
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.poll_interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Catalog refresh scheduler stopped")

    def stop(self) -> None:
        """Ask :meth:`run_forever` to return after the cycle in progress."""
        self._stop_event.set()

    @property
    def is_stopped(self) -> bool:
        return self._stop_event.is_set()

"""Catalog refresh scheduling.

The scheduler periodically downloads the full paper catalog and swaps it
into the shared :class:`~npaperbot.catalog.store.CatalogStore`.
"""

from .scheduler import RefreshScheduler, RefreshState  # noqa: F401

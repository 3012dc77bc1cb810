"""Paper catalog snapshots, search and download."""

from .store import Catalog, CatalogStore  # noqa: F401

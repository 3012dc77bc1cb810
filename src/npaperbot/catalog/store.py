"""In-memory catalog snapshots and the store that serves searches over them.

The store holds exactly one live :class:`Catalog`.  A catalog is never
modified after construction; a refresh builds a new one and swaps the
reference under a lock.  Readers take the reference once and then scan
that snapshot without holding the lock, so a search always sees a single
refresh cycle in full.
"""

import threading
import time
from types import MappingProxyType
from typing import Callable, Iterator, List, Mapping, Optional

import regex

from ..config.settings import settings
from ..core.exceptions import InvalidPattern
from ..core.models import Document, SearchResult
from ..utils.logging import get_logger

logger = get_logger(__name__)


class Catalog(Mapping[str, Document]):
    """Immutable identifier -> Document mapping."""

    def __init__(self, documents: Optional[Mapping[str, Document]] = None) -> None:
        self._documents = MappingProxyType(dict(documents or {}))

    @classmethod
    def from_payload(cls, documents: Mapping[str, Document]) -> "Catalog":
        """Build a catalog keyed by ``documents``, overwriting each identifier with its key."""
        return cls({key: document.with_identifier(key) for key, document in documents.items()})

    def __getitem__(self, identifier: str) -> Document:
        return self._documents[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"<Catalog documents={len(self)}>"


def compile_pattern(pattern: str) -> "regex.Pattern":
    """Compile a user pattern case-insensitively, raising InvalidPattern on failure."""
    try:
        return regex.compile(pattern, regex.IGNORECASE)
    except (regex.error, OverflowError, RecursionError) as e:
        _reject(pattern, str(e))
        raise InvalidPattern(pattern, str(e)) from e


def _reject(pattern: str, reason: str) -> None:
    logger.warning("Rejected search pattern", extra={"pattern": pattern, "error": reason})


class _Matcher:
    """Apply a compiled pattern to field values within one search deadline.

    Matching runs with ``concurrent=True`` so the GIL is released while the
    engine works; a search that overruns its deadline is rejected as an
    invalid pattern.
    """

    def __init__(self, pattern: str, compiled: "regex.Pattern", timeout: float) -> None:
        self.pattern = pattern
        self.compiled = compiled
        self.deadline = time.monotonic() + timeout

    def _timed_out(self) -> InvalidPattern:
        reason = "search took too long"
        _reject(self.pattern, reason)
        return InvalidPattern(self.pattern, reason)

    def __call__(self, value: Optional[str]) -> bool:
        if value is None:
            return False
        remaining = self.deadline - time.monotonic()
        if remaining <= 0:
            raise self._timed_out()
        try:
            return self.compiled.search(value, timeout=remaining, concurrent=True) is not None
        except TimeoutError as e:
            raise self._timed_out() from e


def _matches_identifier(matches: _Matcher, document: Document) -> bool:
    return matches(document.identifier)


def _matches_any_field(matches: _Matcher, document: Document) -> bool:
    return matches(document.identifier) or matches(document.title) or matches(document.authors)


class CatalogStore:
    """Single-writer, multi-reader holder of the live catalog."""

    def __init__(self, catalog: Optional[Catalog] = None, search_timeout: Optional[float] = None) -> None:
        self._catalog = catalog if catalog is not None else Catalog()
        self._lock = threading.Lock()
        self.search_timeout = search_timeout if search_timeout is not None else settings.search_timeout

    def replace(self, catalog: Catalog) -> None:
        """Atomically make ``catalog`` the live snapshot."""
        with self._lock:
            self._catalog = catalog

    def snapshot(self) -> Catalog:
        with self._lock:
            return self._catalog

    def size(self) -> int:
        return len(self.snapshot())

    def __len__(self) -> int:
        return self.size()

    def search_by_identifier(self, pattern: str, limit: int) -> SearchResult:
        """Return documents whose identifier matches ``pattern``."""
        return self._search(pattern, limit, _matches_identifier)

    def search_any_field(self, pattern: str, limit: int) -> SearchResult:
        """Return documents whose identifier, title or authors match ``pattern``."""
        return self._search(pattern, limit, _matches_any_field)

    def _search(
        self,
        pattern: str,
        limit: int,
        predicate: Callable[[_Matcher, Document], bool],
    ) -> SearchResult:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        matches = _Matcher(pattern, compile_pattern(pattern), self.search_timeout)
        catalog = self.snapshot()

        found: List[Document] = []
        for document in catalog.values():
            if not predicate(matches, document):
                continue
            if len(found) == limit:
                return SearchResult(documents=found, truncated=True)
            found.append(document)
        return SearchResult(documents=found, truncated=False)

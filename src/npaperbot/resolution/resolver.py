"""Turn explicit queries and implicit mentions into bounded search results."""

from typing import Iterable, List, Optional

from ..catalog.store import CatalogStore
from ..core.exceptions import ParseAmbiguous
from ..core.ids import build_search_pattern
from ..core.models import Document, ImplicitReference, SearchResult
from ..parsing.implicit import iter_references
from ..utils.logging import get_logger

logger = get_logger(__name__)


class RequestResolver:
    """Query the catalog store on behalf of chat requests."""

    def __init__(self, store: CatalogStore, limit: int) -> None:
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        self.store = store
        self.limit = limit

    def resolve_explicit(self, pattern: str) -> SearchResult:
        """Search every field for ``pattern``; InvalidPattern propagates."""
        return self.store.search_any_field(pattern, self.limit)

    def resolve_references(self, references: Iterable[ImplicitReference]) -> SearchResult:
        """Resolve references one at a time until the limit is reached.

        Matches are appended in reference order.  Once the result is
        truncated no further reference is searched.
        """
        documents: List[Document] = []
        truncated = False
        for reference in references:
            found = self.store.search_by_identifier(build_search_pattern(reference), self.limit)
            truncated = truncated or found.truncated
            for document in found.documents:
                documents.append(document)
                if len(documents) == self.limit:
                    truncated = True
                    break
            if truncated:
                break
        return SearchResult(documents=documents, truncated=truncated)

    def resolve_implicit(self, text: str) -> Optional[SearchResult]:
        """Resolve the mentions found in ``text``.

        Returns None when the text mentions nothing or cannot be parsed, so
        callers stay silent instead of replying "nothing found".
        """
        try:
            references = list(iter_references(text))
        except ParseAmbiguous as e:
            logger.debug(f"Implicit search request parse error: {e}", extra={"offset": e.offset})
            return None
        if not references:
            return None
        return self.resolve_references(references)

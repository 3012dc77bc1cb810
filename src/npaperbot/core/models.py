"""Core domain models for catalog documents, references and search results."""

from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """One catalog record.

    Field aliases follow the keys of the wg21.link index so a decoded
    payload validates straight into this model.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    identifier: str = ""
    title: Optional[str] = None
    authors: Optional[str] = Field(None, alias="author")
    date: Optional[str] = None
    external_link: Optional[str] = Field(None, alias="link")
    related_issue_url: Optional[str] = Field(None, alias="github_url")

    def with_identifier(self, identifier: str) -> "Document":
        """Return a copy keyed by ``identifier``."""
        return self.model_copy(update={"identifier": identifier})


class ImplicitReference(BaseModel):
    """An identifier mention parsed out of free text."""

    model_config = ConfigDict(frozen=True)

    kind: str
    number: str = Field(..., pattern=r"^[0-9]+$")
    revision: Optional[int] = Field(None, ge=0)

    @property
    def pattern(self) -> str:
        """Search pattern for this reference, e.g. ``p2000r10``."""
        pattern = f"{self.kind}{self.number}"
        if self.revision is not None:
            pattern += f"r{self.revision}"
        return pattern


class SearchResult(BaseModel):
    """Matches returned by a catalog search."""

    documents: List[Document] = Field(default_factory=list)
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def is_empty(self) -> bool:
        return not self.documents

    def sorted_documents(self, key: Callable[[Document], str]) -> List[Document]:
        return sorted(self.documents, key=key)

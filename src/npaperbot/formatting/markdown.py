"""Rendering of search results for Telegram's MarkdownV2 dialect."""

import re
from typing import Iterable, List

from ..core.models import Document

_ESCAPED_SYMBOLS = "{}[]()+*|.-_~`>#=!"
_MARKDOWN_V2_RE = re.compile("([" + re.escape(_ESCAPED_SYMBOLS) + "])")
_INLINE_URI_RE = re.compile(r"([)\\])")

TITLE_PLACEHOLDER = "Here should be a paper title"

NOTHING_FOUND_TEXT = "К сожалению, по Вашему запросу ничего не найдено. Попробуйте другой запрос!"
INVALID_PATTERN_TEXT = "Не удалось разобрать запрос. Попробуйте другой запрос!"
TRUNCATED_TEXT = (
    "Показаны только первые {limit} результатов. "
    "Если нужного среди них нет - используйте более точный запрос. Спасибо!"
)


def markdown_v2_escape(text: str) -> str:
    """Backslash-escape every character MarkdownV2 treats as markup."""
    return _MARKDOWN_V2_RE.sub(r"\\\1", text)


def markdown_v2_escape_inline_uri(text: str) -> str:
    """Escape a URI placed inside ``(...)`` of an inline link."""
    return _INLINE_URI_RE.sub(r"\\\1", text)


def format_document(document: Document) -> str:
    """Render one document as a single MarkdownV2 line."""
    title = document.identifier or ""
    if document.title:
        title = f"{title}: {document.title}" if title else document.title
    if not title:
        title = TITLE_PLACEHOLDER

    if document.external_link:
        result = (
            f"[{markdown_v2_escape(title)}]"
            f"({markdown_v2_escape_inline_uri(document.external_link)})"
        )
    else:
        result = markdown_v2_escape(title)

    if document.authors:
        result += f" \\(by {markdown_v2_escape(document.authors)}\\)"
    if document.date:
        result += f" \\({markdown_v2_escape(document.date)}\\)"
    if document.related_issue_url:
        result += (
            " \\(Related: [GitHub issue]"
            f"({markdown_v2_escape_inline_uri(document.related_issue_url)})\\)"
        )
    return result


def render_documents(documents: Iterable[Document]) -> str:
    """Format documents, sort the lines and join them with blank lines."""
    lines: List[str] = sorted(format_document(document) for document in documents)
    return "\n\n".join(lines)


def nothing_found_message() -> str:
    return markdown_v2_escape(NOTHING_FOUND_TEXT)


def invalid_pattern_message() -> str:
    return markdown_v2_escape(INVALID_PATTERN_TEXT)


def truncated_message(limit: int) -> str:
    return markdown_v2_escape(TRUNCATED_TEXT.format(limit=limit))

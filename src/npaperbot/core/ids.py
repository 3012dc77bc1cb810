"""Recognition of WG21 document identifiers such as ``P1488R2``.

An identifier is a case-insensitive type prefix, a run of ASCII digits and
an optional ``R`` followed by a revision number.  Prefixes are tried
longest first so that ``LEWG`` is never cut short by a shorter alternative.
"""

from typing import Optional, Tuple

from .models import ImplicitReference

DOCUMENT_KINDS: Tuple[str, ...] = (
    "N",
    "P",
    "D",
    "CWG",
    "EWG",
    "LWG",
    "LEWG",
    "FS",
    "EDIT",
    "SD",
)

_KINDS_BY_LENGTH: Tuple[str, ...] = tuple(sorted(DOCUMENT_KINDS, key=len, reverse=True))

MENTION_OPENERS = "[{<"
MENTION_CLOSERS = "]}>"


def is_ascii_digit(ch: str) -> bool:
    """Return True for ``0``-``9`` only; other Unicode digits do not count."""
    return "0" <= ch <= "9"


def is_mention_opener(ch: str) -> bool:
    return ch in MENTION_OPENERS


def is_mention_closer(ch: str) -> bool:
    return ch in MENTION_CLOSERS


def _match_kind(text: str, pos: int) -> Optional[str]:
    for kind in _KINDS_BY_LENGTH:
        candidate = text[pos:pos + len(kind)]
        if candidate.upper() == kind:
            return candidate
    return None


def _digit_run_end(text: str, pos: int) -> int:
    end = pos
    while end < len(text) and is_ascii_digit(text[end]):
        end += 1
    return end


def match_identifier(text: str, pos: int = 0) -> Optional[Tuple[ImplicitReference, int]]:
    """Match one identifier token starting at ``pos``.

    Returns the parsed reference together with the offset just past the
    token, or ``None`` when no identifier starts at ``pos``.  The prefix is
    kept as written, so ``p1488`` yields kind ``"p"``.
    """
    kind = _match_kind(text, pos)
    if kind is None:
        return None

    number_start = pos + len(kind)
    number_end = _digit_run_end(text, number_start)
    if number_end == number_start:
        return None

    revision: Optional[int] = None
    end = number_end
    if end < len(text) and text[end] in "rR":
        revision_end = _digit_run_end(text, end + 1)
        if revision_end > end + 1:
            revision = int(text[end + 1:revision_end])
            end = revision_end

    reference = ImplicitReference(
        kind=kind,
        number=text[number_start:number_end],
        revision=revision,
    )
    return reference, end


def build_search_pattern(reference: ImplicitReference) -> str:
    """Build the identifier search pattern for a parsed reference."""
    return reference.pattern

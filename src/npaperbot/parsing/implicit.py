"""Extraction of bracketed document mentions from free text.

A mention looks like ``[P1488R2]``: one opening bracket out of ``[{<``, an
identifier and one closing bracket out of ``]}>``.  The brackets do not
have to pair up, so ``[P1488>`` is accepted.  Text between mentions is
skipped up to the next opening bracket.

Malformed mentions are handled all-or-nothing: an opening bracket that is
not followed by an identifier and a closing bracket stops the whole scan
with :class:`ParseAmbiguous`, including for mentions that come after it.
"""

from typing import Iterator, List, Tuple

from ..core.exceptions import ParseAmbiguous
from ..core.ids import is_mention_closer, is_mention_opener, match_identifier
from ..core.models import ImplicitReference


def _skip_leading_trash(text: str, pos: int) -> int:
    while pos < len(text) and not is_mention_opener(text[pos]):
        pos += 1
    return pos


def _scan(text: str) -> Iterator[Tuple[ImplicitReference, int]]:
    pos = 0
    while True:
        opener = _skip_leading_trash(text, pos)
        if opener >= len(text):
            return

        matched = match_identifier(text, opener + 1)
        if matched is None:
            raise ParseAmbiguous(opener, text[opener:])
        reference, end = matched
        if end >= len(text) or not is_mention_closer(text[end]):
            raise ParseAmbiguous(opener, text[opener:])

        pos = end + 1
        yield reference, pos


def iter_references(text: str) -> Iterator[ImplicitReference]:
    """Lazily yield every mention in ``text`` in order of appearance.

    Raises :class:`ParseAmbiguous` when the scan reaches a malformed mention.
    """
    for reference, _ in _scan(text):
        yield reference


def parse_references(text: str) -> Tuple[List[ImplicitReference], str]:
    """Parse all mentions and return them with the unscanned remainder.

    The remainder is whatever follows the last mention, or the whole text
    when it contains no opening bracket at all.
    """
    references: List[ImplicitReference] = []
    consumed = 0
    for reference, consumed in _scan(text):
        references.append(reference)
    return references, text[consumed:]

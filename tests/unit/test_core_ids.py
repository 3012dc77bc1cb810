"""Unit tests for identifier recognition."""

import pytest
from hypothesis import given, strategies as st

from npaperbot.core.ids import (
    DOCUMENT_KINDS,
    build_search_pattern,
    is_ascii_digit,
    is_mention_closer,
    is_mention_opener,
    match_identifier,
)
from npaperbot.core.models import ImplicitReference
from npaperbot.parsing.implicit import parse_references


class TestCharacterClasses:
    """Tests for the single-character helpers."""

    def test_ascii_digits_only(self) -> None:
        """Test that only ASCII digits count as digits."""
        assert is_ascii_digit("1")
        assert not is_ascii_digit("a")
        assert not is_ascii_digit("Д")
        assert not is_ascii_digit("٣")  # Arabic-Indic three

    def test_openers(self) -> None:
        """Test the opening bracket set."""
        for ch in "[{<":
            assert is_mention_opener(ch)
        assert not is_mention_opener("a")
        assert not is_mention_opener("(")

    def test_closers(self) -> None:
        """Test the closing bracket set."""
        for ch in "]}>":
            assert is_mention_closer(ch)
        assert not is_mention_closer(")")


class TestMatchIdentifier:
    """Tests for matching a single identifier token."""

    @pytest.mark.parametrize("kind", ["N", "n", "P", "D", "CWG", "EWG", "LWG", "LEWG", "FS", "Edit", "SD"])
    def test_every_kind(self, kind: str) -> None:
        """Test each supported prefix, case-insensitively."""
        reference, end = match_identifier(f"{kind}42")
        assert reference.kind == kind
        assert reference.number == "42"
        assert end == len(kind) + 2

    def test_unknown_kind(self) -> None:
        """Test that an unsupported prefix fails."""
        assert match_identifier("WG21") is None
        assert match_identifier("X1") is None

    def test_lewg_not_shadowed(self) -> None:
        """Test that LEWG is matched as a whole prefix."""
        reference, end = match_identifier("LEWG123")
        assert reference.kind == "LEWG"
        assert reference.number == "123"
        assert end == 7

    def test_sd_before_d(self) -> None:
        """Test that SD wins over a shorter alternative."""
        reference, _ = match_identifier("sd6")
        assert reference.kind == "sd"

    def test_number_required(self) -> None:
        """Test that a prefix without digits fails."""
        assert match_identifier("p") is None
        assert match_identifier("p 1488R0") is None
        assert match_identifier("pR1") is None

    def test_revision(self) -> None:
        """Test revision parsing with both marker cases."""
        reference, end = match_identifier("p1488R0")
        assert reference == ImplicitReference(kind="p", number="1488", revision=0)
        assert end == 7
        reference, _ = match_identifier("P2000r10")
        assert reference.revision == 10

    def test_revision_marker_without_digits(self) -> None:
        """Test that a bare R is not consumed."""
        reference, end = match_identifier("p1488R")
        assert reference.revision is None
        assert end == 5

    def test_number_keeps_leading_zeros(self) -> None:
        """Test that the number stays a digit string."""
        reference, _ = match_identifier("N0042")
        assert reference.number == "0042"

    def test_match_at_offset(self) -> None:
        """Test matching in the middle of a text."""
        reference, end = match_identifier("xx[P1488]", pos=3)
        assert reference.kind == "P"
        assert end == 8


class TestBuildSearchPattern:
    """Tests for turning references into search patterns."""

    def test_without_revision(self) -> None:
        assert build_search_pattern(ImplicitReference(kind="p", number="1488")) == "p1488"

    def test_with_revision(self) -> None:
        reference = ImplicitReference(kind="P", number="2000", revision=10)
        assert build_search_pattern(reference) == "P2000r10"

    def test_zero_revision(self) -> None:
        reference = ImplicitReference(kind="D", number="1", revision=0)
        assert build_search_pattern(reference) == "D1r0"


@st.composite
def _bracketed_mentions(draw):
    kind = draw(st.sampled_from(DOCUMENT_KINDS))
    kind = "".join(
        ch.lower() if draw(st.booleans()) else ch for ch in kind
    )
    number = draw(st.text(alphabet="0123456789", min_size=1, max_size=5))
    revision = draw(st.none() | st.integers(min_value=0, max_value=999))
    marker = draw(st.sampled_from("rR"))
    opener = draw(st.sampled_from("[{<"))
    closer = draw(st.sampled_from("]}>"))
    body = kind + number + ("" if revision is None else f"{marker}{revision}")
    return opener + body + closer, kind, number, revision


@given(_bracketed_mentions())
def test_any_bracketed_mention_parses(mention) -> None:
    """Test that every well-formed mention yields exactly one matching reference."""
    text, kind, number, revision = mention
    references, remainder = parse_references(text)
    assert references == [ImplicitReference(kind=kind, number=number, revision=revision)]
    assert remainder == ""

"""Unit tests for scanning free text for bracketed paper mentions."""

import pytest

from npaperbot.core.exceptions import ParseAmbiguous
from npaperbot.core.models import ImplicitReference
from npaperbot.parsing.implicit import iter_references, parse_references

P1488 = ImplicitReference(kind="p", number="1488", revision=None)


class TestParseReferences:
    """Tests for the eager parser with remainder."""

    def test_trailing_mention(self) -> None:
        """Test a mention at the end of the text."""
        assert parse_references("some text [p1488]") == ([P1488], "")

    def test_leading_mention(self) -> None:
        """Test a mention followed by more text."""
        assert parse_references("[p1488] some text") == ([P1488], " some text")

    def test_two_mentions(self) -> None:
        """Test that mentions are returned in order."""
        references, remainder = parse_references("some_text [p1488] and [p2000R10] .")
        assert references == [P1488, ImplicitReference(kind="p", number="2000", revision=10)]
        assert remainder == " ."

    def test_no_mentions(self) -> None:
        """Test text without any bracket."""
        assert parse_references("some_text") == ([], "some_text")

    def test_empty_text(self) -> None:
        assert parse_references("") == ([], "")

    def test_mismatched_brackets(self) -> None:
        """Test that opener and closer need not pair up."""
        assert parse_references("[p1488>") == ([P1488], "")
        assert parse_references("<P1488}")[0][0].kind == "P"
        assert parse_references("{n4860]")[0] == [ImplicitReference(kind="n", number="4860")]

    def test_adjacent_mentions(self) -> None:
        """Test mentions without text in between."""
        references, _ = parse_references("[CWG1][LEWG22]")
        assert [r.kind for r in references] == ["CWG", "LEWG"]

    def test_text_with_other_punctuation(self) -> None:
        """Test that parentheses and other symbols are skipped."""
        references, _ = parse_references("See (also) P1488, then [P1488R2]!")
        assert references == [ImplicitReference(kind="P", number="1488", revision=2)]


class TestMalformedMentions:
    """Tests for the all-or-nothing failure policy."""

    def test_empty_brackets(self) -> None:
        """Test that [] is a failure, not zero references."""
        with pytest.raises(ParseAmbiguous) as exc_info:
            parse_references("[]")
        assert exc_info.value.offset == 0

    def test_non_identifier_in_brackets(self) -> None:
        with pytest.raises(ParseAmbiguous):
            parse_references("look at [this]")

    def test_missing_closer(self) -> None:
        """Test a valid identifier that is never closed."""
        with pytest.raises(ParseAmbiguous):
            parse_references("[p1488")
        with pytest.raises(ParseAmbiguous):
            parse_references("[p1488 ]")

    def test_bare_revision_marker_not_closed(self) -> None:
        """Test that an unconsumed R blocks the closing bracket."""
        with pytest.raises(ParseAmbiguous):
            parse_references("[p1488R]")

    def test_failure_discards_earlier_mentions(self) -> None:
        """Test that a bad bracket fails the whole scan."""
        with pytest.raises(ParseAmbiguous) as exc_info:
            parse_references("[p1488] and [oops] and [p2000]")
        assert exc_info.value.offset == 12
        assert exc_info.value.remainder.startswith("[oops]")


class TestIterReferences:
    """Tests for the lazy generator form."""

    def test_lazy(self) -> None:
        """Test that earlier mentions are produced before a later failure."""
        iterator = iter_references("[p1488] then []")
        assert next(iterator) == P1488
        with pytest.raises(ParseAmbiguous):
            next(iterator)

    def test_restartable(self) -> None:
        """Test that scanning the same text twice gives the same result."""
        text = "[N1] [N2]"
        assert list(iter_references(text)) == list(iter_references(text))
        assert len(list(iter_references(text))) == 2

    def test_empty(self) -> None:
        assert list(iter_references("plain text")) == []

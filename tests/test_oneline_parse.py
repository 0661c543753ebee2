"""Tests for the dealer.exe oneline format."""

import pytest
import sys
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from common_objects import CharacterError, Direction, StructuralError, Suit
from oneline_parse import format_oneline, parse_oneline, scan_dotted_hand, try_parse_oneline

ONELINE = "n AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72"


class TestParseOneline:
    """Tests for parse_oneline."""

    def test_basic(self):
        """Each direction letter introduces an S.H.D.C hand."""
        deal = parse_oneline(ONELINE)
        north = deal.hand(Direction.NORTH)
        assert north.holding(Suit.SPADES) == "AKQT3"
        assert north.holding(Suit.HEARTS) == "J6"
        assert north.holding(Suit.DIAMONDS) == "KJ42"
        assert north.holding(Suit.CLUBS) == "95"
        assert deal.hand(Direction.WEST).holding(Suit.CLUBS) == "QJ72"
        assert deal.is_complete()

    def test_directions_in_any_order(self):
        """Hands are placed by their letter, not their position on the line."""
        shuffled = "w 98.873.9653.QJ72 s J74.QT95.T.AK863 e 652.AK42.AQ87.T4 n AKQT3.J6.KJ42.95"
        assert parse_oneline(shuffled) == parse_oneline(ONELINE)

    def test_uppercase_and_extra_spaces(self):
        """Direction letters are case-insensitive and whitespace runs are fine."""
        line = "  N  AKQT3.J6.KJ42.95 E 652.AK42.AQ87.T4   S J74.QT95.T.AK863 W 98.873.9653.QJ72\n"
        assert parse_oneline(line) == parse_oneline(ONELINE)

    def test_void(self):
        """An empty group is a void."""
        deal = parse_oneline("n AKQ976.KJ84.T32. e J84.Q97.AK4.QJ87 s T53.AT65..AT9654 w 2.32.QJ98765.K32")
        assert deal.hand(Direction.NORTH).suit_length(Suit.CLUBS) == 0
        assert deal.hand(Direction.SOUTH).suit_length(Suit.DIAMONDS) == 0

    def test_wrong_token_count(self):
        """Anything other than 8 tokens is structural."""
        with pytest.raises(StructuralError, match="Expected 8 parts"):
            parse_oneline("n AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4")
        assert try_parse_oneline("Generated 100 hands") is None

    def test_bad_direction(self):
        """Unknown or multi-letter direction tokens are rejected."""
        with pytest.raises(CharacterError, match="F2"):
            parse_oneline("F2 AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72")
        assert try_parse_oneline(ONELINE.replace("n ", "x ", 1)) is None

    def test_bad_suit_count(self):
        """A hand needs exactly four groups."""
        with pytest.raises(StructuralError, match="4 suits"):
            parse_oneline("n AKQT3.J6.KJ4295 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72")

    def test_bad_rank(self):
        """Rank characters outside 2-9TJQKA are rejected."""
        with pytest.raises(CharacterError, match="X"):
            parse_oneline(ONELINE.replace("KJ42", "KJX2"))


class TestScanDottedHand:
    """Tests for the shared S.H.D.C hand decoder."""

    def test_returns_error_value(self):
        """Failures are returned, tagged with the caller's notation."""
        result = scan_dotted_hand("AK.QJ", "pbn")
        assert isinstance(result, StructuralError)
        assert result.notation == "pbn"

    def test_hand(self):
        """A valid holding gives a Hand."""
        hand = scan_dotted_hand("A.K.Q.J", "oneline")
        assert len(hand) == 4


class TestFormatOneline:
    """Tests for format_oneline."""

    def test_format(self):
        """Output is lowercase letters in N, E, S, W order with a newline."""
        assert format_oneline(parse_oneline(ONELINE)) == ONELINE + "\n"

    def test_void_round_trip(self):
        """Voids survive formatting and parsing."""
        line = "n AKQ976.KJ84.T32. e J84.Q97.AK4.QJ87 s T53.AT65..AT9654 w 2.32.QJ98765.K32"
        assert format_oneline(parse_oneline(line)) == line + "\n"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

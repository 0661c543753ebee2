"""Tests for fourth hand inference."""

import pytest
import sys
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from common_objects import Card, Deal, Direction, Hand, Rank, Suit
from fourth_hand import infer_fourth_hand, complete_deal
from oneline_parse import parse_oneline

ONELINE = "n AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72"


class TestInferFourthHand:
    """Tests for infer_fourth_hand."""

    @pytest.mark.parametrize("implicit", list(Direction))
    def test_recovers_each_direction(self, implicit):
        """Dropping any one hand of a complete deal and inferring it gives the same hand back."""
        full = parse_oneline(ONELINE)
        partial = Deal({d: full.hand(d) for d in Direction if d != implicit})
        inferred = infer_fourth_hand(partial, implicit)
        assert inferred == full.hand(implicit)
        assert len(inferred) == 13

    def test_existing_implicit_hand_ignored(self):
        """Whatever the implicit direction already holds is not treated as known."""
        full = parse_oneline(ONELINE)
        deal = parse_oneline(ONELINE)
        deal.set_hand(Direction.WEST, Hand([Card(Suit.SPADES, Rank.ACE)]))
        assert infer_fourth_hand(deal, Direction.WEST) == full.hand(Direction.WEST)

    def test_complete_deal_sets_hand(self):
        """complete_deal writes the inferred hand into the deal."""
        full = parse_oneline(ONELINE)
        deal = Deal({d: full.hand(d) for d in [Direction.NORTH, Direction.EAST, Direction.SOUTH]})
        result = complete_deal(deal, Direction.WEST)
        assert result is deal
        assert deal.is_complete()
        assert deal == full

    def test_empty_deal_gives_whole_deck(self):
        """With no known cards the implicit hand is the entire deck."""
        hand = infer_fourth_hand(Deal(), Direction.EAST)
        assert len(hand) == 52
        assert sorted(hand.cards) == sorted(Card.all())

    def test_short_input_gives_oversized_hand(self):
        """Fewer than 39 known cards are not detected; the remainder is simply larger."""
        deal = Deal({Direction.NORTH: Hand(Card(Suit.SPADES, rank) for rank in Rank)})
        hand = infer_fourth_hand(deal, Direction.WEST)
        assert len(hand) == 39
        assert hand.suit_length(Suit.SPADES) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

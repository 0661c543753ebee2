"""Tests for LIN record parsing and writing."""

import pytest
import sys
from pathlib import Path

# Add parent directory to path so we can import modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from common_objects import Board, Card, Direction, Rank, StructuralError, Suit, Vulnerability
from lin_parse import (
    BidWithAnnotation,
    LinData,
    format_lin,
    format_lin_board,
    parse_lin,
    parse_lin_file,
    parse_lin_holding,
    parse_lin_string,
    parse_md,
    parse_sv,
    try_parse_lin,
    write_lin_file,
)
from oneline_parse import parse_oneline

SAMPLE_LIN = (
    "pn|South,West,North,East|md|3SAKHJD876C5432,S2HQT9DKQ5CKQJT9,SQJT9HA32DAJ2CA8,|sv|o|"
    "ah|Board 1|mb|1C|mb|p|mb|1N!|an|15-17|mb|p|mb|3N|mb|p|mb|p|mb|p|"
    "pc|D2|pc|DA|pc|D3|pc|D8|pc|H2|pc|H4|pc|HJ|pc|HQ|mc|10|"
)
ONELINE = "n AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72"


class TestParseLin:
    """Tests for parse_lin."""

    def test_players_and_dealer(self):
        """Names are listed South, West, North, East; dealer digit 3 is North."""
        data = parse_lin(SAMPLE_LIN)
        assert data.player_name(Direction.SOUTH) == "South"
        assert data.player_name(Direction.EAST) == "East"
        assert data.dealer == Direction.NORTH
        assert data.vulnerability == Vulnerability.NONE
        assert data.board_header == "Board 1"

    def test_hands_and_inferred_east(self):
        """Three given hands plus an inferred East use the whole deck once."""
        deal = parse_lin(SAMPLE_LIN).deal
        assert deal.hand(Direction.SOUTH).holding(Suit.SPADES) == "AK"
        assert len(deal.hand(Direction.SOUTH)) == 10
        assert len(deal.hand(Direction.WEST)) == 12
        assert len(deal.hand(Direction.NORTH)) == 12
        assert len(deal.hand(Direction.EAST)) == 18
        assert deal.card_count() == 52
        assert len({card for direction in Direction for card in deal.hand(direction)}) == 52

    def test_auction_with_alerts(self):
        """Alerted calls drop the '!' and keep the explanation."""
        auction = parse_lin(SAMPLE_LIN).auction
        assert [call.bid for call in auction] == ["1C", "p", "1N", "p", "3N", "p", "p", "p"]
        assert auction[2] == BidWithAnnotation("1N", True, "15-17")
        assert not auction[0].alert
        assert auction[0].annotation is None

    def test_play_by_trick(self):
        """Played cards are grouped four to a trick."""
        data = parse_lin(SAMPLE_LIN)
        assert data.play[0] == Card(Suit.DIAMONDS, Rank.TWO)
        assert len(data.tricks()) == 2
        assert data.format_cardplay_by_trick() == "D2 DA D3 D8|H2 H4 HJ HQ"
        assert data.claim == 10

    def test_unknown_keys_skipped(self):
        """Nodes the parser does not use are ignored with their values."""
        data = parse_lin("qx|o7|rh||md|1SA,HA,DA,|zz|whatever|sv|b|pg||")
        assert data.dealer == Direction.SOUTH
        assert data.vulnerability == Vulnerability.BOTH
        assert len(data.deal.hand(Direction.EAST)) == 49

    def test_no_nodes(self):
        """Text without any LIN node is a structural error."""
        with pytest.raises(StructuralError):
            parse_lin("this is not a lin record")
        assert try_parse_lin("") is None

    def test_to_board(self):
        """The board number comes from the ah header."""
        board = parse_lin(SAMPLE_LIN).to_board()
        assert board.number == 1
        assert board.dealer == Direction.NORTH
        assert parse_lin(SAMPLE_LIN).to_board(number=9).number == 9

    def test_header_without_number(self):
        """A header with no digits leaves the board unnumbered."""
        assert parse_lin("ah|Final|sv|o|").to_board().number is None
        assert parse_lin("sv|o|").to_board().number is None


class TestNodeParsers:
    """Tests for the md, sv and holding helpers."""

    def test_holding_with_ten(self):
        """'10' is accepted for the ten and ranks before a suit letter are dropped."""
        hand = parse_lin_holding("9SA10HK")
        assert hand.holding(Suit.SPADES) == "AT"
        assert hand.holding(Suit.HEARTS) == "K"
        assert len(hand) == 3

    def test_md_dealer_codes(self):
        """Dealer digits 1 to 4 map to South, West, North, East."""
        assert parse_md("1SA,HA,DA,")[0] == Direction.SOUTH
        assert parse_md("2SA,HA,DA,")[0] == Direction.WEST
        assert parse_md("3SA,HA,DA,")[0] == Direction.NORTH
        assert parse_md("4SA,HA,DA,")[0] == Direction.EAST

    def test_md_unusable(self):
        """Bad dealer digits or too few hands give None."""
        assert parse_md("5SA,HA,DA,") is None
        assert parse_md("") is None
        assert parse_md("1SA,HA") is None

    def test_md_explicit_east(self):
        """A non-empty fourth hand is used as given."""
        _, deal = parse_md("1SA,HA,DA,CA")
        assert deal.hand(Direction.EAST).cards == [Card(Suit.CLUBS, Rank.ACE)]

    def test_sv_lenient(self):
        """Unrecognized vulnerability codes mean none vulnerable."""
        assert parse_sv("n") == Vulnerability.NS
        assert parse_sv("E") == Vulnerability.EW
        assert parse_sv("b") == Vulnerability.BOTH
        assert parse_sv("0") == Vulnerability.NONE
        assert parse_sv("?") == Vulnerability.NONE


class TestFormatLin:
    """Tests for LIN output."""

    def test_round_trip(self):
        """A formatted record parses back to the same data."""
        data = LinData(
            dealer=Direction.EAST,
            deal=parse_oneline(ONELINE),
            vulnerability=Vulnerability.EW,
            board_header="Board 5",
            auction=[BidWithAnnotation("1S"), BidWithAnnotation("2C", True, "natural game force"),
                     BidWithAnnotation("p")],
            play=[Card(Suit.HEARTS, Rank.ACE), Card(Suit.HEARTS, Rank.TEN)],
            claim=9,
        )
        text = format_lin(data)
        assert "md|4" in text
        assert "an|natural+game+force|" in text
        assert parse_lin(text) == data

    def test_plus_and_pipe_in_text(self):
        """Literal '+' and '|' in annotations and headers are escaped and read back unchanged."""
        data = LinData(board_header="Round 2 | Board 4",
                       auction=[BidWithAnnotation("2C", True, "5+ hearts"), BidWithAnnotation("2N", True, "15+")])
        text = format_lin(data)
        assert "an|5%2B+hearts|" in text
        parsed = parse_lin(text)
        assert parsed.auction[0].annotation == "5+ hearts"
        assert parsed.auction[1].annotation == "15+"
        assert parsed.board_header == "Round 2 | Board 4"

    def test_board_line(self):
        """Hand record lines carry the qx prefix and a pg terminator."""
        board = Board.numbered(3, parse_oneline(ONELINE))
        line = format_lin_board(board)
        assert line.startswith("qx|o3|md|1")
        assert "ah|Board+3|" in line
        assert "sv|e|" in line
        assert line.endswith("pg||")
        assert parse_lin(line).to_board() == board


class TestLinFiles:
    """Tests for multi-record input."""

    def test_parse_string_skips_bad_lines(self, caplog):
        """Lines without LIN nodes are logged and skipped."""
        content = SAMPLE_LIN + "\n\ngarbage line\n" + SAMPLE_LIN + "\n"
        records = parse_lin_string(content)
        assert len(records) == 2
        assert "Malformed record" in caplog.text

    def test_file_round_trip(self, tmp_path):
        """Boards written to a LIN file read back unchanged."""
        boards = [Board.numbered(1, parse_oneline(ONELINE)), Board.numbered(2, parse_oneline(ONELINE))]
        path = tmp_path / "boards.lin"
        write_lin_file(path, boards)
        assert [record.to_board() for record in parse_lin_file(path)] == boards


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

"""
Oneline format produced by dealer.exe:

    n AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72

Each hand is a direction letter followed by its cards in S.H.D.C order.
"""
from typing import List, Optional, Union, Final
from common_objects import Card, Deal, Direction, Hand, Rank, DISPLAY_SUITS
from common_objects import DealFormatError, StructuralError, CharacterError

NOTATION: Final[str] = "oneline"
NTOKENS: Final[int] = 8


def scan_dotted_hand(hand_str: str, notation: str) -> Union[Hand, DealFormatError]:
    """
    Decode a hand written as Spades.Hearts.Diamonds.Clubs, an empty group being a void.
    Shared with the PBN Deal tag, which uses the same hand layout.
    """
    holdings: List[str] = hand_str.split(".")
    if len(holdings) != len(DISPLAY_SUITS):
        return StructuralError(notation, f"Expected 4 suits separated by dots, got {len(holdings)}")
    hand = Hand()
    for suit, holding in zip(DISPLAY_SUITS, holdings):
        for c in holding:
            rank: Optional[Rank] = Rank.from_char(c)
            if rank is None:
                return CharacterError(notation, f"Invalid rank character: {c}")
            hand.add_card(Card(suit, rank))
    return hand


def _scan_oneline(line: str) -> Union[Deal, DealFormatError]:
    parts: List[str] = line.split()
    if len(parts) != NTOKENS:
        return StructuralError(NOTATION, f"Expected 8 parts (4 positions + 4 hands), got {len(parts)}")

    deal = Deal()
    for i in range(0, NTOKENS, 2):
        direction: Optional[Direction] = Direction.from_char(parts[i]) if len(parts[i]) == 1 else None
        if direction is None:
            return CharacterError(NOTATION, f"Invalid direction character: {parts[i]}")
        hand = scan_dotted_hand(parts[i + 1], NOTATION)
        if isinstance(hand, DealFormatError):
            return hand
        deal.set_hand(direction, hand)
    return deal


def parse_oneline(line: str) -> Deal:
    """
    Parse a deal in dealer.exe oneline format
    :raises StructuralError: Not 8 tokens, or a hand without exactly 4 suit groups
    :raises CharacterError: Bad direction letter or rank character
    """
    result = _scan_oneline(line)
    if isinstance(result, DealFormatError):
        raise result
    return result


def try_parse_oneline(line: str) -> Optional[Deal]:
    result = _scan_oneline(line)
    return result if isinstance(result, Deal) else None


def format_oneline(deal: Deal) -> str:
    """Output: "n CARDS e CARDS s CARDS w CARDS\\n" """
    parts: List[str] = [f"{direction.abbreviation().lower()} {deal.hand(direction).to_pbn()}" for direction in Direction]
    return " ".join(parts) + "\n"

from dataclasses import dataclass, field
from typing import Optional, Dict, Iterable, Iterator, List
from enum import Enum, IntEnum
from functools import total_ordering
from line_profiler import LineProfiler

NCARDS_IN_HAND: int = 13
NCARDS_IN_DECK: int = 52


class DealFormatError(ValueError):
    """Text could not be decoded as a deal in the given notation."""

    def __init__(self, notation: str, message: str):
        super().__init__(f"{notation} parse error: {message}")
        self.notation = notation
        self.message = message


class StructuralError(DealFormatError):
    """Wrong number of tokens, lines or suit groups, or a malformed header."""


class CharacterError(DealFormatError):
    """A rank, suit or direction character outside its recognized set."""


@total_ordering
class Suit(Enum):
    CLUBS       = (0, "C")
    DIAMONDS    = (1, "D")
    HEARTS      = (2, "H")
    SPADES      = (3, "S")

    __from_str_map__ = {"C": CLUBS, "D": DIAMONDS, "H": HEARTS, "S": SPADES}

    @classmethod
    def from_char(cls, suit_char: str) -> Optional["Suit"]:
        value = cls.__from_str_map__.get(suit_char.upper())
        return Suit(value) if value is not None else None

    def __lt__(self, other) -> bool:
        return self.value[0] < other.value[0]

    def __repr__(self) -> str:
        return self.name

    def abbreviation(self) -> str:
        return self.value[1]

# Order in which suits are written by every notation
DISPLAY_SUITS: List[Suit] = [Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS]


@total_ordering
class Rank(Enum):
    TWO     = (2, "2")
    THREE   = (3, "3")
    FOUR    = (4, "4")
    FIVE    = (5, "5")
    SIX     = (6, "6")
    SEVEN   = (7, "7")
    EIGHT   = (8, "8")
    NINE    = (9, "9")
    TEN     = (10, "T")
    JACK    = (11, "J")
    QUEEN   = (12, "Q")
    KING    = (13, "K")
    ACE     = (14, "A")

    __from_str_map__ = {
        "2": TWO,
        "3": THREE,
        "4": FOUR,
        "5": FIVE,
        "6": SIX,
        "7": SEVEN,
        "8": EIGHT,
        "9": NINE,
        "10": TEN,
        "T": TEN,
        "J": JACK,
        "Q": QUEEN,
        "K": KING,
        "A": ACE,
    }

    @classmethod
    def from_char(cls, rank_char: str) -> Optional["Rank"]:
        value = cls.__from_str_map__.get(rank_char.upper())
        return Rank(value) if value is not None else None

    def __lt__(self, other) -> bool:
        return self.value[0] < other.value[0]

    def __repr__(self) -> str:
        return self.name

    def abbreviation(self) -> str:
        return self.value[1]


@total_ordering
class Direction(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    __from_str_map__ = {"N": NORTH, "E": EAST, "S": SOUTH, "W": WEST}

    @classmethod
    def from_char(cls, direction_char: str) -> Optional["Direction"]:
        value = cls.__from_str_map__.get(direction_char.upper())
        return Direction(value) if value is not None else None

    def __lt__(self, other) -> bool:
        return self.value < other.value

    def __repr__(self) -> str:
        return self.name

    def offset(self, offset: int) -> "Direction":
        return Direction((self.value + offset) % 4)

    def next(self) -> "Direction":
        return self.offset(1)

    def partner(self) -> "Direction":
        return self.offset(2)

    def previous(self) -> "Direction":
        return self.offset(3)

    def abbreviation(self) -> str:
        return self.name[0]


@total_ordering
@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank

    @classmethod
    def from_str(cls, card_str: str) -> Optional["Card"]:
        """Suit character followed by rank character, e.g. "SA" or "d2"."""
        if len(card_str) < 2:
            return None
        suit = Suit.from_char(card_str[0])
        rank = Rank.from_char(card_str[1:])
        if suit is None or rank is None:
            return None
        return cls(suit, rank)

    @classmethod
    def all(cls) -> List["Card"]:
        return [cls(suit, rank) for suit in Suit for rank in Rank]

    def __lt__(self, other) -> bool:
        return (self.suit, self.rank) < (other.suit, other.rank)

    def __str__(self) -> str:
        return self.suit.abbreviation() + self.rank.abbreviation()


# Points lookup
HCP_values: Dict[Rank, int] = {Rank.ACE: 4, Rank.KING: 3, Rank.QUEEN: 2, Rank.JACK: 1}


class Hand:
    """
    Cards held by one player. Cards are kept in the order they were added;
    add_card does not reject a card that is already present.
    """

    def __init__(self, cards: Optional[Iterable[Card]] = None):
        self.cards: List[Card] = list(cards) if cards else []

    def add_card(self, card: Card) -> None:
        self.cards.append(card)

    def cards_in_suit(self, suit: Suit) -> List[Card]:
        """Cards of one suit, highest rank first"""
        return sorted((c for c in self.cards if c.suit == suit), key=lambda c: c.rank, reverse=True)

    def suit_length(self, suit: Suit) -> int:
        return sum(1 for c in self.cards if c.suit == suit)

    def holding(self, suit: Suit) -> str:
        return "".join(c.rank.abbreviation() for c in self.cards_in_suit(suit))

    def hcp(self) -> int:
        return sum(HCP_values.get(c.rank, 0) for c in self.cards)

    def to_pbn(self) -> str:
        return ".".join(self.holding(suit) for suit in DISPLAY_SUITS)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Hand):
            return NotImplemented
        return sorted(self.cards) == sorted(other.cards)

    def __repr__(self) -> str:
        return f"Hand({self.to_pbn()})"


class Deal:
    """Hands for all four directions; a direction with no cards has an empty Hand."""

    def __init__(self, hands: Optional[Dict[Direction, Hand]] = None):
        self.hands: Dict[Direction, Hand] = {direction: Hand() for direction in Direction}
        if hands:
            self.hands.update(hands)

    def hand(self, direction: Direction) -> Hand:
        return self.hands[direction]

    def set_hand(self, direction: Direction, hand: Hand) -> None:
        self.hands[direction] = hand

    def card_count(self) -> int:
        return sum(len(hand) for hand in self.hands.values())

    def is_complete(self) -> bool:
        """52 distinct cards, 13 in each hand"""
        if any(len(hand) != NCARDS_IN_HAND for hand in self.hands.values()):
            return False
        return len({card for hand in self.hands.values() for card in hand}) == NCARDS_IN_DECK

    def to_pbn(self, first: Direction = Direction.NORTH) -> str:
        """PBN Deal tag value, e.g. "N:K843.T542.J6.863 AQJ7.K.Q75.AT942 ..." """
        hands: List[str] = [self.hands[first.offset(i)].to_pbn() for i in range(4)]
        return f"{first.abbreviation()}:" + " ".join(hands)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Deal):
            return NotImplemented
        return all(self.hands[d] == other.hands[d] for d in Direction)

    def __repr__(self) -> str:
        return f"Deal({self.to_pbn()})"


class Vulnerability(Enum):
    NONE = "None"
    NS = "NS"
    EW = "EW"
    BOTH = "All"

    def to_pbn(self) -> str:
        return self.value

    @classmethod
    def from_pbn(cls, vul_str: str) -> Optional["Vulnerability"]:
        return vulDict.get(vul_str.strip().upper())

vulDict: Dict[str, Vulnerability] = {
    'Z': Vulnerability.NONE,
    'NONE': Vulnerability.NONE,
    'LOVE': Vulnerability.NONE,
    '-': Vulnerability.NONE,
    'N': Vulnerability.NS,
    'NS': Vulnerability.NS,
    'E': Vulnerability.EW,
    'EW': Vulnerability.EW,
    'WE': Vulnerability.EW,
    'B': Vulnerability.BOTH,
    'BOTH': Vulnerability.BOTH,
    'ALL': Vulnerability.BOTH,
}

dealVulnerabilities: List[Vulnerability] = [
    Vulnerability.EW,      # deal 0 has value for deal 16
    Vulnerability.NONE,
    Vulnerability.NS,
    Vulnerability.EW,
    Vulnerability.BOTH,
    Vulnerability.NS,
    Vulnerability.EW,
    Vulnerability.BOTH,
    Vulnerability.NONE,
    Vulnerability.EW,
    Vulnerability.BOTH,
    Vulnerability.NONE,
    Vulnerability.NS,
    Vulnerability.BOTH,
    Vulnerability.NONE,
    Vulnerability.NS
]

def dealNo2dealer(dno: int) -> Direction:
    dealer_map = {1: Direction.NORTH, 2: Direction.EAST, 3: Direction.SOUTH, 0: Direction.WEST}
    return dealer_map[dno % 4]

def dealNo2vul(dno: int) -> Vulnerability:
    return dealVulnerabilities[dno % 16]


@dataclass
class Board:
    """A deal together with its board number, dealer, vulnerability and event tags."""
    number: Optional[int] = None
    dealer: Optional[Direction] = None
    vulnerable: Vulnerability = Vulnerability.NONE
    deal: Deal = field(default_factory=Deal)
    event: Optional[str] = None
    site: Optional[str] = None
    date: Optional[str] = None
    double_dummy_tricks: Optional[str] = None
    optimum_score: Optional[str] = None
    par_contract: Optional[str] = None

    @classmethod
    def numbered(cls, number: int, deal: Deal) -> "Board":
        """Board whose dealer and vulnerability follow the standard rotation for its number"""
        return cls(number=number, dealer=dealNo2dealer(number), vulnerable=dealNo2vul(number), deal=deal)


lineProf: LineProfiler = LineProfiler()

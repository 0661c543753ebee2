import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union, Final
from urllib.parse import quote_plus, unquote_plus
from common_objects import Board, Card, Deal, Direction, Hand, Rank, Suit, Vulnerability, DISPLAY_SUITS
from common_objects import DealFormatError, StructuralError
from fourth_hand import complete_deal

NOTATION: Final[str] = "lin"
# md hands and pn names are listed starting with South
_LIN_DIRECTION_MAP: Final[List[Direction]] = [Direction.SOUTH, Direction.WEST, Direction.NORTH, Direction.EAST]
_VUL_MAP: Final[Dict[str, Vulnerability]] = {
    "o": Vulnerability.NONE,
    "0": Vulnerability.NONE,
    "-": Vulnerability.NONE,
    "n": Vulnerability.NS,
    "ns": Vulnerability.NS,
    "e": Vulnerability.EW,
    "ew": Vulnerability.EW,
    "b": Vulnerability.BOTH,
    "both": Vulnerability.BOTH,
    "all": Vulnerability.BOTH,
}
_VUL_CODES: Final[Dict[Vulnerability, str]] = {
    Vulnerability.NONE: "o",
    Vulnerability.NS: "n",
    Vulnerability.EW: "e",
    Vulnerability.BOTH: "b",
}
_RECOGNIZED_KEYS: Final[Tuple[str, ...]] = ("pn", "md", "sv", "ah", "mb", "an", "pc", "mc")


@dataclass
class BidWithAnnotation:
    """A call with its alert flag and optional explanation"""
    bid: str
    alert: bool = False
    annotation: Optional[str] = None


@dataclass
class LinData:
    """Everything recovered from a single LIN record"""
    player_names: List[str] = field(default_factory=lambda: ["", "", "", ""])  # S, W, N, E
    dealer: Direction = Direction.NORTH
    deal: Deal = field(default_factory=Deal)
    vulnerability: Vulnerability = Vulnerability.NONE
    board_header: Optional[str] = None
    auction: List[BidWithAnnotation] = field(default_factory=list)
    play: List[Card] = field(default_factory=list)
    claim: Optional[int] = None

    def player_name(self, direction: Direction) -> str:
        return self.player_names[_LIN_DIRECTION_MAP.index(direction)]

    def tricks(self) -> List[List[Card]]:
        return [self.play[i:i + 4] for i in range(0, len(self.play), 4)]

    def format_cardplay_by_trick(self) -> str:
        """
        Format the cardplay trick by trick
        :return: e.g. "D2 DA D6 D5|S3 S2 SQ SA"
        """
        return "|".join(" ".join(str(card) for card in trick) for trick in self.tricks())

    def to_board(self, number: Optional[int] = None) -> Board:
        if number is None and self.board_header:
            number = extract_board_number(self.board_header)
        return Board(number=number, dealer=self.dealer, vulnerable=self.vulnerability, deal=self.deal)

    @classmethod
    def from_board(cls, board: Board) -> "LinData":
        header = f"Board {board.number}" if board.number is not None else None
        return cls(dealer=board.dealer or Direction.NORTH, deal=board.deal,
                   vulnerability=board.vulnerable, board_header=header)


def parse_lin_holding(holding: str) -> Hand:
    """
    :param holding: A LIN style holding like SAKQ952HK65DQ6CKT
    :return: The cards of the holding; ranks before the first suit letter are ignored
    """
    holding = holding.replace("10", "T")
    hand = Hand()
    current_suit: Optional[Suit] = None
    for c in holding:
        suit: Optional[Suit] = Suit.from_char(c)
        if suit is not None:
            current_suit = suit
            continue
        rank: Optional[Rank] = Rank.from_char(c)
        if current_suit is not None and rank is not None:
            hand.add_card(Card(current_suit, rank))
    return hand


def parse_md(md_str: str) -> Optional[Tuple[Direction, Deal]]:
    """
    :param md_str: Dealer digit (1=South, 2=West, 3=North, 4=East) then hands in S, W, N, E order,
                   e.g. "3SAKHJD876C5432,S2HQT9DKQ5CKQJT9,SQJT9HA32DAJ2CA8,"
    :return: Dealer and deal, or None if the node is unusable. A missing East hand is inferred.
    """
    if not md_str or md_str[0] not in "1234":
        return None
    dealer: Direction = _LIN_DIRECTION_MAP[int(md_str[0]) - 1]
    hand_strs: List[str] = md_str[1:].split(",")
    if len(hand_strs) < 3:
        return None

    deal = Deal()
    for direction, hand_str in zip(_LIN_DIRECTION_MAP[:3], hand_strs):
        deal.set_hand(direction, parse_lin_holding(hand_str))
    if len(hand_strs) > 3 and hand_strs[3].strip():
        deal.set_hand(Direction.EAST, parse_lin_holding(hand_strs[3]))
    else:
        complete_deal(deal, Direction.EAST)
    return dealer, deal


def parse_sv(sv: str) -> Vulnerability:
    """Unrecognized codes mean nobody is vulnerable"""
    return _VUL_MAP.get(sv.strip().lower(), Vulnerability.NONE)


def extract_board_number(text: str) -> Optional[int]:
    match = re.search(r'\d+', text)
    return int(match.group()) if match else None


def _decode_text(value: str) -> str:
    return unquote_plus(value)


def _encode_text(value: str) -> str:
    # Literal '+' and '|' are percent-escaped so they survive decoding
    return quote_plus(value)


def _scan_lin(lin_str: str) -> Union[LinData, DealFormatError]:
    data = LinData()
    tokens: List[str] = lin_str.strip().split("|")
    recognized: int = 0
    # Nodes are key|value pairs; unknown keys are skipped together with their value
    for i in range(0, len(tokens) - 1, 2):
        key: str = tokens[i].strip().lower()
        value: str = tokens[i + 1]
        if key not in _RECOGNIZED_KEYS:
            continue
        recognized += 1
        if key == "pn":
            for j, name in enumerate(value.split(",")[:4]):
                data.player_names[j] = name
        elif key == "md":
            parsed = parse_md(value.strip())
            if parsed is None:
                logging.debug(f"Ignoring unusable md node: {value}")
            else:
                data.dealer, data.deal = parsed
        elif key == "sv":
            data.vulnerability = parse_sv(value)
        elif key == "ah":
            data.board_header = _decode_text(value)
        elif key == "mb":
            bid: str = value.strip()
            data.auction.append(BidWithAnnotation(bid.rstrip("!"), bid.endswith("!")))
        elif key == "an":
            # Explanations belong to the most recent call
            if data.auction:
                data.auction[-1].annotation = _decode_text(value)
        elif key == "pc":
            card: Optional[Card] = Card.from_str(value.strip())
            if card is None:
                logging.debug(f"Ignoring unknown played card: {value}")
            else:
                data.play.append(card)
        elif key == "mc":
            claim: str = value.strip()
            data.claim = int(claim) if claim.isdigit() else None

    if recognized == 0:
        return StructuralError(NOTATION, f"No LIN nodes found in: {lin_str[:80]}")
    return data


def parse_lin(lin_str: str) -> LinData:
    """
    Parse a single-line LIN record.
    :raises StructuralError: The text holds no recognized LIN node
    """
    result = _scan_lin(lin_str)
    if isinstance(result, DealFormatError):
        raise result
    return result


def try_parse_lin(lin_str: str) -> Optional[LinData]:
    result = _scan_lin(lin_str)
    return result if isinstance(result, LinData) else None


def _hand_to_lin(hand: Hand) -> str:
    return "".join(suit.abbreviation() + hand.holding(suit) for suit in DISPLAY_SUITS)


def format_lin(data: LinData) -> str:
    """
    Encode a LinData record as a single LIN line. The East hand is left implicit.
    """
    nodes: List[Tuple[str, str]] = []
    if any(data.player_names):
        nodes.append(("pn", ",".join(data.player_names)))
    dealer_code: int = _LIN_DIRECTION_MAP.index(data.dealer) + 1
    hands: List[str] = [_hand_to_lin(data.deal.hand(direction)) for direction in _LIN_DIRECTION_MAP[:3]]
    nodes.append(("md", f"{dealer_code}" + ",".join(hands) + ","))
    nodes.append(("sv", _VUL_CODES[data.vulnerability]))
    if data.board_header:
        nodes.append(("ah", _encode_text(data.board_header)))
    for call in data.auction:
        nodes.append(("mb", call.bid + ("!" if call.alert else "")))
        if call.annotation:
            nodes.append(("an", _encode_text(call.annotation)))
    for card in data.play:
        nodes.append(("pc", str(card)))
    if data.claim is not None:
        nodes.append(("mc", str(data.claim)))
    return "".join(f"{key}|{value}|" for key, value in nodes)


def format_lin_board(board: Board) -> str:
    """Hand record line: qx|o<board>|md|...|ah|Board+<board>|sv|...|pg||"""
    prefix: str = f"qx|o{board.number}|" if board.number is not None else ""
    return prefix + format_lin(LinData.from_board(board)) + "pg||"


def parse_lin_string(content: str) -> List[LinData]:
    """Parse one LIN record per non-blank line, skipping lines that hold no LIN nodes"""
    records: List[LinData] = []
    for line in content.splitlines():
        if not line.strip():
            continue
        data: Optional[LinData] = try_parse_lin(line)
        if data is None:
            logging.warning(f"Malformed record {line[:80]}")
            continue
        records.append(data)
    return records


def parse_lin_file(file_path: Path) -> List[LinData]:
    with open(file_path, "r", encoding="utf-8", errors="replace") as lin_file:
        return parse_lin_string(lin_file.read())


def write_lin_file(file_path: Path, boards: Sequence[Board]) -> None:
    lines: List[str] = [format_lin_board(board) for board in boards]
    file_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

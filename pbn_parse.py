import re
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union, Final
from common_objects import Board, Deal, Direction, Hand, Vulnerability, lineProf
from common_objects import DealFormatError, StructuralError, CharacterError
from oneline_parse import scan_dotted_hand
from fourth_hand import complete_deal

NOTATION: Final[str] = "pbn"
TAG_PATTERN = re.compile(r'\[(\w+)\s+"([^"]*)"\]')
UNKNOWN_HAND: Final[str] = "-"


@dataclass
class TagPair:
    """A parsed PBN tag pair"""
    name: str
    value: str


def parse_tag_pair(line: str) -> Optional[TagPair]:
    """Parse a tag pair from a line: [TagName "value"]"""
    tag_match = TAG_PATTERN.fullmatch(line.strip())
    if not tag_match:
        return None
    tag_name, tag_value = tag_match.groups()
    return TagPair(tag_name, tag_value)


def _scan_pbn_deal(deal_str: str) -> Union[Deal, DealFormatError]:
    deal_str = deal_str.strip()
    if len(deal_str) < 2 or deal_str[1] != ":":
        return StructuralError(NOTATION, f"Expected '<direction>:<hands>', got: '{deal_str}'")
    first: Optional[Direction] = Direction.from_char(deal_str[0])
    if first is None:
        return CharacterError(NOTATION, f"Invalid direction character: {deal_str[0]}")
    hands: List[str] = deal_str[2:].split()
    if len(hands) not in (3, 4):
        return StructuralError(NOTATION, f"Expected 4 hands, got {len(hands)}")
    if len(hands) == 3:
        hands.append(UNKNOWN_HAND)

    deal = Deal()
    unknown: List[Direction] = []
    for i, hand_str in enumerate(hands):
        direction: Direction = first.offset(i)
        if hand_str == UNKNOWN_HAND:
            unknown.append(direction)
            continue
        hand: Union[Hand, DealFormatError] = scan_dotted_hand(hand_str, NOTATION)
        if isinstance(hand, DealFormatError):
            return hand
        deal.set_hand(direction, hand)
    if len(unknown) == 1:
        complete_deal(deal, unknown[0])
    return deal


def parse_pbn_deal(deal_str: str) -> Deal:
    """
    Parse a Deal tag value such as "N:K843.T542.J6.863 AQJ7.K.Q75.AT942 962.AJ7.KT82.J75 T5.Q9863.A943.KQ".
    A single hand given as "-" (or omitted) is the remainder of the deck.
    :raises StructuralError: Missing direction prefix, wrong number of hands or suit groups
    :raises CharacterError: Bad direction or rank character
    """
    result = _scan_pbn_deal(deal_str)
    if isinstance(result, DealFormatError):
        raise result
    return result


def is_deal_tag_line(line: str) -> bool:
    return line.lstrip().startswith("[Deal ")


def parse_deal_tag(line: str) -> Optional[Deal]:
    """Extract and parse the deal from a standalone [Deal "..."] line; None if it is not one"""
    tag: Optional[TagPair] = parse_tag_pair(line)
    if tag is None or tag.name != "Deal":
        return None
    result = _scan_pbn_deal(tag.value)
    return result if isinstance(result, Deal) else None


class PBNParser:
    """Parser for PBN (Portable Bridge Notation) files"""

    def __init__(self):
        self.boards: List[Board] = []
        self.current_board: Board = Board()
        self.has_content: bool = False
        self.in_commentary: bool = False

    def parse(self, content: str) -> List[Board]:
        """Parse PBN content and return a Board for each game"""
        for raw_line in content.splitlines():
            line: str = raw_line.strip()

            # Track multi-line commentary blocks { ... }
            if self.in_commentary:
                if "}" in line:
                    self.in_commentary = False
                continue
            if line.startswith("{"):
                if "}" not in line:
                    self.in_commentary = True
                continue

            # An empty line ends a board only once a tag has been seen
            if not line:
                self._finish_board()
                continue

            # Skip line comments and escape lines
            if line.startswith(";") or line.startswith("%"):
                continue

            if line.startswith("["):
                tag: Optional[TagPair] = parse_tag_pair(line)
                if tag is not None:
                    self.has_content = True
                    self._apply_tag(tag)

        self._finish_board()
        return self.boards

    def _finish_board(self) -> None:
        if self.has_content:
            self.boards.append(self.current_board)
            self.current_board = Board()
            self.has_content = False

    def _apply_tag(self, tag: TagPair) -> None:
        board: Board = self.current_board
        if tag.name == "Board":
            if tag.value.strip().isdigit():
                board.number = int(tag.value)
        elif tag.name == "Dealer":
            if tag.value:
                board.dealer = Direction.from_char(tag.value[0])
        elif tag.name == "Vulnerable":
            board.vulnerable = Vulnerability.from_pbn(tag.value) or Vulnerability.NONE
        elif tag.name == "Deal":
            result = _scan_pbn_deal(tag.value)
            if isinstance(result, Deal):
                board.deal = result
            else:
                logging.info(f"Ignoring Deal tag: {result}")
        elif tag.name == "Event":
            board.event = tag.value or None
        elif tag.name == "Site":
            board.site = tag.value or None
        elif tag.name == "Date":
            board.date = tag.value or None
        elif tag.name == "DoubleDummyTricks":
            board.double_dummy_tricks = tag.value
        elif tag.name == "OptimumScore":
            board.optimum_score = tag.value
        elif tag.name == "ParContract":
            board.par_contract = tag.value


def read_pbn(content: str) -> List[Board]:
    return PBNParser().parse(content)


def read_pbn_file(file_path: Path) -> List[Board]:
    parser = PBNParser()
    lineProf.add_function(parser.parse)
    with open(file_path, 'r', encoding='iso-8859-1') as f:
        return parser.parse(f.read())


def board_to_pbn(board: Board) -> str:
    """Convert a single board to PBN tag lines"""
    lines: List[str] = [
        f'[Event "{board.event or ""}"]',
        f'[Site "{board.site or ""}"]',
        f'[Date "{board.date or ""}"]',
    ]
    if board.number is not None:
        lines.append(f'[Board "{board.number}"]')
    # Player names are empty for hand records
    for seat in ["West", "North", "East", "South"]:
        lines.append(f'[{seat} ""]')
    if board.dealer is not None:
        lines.append(f'[Dealer "{board.dealer.abbreviation()}"]')
    lines.append(f'[Vulnerable "{board.vulnerable.to_pbn()}"]')
    lines.append(f'[Deal "{board.deal.to_pbn(board.dealer or Direction.NORTH)}"]')
    for tag_name in ["Scoring", "Declarer", "Contract", "Result"]:
        lines.append(f'[{tag_name} ""]')
    if board.double_dummy_tricks is not None:
        lines.append(f'[DoubleDummyTricks "{board.double_dummy_tricks}"]')
    if board.optimum_score is not None:
        lines.append(f'[OptimumScore "{board.optimum_score}"]')
    if board.par_contract is not None:
        lines.append(f'[ParContract "{board.par_contract}"]')
    return "\n".join(lines) + "\n"


def write_pbn(boards: Sequence[Board]) -> str:
    output: str = "% PBN 2.1\n% EXPORT\n\n"
    return output + "\n".join(board_to_pbn(board) for board in boards)


def write_pbn_file(file_path: Path, boards: Sequence[Board]) -> None:
    file_path.write_text(write_pbn(boards), encoding="iso-8859-1")

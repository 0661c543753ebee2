"""
Printall: the default dealer.exe output, a "newspaper style" 4-column layout

       1.
    J 7 3               9 8                 A Q 5 4 2           K T 6
    3                   9 6 4 2             K J 8 7             A Q T 5
    K Q J T 9 8 5       7                   3 2                 A 6 4
    T 5                 9 8 7 4 3 2         A K                 Q J 6

Columns are North, East, South, West, each 20 characters wide.
Rows are Spades, Hearts, Diamonds, Clubs.
"""
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union, Final
from common_objects import Card, Deal, Direction, Hand, Rank, DISPLAY_SUITS
from common_objects import DealFormatError, StructuralError, CharacterError

NOTATION: Final[str] = "printall"
COLUMN_WIDTH: Final[int] = 20
COLUMN_DIRECTIONS: Final[List[Direction]] = [Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST]
VOID_MARKER: Final[str] = "-"
STATS_PREFIXES: Final[Tuple[str, ...]] = ("Generated ", "Produced ", "Initial ", "Time ")


def is_board_number_line(line: str) -> bool:
    """Check if a line looks like a board number header, e.g. "   1." or "  42." """
    trimmed = line.strip()
    return trimmed.endswith(".") and trimmed[:-1].strip().isdigit()


def _format_column(hand: Hand, suit) -> str:
    ranks: List[str] = [card.rank.abbreviation() for card in hand.cards_in_suit(suit)]
    if not ranks:
        return VOID_MARKER + " "
    spaced = " ".join(ranks) + " "
    # Long suits are packed so the next column still starts on its boundary
    return spaced if len(spaced) <= COLUMN_WIDTH else "".join(ranks) + " "


def format_printall(deal: Deal, board_number: int) -> str:
    """
    Format a deal as a printall block: board number line, 4 suit lines and a blank line
    """
    lines: List[str] = [f"{board_number:4d}."]
    for suit in DISPLAY_SUITS:
        columns: List[str] = [_format_column(deal.hand(direction), suit) for direction in COLUMN_DIRECTIONS]
        lines.append("".join(column.ljust(COLUMN_WIDTH) for column in columns[:-1]) + columns[-1])
    return "\n".join(lines) + "\n\n"


def _scan_printall(lines: Sequence[str]) -> Union[Tuple[Deal, int], DealFormatError]:
    idx: int = 0
    while idx < len(lines) and not lines[idx].strip():
        idx += 1
    if idx >= len(lines):
        return StructuralError(NOTATION, "No printall data found")

    header: str = lines[idx].strip()
    if not is_board_number_line(header):
        return StructuralError(NOTATION, f"Expected board number line (e.g. '   1.'), got: '{header}'")
    idx += 1

    hands: Dict[Direction, Hand] = {direction: Hand() for direction in COLUMN_DIRECTIONS}
    for suit in DISPLAY_SUITS:
        if idx >= len(lines):
            return StructuralError(NOTATION, f"Expected suit line for {suit.name}, but reached end of input")
        line: str = lines[idx].rstrip("\r\n")
        idx += 1

        for col_idx, direction in enumerate(COLUMN_DIRECTIONS):
            # Slots sit at fixed offsets no matter how full the previous slot is
            start: int = col_idx * COLUMN_WIDTH
            column: str = line[start:start + COLUMN_WIDTH].strip()
            if column == VOID_MARKER or not column:
                continue
            for token in column.split():
                for c in token:
                    rank: Optional[Rank] = Rank.from_char(c)
                    if rank is None:
                        return CharacterError(NOTATION, f"Invalid rank character '{c}' in printall")
                    hands[direction].add_card(Card(suit, rank))

    # Skip trailing blank line if present
    if idx < len(lines) and not lines[idx].strip():
        idx += 1

    return Deal(hands), idx


def parse_printall(lines: Sequence[str]) -> Tuple[Deal, int]:
    """
    Parse a single printall block (one deal).
    :param lines: Board number line followed by 4 suit lines, optionally a trailing blank line
    :return: The parsed deal and the number of lines consumed
    :raises StructuralError: Bad header or missing suit line
    :raises CharacterError: Unrecognized rank character
    """
    result = _scan_printall(lines)
    if isinstance(result, DealFormatError):
        raise result
    return result


def try_parse_printall(lines: Sequence[str]) -> Optional[Tuple[Deal, int]]:
    result = _scan_printall(lines)
    return None if isinstance(result, DealFormatError) else result


def _is_stats_line(line: str) -> bool:
    return line.startswith(STATS_PREFIXES)


def parse_printall_string(content: str) -> List[Deal]:
    """Parse all printall deals from dealer output, skipping statistics and other stray lines"""
    lines: List[str] = content.splitlines()
    deals: List[Deal] = []
    pos: int = 0
    while pos < len(lines):
        trimmed = lines[pos].strip()
        if not trimmed or _is_stats_line(trimmed):
            pos += 1
            continue
        parsed = try_parse_printall(lines[pos:])
        if parsed is None:
            logging.debug(f"Skipping unrecognized line {pos + 1}: {trimmed[:80]}")
            pos += 1
            continue
        deal, consumed = parsed
        deals.append(deal)
        pos += consumed
    return deals


def parse_printall_file(file_path: Path) -> List[Deal]:
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return parse_printall_string(f.read())


def write_printall_file(file_path: Path, deals: Sequence[Deal], first_board: int = 1) -> None:
    text = "".join(format_printall(deal, first_board + i) for i, deal in enumerate(deals))
    file_path.write_text(text, encoding="utf-8")

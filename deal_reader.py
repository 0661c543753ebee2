"""
Streaming deal reader with format auto-detection.

Reads deals from any forward-only source of text lines (an open file,
io.StringIO, sys.stdin, a list of strings) and recognizes, line by line:

    oneline     n AKQT3.J6.KJ42.95 e 652.AK42.AQ87.T4 s J74.QT95.T.AK863 w 98.873.9653.QJ72
    PBN         [Deal "N:KQ4.QJ982..AKQ43 J653.A73.985.J97 9.K54.KQT732.652 AT872.T6.AJ64.T8"]
    printall    a "   1." board number line followed by 4 suit lines

Everything else (PBN metadata, dealer.exe statistics, comments) is skipped,
so raw dealer.exe output can be fed in directly.
"""
import logging
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Deque, Iterable, Iterator, List, Optional, Tuple
from common_objects import Deal
from oneline_parse import try_parse_oneline
from pbn_parse import is_deal_tag_line, parse_deal_tag
from printall_parse import is_board_number_line, try_parse_printall

PRINTALL_BODY_LINES: int = 4


class ReaderState(Enum):
    SCANNING = 0
    AWAITING_PRINTALL_BODY = 1
    EXHAUSTED = 2


class DealReader:
    """
    Iterator over the deals found in a text source.

    The reader borrows the source and never closes it. Decoders are tried in a fixed
    order (oneline, PBN Deal tag, printall block) and the first one that accepts a
    line wins. A printall header pulls the next 4 lines unconditionally; if they do
    not decode, those lines are gone and the sequence ends, unless
    replay_failed_blocks is set, in which case they are scanned again as ordinary lines.
    """

    def __init__(self, source: Iterable[str], replay_failed_blocks: bool = False):
        self._lines: Iterator[str] = iter(source)
        self._pending: Deque[str] = deque()
        self.replay_failed_blocks: bool = replay_failed_blocks
        self.state: ReaderState = ReaderState.SCANNING
        self.line_number: int = 0
        self.deals_read: int = 0

    def __iter__(self) -> "DealReader":
        return self

    def _read_line(self) -> Optional[str]:
        """Next line from the replay queue or the source; None at end of input"""
        if self._pending:
            return self._pending.popleft()
        line: Optional[str] = next(self._lines, None)
        if line is not None:
            self.line_number += 1
        return line

    def _classify_line(self, line: str) -> Tuple[Optional[Deal], bool]:
        """
        Try the single-line decoders.
        :return: (deal, False) if the line held a deal, (None, True) if it starts a printall
                 block, (None, False) if it is not recognized
        """
        deal: Optional[Deal] = try_parse_oneline(line)
        if deal is not None:
            return deal, False
        if is_deal_tag_line(line):
            deal = parse_deal_tag(line)
            if deal is not None:
                return deal, False
        return None, is_board_number_line(line)

    def _read_printall(self, header: str) -> Optional[Deal]:
        body: List[str] = []
        for _ in range(PRINTALL_BODY_LINES):
            line: Optional[str] = self._read_line()
            if line is None:
                logging.debug(f"Input ended inside the printall block at line {self.line_number}")
                self.state = ReaderState.EXHAUSTED
                return None
            body.append(line)

        parsed = try_parse_printall([header] + body)
        if parsed is not None:
            self.state = ReaderState.SCANNING
            return parsed[0]

        if self.replay_failed_blocks:
            logging.info(f"Rescanning 4 lines after bogus printall header '{header.strip()}'")
            self._pending.extend(body)
            self.state = ReaderState.SCANNING
        else:
            logging.warning(f"Malformed printall block ending at line {self.line_number}, stopping")
            self.state = ReaderState.EXHAUSTED
        return None

    def __next__(self) -> Deal:
        while self.state != ReaderState.EXHAUSTED:
            line: Optional[str] = self._read_line()
            if line is None:
                self.state = ReaderState.EXHAUSTED
                break

            trimmed: str = line.strip()
            if not trimmed:
                continue

            deal, starts_block = self._classify_line(trimmed)
            if starts_block:
                self.state = ReaderState.AWAITING_PRINTALL_BODY
                deal = self._read_printall(line)
            if deal is not None:
                self.deals_read += 1
                return deal
            if not starts_block:
                logging.debug(f"Skipping line {self.line_number}: {trimmed[:80]}")
        raise StopIteration


def read_deals(source: Iterable[str], replay_failed_blocks: bool = False) -> Iterator[Deal]:
    yield from DealReader(source, replay_failed_blocks)


def read_deals_file(file_path: Path, replay_failed_blocks: bool = False) -> Iterator[Deal]:
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        yield from DealReader(f, replay_failed_blocks)

import threading
import logging
from pathlib import Path
from typing import List, Dict, Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from common_objects import Board, DealFormatError, lineProf
from pbn_parse import read_pbn_file
from lin_parse import parse_lin_file
from deal_reader import read_deals_file

class DataCollector:
    """Thread-safe collector for parsed boards, keyed by source file."""

    def __init__(self):
        self._lock = threading.Lock()
        self.boards: Dict[Path, List[Board]] = {}
        self.success: int = 0

    def add_batch(self, file_path: Path, batch: List[Board]):
        """Add a batch of records in a thread-safe manner."""
        with self._lock:
            self.boards[file_path] = batch
            self.success = self.success + 1

def get_file_extension(file_path: Path) -> str:
    """Get file extension in uppercase."""
    return file_path.suffix.upper()

def parse_lin_boards(file_path: Path) -> List[Board]:
    return [record.to_board() for record in parse_lin_file(file_path)]

def make_stream_parser(replay_failed_blocks: bool = False) -> Callable[[Path], List[Board]]:
    """Parser for dealer output in any mix of oneline, printall and PBN Deal lines"""
    def parse_stream_file(file_path: Path) -> List[Board]:
        deals = read_deals_file(file_path, replay_failed_blocks)
        return [Board.numbered(number, deal) for number, deal in enumerate(deals, 1)]
    return parse_stream_file

parsers: Dict[str, Callable[[Path], List[Board]]] = {}

def register_parser(ext: str, parser_func: Callable[[Path], List[Board]]):
    parsers[ext.upper()] = parser_func

def get_parser_for_file(file_path: Path) -> Callable[[Path], List[Board]]:
    """Return the appropriate parser function for the file type."""
    return parsers[get_file_extension(file_path)]

def register_stream_parsers(replay_failed_blocks: bool = False) -> None:
    stream_parser = make_stream_parser(replay_failed_blocks)
    for ext in [".TXT", ".DLR", ".OUT"]:
        register_parser(ext, stream_parser)

# Register parsers
register_parser(".PBN", read_pbn_file)
register_parser(".LIN", parse_lin_boards)
register_stream_parsers()

def process_file(file_path: Path, collector: DataCollector) -> None:
    """Process a single file and add results to collector."""
    try:
        parser: Callable[[Path], List[Board]] = get_parser_for_file(file_path)
        raw_data: List[Board] = parser(file_path)
        collector.add_batch(file_path, raw_data)

    except (DealFormatError, OSError, UnicodeDecodeError) as e:
        logging.error(f"Error processing file {file_path}: {str(e)}")

def collect_files(paths: List[Path]) -> List[Path]:
    """Collect all supported files from the given paths."""
    files = []

    for path in paths:
        if path.is_file():
            if get_file_extension(path) in parsers.keys():
                files.append(path)
        elif path.is_dir():
            # Recursively find all supported files
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and get_file_extension(p) in parsers))
        else:
            logging.warning(f"No such file or directory: {path}")

    return files

def ingest_files(paths: List[Path], parallelize: bool = True) -> List[Board]:
    """
    Read every supported file under the given paths into Boards.

    Args:
        paths: List of file or directory paths to process
        parallelize: Parse files on a thread pool instead of one after another
    Returns:
        Boards in the order their files were collected
    """
    # Collect all files to process
    files_to_process = collect_files(paths)

    if not files_to_process:
        logging.warning("No supported files found to process")
        return []

    logging.info(f"Found {len(files_to_process)} files to process")

    collector = DataCollector()
    lineProf.add_function(process_file)

    # Process files (serial or parallel based on parallelize)
    if parallelize: # Parallel processing
        with ThreadPoolExecutor() as executor:
            future_to_file = {
                executor.submit(process_file, file_path, collector): file_path
                for file_path in files_to_process
            }

            # Wait for completion and handle any errors
            for future in as_completed(future_to_file):
                file_path = future_to_file[future]
                try:
                    future.result()
                except Exception as e:
                    logging.error(f"Failed to process {file_path}: {str(e)}")
    else:   # Serial processing
        for file_path in files_to_process:
            process_file(file_path, collector)

    boards: List[Board] = [board for file_path in files_to_process for board in collector.boards.get(file_path, [])]
    logging.info(f"Successfully processed {collector.success} files")
    logging.info(f"Processing complete. Read {len(boards)} total boards")

    return boards

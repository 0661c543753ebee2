import logging
import cProfile
import pstats
import sys
from dataclasses import dataclass
from configparser import ConfigParser
from pathlib import Path
from argparse import ArgumentParser, Namespace
from typing import Callable, Dict, List, Optional, Sequence
from common_objects import Board, lineProf
from ingest import ingest_files, register_stream_parsers
from deal_table import write_deal_csv
from pbn_parse import write_pbn
from lin_parse import format_lin_board
from oneline_parse import format_oneline
from printall_parse import format_printall

def _boards_to_oneline(boards: Sequence[Board]) -> str:
    return "".join(format_oneline(board.deal) for board in boards)

def _boards_to_printall(boards: Sequence[Board]) -> str:
    return "".join(format_printall(board.deal, board.number if board.number is not None else i)
                   for i, board in enumerate(boards, 1))

def _boards_to_lin(boards: Sequence[Board]) -> str:
    return "".join(format_lin_board(board) + "\n" for board in boards)

writers: Dict[str, Callable[[Sequence[Board]], str]] = {
    "pbn": write_pbn,
    "lin": _boards_to_lin,
    "oneline": _boards_to_oneline,
    "printall": _boards_to_printall,
}

@dataclass
class ConvertConfig:
    """Configuration for deal conversion."""
    output_format: str = "pbn"
    encoding: str = "utf-8"
    replay_failed_blocks: bool = False
    parallelize: bool = True

    @classmethod
    def from_config_file(cls, config_path: Path) -> 'ConvertConfig':
        """Load configuration from a file."""
        config = ConfigParser()
        config.read(config_path)
        output_format = config.get('Output', 'format', fallback=cls.output_format).lower()
        if output_format not in writers:
            raise ValueError(f"Unknown output format '{output_format}' in {config_path}")
        return cls(
            output_format=output_format,
            encoding=config.get('Output', 'encoding', fallback=cls.encoding),
            replay_failed_blocks=config.getboolean('Reader', 'replay_failed_blocks', fallback=cls.replay_failed_blocks),
            parallelize=config.getboolean('Ingest', 'parallelize', fallback=cls.parallelize)
        )
# end class ConvertConfig

def build_arg_parser() -> ArgumentParser:
    arg_list = ArgumentParser(description="Convert bridge deals between PBN, LIN, oneline and printall formats")
    arg_list.add_argument("files", nargs="+", help="Deal files or directories to read (PBN, LIN, dealer output)")
    arg_list.add_argument("-t", "--to", choices=sorted(writers.keys()), help="Output format (default pbn)")
    arg_list.add_argument("-o", "--output", help="Output file, default stdout")
    arg_list.add_argument("--csv", help="Also write a per-deal CSV summary to this path")
    arg_list.add_argument("-c", "--config", help="INI configuration file")
    arg_list.add_argument("-s", "--serial", action="store_true", help="Read files one after another")
    arg_list.add_argument("--replay", action="store_true", help="Rescan lines after a malformed printall block")
    arg_list.add_argument("--profile", action="store_true", help="Enable performance profiling")
    arg_list.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    return arg_list

def resolve_config(args: Namespace) -> ConvertConfig:
    config: ConvertConfig = ConvertConfig.from_config_file(Path(args.config)) if args.config else ConvertConfig()
    if args.to:
        config.output_format = args.to
    if args.serial:
        config.parallelize = False
    if args.replay:
        config.replay_failed_blocks = True
    return config

def _main_impl(args: Namespace) -> int:
    config: ConvertConfig = resolve_config(args)
    register_stream_parsers(config.replay_failed_blocks)
    boards: List[Board] = ingest_files([Path(f) for f in args.files], parallelize=config.parallelize)
    if not boards:
        logging.warning("No deals found")
        return 1

    text: str = writers[config.output_format](boards)
    if args.output:
        Path(args.output).write_text(text, encoding=config.encoding)
        logging.info(f"Wrote {len(boards)} deals to {args.output}")
    else:
        sys.stdout.write(text)

    if args.csv:
        write_deal_csv(boards, Path(args.csv))
    return 0

def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the deal-convert console script."""
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s - %(levelname)s - %(message)s')
    try:
        if args.profile:
            # Set up profiling
            profiler = cProfile.Profile()
            profiler.enable()
            lineProf.add_function(_main_impl)
            status: int = lineProf.runcall(_main_impl, args)
            lineProf.print_stats()
            profiler.disable()
            stats = pstats.Stats(profiler)
            stats.strip_dirs().sort_stats('time').print_stats(10)  # Top 10 functions sorted by time
            return status
        return _main_impl(args)
    except (ValueError, OSError) as e:
        logging.error(f"Error during processing: {str(e)}")
        return 2

if __name__ == "__main__":
    sys.exit(main())

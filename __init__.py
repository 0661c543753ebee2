"""
bridge-deal-codecs
==================
Readers and writers for bridge deal records in the plain-text notations
used by bridge tools.

This package provides functionality to:
- Decode deals from PBN, LIN, dealer.exe oneline and printall output
- Stream deals out of mixed-format text with automatic format detection
- Infer the fourth hand when a notation lists only three
- Write deals back out in any of those notations
- Export a per-deal CSV summary
"""

__version__ = "0.1.0"

# Note: With a flat module structure, imports should be done directly:
# Example:
#   from deal_reader import DealReader
#   from printall_parse import parse_printall, format_printall
#   from common_objects import Deal, Direction

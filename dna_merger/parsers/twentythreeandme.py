"""23andMe raw data parser.

23andMe format (tab-separated, comment preamble):
# This data file generated by 23andMe at: Mon Jan 01 00:00:00 2024
# file_id: 5f3c...
# signature: 9a1b...
# timestamp: 2024-01-01 00:00:00
# ... reference human assembly build 37 ...
# rsid	chromosome	position	genotype
rs4477212	1	82154	AA
i6019299	MT	16519	T

Hemizygous X/Y/MT calls are reported as a single character.
"""

import re

from dna_merger.models import DNAFormat, ParseResult
from dna_merger.parsers.base import VendorParser
from dna_merger.progress import ProgressCallback


class TwentyThreeAndMeParser(VendorParser):
    """Parser for 23andMe tab-separated exports.

    Columns:
    0: rsid - rsID or 23andMe internal ID (i-prefixed)
    1: chromosome - 1-22, X, Y, MT
    2: position - Base pair position
    3: genotype - Two-character call, or one character for hemizygous calls
    """

    format = DNAFormat.TWENTYTHREEANDME
    min_columns = 4
    allow_single_char = True
    metadata_patterns = (
        ("file_id", re.compile(r"file_id:\s*(.+)$", re.IGNORECASE)),
        ("signature", re.compile(r"signature:\s*(.+)$", re.IGNORECASE)),
        ("timestamp", re.compile(r"timestamp:\s*(.+)$", re.IGNORECASE)),
        ("reference", re.compile(r"assembly build\s*(\d+)", re.IGNORECASE)),
    )

    def split_line(self, line: str) -> list[str]:
        return line.split("\t")


def parse_23andme(
    content: str,
    file_index: int = 0,
    progress_callback: ProgressCallback | None = None,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
) -> ParseResult:
    """Parse a 23andMe raw data file.

    Args:
        content: Full text of the file
        file_index: Index of this file among the merge inputs
        progress_callback: Optional progress percentage callback
        allow_multibase: Accepted for interface parity; 23andMe has no indel strings
        include_invalid_positions: Keep rows with chromosome/position 0

    Returns:
        ParseResult tagged as 23andme
    """
    parser = TwentyThreeAndMeParser(allow_multibase, include_invalid_positions)
    return parser.parse(content, file_index, progress_callback)

"""MyHeritage raw data parser.

MyHeritage format (quoted CSV, "##key=value" preamble):
##fileformat=MyHeritage
##format=MHv1.0
##chip=GSA
##reference=build37
RSID,CHROMOSOME,POSITION,RESULT
"rs4477212","1","82154","AA"
"""

import re

from dna_merger.models import DNAFormat, ParseResult
from dna_merger.parsers.base import VendorParser
from dna_merger.parsers.csv_tokens import split_csv_line
from dna_merger.progress import ProgressCallback


class MyHeritageParser(VendorParser):
    """Parser for MyHeritage CSV exports.

    The ##format= value is reported as the file version.
    """

    format = DNAFormat.MYHERITAGE
    min_columns = 4
    metadata_patterns = (
        ("chip", re.compile(r"^##chip=(.+)$", re.IGNORECASE)),
        ("version", re.compile(r"^##format=(.+)$", re.IGNORECASE)),
        ("reference", re.compile(r"^##reference=(.+)$", re.IGNORECASE)),
    )

    def split_line(self, line: str) -> list[str]:
        return split_csv_line(line)


def parse_myheritage(
    content: str,
    file_index: int = 0,
    progress_callback: ProgressCallback | None = None,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
) -> ParseResult:
    """Parse a MyHeritage raw data file.

    Args:
        content: Full text of the file
        file_index: Index of this file among the merge inputs
        progress_callback: Optional progress percentage callback
        allow_multibase: Accepted for interface parity; MyHeritage has no indel strings
        include_invalid_positions: Keep rows with chromosome/position 0

    Returns:
        ParseResult tagged as myheritage
    """
    parser = MyHeritageParser(allow_multibase, include_invalid_positions)
    return parser.parse(content, file_index, progress_callback)

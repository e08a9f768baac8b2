"""FamilyTreeDNA raw data parser.

FTDNA format (CSV, quoted or unquoted, no comment preamble):
RSID,CHROMOSOME,POSITION,RESULT
"rs4477212","1","82154","AA"
rs3094315,1,752566,AG
"""

from dna_merger.models import DNAFormat, ParseResult
from dna_merger.parsers.base import VendorParser
from dna_merger.parsers.csv_tokens import split_csv_line
from dna_merger.progress import ProgressCallback


class FTDNAParser(VendorParser):
    """Parser for FamilyTreeDNA CSV exports."""

    format = DNAFormat.FTDNA
    min_columns = 4

    def split_line(self, line: str) -> list[str]:
        return split_csv_line(line)


def parse_ftdna(
    content: str,
    file_index: int = 0,
    progress_callback: ProgressCallback | None = None,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
) -> ParseResult:
    """Parse a FamilyTreeDNA raw data file."""
    parser = FTDNAParser(allow_multibase, include_invalid_positions)
    return parser.parse(content, file_index, progress_callback)

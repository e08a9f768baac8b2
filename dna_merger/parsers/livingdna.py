"""Living DNA raw data parser.

Living DNA format (whitespace-separated):
# Living DNA customer genotype data download file version: 1.0.1
# Genotype chip: GSAv3
# Human Genome Reference Build 37 (GRCh37.p13)
# rsid	chromosome	position	genotype
rs4477212	1	82154	AA
rs11280701	3	117564	TAAGTGTAAGTG

Indels are reported as multi-base strings; with allow_multibase they are
stored split into two alleles ("TAAGTG TAAGTG"), otherwise skipped.
"""

import re

from dna_merger.models import DNAFormat, ParseResult
from dna_merger.parsers.base import VendorParser
from dna_merger.progress import ProgressCallback


class LivingDNAParser(VendorParser):
    """Parser for Living DNA exports."""

    format = DNAFormat.LIVINGDNA
    min_columns = 4
    supports_multibase = True
    metadata_patterns = (
        ("chip", re.compile(r"genotype chip:\s*(\S+)", re.IGNORECASE)),
        ("version", re.compile(r"file version:\s*(\S+)", re.IGNORECASE)),
        ("reference", re.compile(r"human genome reference build\s*(\d+)", re.IGNORECASE)),
    )

    def split_line(self, line: str) -> list[str]:
        return line.split()


def parse_livingdna(
    content: str,
    file_index: int = 0,
    progress_callback: ProgressCallback | None = None,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
) -> ParseResult:
    """Parse a Living DNA raw data file.

    Args:
        content: Full text of the file
        file_index: Index of this file among the merge inputs
        progress_callback: Optional progress percentage callback
        allow_multibase: Keep multi-base indel genotypes, split into two alleles
        include_invalid_positions: Keep rows with chromosome/position 0

    Returns:
        ParseResult tagged as livingdna
    """
    parser = LivingDNAParser(allow_multibase, include_invalid_positions)
    return parser.parse(content, file_index, progress_callback)

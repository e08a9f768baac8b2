"""AncestryDNA raw data parser.

AncestryDNA format (tab-separated, alleles in separate columns):
#AncestryDNA raw data download
#This file was generated by AncestryDNA at: 01/01/2024 00:00:00 UTC
#Data was collected using AncestryDNA array version: V2.0
#Data is formatted using AncestryDNA converter version: V1.0
#... human reference build 37.1 ...
rsid	chromosome	position	allele1	allele2
rs4477212	1	82154	A	A
rs6681049	23	800007	0	0

Chromosomes X, Y, PAR and MT are encoded as 23, 24, 25 and 26 and are kept
in that form.
"""

import re

from dna_merger.models import DNAFormat, ParseResult
from dna_merger.parsers.base import VendorParser
from dna_merger.progress import ProgressCallback


class AncestryParser(VendorParser):
    """Parser for AncestryDNA exports.

    Columns:
    0: rsid
    1: chromosome - 1-26 (23=X, 24=Y, 25=PAR, 26=MT)
    2: position
    3: allele1
    4: allele2
    """

    format = DNAFormat.ANCESTRY
    min_columns = 5
    valid_chromosomes = "1-26, X, Y, MT"
    metadata_patterns = (
        ("chip", re.compile(r"array version:\s*(\S+)", re.IGNORECASE)),
        ("version", re.compile(r"converter version:\s*(\S+)", re.IGNORECASE)),
        ("reference", re.compile(r"reference build\s*([\d.]+)", re.IGNORECASE)),
    )

    def split_line(self, line: str) -> list[str]:
        return line.split("\t")

    def build_genotype(self, fields: list[str]) -> str:
        # "-" "-" -> "--", "0" "0" -> "00"
        return fields[3] + fields[4]


def parse_ancestry(
    content: str,
    file_index: int = 0,
    progress_callback: ProgressCallback | None = None,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
) -> ParseResult:
    """Parse an AncestryDNA raw data file.

    Args:
        content: Full text of the file
        file_index: Index of this file among the merge inputs
        progress_callback: Optional progress percentage callback
        allow_multibase: Accepted for interface parity; AncestryDNA has no indel strings
        include_invalid_positions: Keep rows with chromosome/position 0

    Returns:
        ParseResult tagged as ancestry
    """
    parser = AncestryParser(allow_multibase, include_invalid_positions)
    return parser.parse(content, file_index, progress_callback)

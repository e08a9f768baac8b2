"""Vendor raw-data parsers.

One VendorParser subclass per dialect, selected through the PARSERS lookup
table keyed by DNAFormat (the output of detect_format or an explicit choice).
"""

from dna_merger.exceptions import UnknownFormatError
from dna_merger.models import DNAFormat, ParseResult
from dna_merger.parsers.ancestry import AncestryParser, parse_ancestry
from dna_merger.parsers.base import VendorParser
from dna_merger.parsers.ftdna import FTDNAParser, parse_ftdna
from dna_merger.parsers.livingdna import LivingDNAParser, parse_livingdna
from dna_merger.parsers.myheritage import MyHeritageParser, parse_myheritage
from dna_merger.parsers.twentythreeandme import TwentyThreeAndMeParser, parse_23andme
from dna_merger.progress import ProgressCallback

__all__ = [
    # Unified interface
    "PARSERS",
    "get_parser",
    "parse_content",
    "VendorParser",
    # Dialect specific
    "AncestryParser",
    "FTDNAParser",
    "LivingDNAParser",
    "MyHeritageParser",
    "TwentyThreeAndMeParser",
    "parse_23andme",
    "parse_ancestry",
    "parse_ftdna",
    "parse_livingdna",
    "parse_myheritage",
]

PARSERS: dict[DNAFormat, type[VendorParser]] = {
    DNAFormat.ANCESTRY: AncestryParser,
    DNAFormat.MYHERITAGE: MyHeritageParser,
    DNAFormat.LIVINGDNA: LivingDNAParser,
    DNAFormat.TWENTYTHREEANDME: TwentyThreeAndMeParser,
    DNAFormat.FTDNA: FTDNAParser,
}


def get_parser(
    fmt: DNAFormat | str,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
    source: str = "input",
) -> VendorParser:
    """Instantiate the parser for a dialect.

    Args:
        fmt: Dialect tag
        allow_multibase: Keep multi-base indel genotypes
        include_invalid_positions: Keep rows with chromosome/position 0
        source: Name used in the error message (usually the file name)

    Returns:
        Configured VendorParser

    Raises:
        UnknownFormatError: If fmt is DNAFormat.UNKNOWN
        ValueError: If fmt is not a DNAFormat value
    """
    fmt = DNAFormat(fmt)
    if fmt not in PARSERS:
        raise UnknownFormatError(source)
    return PARSERS[fmt](
        allow_multibase=allow_multibase,
        include_invalid_positions=include_invalid_positions,
    )


def parse_content(
    content: str,
    fmt: DNAFormat | str,
    file_index: int = 0,
    progress_callback: ProgressCallback | None = None,
    allow_multibase: bool = False,
    include_invalid_positions: bool = False,
) -> ParseResult:
    """Parse raw file content with the parser for the given dialect.

    Example:
        >>> result = parse_content(text, detect_format(text), file_index=1)
        >>> len(result.markers)
        631455
    """
    parser = get_parser(fmt, allow_multibase, include_invalid_positions)
    return parser.parse(content, file_index, progress_callback)

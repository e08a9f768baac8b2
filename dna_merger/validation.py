"""Shared validation rules for raw genotype data.

Genotype, chromosome and position legality checks used by every vendor
parser, plus the genotype normalisations used when comparing calls across
files and when writing a target dialect.
"""

import re

from dna_merger.models import DNAFormat, OutputFormat

VALID_NUCLEOTIDE_PAIRS: frozenset[str] = frozenset(
    a + b for a in "ATCG" for b in "ATCG"
)

# No-call and insertion/deletion markers
VALID_SPECIAL_GENOTYPES: frozenset[str] = frozenset({"--", "00", "DD", "II", "DI", "ID"})

# Hemizygous calls (X/Y/MT in male samples) reported as one character
VALID_SINGLE_CHAR_GENOTYPES: frozenset[str] = frozenset({"A", "T", "C", "G", "-", "0", "D", "I"})

MISSING_VALUES: frozenset[str] = frozenset({"--", "00"})

LETTER_CHROMOSOMES: frozenset[str] = frozenset({"X", "Y", "XY", "MT", "M"})

_MULTIBASE_RE = re.compile(r"[ATCG]+")
_STANDARD_ID_RE = re.compile(r"rs\d+", re.IGNORECASE)


def validate_genotype(genotype: str, allow_single_char: bool = False) -> bool:
    """Check whether a genotype call is legal.

    Args:
        genotype: Raw genotype string (case-insensitive)
        allow_single_char: Also accept single-character hemizygous calls

    Returns:
        True if the genotype is a nucleotide pair, a missing/indel marker,
        or (when allowed) a single-character call

    Example:
        >>> validate_genotype("ag")
        True
        >>> validate_genotype("A")
        False
        >>> validate_genotype("A", allow_single_char=True)
        True
    """
    normalized = genotype.strip().upper()

    if normalized in VALID_NUCLEOTIDE_PAIRS or normalized in VALID_SPECIAL_GENOTYPES:
        return True

    if allow_single_char:
        return normalized in VALID_SINGLE_CHAR_GENOTYPES

    return False


def is_missing_value(genotype: str) -> bool:
    """Check if a genotype is a no-call ("--" or "00")."""
    return genotype.strip().upper() in MISSING_VALUES


def is_valid_chromosome(chromosome: str, fmt: DNAFormat | str) -> bool:
    """Check whether a chromosome token is legal for a dialect.

    X, Y, XY (pseudoautosomal), MT and M are valid everywhere, as are 1-22.
    AncestryDNA additionally encodes 23=X, 24=Y, 25=PAR and 26=MT.

    Args:
        chromosome: Chromosome token from the file
        fmt: Dialect the token comes from

    Returns:
        True if the token is valid for the dialect
    """
    chr_val = chromosome.strip().upper()

    if chr_val in LETTER_CHROMOSOMES:
        return True

    if not (chr_val.isascii() and chr_val.isdecimal()):
        return False

    num = int(chr_val)
    if 1 <= num <= 22:
        return True

    return fmt == DNAFormat.ANCESTRY and 23 <= num <= 26


def is_multibase_genotype(genotype: str) -> bool:
    """Check if a genotype is a multi-base indel string.

    Multi-base genotypes are longer than two characters and consist only of
    A, T, C and G. Both even and odd lengths qualify.

    Example:
        >>> is_multibase_genotype("TAAGTGTAAGTG")
        True
        >>> is_multibase_genotype("AGA")
        True
        >>> is_multibase_genotype("----")
        False
    """
    normalized = genotype.strip().upper()
    return len(normalized) > 2 and _MULTIBASE_RE.fullmatch(normalized) is not None


def split_multibase_genotype(genotype: str) -> str:
    """Split a multi-base genotype into two space-separated alleles.

    Odd-length strings put the shorter allele first.

    Args:
        genotype: Genotype string

    Returns:
        "allele1 allele2", or the input unchanged if it is not multi-base

    Example:
        >>> split_multibase_genotype("TAAGTGTAAGTG")
        "TAAGTG TAAGTG"
        >>> split_multibase_genotype("AGA")
        "A GA"
    """
    normalized = genotype.strip().upper()

    if not is_multibase_genotype(normalized):
        return genotype

    half = len(normalized) // 2
    return f"{normalized[:half]} {normalized[half:]}"


def is_standard_id(snp_id: str) -> bool:
    """Check if an identifier is a standard rsID ("rs" followed by digits)."""
    return _STANDARD_ID_RE.fullmatch(snp_id.strip()) is not None


def is_valid_position(position: str) -> bool:
    """Check if a position is a positive integer (zero is invalid)."""
    try:
        return int(position.strip()) > 0
    except ValueError:
        return False


def has_invalid_position(chromosome: str, position: str) -> bool:
    """Check for the placeholder coordinates vendors use for unmapped markers.

    Returns:
        True if the chromosome is "0" or the position is not a positive integer
    """
    return chromosome.strip() == "0" or not is_valid_position(position)


def should_keep_invalid_position(snp_id: str, genotype: str, enabled: bool) -> bool:
    """Decide whether a row with invalid coordinates is kept.

    Args:
        snp_id: Marker identifier
        genotype: Raw genotype
        enabled: Whether invalid positions are included at all

    Returns:
        False when disabled. When enabled, True for standard rsIDs and, for
        vendor-internal IDs, True only if the genotype is not a no-call
        (DD/II/DI/ID count as informative).
    """
    if not enabled:
        return False

    if is_standard_id(snp_id):
        return True

    return not is_missing_value(genotype)


def normalize_genotype_for_comparison(genotype: str) -> str:
    """Normalize a genotype so equivalent calls compare equal.

    Upper-cases and doubles single-character hemizygous calls ("A" == "AA").
    """
    normalized = genotype.strip().upper()
    if len(normalized) == 1:
        return normalized * 2
    return normalized


def normalize_genotype_for_format(genotype: str, target: OutputFormat | str) -> str:
    """Normalize a genotype for writing in a target dialect.

    Applies the comparison normalisation, then maps the no-call spelling:
    AncestryDNA writes "00", MyHeritage writes "--".

    Example:
        >>> normalize_genotype_for_format("--", "ancestry")
        "00"
        >>> normalize_genotype_for_format("0 0", "myheritage")
        "--"
        >>> normalize_genotype_for_format("a", "myheritage")
        "AA"
    """
    normalized = normalize_genotype_for_comparison(genotype)

    if target == OutputFormat.MYHERITAGE:
        if normalized in ("00", "0 0"):
            return "--"
    elif target == OutputFormat.ANCESTRY:
        if normalized == "--":
            return "00"

    return normalized

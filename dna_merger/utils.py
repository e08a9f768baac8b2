"""Chromosome helpers shared by the parsers, merge engine and writers.

Chromosome tokens arrive in two spellings: letters (X, Y, XY, MT) and the
AncestryDNA numeric codes 23-26. These helpers normalise and rank them.
"""

# Sort rank of non-numeric chromosomes (numeric 1-22 rank as themselves)
CHROMOSOME_RANK: dict[str, int] = {
    "X": 23,
    "Y": 24,
    "XY": 25,  # Pseudoautosomal region
    "MT": 26,
    "M": 26,
}

UNKNOWN_CHROMOSOME_RANK = 999

# AncestryDNA numeric encoding -> letter form
NUMERIC_TO_LETTER: dict[str, str] = {
    "23": "X",
    "24": "Y",
    "25": "XY",
    "26": "MT",
}

LETTER_TO_NUMERIC: dict[str, str] = {
    "X": "23",
    "Y": "24",
    "XY": "25",
    "MT": "26",
    "M": "26",
}

PAR_CHROMOSOMES: frozenset[str] = frozenset({"XY", "25"})


def normalize_chromosome(chr_val: str) -> str:
    """Normalize a chromosome token to its canonical spelling.

    Letters are upper-cased and "M" becomes "MT". Numeric tokens, including
    the AncestryDNA codes 23-26, are kept verbatim.

    Example:
        >>> normalize_chromosome("x")
        "X"
        >>> normalize_chromosome("M")
        "MT"
        >>> normalize_chromosome("25")
        "25"
    """
    chr_val = chr_val.strip().upper()
    if chr_val == "M":
        return "MT"
    return chr_val


def chromosome_sort_key(chr_val: str) -> int:
    """Get the sort rank of a chromosome token.

    1-22 rank numerically, X=23, Y=24, XY=25, MT/M=26, anything
    unrecognised 999.

    Example:
        >>> chromosome_sort_key("7")
        7
        >>> chromosome_sort_key("XY")
        25
        >>> chromosome_sort_key("chrUn")
        999
    """
    upper = chr_val.strip().upper()
    if upper in CHROMOSOME_RANK:
        return CHROMOSOME_RANK[upper]
    if upper.isascii() and upper.isdecimal():
        return int(upper)
    return UNKNOWN_CHROMOSOME_RANK


def position_sort_key(position: str) -> int:
    """Get the numeric sort value of a position string (0 if not numeric)."""
    try:
        return int(position.strip())
    except ValueError:
        return 0


def to_letter_chromosome(chr_val: str) -> str:
    """Convert AncestryDNA numeric codes 23-26 to letter form."""
    return NUMERIC_TO_LETTER.get(chr_val, chr_val)


def to_numeric_chromosome(chr_val: str) -> str:
    """Convert letter chromosomes X/Y/XY/MT to AncestryDNA numeric codes."""
    return LETTER_TO_NUMERIC.get(chr_val.upper(), chr_val)


def is_par_chromosome(chr_val: str) -> bool:
    """Check if a chromosome token denotes the pseudoautosomal region."""
    return chr_val.strip().upper() in PAR_CHROMOSOMES

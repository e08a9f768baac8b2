"""Vendor format auto-detection.

Detects the raw-data dialect of a file from its text: vendor signatures in
comment lines first, then the column-header structure.

Detectable: AncestryDNA, MyHeritage, Living DNA.
Not detectable: 23andMe and FamilyTreeDNA exports carry no rule here, so
callers must name the format for those files explicitly (FamilyTreeDNA's
quoted CSV header is indistinguishable from MyHeritage's).
"""

from dna_merger.models import DNAFormat

# Comment-line signatures, checked in order
COMMENT_SIGNATURES: tuple[tuple[str, DNAFormat], ...] = (
    ("ancestrydna", DNAFormat.ANCESTRY),
    ("myheritage", DNAFormat.MYHERITAGE),
    ("living dna", DNAFormat.LIVINGDNA),
)


def detect_format(content: str) -> DNAFormat:
    """Detect the vendor dialect of raw DNA file content.

    Args:
        content: Full text of the file

    Returns:
        Detected DNAFormat, or DNAFormat.UNKNOWN if no rule matched

    Examples:
        >>> detect_format("#AncestryDNA raw data download\\n")
        DNAFormat.ANCESTRY
        >>> detect_format('RSID,CHROMOSOME,POSITION,RESULT\\n"rs1","1","100","AA"')
        DNAFormat.UNKNOWN
    """
    for line in content.split("\n"):
        if not line.strip():
            continue

        if line.startswith("#"):
            lowered = line.lower()
            for signature, fmt in COMMENT_SIGNATURES:
                if signature in lowered:
                    return fmt
            continue

        # Tab-delimited header with separate allele columns
        if "\t" in line and "," not in line:
            lowered = line.lower()
            if "rsid" in lowered and "allele" in lowered:
                return DNAFormat.ANCESTRY

        # Quoted CSV header
        if "," in line and '"' in line:
            upper = line.upper()
            if "RSID" in upper and "RESULT" in upper:
                return DNAFormat.MYHERITAGE

    return DNAFormat.UNKNOWN


def is_detectable(fmt: DNAFormat) -> bool:
    """Check whether detect_format can ever return the given format."""
    return fmt in {DNAFormat.ANCESTRY, DNAFormat.MYHERITAGE, DNAFormat.LIVINGDNA}

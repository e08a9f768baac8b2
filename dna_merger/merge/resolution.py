"""Conflict resolution policies.

Each policy receives the raw genotype per file (None where a file never
reported the marker) plus the comparison-normalised genotypes, and returns a
Resolution naming the chosen genotype, the file it came from and why.
"""

from dataclasses import dataclass

from dna_merger.validation import is_missing_value

# Placeholder written when no file supplies a genotype
MISSING_PLACEHOLDER = "--"

# Consensus voting needs at least this many files
MIN_CONSENSUS_FILES = 3


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one conflicting marker."""

    genotype: str
    source_file: int
    reason: str


def resolve_by_priority(
    file_genotypes: list[str | None], fill_missing: bool = True
) -> Resolution:
    """Resolve a conflict by file order.

    Args:
        file_genotypes: Raw genotype per file, lowest index = highest priority
        fill_missing: Take the first non-missing genotype instead of file 1's

    Returns:
        Resolution for the marker

    Example:
        >>> resolve_by_priority(["--", "AG", "AA"])
        Resolution(genotype='AG', source_file=1,
                   reason='Filled missing from File 2 (highest priority non-missing)')
    """
    if not fill_missing:
        return Resolution(
            file_genotypes[0] or MISSING_PLACEHOLDER, 0, "Used File 1 (highest priority)"
        )

    for index, genotype in enumerate(file_genotypes):
        if genotype is not None and not is_missing_value(genotype):
            return Resolution(
                genotype,
                index,
                f"Filled missing from File {index + 1} (highest priority non-missing)",
            )

    return Resolution(
        file_genotypes[0] or MISSING_PLACEHOLDER, 0, "All files missing, used File 1 placeholder"
    )


def resolve_by_consensus(
    file_genotypes: list[str | None], normalized: list[str | None]
) -> Resolution:
    """Resolve a conflict by plurality vote across files.

    Non-missing normalised genotypes are tallied in first-seen order. A strict
    winner takes the marker; on a tie the tied genotype first reported by the
    lowest-index file wins. The stored genotype is the raw call of the first
    file supporting the winner.

    Args:
        file_genotypes: Raw genotype per file
        normalized: normalize_genotype_for_comparison of each raw genotype

    Returns:
        Resolution for the marker
    """
    # genotype -> indices of supporting files; dict keeps first-seen order
    tally: dict[str, list[int]] = {}
    for index, genotype in enumerate(normalized):
        if genotype is not None and not is_missing_value(genotype):
            tally.setdefault(genotype, []).append(index)

    if not tally:
        return Resolution(MISSING_PLACEHOLDER, 0, "Consensus: All files missing")

    top_count = max(len(indices) for indices in tally.values())
    tied = [genotype for genotype, indices in tally.items() if len(indices) == top_count]

    # First tied genotype in first-seen order has the lowest first file index
    winner = tied[0]
    source = tally[winner][0]

    if len(tied) == 1:
        reason = f"Consensus: {winner} ({top_count}/{len(file_genotypes)} files)"
    else:
        reason = (
            f"Consensus: Tie between {', '.join(tied)}, "
            f"used {winner} from File {source + 1} (priority)"
        )

    return Resolution(file_genotypes[source] or MISSING_PLACEHOLDER, source, reason)

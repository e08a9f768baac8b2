"""Merge log writer.

Produces a fixed-width plain text report of a merge run: input files with
their header metadata, summary counts, the conflict table and the skipped
rows table.
"""

from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from dna_merger.io_utils import write_text_atomic
from dna_merger.models import ConflictEntry, FileMetadata, SkippedEntry
from dna_merger.validation import normalize_genotype_for_comparison
from dna_merger.writers.output import format_timestamp

# Conflicts rendered as full table rows; the rest use the compact form
MAX_DETAILED_CONFLICTS = 20

# Width of the content column in the skipped rows table
SKIPPED_CONTENT_WIDTH = 42

# Minimum width of a genotype cell in the conflict table
GENOTYPE_CELL_WIDTH = 6


def _conflict_widths(
    conflicts: Sequence[ConflictEntry], file_count: int
) -> tuple[list[int], int]:
    """Width of each file column and of the Chosen column.

    Every cell in a column, header included, gets the same width so split
    indel calls and two-digit file numbers keep the table aligned.
    """
    widths = [max(GENOTYPE_CELL_WIDTH, len(f"File {i + 1}")) for i in range(file_count)]
    chosen_width = GENOTYPE_CELL_WIDTH
    for conflict in conflicts:
        for i, genotype in enumerate(conflict.file_genotypes[:file_count]):
            if genotype is not None:
                widths[i] = max(widths[i], len(genotype))
        chosen_width = max(chosen_width, len(conflict.chosen_genotype))
    return widths, chosen_width


def _conflict_header(widths: list[int], chosen_width: int) -> list[str]:
    file_columns = [f"File {i + 1}".ljust(width) for i, width in enumerate(widths)]
    header = " | ".join(
        [
            "RSID".ljust(17),
            "Chr",
            "Position ",
            *file_columns,
            "Chosen".ljust(chosen_width),
            "Source ",
            "Resolution Reason",
        ]
    )
    separator = "-|-".join(
        ["-" * 17, "-" * 3, "-" * 9, *["-" * width for width in widths], "-" * chosen_width, "-" * 7, "-" * 27]
    )
    return [header, separator]


def _conflict_row(conflict: ConflictEntry, widths: list[int], chosen_width: int) -> str:
    genotypes = [
        (g if g is not None else "N/A").ljust(widths[i] if i < len(widths) else GENOTYPE_CELL_WIDTH)
        for i, g in enumerate(conflict.file_genotypes)
    ]
    return " | ".join(
        [
            conflict.rsid.ljust(17),
            conflict.chromosome.ljust(3),
            conflict.position.ljust(9),
            *genotypes,
            conflict.chosen_genotype.ljust(chosen_width),
            f"File {conflict.chosen_from_file + 1}".ljust(7),
            conflict.resolution_reason,
        ]
    )


def _compact_conflict_row(conflict: ConflictEntry) -> str:
    """One-line conflict listing only the files that disagree with the choice."""
    chosen = normalize_genotype_for_comparison(conflict.chosen_genotype)
    differing = [
        f"F{i + 1}:{g}"
        for i, g in enumerate(conflict.file_genotypes)
        if g is not None and normalize_genotype_for_comparison(g) != chosen
    ]
    return (
        f"{conflict.rsid} ({conflict.chromosome}:{conflict.position}) "
        f"{' '.join(differing)} -> {conflict.chosen_genotype} "
        f"(File {conflict.chosen_from_file + 1})"
    )


def generate_log(
    conflicts: Sequence[ConflictEntry],
    skipped: Sequence[SkippedEntry],
    file_names: Sequence[str],
    files_metadata: Sequence[FileMetadata | None],
    excluded_par: int | None = None,
    generated_at: datetime | None = None,
) -> str:
    """Render the merge log.

    Args:
        conflicts: Conflicts in first-sighting order
        skipped: Skipped rows of all files
        file_names: Display name per input file, in priority order
        files_metadata: Header metadata per input file
        excluded_par: PAR markers dropped from the output (reported if > 0)
        generated_at: Generation time (defaults to now, UTC)

    Returns:
        Log text

    Example:
        >>> text = generate_log(result.conflicts, result.skipped,
        ...                     ["a.txt", "b.csv"], result.files_metadata)
        >>> text.splitlines()[0]
        'DNA Merge Log'
    """
    lines = [
        "DNA Merge Log",
        f"Generated: {format_timestamp(generated_at)}",
        "",
        "=== FILES ===",
    ]

    for i, name in enumerate(file_names):
        lines.append(f"File {i + 1}: {name}")
        metadata = files_metadata[i] if i < len(files_metadata) else None
        if metadata is not None:
            for label, value in metadata.labelled():
                lines.append(f"  {label}: {value}")
    lines.append("")

    lines.append("=== SUMMARY ===")
    lines.append(f"Files merged: {len(file_names)}")
    lines.append(f"Conflicts detected: {len(conflicts)}")
    lines.append(f"Invalid rows skipped: {len(skipped)}")
    if excluded_par:
        lines.append(
            f"Pseudoautosomal region (PAR) SNPs excluded for MyHeritage format: {excluded_par}"
        )
    lines.append("")

    if conflicts:
        lines.append("=== CONFLICTS (Same RSID, Different Genotypes) ===")
        detailed = conflicts[:MAX_DETAILED_CONFLICTS]
        widths, chosen_width = _conflict_widths(detailed, len(file_names))
        lines.extend(_conflict_header(widths, chosen_width))
        for conflict in detailed:
            lines.append(_conflict_row(conflict, widths, chosen_width))

        remaining = conflicts[MAX_DETAILED_CONFLICTS:]
        if remaining:
            lines.append("")
            lines.append(f"... {len(remaining)} more conflicts")
            for conflict in remaining:
                lines.append(_compact_conflict_row(conflict))
        lines.append("")

    if skipped:
        lines.append("=== SKIPPED ROWS (Invalid Data) ===")
        lines.append(f"File | Line    | {'Content'.ljust(SKIPPED_CONTENT_WIDTH)} | Reason")
        lines.append(f"-----|---------|-{'-' * SKIPPED_CONTENT_WIDTH}-|-----------------------")
        for entry in skipped:
            content = entry.content[:SKIPPED_CONTENT_WIDTH].ljust(SKIPPED_CONTENT_WIDTH)
            lines.append(
                f"{str(entry.source_file + 1).ljust(4)} | "
                f"{str(entry.line_number).ljust(7)} | {content} | {entry.reason}"
            )
        lines.append("")

    return "\n".join(lines)


def write_log_file(log_path: Path, text: str) -> Path:
    """Write the merge log atomically.

    Args:
        log_path: Destination path
        text: Log text from generate_log

    Returns:
        Path to the written log file
    """
    return write_text_atomic(log_path, text)

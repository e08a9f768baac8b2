"""Merged raw data writers.

Renders merged markers in a vendor dialect so the result can be uploaded
like an ordinary download:

- myheritage: quoted CSV, letter chromosomes. The pseudoautosomal region
  (XY / 25) cannot be represented and is dropped.
- ancestry: tab-separated, numeric chromosomes 23-26, one column per allele.
"""

import csv
import io
from collections.abc import Sequence
from datetime import datetime, timezone

from dna_merger.models import Marker, OutputFormat, OutputResult
from dna_merger.utils import is_par_chromosome, to_letter_chromosome, to_numeric_chromosome
from dna_merger.validation import normalize_genotype_for_format

SOURCE_NAME = "dna-merger"

DISCLAIMER = (
    "THIS INFORMATION IS FOR YOUR PERSONAL USE AND IS INTENDED FOR GENEALOGICAL RESEARCH ONLY."
)


def format_timestamp(generated_at: datetime | None = None) -> str:
    """Format a generation time as "YYYY-mm-dd HH:MM:SS UTC"."""
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)
    elif generated_at.tzinfo is not None:
        generated_at = generated_at.astimezone(timezone.utc)
    return generated_at.strftime("%Y-%m-%d %H:%M:%S") + " UTC"


def generate_myheritage_csv(
    markers: Sequence[Marker],
    file_count: int = 2,
    generated_at: datetime | None = None,
) -> OutputResult:
    """Render markers as a MyHeritage CSV file.

    Args:
        markers: Merged markers, already sorted
        file_count: Number of merged input files, recorded in the header
        generated_at: Generation time (defaults to now, UTC)

    Returns:
        OutputResult with the CSV text and the number of PAR markers dropped
    """
    buffer = io.StringIO()
    buffer.write(
        "##fileformat=MyHeritage\n"
        "##format=MHv1.0\n"
        f"##source={SOURCE_NAME}\n"
        f"##timestamp={format_timestamp(generated_at)}\n"
        f"##merged_files={file_count}\n"
        "#\n"
        "# Merged DNA raw data.\n"
        "# For each SNP, we provide the identifier, chromosome number, "
        "base pair position and genotype.\n"
        f"# {DISCLAIMER}\n"
        "RSID,CHROMOSOME,POSITION,RESULT\n"
    )

    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    excluded_par = 0

    for marker in markers:
        if is_par_chromosome(marker.chromosome):
            excluded_par += 1
            continue
        writer.writerow(
            [
                marker.rsid,
                to_letter_chromosome(marker.chromosome),
                marker.position,
                normalize_genotype_for_format(marker.genotype, OutputFormat.MYHERITAGE),
            ]
        )

    return OutputResult(text=buffer.getvalue(), excluded_par=excluded_par)


def generate_ancestry_tsv(
    markers: Sequence[Marker],
    file_count: int = 2,
    generated_at: datetime | None = None,
) -> OutputResult:
    """Render markers as an AncestryDNA tab-separated file.

    Genotypes are split into two allele columns; split indel strings
    ("TAAGTG TAAGTG") split on the space.

    Args:
        markers: Merged markers, already sorted
        file_count: Number of merged input files, recorded in the header
        generated_at: Generation time (defaults to now, UTC)

    Returns:
        OutputResult with the TSV text (nothing is excluded)
    """
    lines = [
        "#AncestryDNA merged data",
        f"#Generated by {SOURCE_NAME} at: {format_timestamp(generated_at)}",
        f"#Merged from {file_count} files",
        f"#{DISCLAIMER}",
        "rsid\tchromosome\tposition\tallele1\tallele2",
    ]

    for marker in markers:
        genotype = normalize_genotype_for_format(marker.genotype, OutputFormat.ANCESTRY)
        if " " in genotype:
            allele1, allele2 = genotype.split(" ", 1)
        else:
            allele1, allele2 = genotype[0], genotype[1:]
        lines.append(
            f"{marker.rsid}\t{to_numeric_chromosome(marker.chromosome)}\t"
            f"{marker.position}\t{allele1}\t{allele2}"
        )

    return OutputResult(text="\n".join(lines) + "\n")


def generate_output(
    markers: Sequence[Marker],
    target: OutputFormat | str,
    file_count: int | None = None,
    generated_at: datetime | None = None,
) -> OutputResult:
    """Render merged markers in the target dialect.

    Args:
        markers: Merged markers, already sorted
        target: "ancestry" or "myheritage"
        file_count: Number of merged input files (defaults to 2)
        generated_at: Generation time (defaults to now, UTC)

    Returns:
        OutputResult with the file text and excluded PAR count

    Raises:
        ValueError: If target is not a known output dialect
    """
    target = OutputFormat(target)
    count = file_count if file_count is not None else 2

    if target == OutputFormat.MYHERITAGE:
        return generate_myheritage_csv(markers, count, generated_at)
    return generate_ancestry_tsv(markers, count, generated_at)

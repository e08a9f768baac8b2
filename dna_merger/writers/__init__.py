"""Writers for merged raw data and merge logs."""

from dna_merger.writers.log import generate_log, write_log_file
from dna_merger.writers.output import (
    generate_ancestry_tsv,
    generate_myheritage_csv,
    generate_output,
)

__all__ = [
    "generate_ancestry_tsv",
    "generate_log",
    "generate_myheritage_csv",
    "generate_output",
    "write_log_file",
]

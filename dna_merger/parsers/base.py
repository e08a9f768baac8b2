"""Abstract base class for vendor raw-data parsers.

Every vendor dialect shares one per-line pipeline:

1. Skip blank lines; feed comment lines to the metadata patterns; skip the
   column-header row once.
2. Split with the dialect's tokenizer and check the column count.
3. Reject rows with empty required fields.
4. Rows with placeholder coordinates go through the invalid-position policy.
5. Validate the chromosome for the dialect.
6. Validate the genotype (single-character calls and multi-base indels
   where the dialect supports them).
7. Normalize the chromosome and keep the marker.

Subclasses declare the tokenizer, column layout and metadata patterns.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import ClassVar

from dna_merger.models import DNAFormat, FileMetadata, Marker, ParseResult, SkippedEntry
from dna_merger.progress import BATCH_SIZE, Phase, ProgressCallback, ProgressEvent, Steps, drive
from dna_merger.utils import normalize_chromosome
from dna_merger.validation import (
    has_invalid_position,
    is_multibase_genotype,
    is_valid_chromosome,
    should_keep_invalid_position,
    split_multibase_genotype,
    validate_genotype,
)

logger = logging.getLogger(__name__)

# Longest raw line kept in a SkippedEntry
MAX_SKIPPED_CONTENT = 200


class VendorParser(ABC):
    """Base class for vendor raw-data parsers.

    Class attributes configure the shared pipeline:
    - format: Dialect tag stored on the ParseResult
    - min_columns: Columns a data row needs
    - allow_single_char: Accept single-character hemizygous calls
    - supports_multibase: Dialect may carry multi-base indel genotypes
    - valid_chromosomes: Chromosome range quoted in rejection reasons
    - metadata_patterns: (FileMetadata field, regex) pairs matched against
      comment lines; group 1 is the value
    """

    format: ClassVar[DNAFormat]
    min_columns: ClassVar[int] = 4
    allow_single_char: ClassVar[bool] = False
    supports_multibase: ClassVar[bool] = False
    valid_chromosomes: ClassVar[str] = "1-22, X, Y, MT"
    metadata_patterns: ClassVar[tuple[tuple[str, re.Pattern[str]], ...]] = ()

    def __init__(
        self,
        allow_multibase: bool = False,
        include_invalid_positions: bool = False,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        """Initialize parser options.

        Args:
            allow_multibase: Keep multi-base indel genotypes (split into two alleles)
            include_invalid_positions: Keep rows with chromosome/position 0
                when should_keep_invalid_position allows it
            batch_size: Lines processed between progress events
        """
        self.allow_multibase = allow_multibase
        self.include_invalid_positions = include_invalid_positions
        self.batch_size = batch_size

    @abstractmethod
    def split_line(self, line: str) -> list[str]:
        """Split a data line into raw columns."""

    def required_fields(self, parts: list[str]) -> list[str]:
        """Return the trimmed required fields of a row.

        Default layout: rsid, chromosome, position, genotype.
        """
        return [part.strip() for part in parts[: self.min_columns]]

    def build_genotype(self, fields: list[str]) -> str:
        """Build the genotype from the required fields."""
        return fields[3]

    def is_header(self, line: str) -> bool:
        """Check whether a non-comment line is the column-header row."""
        return "rsid" in line.lower()

    def extract_metadata(self, line: str, metadata: dict[str, str]) -> None:
        """Collect header metadata from a comment line (first match wins)."""
        for field_name, pattern in self.metadata_patterns:
            if field_name in metadata:
                continue
            match = pattern.search(line)
            if match:
                metadata[field_name] = match.group(1).strip()

    def parse(
        self,
        content: str,
        file_index: int = 0,
        progress_callback: ProgressCallback | None = None,
    ) -> ParseResult:
        """Parse raw file content.

        Args:
            content: Full text of the file
            file_index: Index of this file among the merge inputs
            progress_callback: Called with a non-decreasing percentage at
                every batch boundary

        Returns:
            ParseResult with accepted markers, skipped rows and metadata
        """
        return drive(self.iter_parse(content, file_index), progress_callback)

    def iter_parse(self, content: str, file_index: int = 0) -> Steps[ParseResult]:
        """Parse raw file content cooperatively.

        Yields a ProgressEvent every batch_size lines and returns the
        ParseResult when the input is exhausted.
        """
        lines = content.split("\n")
        total = len(lines)
        markers: list[Marker] = []
        skipped: list[SkippedEntry] = []
        metadata: dict[str, str] = {}
        header_found = False

        for i, line in enumerate(lines):
            if i > 0 and i % self.batch_size == 0:
                yield ProgressEvent(Phase.PARSING, min(round(i / total * 100), 99))

            stripped = line.strip()
            if not stripped:
                continue

            if stripped.startswith("#"):
                self.extract_metadata(stripped, metadata)
                continue

            if not header_found and self.is_header(stripped):
                header_found = True
                continue

            outcome = self.parse_row(stripped, file_index)
            if isinstance(outcome, Marker):
                markers.append(outcome)
            else:
                skipped.append(
                    SkippedEntry(
                        line_number=i + 1,
                        content=stripped[:MAX_SKIPPED_CONTENT],
                        reason=outcome,
                        source_file=file_index,
                    )
                )

        yield ProgressEvent(Phase.PARSING, 100)

        logger.debug(
            "Parsed %s file %d: %d markers, %d skipped rows",
            self.format.value,
            file_index,
            len(markers),
            len(skipped),
        )

        return ParseResult(
            markers=tuple(markers),
            skipped=tuple(skipped),
            format=self.format,
            metadata=FileMetadata(**metadata) if metadata else None,
        )

    def parse_row(self, line: str, file_index: int = 0) -> Marker | str:
        """Run the per-line pipeline on one data line.

        Returns:
            The accepted Marker, or the rejection reason
        """
        parts = self.split_line(line)
        if len(parts) < self.min_columns:
            return f"Insufficient columns (expected {self.min_columns})"

        fields = self.required_fields(parts)
        if not all(fields):
            return "Missing required fields"

        rsid, chromosome, position = fields[0], fields[1], fields[2]
        genotype = self.build_genotype(fields)

        if has_invalid_position(chromosome, position):
            if not should_keep_invalid_position(rsid, genotype, self.include_invalid_positions):
                return f"Invalid position: chromosome={chromosome}, position={position}"
            # Literal coordinates are preserved; chromosome range check is bypassed
            checked, reason = self.check_genotype(genotype, allow_single_char=True)
            if checked is None:
                return reason
            return Marker(rsid, chromosome.upper(), position, checked, file_index)

        if not is_valid_chromosome(chromosome, self.format):
            return f"Invalid chromosome: {chromosome} (valid: {self.valid_chromosomes})"

        checked, reason = self.check_genotype(genotype, self.allow_single_char)
        if checked is None:
            return reason

        return Marker(rsid, normalize_chromosome(chromosome), position, checked, file_index)

    def check_genotype(
        self, genotype: str, allow_single_char: bool
    ) -> tuple[str | None, str]:
        """Validate a genotype for this dialect.

        Args:
            genotype: Raw genotype
            allow_single_char: Accept single-character calls

        Returns:
            (genotype to store, "") on success, (None, reason) on rejection
        """
        if validate_genotype(genotype, allow_single_char):
            return genotype, ""

        if self.supports_multibase and is_multibase_genotype(genotype):
            if not self.allow_multibase:
                return None, f"Skipped multi-base genotype (Indel): {genotype}"
            return split_multibase_genotype(genotype), ""

        return None, f"Invalid genotype: {genotype}"

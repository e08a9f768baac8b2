"""Data models for the DNA merger.

Records for vendor formats, parsed markers, skipped rows, per-file header
metadata, merge options and the results of parsing and merging.
"""

from dataclasses import dataclass, field
from enum import Enum


class DNAFormat(str, Enum):
    """Raw-data export dialects understood by the parsers."""

    ANCESTRY = "ancestry"
    MYHERITAGE = "myheritage"
    LIVINGDNA = "livingdna"
    TWENTYTHREEANDME = "23andme"
    FTDNA = "ftdna"
    UNKNOWN = "unknown"


class OutputFormat(str, Enum):
    """Dialects the merged markers can be written as."""

    ANCESTRY = "ancestry"
    MYHERITAGE = "myheritage"


class ConflictResolution(str, Enum):
    """Policy used when files disagree on a marker's genotype."""

    PRIORITY = "priority"
    CONSENSUS = "consensus"


@dataclass(frozen=True, slots=True)
class Marker:
    """A single genotyped marker (SNP).

    Attributes:
        rsid: Vendor-assigned identifier (usually "rs" + digits)
        chromosome: Chromosome token ("1".."22", "X", "Y", "XY", "MT",
            or the numeric 23-26 encodings used by AncestryDNA)
        position: Base pair position, kept as the literal string from the file
        genotype: Two-character call, missing/indel marker, single hemizygous
            call, or a space-separated two-allele indel string
        source_file: Index of the input file this record currently represents
    """

    rsid: str
    chromosome: str
    position: str
    genotype: str
    source_file: int = 0


@dataclass(frozen=True, slots=True)
class SkippedEntry:
    """A rejected input line.

    Attributes:
        line_number: 1-based line number in the original file
        content: Raw line content (truncated)
        reason: Human-readable rejection reason
        source_file: Index of the input file the line came from
    """

    line_number: int
    content: str
    reason: str
    source_file: int = 0


@dataclass(frozen=True, slots=True)
class FileMetadata:
    """Header metadata extracted from a raw data file's comment lines."""

    chip: str | None = None
    version: str | None = None
    reference: str | None = None
    file_id: str | None = None
    signature: str | None = None
    timestamp: str | None = None

    def labelled(self) -> list[tuple[str, str]]:
        """Return (label, value) pairs for the fields that are set."""
        return [(label, value) for label, value in self._items() if value is not None]

    def _items(self) -> list[tuple[str, str | None]]:
        return [
            ("Chip", self.chip),
            ("Version", self.version),
            ("Reference", self.reference),
            ("File ID", self.file_id),
            ("Signature", self.signature),
            ("Timestamp", self.timestamp),
        ]


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of parsing one raw data file.

    Attributes:
        markers: Accepted markers, in file order
        skipped: One entry per rejected line
        format: Dialect the file was parsed as
        metadata: Header metadata, or None if the file carried none
    """

    markers: tuple[Marker, ...]
    skipped: tuple[SkippedEntry, ...]
    format: DNAFormat
    metadata: FileMetadata | None = None


@dataclass(frozen=True, slots=True)
class MergeOptions:
    """Caller-supplied merge policy.

    Attributes:
        fill_missing: Prefer any non-missing genotype over strict file priority
        conflict_resolution: "priority" (file order) or "consensus" (plurality vote)
    """

    fill_missing: bool = True
    conflict_resolution: ConflictResolution = ConflictResolution.PRIORITY


@dataclass(frozen=True, slots=True)
class ConflictEntry:
    """A marker for which two or more files disagree.

    Attributes:
        rsid: Marker identifier
        chromosome: Chromosome from the first file that reported the marker
        position: Position from the first file that reported the marker
        file_genotypes: Genotype per input file (None = file never reported it)
        chosen_genotype: Genotype written to the merged output
        chosen_from_file: Index of the file that supplied the chosen genotype
        resolution_reason: Why that genotype was chosen
    """

    rsid: str
    chromosome: str
    position: str
    file_genotypes: tuple[str | None, ...]
    chosen_genotype: str
    chosen_from_file: int
    resolution_reason: str


@dataclass
class MergeResult:
    """Outcome of merging N parse results.

    Attributes:
        markers: Merged markers sorted by chromosome and position
        conflicts: One entry per conflicting marker, in first-sighting order
        skipped: Skipped rows of all files, tagged with their file index
        files_metadata: Header metadata per input file (empty when absent)
    """

    markers: list[Marker] = field(default_factory=list)
    conflicts: list[ConflictEntry] = field(default_factory=list)
    skipped: list[SkippedEntry] = field(default_factory=list)
    files_metadata: list[FileMetadata] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class OutputResult:
    """Generated output text plus the number of PAR markers left out."""

    text: str
    excluded_par: int = 0

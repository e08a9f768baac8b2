"""Configuration dataclass for the DNA merger."""

from dataclasses import dataclass, field
from pathlib import Path

from dna_merger.models import ConflictResolution, DNAFormat, MergeOptions, OutputFormat

# Most files a single merge accepts
MAX_FILES = 10


@dataclass
class Config:
    """Configuration for one merge run.

    Attributes:
        input_files: Raw data files in priority order (first = highest priority)
        formats: Per-file format override; None entries are auto-detected
        output_dir: Output directory for generated files
        output_format: Dialect of the merged file ("ancestry" or "myheritage")
        fill_missing: Prefer any non-missing genotype over strict file priority
        conflict_resolution: "priority" or "consensus"
        allow_multibase: Keep multi-base indel genotypes (Living DNA)
        include_invalid_positions: Keep rows with chromosome/position 0
        verbose: Print per-file parse counts during the run
        file_stem: Base name of the merged file and its log
        write_log: Write the merge log next to the merged file
    """

    input_files: list[Path]

    # Optional settings
    formats: list[DNAFormat | None] = field(default_factory=list)
    output_dir: Path | None = None
    output_format: OutputFormat = OutputFormat.MYHERITAGE

    # Merge policy
    fill_missing: bool = True
    conflict_resolution: ConflictResolution = ConflictResolution.PRIORITY

    # Parser options
    allow_multibase: bool = False
    include_invalid_positions: bool = False

    # Behavior flags
    verbose: bool = False
    file_stem: str = "merged"
    write_log: bool = True

    def __post_init__(self) -> None:
        """Coerce types and set defaults."""
        # Ensure paths are Path objects
        self.input_files = [Path(p) for p in self.input_files]

        # Set output_dir to current directory if not specified
        if self.output_dir is None:
            self.output_dir = Path.cwd()
        elif isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

        self.output_format = OutputFormat(self.output_format)
        self.conflict_resolution = ConflictResolution(self.conflict_resolution)

        # None means auto-detect; pad so every input has an entry
        self.formats = [DNAFormat(f) if f is not None else None for f in self.formats]
        if not self.formats:
            self.formats = [None] * len(self.input_files)

    @property
    def merge_options(self) -> MergeOptions:
        """Merge policy for the engine."""
        return MergeOptions(
            fill_missing=self.fill_missing,
            conflict_resolution=self.conflict_resolution,
        )

    @property
    def output_extension(self) -> str:
        """File extension of the merged file."""
        return ".csv" if self.output_format == OutputFormat.MYHERITAGE else ".txt"

    @property
    def output_path(self) -> Path:
        """Path of the merged raw data file."""
        assert self.output_dir is not None  # Set in __post_init__
        return self.output_dir / f"{self.file_stem}-{self.output_format.value}{self.output_extension}"

    @property
    def log_path(self) -> Path:
        """Path of the merge log."""
        assert self.output_dir is not None  # Set in __post_init__
        return self.output_dir / f"{self.file_stem}-log.txt"

    @property
    def file_names(self) -> list[str]:
        """Display names of the input files."""
        return [p.name for p in self.input_files]

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors: list[str] = []

        if not self.input_files:
            errors.append("At least one input file is required")
        elif len(self.input_files) > MAX_FILES:
            errors.append(
                f"Too many input files: {len(self.input_files)} (maximum {MAX_FILES})"
            )

        for path in self.input_files:
            if not path.exists():
                errors.append(f"Input file not found: {path}")

        if len(self.formats) != len(self.input_files):
            errors.append(
                f"Got {len(self.formats)} formats for {len(self.input_files)} input files"
            )

        if self.output_dir is not None and not self.output_dir.exists():
            errors.append(f"Output directory does not exist: {self.output_dir}")

        return errors

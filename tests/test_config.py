"""Tests for Config."""

from pathlib import Path

from dna_merger.config import MAX_FILES, Config
from dna_merger.models import ConflictResolution, DNAFormat, MergeOptions, OutputFormat


class TestConfigDefaults:
    """Test coercion and defaults."""

    def test_coercion(self, tmp_path: Path) -> None:
        """Strings become paths and enums."""
        config = Config(
            input_files=[str(tmp_path / "a.txt")],
            formats=["23andme"],
            output_dir=str(tmp_path),
            output_format="ancestry",
            conflict_resolution="consensus",
        )

        assert config.input_files == [tmp_path / "a.txt"]
        assert config.formats == [DNAFormat.TWENTYTHREEANDME]
        assert config.output_dir == tmp_path
        assert config.output_format == OutputFormat.ANCESTRY
        assert config.conflict_resolution == ConflictResolution.CONSENSUS

    def test_defaults(self, tmp_path: Path) -> None:
        """Formats default to auto-detect, output_dir to the cwd."""
        config = Config(input_files=[tmp_path / "a.txt", tmp_path / "b.txt"])

        assert config.formats == [None, None]
        assert config.output_dir == Path.cwd()
        assert config.output_format == OutputFormat.MYHERITAGE
        assert config.merge_options == MergeOptions()

    def test_paths(self, tmp_path: Path) -> None:
        """Output and log paths derive from stem and output format."""
        config = Config(input_files=[tmp_path / "a.txt"], output_dir=tmp_path, file_stem="family")

        assert config.output_path == tmp_path / "family-myheritage.csv"
        assert config.log_path == tmp_path / "family-log.txt"

        config.output_format = OutputFormat.ANCESTRY
        assert config.output_path == tmp_path / "family-ancestry.txt"

    def test_file_names(self, tmp_path: Path) -> None:
        """Display names are the file names."""
        config = Config(input_files=[tmp_path / "x" / "a.txt", tmp_path / "b.csv"])
        assert config.file_names == ["a.txt", "b.csv"]


class TestConfigValidate:
    """Test validation messages."""

    def test_valid(self, tmp_path: Path) -> None:
        """Existing files and directory validate cleanly."""
        path = tmp_path / "a.txt"
        path.write_text("")

        assert Config(input_files=[path], output_dir=tmp_path).validate() == []

    def test_no_files(self, tmp_path: Path) -> None:
        """At least one file is required."""
        errors = Config(input_files=[], output_dir=tmp_path).validate()
        assert errors == ["At least one input file is required"]

    def test_too_many_files(self, tmp_path: Path) -> None:
        """More than MAX_FILES inputs are refused."""
        paths = []
        for i in range(MAX_FILES + 1):
            path = tmp_path / f"{i}.txt"
            path.write_text("")
            paths.append(path)

        errors = Config(input_files=paths, output_dir=tmp_path).validate()
        assert errors == [f"Too many input files: {MAX_FILES + 1} (maximum {MAX_FILES})"]

    def test_missing_file_and_dir(self, tmp_path: Path) -> None:
        """Every problem is reported."""
        config = Config(input_files=[tmp_path / "missing.txt"], output_dir=tmp_path / "nope")
        errors = config.validate()

        assert f"Input file not found: {tmp_path / 'missing.txt'}" in errors
        assert f"Output directory does not exist: {tmp_path / 'nope'}" in errors

    def test_format_count_mismatch(self, tmp_path: Path) -> None:
        """Formats must match the inputs one to one."""
        path = tmp_path / "a.txt"
        path.write_text("")
        config = Config(input_files=[path], formats=["ancestry", "ftdna"], output_dir=tmp_path)

        assert config.validate() == ["Got 2 formats for 1 input files"]

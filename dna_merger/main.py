"""Main orchestration for the DNA merger.

Coordinates the caller-side steps around the merge core: reading each
download, detecting its format, parsing, merging, and writing the merged
file plus its log.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from dna_merger.config import Config
from dna_merger.exceptions import ConfigurationError, UnknownFormatError
from dna_merger.format_detection import detect_format
from dna_merger.io_utils import read_text, write_text_atomic
from dna_merger.merge import merge_files
from dna_merger.models import DNAFormat, MergeResult, ParseResult
from dna_merger.parsers import get_parser
from dna_merger.writers import generate_log, generate_output, write_log_file

logger = logging.getLogger(__name__)

console = Console()


@dataclass
class MergeRun:
    """Outcome of a merge run.

    Attributes:
        result: Merged markers, conflicts and skipped rows
        formats: Format each input was parsed as
        output_path: Path of the merged raw data file
        log_path: Path of the merge log (None when disabled)
        excluded_par: PAR markers dropped from the output
    """

    result: MergeResult
    formats: list[DNAFormat]
    output_path: Path
    log_path: Path | None
    excluded_par: int = 0


def resolve_formats(config: Config, contents: list[str]) -> list[DNAFormat]:
    """Determine the format of every input, refusing undetectable files.

    Args:
        config: Run configuration (explicit formats win over detection)
        contents: Text of each input file

    Returns:
        Format per input file

    Raises:
        UnknownFormatError: If any file has no explicit format and cannot be detected
    """
    formats: list[DNAFormat] = []
    for path, explicit, content in zip(config.input_files, config.formats, contents):
        fmt = explicit if explicit is not None else detect_format(content)
        if fmt == DNAFormat.UNKNOWN:
            raise UnknownFormatError(path.name)
        logger.info("%s: %s%s", path.name, fmt.value, "" if explicit is not None else " (detected)")
        formats.append(fmt)
    return formats


def run_merge(config: Config, console: Console = console) -> MergeRun:
    """Run a full merge.

    Steps:
    1. Validate configuration
    2. Read every input and resolve its format (all before any parsing)
    3. Parse each file, then merge, with progress bars
    4. Generate and write the merged file and the log

    Args:
        config: Run configuration
        console: Rich console for progress and messages

    Returns:
        MergeRun describing the result and written files

    Raises:
        ConfigurationError: If the configuration is invalid
        UnknownFormatError: If a file's format cannot be determined
        FileNotFoundError: If an input disappears while reading
    """
    errors = config.validate()
    if errors:
        raise ConfigurationError(errors)

    contents = [read_text(path) for path in config.input_files]
    formats = resolve_formats(config, contents)

    results: list[ParseResult] = []

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        for file_index, (path, fmt, content) in enumerate(zip(config.input_files, formats, contents)):
            task = progress.add_task(f"Parsing {path.name} ({fmt.value})...", total=100)
            parser = get_parser(
                fmt,
                allow_multibase=config.allow_multibase,
                include_invalid_positions=config.include_invalid_positions,
                source=path.name,
            )
            result = parser.parse(
                content,
                file_index,
                lambda pct, task=task: progress.update(task, completed=pct),
            )
            progress.update(task, completed=100)
            results.append(result)

            if config.verbose:
                progress.console.print(
                    f"  {path.name}: {len(result.markers):,} markers, "
                    f"{len(result.skipped):,} skipped rows"
                )

        task = progress.add_task("Merging...", total=100)
        merged = merge_files(
            results,
            config.merge_options,
            lambda pct: progress.update(task, completed=pct),
        )
        progress.update(task, completed=100)

    output = generate_output(merged.markers, config.output_format, file_count=len(results))
    write_text_atomic(config.output_path, output.text)
    logger.info("Wrote %d markers to %s", len(merged.markers) - output.excluded_par, config.output_path)

    log_path: Path | None = None
    if config.write_log:
        log_text = generate_log(
            merged.conflicts,
            merged.skipped,
            config.file_names,
            merged.files_metadata,
            output.excluded_par,
        )
        log_path = write_log_file(config.log_path, log_text)

    return MergeRun(
        result=merged,
        formats=formats,
        output_path=config.output_path,
        log_path=log_path,
        excluded_par=output.excluded_par,
    )

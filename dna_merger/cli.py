"""Typer CLI for the DNA merger.

Usage:
    # Merge two downloads into a MyHeritage upload (format auto-detected)
    dna-merger merge AncestryDNA.txt LivingDNA.txt

    # 23andMe and FamilyTreeDNA files need an explicit format, one per file
    dna-merger merge genome.txt ftdna.csv -F 23andme -F ftdna

    # Three files, majority vote, AncestryDNA output
    dna-merger merge a.txt b.csv c.txt --resolution consensus -t ancestry

    # Show what format each file is detected as
    dna-merger detect AncestryDNA.txt genome.txt
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from dna_merger import __version__
from dna_merger.format_detection import detect_format, is_detectable
from dna_merger.models import DNAFormat

app = typer.Typer(
    name="dna-merger",
    help="Merge consumer DNA raw data downloads into one uploadable file",
    add_completion=False,
)

console = Console()


class Vendor(str, Enum):
    """Input format choice ("auto" = detect from content)."""

    auto = "auto"
    ancestry = "ancestry"
    myheritage = "myheritage"
    livingdna = "livingdna"
    twentythreeandme = "23andme"
    ftdna = "ftdna"


class Target(str, Enum):
    """Output file format."""

    myheritage = "myheritage"
    ancestry = "ancestry"


class Resolution(str, Enum):
    """Conflict resolution policy."""

    priority = "priority"
    consensus = "consensus"


def expand_formats(vendors: list[Vendor] | None, file_count: int) -> list[DNAFormat | None]:
    """Turn --format options into one entry per input file.

    No options means detect every file. A single option applies to all
    files; otherwise there must be one option per file.

    Raises:
        typer.BadParameter: If the option count matches neither rule
    """
    if not vendors:
        return [None] * file_count

    formats = [None if v == Vendor.auto else DNAFormat(v.value) for v in vendors]
    if len(formats) == 1:
        return formats * file_count
    if len(formats) != file_count:
        raise typer.BadParameter(
            f"Got {len(formats)} --format options for {file_count} files "
            "(give one, or one per file)",
            param_hint="--format",
        )
    return formats


@app.command()
def merge(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Raw data files in priority order (first = highest priority)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    formats: Annotated[
        list[Vendor] | None,
        typer.Option(
            "--format", "-F",
            help="Input format, once for all files or once per file (default: auto)",
        ),
    ] = None,
    output_format: Annotated[
        Target,
        typer.Option(
            "--output-format", "-t",
            help="Format of the merged file: 'myheritage' (CSV) or 'ancestry' (TSV)",
        ),
    ] = Target.myheritage,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir", "-o",
            help="Output directory (default: current directory)",
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
    no_fill_missing: Annotated[
        bool,
        typer.Option(
            "--no-fill-missing",
            help="Always keep the highest priority file's genotype, even when it is a no-call",
        ),
    ] = False,
    resolution: Annotated[
        Resolution,
        typer.Option(
            "--resolution",
            help="Conflict resolution: 'priority' (file order) or 'consensus' (majority of 3+ files)",
        ),
    ] = Resolution.priority,
    multibase: Annotated[
        bool,
        typer.Option(
            "--multibase",
            help="Keep multi-base indel genotypes (Living DNA) instead of skipping them",
        ),
    ] = False,
    include_invalid_positions: Annotated[
        bool,
        typer.Option(
            "--include-invalid-positions",
            help="Keep markers reported at chromosome 0 / position 0",
        ),
    ] = False,
    stem: Annotated[
        str,
        typer.Option(
            "--stem",
            help="Base name of the output files",
        ),
    ] = "merged",
    no_log: Annotated[
        bool,
        typer.Option(
            "--no-log",
            help="Skip writing the merge log",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", "-v",
            help="Enable verbose logging",
        ),
    ] = False,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Also write a rotating debug log under <dir>/logs/",
            file_okay=False,
            dir_okay=True,
        ),
    ] = None,
) -> None:
    """Merge raw DNA data files from different vendors.

    Markers reported by several files are merged; when files disagree the
    conflict is resolved by file priority or by consensus and recorded in
    the merge log together with every skipped input row.
    """
    from dna_merger.config import Config
    from dna_merger.logging_config import get_log_file_path, setup_logging
    from dna_merger.main import run_merge

    setup_logging(
        log_dir=str(log_dir) if log_dir is not None else None,
        console_level=logging.INFO if verbose else logging.WARNING,
    )

    console.print("\n")
    console.print("[bold]DNA Raw Data Merger[/bold]", style="blue")
    console.print(f"v{__version__}\n")

    # Set default output directory
    if output_dir is None:
        output_dir = Path.cwd()

    # Ensure output directory exists
    output_dir.mkdir(parents=True, exist_ok=True)

    config = Config(
        input_files=files,
        formats=expand_formats(formats, len(files)),
        output_dir=output_dir,
        output_format=output_format.value,
        fill_missing=not no_fill_missing,
        conflict_resolution=resolution.value,
        allow_multibase=multibase,
        include_invalid_positions=include_invalid_positions,
        verbose=verbose,
        file_stem=stem,
        write_log=not no_log,
    )

    # Print options
    console.print("Options Set:")
    for i, path in enumerate(config.input_files):
        fmt = config.formats[i]
        console.print(f"File {i + 1}:                      {path} ({fmt.value if fmt else 'auto'})")
    console.print(f"Output format:               {config.output_format.value}")
    console.print(f"Conflict resolution:         {config.conflict_resolution.value}")
    console.print(f"Fill missing:                {config.fill_missing}")
    if config.allow_multibase:
        console.print("Multi-base genotypes:        kept")
    if config.include_invalid_positions:
        console.print("Invalid positions:           kept")
    if config.verbose:
        console.print("Verbose logging flag set")
    console.print("")

    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]ERROR:[/red] {error}")
        raise typer.Exit(code=1)

    try:
        run = run_merge(config, console=console)
    except Exception as e:
        console.print(f"[red]ERROR:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(code=1)

    result = run.result
    console.print("\n[bold]Merge summary:[/bold]")
    console.print(f"  Merged markers:     {len(result.markers):,}")
    console.print(f"  Conflicts:          {len(result.conflicts):,}")
    console.print(f"  Skipped rows:       {len(result.skipped):,}")
    if run.excluded_par:
        console.print(f"  PAR excluded:       {run.excluded_par:,}")
    console.print(f"\n  Output file:        {run.output_path}")
    if run.log_path is not None:
        console.print(f"  Log file:           {run.log_path}")
    if get_log_file_path() is not None:
        console.print(f"  Debug log:          {get_log_file_path()}")
    console.print("\n[green]Merge complete![/green]\n")


@app.command()
def detect(
    files: Annotated[
        list[Path],
        typer.Argument(
            help="Raw data files to inspect",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
) -> None:
    """Print the detected format of each file.

    23andMe and FamilyTreeDNA exports are reported as unknown; pass
    --format explicitly when merging them.
    """
    from dna_merger.io_utils import read_text

    unknown = False
    for path in files:
        fmt = detect_format(read_text(path))
        if fmt == DNAFormat.UNKNOWN:
            unknown = True
            console.print(f"{path}: [yellow]unknown[/yellow]")
        else:
            console.print(f"{path}: {fmt.value}")

    if unknown:
        undetectable = [f.value for f in DNAFormat if f != DNAFormat.UNKNOWN and not is_detectable(f)]
        console.print(
            f"\n[yellow]Hint:[/yellow] {', '.join(undetectable)} files cannot be detected; "
            "use --format when merging"
        )


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

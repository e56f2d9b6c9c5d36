"""vcf-liftover: lift VCF records onto a new reference assembly."""

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import ConfigValidationError, load_config
from .exceptions import IntervalFileError, LiftoverError
from .intervals import load_intervals
from .manifest import read_locus_table, write_normalization_manifest
from .pipeline import LiftoverConfig, LiftoverPipeline, interval_mapper
from .reference import FastaReference
from .vcf_io import LIFTOVER_INFO_LINES, REJECT_INFO_LINES, VCFReader, VCFWriter, build_header


def version_callback(value: bool) -> None:
    if value:
        print(__version__)
        raise typer.Exit()


app = typer.Typer(
    name="vcf-liftover", help="Lift VCF variants and genotypes onto a new reference assembly"
)
console = Console()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", callback=version_callback, is_eager=True, help="Show version and exit"
        ),
    ] = None,
) -> None:
    pass


def setup_logging(verbose: bool, quiet: bool, log_file: Path | None = None) -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("vcf_liftover").setLevel(level)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logging.getLogger("vcf_liftover").addHandler(file_handler)


def _resolve_config(
    config_file: Path | None,
    write_original_position: bool | None,
    recover_swapped_ref_alt: bool | None,
    strict: bool | None,
) -> LiftoverConfig:
    """Merge CLI flags over the TOML config; flags left unset keep config values."""
    overrides = {
        "write_original_position": write_original_position,
        "recover_swapped_ref_alt": recover_swapped_ref_alt,
        "strict": strict,
    }
    if config_file:
        return load_config(config_file, overrides)
    return LiftoverConfig(**{k: v for k, v in overrides.items() if v is not None})


@app.command()
def lift(
    vcf_path: Path = typer.Argument(..., help="Source VCF file (.vcf, .vcf.gz, .bcf)"),
    intervals_path: Path = typer.Option(
        ..., "--intervals", "-i", help="TSV of target intervals from a coordinate mapper"
    ),
    reference_path: Path = typer.Option(
        ..., "--reference", "-R", help="Destination reference FASTA"
    ),
    output: Path = typer.Option(..., "--output", "-o", help="Lifted VCF (.vcf or .vcf.gz)"),
    reject: Annotated[
        Path | None, typer.Option("--reject", help="Write records that failed to lift here")
    ] = None,
    write_original_position: Annotated[
        bool | None,
        typer.Option(
            "--write-original-position/--no-write-original-position",
            help="Annotate lifted records with OriginalContig/OriginalStart",
        ),
    ] = None,
    recover_swapped_ref_alt: Annotated[
        bool | None,
        typer.Option(
            "--recover-swapped-ref-alt/--no-recover-swapped-ref-alt",
            help="Swap REF/ALT of SNPs whose ALT matches the new reference",
        ),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--lenient", help="Abort on malformed records instead of rejecting"),
    ] = None,
    config_file: Annotated[
        Path | None, typer.Option("--config", "-c", help="TOML configuration file")
    ] = None,
    log_file: Annotated[Path | None, typer.Option("--log", help="Write log to file")] = None,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show progress"),
) -> None:
    """Lift a VCF onto a new reference using precomputed target intervals.

    Records are written sorted by the destination reference's contig order.

    Examples:

        vcf-liftover lift in.vcf.gz -i mapped.tsv -R hg38.fa -o out.vcf.gz --reject rej.vcf
    """
    setup_logging(verbose, quiet, log_file)

    for label, path in (
        ("VCF file", vcf_path),
        ("Interval file", intervals_path),
        ("Reference FASTA", reference_path),
    ):
        if not path.exists():
            console.print(f"[red]Error: {label} not found: {path}[/red]")
            raise typer.Exit(1)

    try:
        config = _resolve_config(
            config_file, write_original_position, recover_swapped_ref_alt, strict
        )
    except (ConfigValidationError, FileNotFoundError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1) from None

    if not verbose and not quiet:
        logging.getLogger("vcf_liftover").setLevel(config.log_level)

    try:
        lookup = load_intervals(intervals_path)
    except IntervalFileError as e:
        console.print(f"[red]Error in interval file: {e}[/red]")
        raise typer.Exit(1) from None

    try:
        with FastaReference(reference_path) as reference, VCFReader(vcf_path) as reader:
            contig_order = {name: i for i, name in enumerate(reference.contig_names)}
            contigs = [(name, len(reference[name])) for name in reference.contig_names]
            pipeline = LiftoverPipeline(interval_mapper(lookup), reference, config)

            lifted = []
            reject_header = build_header(reader.raw_header, REJECT_INFO_LINES)
            reject_writer = VCFWriter(reject, reject_header) if reject else nullcontext()
            with reject_writer:
                progress_ctx = (
                    Progress(SpinnerColumn(), TextColumn("{task.description}"), console=console)
                    if progress and not quiet else nullcontext()
                )
                with progress_ctx as progress_bar:
                    task = (
                        progress_bar.add_task("Lifting variants...", total=None)
                        if progress_bar else None
                    )
                    for outcome in pipeline.run(reader):
                        if outcome.lifted:
                            lifted.append(outcome.record)
                        elif reject:
                            reject_writer.write(outcome.record)
                        if progress_bar and pipeline.stats.total % 10_000 == 0:
                            progress_bar.update(
                                task, description=f"Processed {pipeline.stats.total:,} variants"
                            )

            lifted.sort(key=lambda r: (contig_order[r.contig], r.start, r.end))
            header = build_header(reader.raw_header, LIFTOVER_INFO_LINES, contigs)
            with VCFWriter(output, header) as writer:
                for record in lifted:
                    writer.write(record)

    except LiftoverError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print("[yellow]Tip:[/yellow] Use --lenient to reject malformed records")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    stats = pipeline.stats
    if not quiet:
        console.print(
            f"[green]✓[/green] Lifted {stats.lifted:,} of {stats.total:,} variants"
            f" ({stats.swapped:,} with swapped REF/ALT)"
        )
        if stats.rejected:
            table = Table(title="Rejected variants")
            table.add_column("Reason")
            table.add_column("Count", justify="right")
            for reason, count in sorted(stats.rejected.items()):
                table.add_row(reason, f"{count:,}")
            console.print(table)
        console.print(f"  Output: {output}")
        if reject:
            console.print(f"  Rejects: {reject}")


@app.command("normalization-manifest")
def normalization_manifest(
    loci_path: Path = typer.Argument(..., help="TSV of manifest loci with GenTrain scores"),
    output: Path = typer.Argument(..., help="Output bpm.csv file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
) -> None:
    """Write a normalization manifest (bpm.csv) from a locus table."""
    setup_logging(verbose, quiet)

    if not loci_path.exists():
        console.print(f"[red]Error: Locus table not found: {loci_path}[/red]")
        raise typer.Exit(1)

    try:
        loci = read_locus_table(loci_path)
        count = write_normalization_manifest(loci, output)
    except (ValueError, OSError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None

    if not quiet:
        console.print(f"[green]✓[/green] Wrote {count:,} loci to {output}")


if __name__ == "__main__":
    app()

"""Command-line interface for modelgen."""

import sys
from pathlib import Path

import click

from .engine import generate as run_generation
from .errors import EngineError, LoadError, StructuralRegionError
from .graph.builder import load
from .logs import configure_logging, get_logger
from .output.formatter import format_summary
from .schema.errors import SchemaValidationError
from .schema.profile import TargetProfile, load_profile

logger = get_logger(__name__)


@click.group()
@click.version_option(package_name="modelgen")
def main():
    """modelgen: model-driven code generation with protected regions."""
    pass


@main.command()
@click.argument("model_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--dest",
    "destination",
    required=True,
    type=click.Path(file_okay=False),
    help="Directory receiving the generated files",
)
@click.option(
    "--profile",
    "profile_file",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML target profile",
)
@click.option(
    "--strict/--lenient",
    default=None,
    help="Abort on malformed regions (default) or skip the affected files",
)
@click.option(
    "--parallel",
    is_flag=True,
    default=False,
    help="Render targets and read existing files on a thread pool",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Report what would change without writing",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging")
@click.option("-q", "--quiet", is_flag=True, default=False, help="Warnings only")
def generate(
    model_file: str,
    destination: str,
    profile_file: str | None,
    strict: bool | None,
    parallel: bool,
    dry_run: bool,
    output_format: str,
    verbose: bool,
    quiet: bool,
):
    """Generate source files for a model.

    MODEL_FILE is the path to a YAML or JSON model file.

    Exit codes:
      0 - Generation succeeded
      1 - Malformed regions or write failure
      2 - Model or profile error
    """
    configure_logging(verbose=verbose, quiet=quiet)

    try:
        graph = load(Path(model_file))
        profile = load_profile(profile_file) if profile_file else TargetProfile()
    except SchemaValidationError as e:
        click.echo(f"Schema validation error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)
    except LoadError as e:
        click.echo(f"Error loading model: {e}", err=True)
        sys.exit(2)

    overrides = {}
    if strict is not None:
        overrides["strict"] = strict
    if parallel:
        overrides["parallel"] = True
    if overrides:
        profile = profile.model_copy(update=overrides)

    try:
        summary = run_generation(graph, destination, profile, dry_run=dry_run)
    except StructuralRegionError as e:
        click.echo("Malformed protected regions, nothing was written:", err=True)
        for failure in e.failures:
            click.echo(f"  - {failure}", err=True)
        sys.exit(1)
    except EngineError as e:
        click.echo(f"Generation failed: {e}", err=True)
        sys.exit(1)

    click.echo(format_summary(summary, output_format))  # type: ignore

    if summary.has_failures:
        logger.warning("%d file(s) skipped because of malformed regions", len(summary.failures))
        sys.exit(1)
    sys.exit(0)

"""rpcdoc CLI interface.

Commands:
- generate: Generate the service specification document
- check: Generate in memory and report per-service errors
- init: Initialize rpcdoc configuration and a sample metadata document
- validate: Validate a Jinja2 template

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from rpcdoc import __version__
from rpcdoc.config import OUTPUT_FORMATS, RpcDocConfig, load_config
from rpcdoc.errors import RpcDocError
from rpcdoc.models.generation import GenerationResult, GenerationStatus
from rpcdoc.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="rpcdoc",
    help="Service specification generator for RPC interface metadata",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: RpcDocConfig | None = None
_logger = get_logger()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rpcdoc {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output with timestamps"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress info messages (warnings and errors only)"),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option("--ci", help="Enable CI mode with JSON log lines"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """rpcdoc - Service specification generator.

    Turns RPC service metadata into a normalized specification of services,
    functions, types and endpoints.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
        if _config.config_path:
            _logger.debug(f"Loaded config from: {_config.config_path}")
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)


def _run_pipeline(metadata: Path | None) -> GenerationResult:
    """Run generation, exiting with code 1 on fatal errors."""
    from rpcdoc.pipeline import GenerationPipeline

    pipeline = GenerationPipeline(config=_config)
    try:
        return pipeline.run(metadata)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except (KeyError, ValueError, RpcDocError) as e:
        _logger.error(f"Generation failed: {e}")
        raise typer.Exit(1)


def _report_errors(result: GenerationResult) -> None:
    for error in result.errors:
        _logger.warning(f"  [{error.component}] {error.service}: {error.message}")


# =============================================================================
# generate command
# =============================================================================


@app.command()
def generate(
    metadata: Annotated[
        Path | None,
        typer.Option(
            "--metadata",
            "-m",
            help="Metadata document (overrides config)",
            dir_okay=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (overrides config)"),
    ] = None,
    format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: markdown, json"),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Document title (overrides config)"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Preview output without writing files"),
    ] = False,
) -> None:
    """Generate the service specification document.

    Exit codes:
        0: Specification generated successfully
        1: Fatal error (nothing written)
        2: Generated with some services skipped
    """
    from rpcdoc.templates import SpecificationRenderer

    config = _config or RpcDocConfig()
    output_path = output or Path(config.output.path)
    output_format = format or config.output.format
    doc_title = title or config.output.title

    if output_format not in OUTPUT_FORMATS:
        _logger.error(f"Invalid format: {output_format}. Use one of {sorted(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    result = _run_pipeline(metadata)

    _logger.info(f"Generation {result.status.value}")
    if result.errors:
        _logger.warning(f"Skipped {len(result.errors)} service(s)")
        _report_errors(result)

    template_path = Path(config.output.template) if config.output.template else None
    renderer = SpecificationRenderer(template_path)

    try:
        if dry_run:
            if output_format == "json":
                typer.echo(renderer.render_json(result.specification, result))
            else:
                typer.echo(renderer.preview(result.specification, doc_title, max_lines=100))
            _logger.info("Dry run complete - no files written")
        else:
            rendered_path = renderer.render_to_file(
                result.specification,
                output_path,
                output_format=output_format,
                title=doc_title,
                result=result,
            )
            typer.echo(f"Specification written to: {rendered_path}")
    except (ValueError, OSError) as e:
        _logger.error(f"Rendering failed: {e}")
        raise typer.Exit(1)

    if result.status == GenerationStatus.FAILED:
        raise typer.Exit(1)
    elif result.errors:
        raise typer.Exit(2)
    raise typer.Exit(0)


# =============================================================================
# check command
# =============================================================================


@app.command()
def check(
    metadata: Annotated[
        Path | None,
        typer.Option(
            "--metadata",
            "-m",
            help="Metadata document (overrides config)",
            dir_okay=False,
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Check that every bound service resolves.

    Exit codes:
        0: Every service resolved
        1: One or more services failed
    """
    result = _run_pipeline(metadata)
    spec = result.specification

    if json_output:
        typer.echo(json.dumps(
            {
                "status": result.status.value,
                "service_count": spec.service_count,
                "function_count": spec.function_count,
                "class_count": spec.class_count,
                "errors": [e.to_dict() for e in result.errors],
            },
            indent=2,
        ))
    else:
        typer.echo("\nCheck Results\n")
        for service in spec.services.values():
            typer.echo(f"  ok    {service.name} ({len(service.functions)} functions)")
        for error in result.errors:
            typer.echo(f"  FAIL  {error.service}")
            typer.echo(f"        └─ [{error.component}] {error.message}")
        typer.echo()

    if result.has_errors():
        if not json_output:
            typer.echo(f"Check FAILED: {len(result.errors)} service(s) did not resolve")
        raise typer.Exit(1)

    if not json_output:
        typer.echo(f"All {spec.service_count} services resolved")
    raise typer.Exit(0)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite existing files"),
    ] = False,
) -> None:
    """Initialize rpcdoc configuration.

    Creates .rpcdoc/config.yaml and a sample metadata document.
    """
    from rpcdoc.config import create_default_config, create_sample_metadata

    rpcdoc_dir = Path(".rpcdoc")
    config_file = rpcdoc_dir / "config.yaml"
    metadata_file = Path("rpcdoc.metadata.yaml")

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    rpcdoc_dir.mkdir(exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")

    if not metadata_file.exists() or force:
        metadata_file.write_text(create_sample_metadata(), encoding="utf-8")
        _logger.info(f"Created sample metadata: {metadata_file}")

    typer.echo("\nrpcdoc configuration initialized")
    typer.echo(f"   Config: {config_file}")
    typer.echo(f"   Metadata: {metadata_file}")
    raise typer.Exit(0)


# =============================================================================
# validate command
# =============================================================================


@app.command()
def validate(
    template: Annotated[
        Path,
        typer.Argument(
            help="Path to Jinja2 template to validate",
            exists=True,
            dir_okay=False,
        ),
    ],
) -> None:
    """Validate a Jinja2 template.

    Parses the template with the renderer's filters registered, so unknown
    filters are reported too.
    """
    from jinja2 import TemplateSyntaxError

    from rpcdoc.templates import SpecificationRenderer

    _logger.info(f"Validating template: {template}")

    env = SpecificationRenderer().environment
    try:
        env.compile(template.read_text(encoding="utf-8"), name=template.name)
    except TemplateSyntaxError as e:
        _logger.error(f"Template syntax error: {e.message}")
        typer.echo(f"Template syntax error at line {e.lineno}: {e.message}")
        raise typer.Exit(1)

    typer.echo(f"Template is valid: {template}")
    raise typer.Exit(0)


if __name__ == "__main__":
    app()

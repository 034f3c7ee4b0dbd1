"""CLI entry point for wsdl-openapi."""

import sys
from pathlib import Path

import click

from wsdl_openapi.config import Settings
from wsdl_openapi.converter import WsdlConverter
from wsdl_openapi.errors import ConfigError, ConversionError
from wsdl_openapi.log import configure_logging
from wsdl_openapi.openapi.serializer import FORMATS, render_document
from wsdl_openapi.openapi.validator import validate_document
from wsdl_openapi.runner import load_locations, run_batch


def _load_settings(ctx: click.Context, settings_path: Path | None, timeout: float | None = None) -> Settings:
    """Load settings, apply CLI overrides and configure logging."""
    try:
        settings = Settings.from_file(settings_path) if settings_path else Settings()
    except ConfigError as e:
        raise click.ClickException(str(e))

    if timeout is not None:
        settings = settings.model_copy(update={"timeout_seconds": timeout})

    options = ctx.obj or {}
    configure_logging(
        options.get("log_level") or settings.log_level,
        options.get("log_format") or settings.log_format,
    )
    return settings


@click.group()
@click.option("--log-level", default=None, type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False), help="Log level (default from settings).")
@click.option("--log-format", default=None, type=click.Choice(["console", "json"]), help="Log output format.")
@click.pass_context
def main(ctx: click.Context, log_level: str | None, log_format: str | None):
    """wsdl-openapi: convert WSDL service descriptions into OpenAPI documents."""
    ctx.obj = {"log_level": log_level, "log_format": log_format}


@main.command()
@click.argument("location")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file (default: stdout).")
@click.option("--format", "fmt", default=None, type=click.Choice(list(FORMATS)), help="Output format.")
@click.option("--settings", "settings_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML/JSON settings file.")
@click.option("--timeout", default=None, type=float, help="Fetch timeout in seconds.")
@click.pass_context
def convert(ctx: click.Context, location: str, output: Path | None, fmt: str | None, settings_path: Path | None, timeout: float | None):
    """Convert the WSDL at LOCATION (file path or URL) to OpenAPI."""
    settings = _load_settings(ctx, settings_path, timeout)
    fmt = fmt or settings.output_format

    try:
        document = WsdlConverter(settings).convert(location)
    except ConversionError as e:
        raise click.ClickException(str(e))

    text = render_document(document, fmt)
    for where, message in validate_document(document.to_dict(), text, fmt).items():
        click.echo(f"Warning: {where}: {message}", err=True)

    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"OpenAPI saved to: {output}")


@main.command()
@click.option("-c", "--config", "locations_path", default="wsdls.json", type=click.Path(path_type=Path), help="JSON/YAML file with a list of WSDL locations.")
@click.option("-o", "--out", "out_dir", default="Temp", type=click.Path(path_type=Path), help="Output directory for OpenAPI files.")
@click.option("--generator-cmd", default=None, help='Client generator command, e.g. "kiota generate -l csharp -d {document} -o {output}".')
@click.option("--settings", "settings_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML/JSON settings file.")
@click.pass_context
def batch(ctx: click.Context, locations_path: Path, out_dir: Path, generator_cmd: str | None, settings_path: Path | None):
    """Convert every WSDL listed in the config file and run the client generator when needed."""
    settings = _load_settings(ctx, settings_path)

    if not locations_path.exists():
        raise click.ClickException(f"Config file not found: {locations_path}")
    try:
        locations = load_locations(locations_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    click.echo(f"Processing {len(locations)} locations into {out_dir}...")
    results = run_batch(locations, out_dir, settings=settings, generator_command=generator_cmd)

    failed = 0
    for result in results:
        if result.error:
            failed += 1
            click.echo(f"  Failed {result.location}: {result.error}")
        elif result.skipped:
            click.echo(f"  Skipping client generation for {result.output} (no changes and client exists)")
        elif result.generated:
            click.echo(f"  Created {result.output} and its client")
        else:
            click.echo(f"  Created {result.output}")

    click.echo(f"Done! Converted {len(results) - failed} of {len(results)} locations.")
    if failed:
        sys.exit(1)

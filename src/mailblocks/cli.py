"""Command-line interface for MailBlocks.

This module provides the CLI commands for running the API server and for
validating, compiling and previewing templates from files.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, NoReturn

import click

from mailblocks import __version__
from mailblocks.core.config import Settings, get_settings
from mailblocks.core.logging import LoggingContext, configure_logging, get_logger


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _load_template(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        click.echo(f"Error: {path} is not valid JSON: {e}", err=True)
        raise SystemExit(1)


def _write_output(content: str, output: str | None) -> None:
    if output:
        Path(output).write_text(content, encoding="utf-8")
        click.echo(f"Wrote {output}", err=True)
    else:
        click.echo(content)


@click.group()
@click.version_option(version=__version__, prog_name="MailBlocks")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides MAILBLOCKS_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """MailBlocks - email template validation, compilation and storage."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = {"settings": settings}


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.pass_context
def serve(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    workers: int | None,
    reload: bool,
) -> None:
    """Start the MailBlocks API server."""
    import uvicorn

    settings = _settings(ctx)
    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    logger = get_logger(__name__)
    logger.info(
        "Starting MailBlocks server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "mailblocks.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
def validate(template_file: str) -> None:
    """Validate a template JSON file.

    Prints one error per line and exits with status 1 when invalid.
    """
    from mailblocks.domain.services.template_validator import validate_template

    result = validate_template(_load_template(template_file))
    if result.valid:
        click.echo(f"{template_file}: valid")
        return

    for error in result.errors:
        click.echo(f"{template_file}: {error}", err=True)
    raise SystemExit(1)


@cli.command(name="compile")
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Output file")
@click.option("--html", "as_html", is_flag=True, default=False, help="Render HTML instead of MJML")
@click.pass_context
def compile_command(ctx: click.Context, template_file: str, output: str | None, as_html: bool) -> None:
    """Compile a template JSON file to MJML (or HTML with --html)."""
    from mailblocks.infrastructure.services.mjml.html_renderer import MjmlRenderer
    from mailblocks.infrastructure.services.template_publisher import (
        TemplatePublisher,
        TemplateValidationError,
    )

    settings = _settings(ctx)
    publisher = TemplatePublisher(
        MjmlRenderer(validation_level=settings.mjml_validation_level),
        render_html=as_html,
    )

    try:
        with LoggingContext(template_file=template_file):
            published = asyncio.run(publisher.publish(_load_template(template_file)))
    except TemplateValidationError as e:
        for error in e.errors:
            click.echo(f"{template_file}: {error}", err=True)
        raise SystemExit(1)

    if not as_html:
        _write_output(published.mjml, output)
        return

    for diagnostic in published.diagnostics:
        click.echo(f"Warning: {diagnostic.formatted_message}", err=True)
    if not published.html:
        click.echo("Error: MJML rendering produced no HTML", err=True)
        raise SystemExit(1)
    _write_output(published.html, output)


@cli.command()
@click.argument("mjml_file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Output file")
@click.pass_context
def preview(ctx: click.Context, mjml_file: str, output: str | None) -> None:
    """Render an MJML file to HTML."""
    from mailblocks.infrastructure.services.mjml.html_renderer import MjmlRenderer

    renderer = MjmlRenderer(validation_level=_settings(ctx).mjml_validation_level)
    result = renderer.render(Path(mjml_file).read_text(encoding="utf-8"))

    for diagnostic in result.errors:
        click.echo(f"Warning: {diagnostic.formatted_message}", err=True)
    if not result.html:
        click.echo("Error: MJML rendering produced no HTML", err=True)
        raise SystemExit(1)
    _write_output(result.html, output)


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def init_db(ctx: click.Context, force: bool) -> None:
    """Create the database tables.

    Use this only in development. In production, use migrations instead.
    """
    from mailblocks.infrastructure.persistence.database import get_db_manager, init_database

    settings = _settings(ctx)
    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm("This will create all database tables. Continue?", abort=True, default=False)

    async def initialize():
        try:
            await init_database()
            await get_db_manager().create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option("--check-storage", is_flag=True, help="Probe the image storage provider")
@click.pass_context
def info(ctx: click.Context, check_storage: bool) -> None:
    """Display MailBlocks configuration."""
    settings = _settings(ctx)

    click.echo(f"""
MailBlocks v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}
  External URL: {settings.external_url}

Database:
  URL:          {settings.database_url}

Storage:
  Provider:     {settings.storage_provider}
  Path:         {settings.storage_path}
  S3 Bucket:    {settings.s3_bucket or '-'}

Rendering:
  Validation:   {settings.mjml_validation_level}
  HTML on save: {settings.render_html_on_save}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")

    if check_storage:
        from mailblocks.infrastructure.storage import build_storage_provider

        ok, message = asyncio.run(build_storage_provider(settings).test_connection())
        click.echo(f"Storage check: {message}", err=not ok)
        if not ok:
            raise SystemExit(1)


def main() -> NoReturn:
    """Main entry point for the CLI.

    Called by the `mailblocks` console script and `python -m mailblocks`.
    """
    cli()


if __name__ == "__main__":
    main()

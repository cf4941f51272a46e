"""Command-line interface for Kinobot."""

import asyncio
import json
import sys
from pathlib import Path

import click
import httpx

from kinobot import __version__
from kinobot.commands import CommandHandler, Reply
from kinobot.config import load_config
from kinobot.utils.logger import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to built-in defaults)",
)
@click.pass_context
def cli(ctx, config):
    """Kinobot - movie, book and image lookups for chat bots."""
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


def _run_command(config, method: str, *args, **kwargs) -> Reply:
    """Run one command with a short-lived HTTP client."""

    async def _run():
        async with httpx.AsyncClient(timeout=config.tmdb.timeout_seconds) as client:
            handler = CommandHandler(config, client)
            return await getattr(handler, method)(*args, **kwargs)

    return asyncio.run(_run())


def _print_reply(reply: Reply):
    """Print the reply payload and exit non-zero on error replies."""
    click.echo(json.dumps(reply.to_payload(), indent=2, ensure_ascii=False))
    if reply.ephemeral:
        sys.exit(1)


@cli.command()
@click.argument("title")
@click.option("--year", "-y", type=int, default=None, help="The year the movie was released")
@click.pass_context
def kino(ctx, title, year):
    """Look up a movie on TMDB."""
    _print_reply(_run_command(ctx.obj["config"], "kino", title, year=year))


@cli.command()
@click.argument("title")
@click.pass_context
def book(ctx, title):
    """Look up a book on Goodreads."""
    _print_reply(_run_command(ctx.obj["config"], "book", title))


@cli.command()
@click.argument("term")
@click.pass_context
def image(ctx, term):
    """Search for an image."""
    _print_reply(_run_command(ctx.obj["config"], "image", term))


@cli.command()
@click.pass_context
def daemon(ctx):
    """Start the HTTP command endpoint."""
    config = ctx.obj["config"]

    click.echo("Starting Kinobot daemon...")
    click.echo(f"Listening on {config.api.host}:{config.api.port}")
    click.echo(f"Signature auth: {'enabled' if config.api.shared_secret else 'disabled'}")
    click.echo("")
    click.echo("Endpoints:")
    click.echo(f"  - Movie:        http://{config.api.host}:{config.api.port}/commands/kino")
    click.echo(f"  - Book:         http://{config.api.host}:{config.api.port}/commands/book")
    click.echo(f"  - Image:        http://{config.api.host}:{config.api.port}/commands/image")
    click.echo(f"  - Health check: http://{config.api.host}:{config.api.port}/health")
    click.echo("")
    click.echo("Press Ctrl+C to stop")

    from kinobot.daemon import start_daemon

    try:
        start_daemon(config)
    except KeyboardInterrupt:
        click.echo("\n\nDaemon stopped")
        sys.exit(0)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Kinobot v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Main CLI entry point for the Estudio generation backend.
"""

import asyncio
import json
import os
import sys

import click
import uvicorn

from estudio import __version__
from estudio.config import settings
from estudio.generation.models import Failure, MediaType, Pending, ProviderKind
from estudio.generation.registry import model_registry
from estudio.logging import configure_logging, get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="estudio")
def cli() -> None:
    """Estudio CLI - run the API server and inspect generation models."""
    pass


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8090, type=int, help="Port to bind to (default: 8090)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option("--workers", default=1, type=int, help="Number of worker processes (default: 1)")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, workers: int, log_level: str) -> None:
    """Start the Estudio API server."""
    configure_logging(debug=(log_level == "debug"))

    logger.info(
        "Starting Estudio API server",
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )

    # Reload and worker processes import the app fresh, so settings travel via env
    if log_level == "debug":
        os.environ["ESTUDIO_DEBUG"] = "true"
        os.environ["ESTUDIO_LOG_LEVEL"] = "debug"
    else:
        os.environ.setdefault("ESTUDIO_DEBUG", "false")
        os.environ.setdefault("ESTUDIO_LOG_LEVEL", log_level)

    try:
        if reload or workers > 1:
            uvicorn.run(
                "estudio.api.app:app",
                host=host,
                port=port,
                reload=reload,
                workers=(workers if not reload else 1),
                log_level=log_level,
                access_log=True,
            )
        else:
            from estudio.api.app import app

            uvicorn.run(app, host=host, port=port, log_level=log_level, access_log=True)
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")
    except Exception as e:
        logger.error("Server startup failed", error=str(e))
        sys.exit(1)


@cli.command("models")
@click.option(
    "--media-type",
    type=click.Choice([m.value for m in MediaType]),
    help="Only list models for this media type",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON")
def list_models(media_type: str | None, as_json: bool) -> None:
    """List the generation models in the catalog."""
    if media_type:
        descriptors = model_registry.list_by_media_type(MediaType(media_type))
    else:
        descriptors = model_registry.list_all()

    if as_json:
        click.echo(json.dumps([d.model_dump(mode="json") for d in descriptors], indent=2))
        return

    for d in descriptors:
        mode = "async" if d.is_asynchronous else "sync"
        click.echo(
            f"{d.model_id:<24} {d.media_type.value:<6} {d.provider_kind.value:<11} "
            f"{mode:<6} {d.price_hint or ''}"
        )


@cli.command("status")
@click.argument("task_id")
@click.option(
    "--provider",
    required=True,
    type=click.Choice([p.value for p in ProviderKind]),
    help="Provider that issued the task",
)
@click.option(
    "--media-type",
    default=MediaType.IMAGE.value,
    type=click.Choice([m.value for m in MediaType]),
    help="Media type of the task (default: image)",
)
def check_status(task_id: str, provider: str, media_type: str) -> None:
    """Check a submitted task once using the keys in settings."""
    from estudio.generation.orchestrator import create_orchestrator

    configure_logging(debug=False, log_level="warning")
    orchestrator = create_orchestrator(settings)

    result = asyncio.run(
        orchestrator.check_status(task_id, ProviderKind(provider), MediaType(media_type))
    )

    if isinstance(result, Pending):
        click.echo(f"processing: {task_id}")
    elif isinstance(result, Failure):
        click.echo(f"✗ failed ({result.error_kind.value}): {result.message}", err=True)
        sys.exit(1)
    else:
        artifact = result.artifact_url or f"{len(result.artifact_bytes or b'')} bytes inline"
        click.echo(f"✓ completed: {artifact}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()

"""
Command-line interface for the rignum feed service.

Usage:
    rignum serve     # Run the feed API
    rignum init-db   # Create the sources/items schema
    rignum health    # Check database connectivity
    rignum feed      # Run one feed query and print JSON
"""

import asyncio
import json
import os
import sys

import click

from rignum.config.settings import get_settings
from rignum.observability.logging import setup_logging
from rignum.observability.metrics import get_metrics


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Rignum - read-only feed of captured market metadata."""
    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()

    settings = get_settings()
    if settings.tracing_enabled:
        from rignum.observability.tracing import setup_tracing

        setup_tracing(
            service_name=settings.otel_service_name,
            otlp_endpoint=settings.otel_exporter_otlp_endpoint,
        )


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
@click.option("--metrics/--no-metrics", default=True, help="Enable metrics server")
@click.option("--metrics-port", default=None, type=int, help="Metrics server port")
def serve(
    host: str | None,
    port: int | None,
    reload: bool,
    metrics: bool,
    metrics_port: int | None,
) -> None:
    """Start the feed API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    if metrics:
        metrics_port = metrics_port or settings.metrics_port
        get_metrics().start_server(port=metrics_port)
        click.echo(f"Metrics available on http://localhost:{metrics_port}/metrics")

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "rignum.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from rignum.feed.repository import FeedRepository
    from rignum.storage.database import Database

    async def run():
        async with Database() as db:
            await FeedRepository(db).create_tables()
        click.echo("Database initialized successfully")

    asyncio.run(run())


@main.command()
def health() -> None:
    """Check database connectivity."""
    import structlog

    logger = structlog.get_logger()

    async def check() -> bool:
        from rignum.storage.database import Database

        try:
            async with Database() as db:
                return await db.health_check()
        except Exception as e:
            logger.error("Postgres health check failed", error=str(e))
            return False

    healthy = asyncio.run(check())

    click.echo("\nHealth Check Results:")
    click.echo("-" * 40)
    icon = "✓" if healthy else "✗"
    color = "green" if healthy else "red"
    click.echo(click.style(f"  {icon} postgres: {healthy}", fg=color))
    click.echo("-" * 40)

    if healthy:
        click.echo(click.style("All core services healthy!", fg="green"))
        sys.exit(0)
    else:
        click.echo(click.style("Some services unhealthy!", fg="red"))
        sys.exit(1)


@main.command()
@click.option("--q", "q", default=None, help="Free-text search")
@click.option("--source", default=None, help="Exact source name")
@click.option("--market", default=None, help="Market category")
@click.option("--label", default=None, help="Content label")
@click.option("--flag", default=None, help="Flag the item must carry")
@click.option("--topic", default=None, help="Topic the item must carry")
@click.option("--limit", default=None, help="Page size (1-100)")
def feed(
    q: str | None,
    source: str | None,
    market: str | None,
    label: str | None,
    flag: str | None,
    topic: str | None,
    limit: str | None,
) -> None:
    """Run one feed query against the database and print it as JSON."""
    from rignum.api.models import FeedResponse
    from rignum.feed.engine import FeedQueryEngine
    from rignum.feed.repository import FeedRepository
    from rignum.storage.database import Database

    params = {
        "q": q,
        "source": source,
        "market": market,
        "label": label,
        "flag": flag,
        "topic": topic,
        "limit": limit,
    }

    async def run() -> FeedResponse:
        async with Database() as db:
            engine = FeedQueryEngine(FeedRepository(db))
            page = await engine.query(params)
        return FeedResponse.from_page(page)

    response = asyncio.run(run())
    click.echo(json.dumps(response.model_dump(), indent=2))


if __name__ == "__main__":
    main()

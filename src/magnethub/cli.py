"""MagnetHub CLI.

Usage:
    magnethub serve                         # Host simulator on 127.0.0.1:4100
    magnethub serve --port 8080 --ad-outcome no_fill
    magnethub serve --data highscore=42     # Seed saved data
    magnethub health                        # Check a running simulator
    magnethub version                       # Show SDK info
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
import httpx

from .config import AD_OUTCOMES, SimulatorConfig
from .version import SDK_INFO, VERSION


def _parse_seed(values: tuple[str, ...]) -> dict[str, Any]:
    """Parse key=value pairs; values are JSON when possible, else strings."""
    seed: dict[str, Any] = {}
    for item in values:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got {item!r}", param_hint="--data")
        try:
            seed[key] = json.loads(raw)
        except json.JSONDecodeError:
            seed[key] = raw
    return seed


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.version_option(VERSION, prog_name="magnethub")
def main(verbose: bool) -> None:
    """MagnetHub - host/game messaging SDK tools."""
    # Logs go to stderr so stdout stays clean for command output
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.option("--host", default=None, help="Host to bind to [env: MAGNETHUB_HOST]")
@click.option("--port", type=int, default=None, help="Port to bind to [env: MAGNETHUB_PORT]")
@click.option(
    "--ad-outcome",
    type=click.Choice(AD_OUTCOMES),
    default=None,
    help="How simulated ads end [env: MAGNETHUB_AD_OUTCOME]",
)
@click.option("--data", "data", multiple=True, help="Seed saved data as key=value (repeatable)")
def serve(
    host: str | None,
    port: int | None,
    ad_outcome: str | None,
    data: tuple[str, ...],
) -> None:
    """Run the host simulator (WebSocket endpoint at /ws)."""
    import uvicorn

    from .app import create_app

    config = SimulatorConfig.from_env()
    if host:
        config.host = host
    if port:
        config.port = port
    if ad_outcome:
        config.ad_outcome = ad_outcome
    config.initial_data.update(_parse_seed(data))

    url = f"ws://{config.host}:{config.port}/ws"
    click.echo(f"Starting MagnetHub host simulator on {url}", err=True)
    click.echo(f"  Ad outcome: {config.ad_outcome}", err=True)
    click.echo("Press Ctrl+C to stop", err=True)

    uvicorn.run(create_app(config), host=config.host, port=config.port)


@main.command()
@click.option("--url", default="http://127.0.0.1:4100", help="Simulator base URL")
def health(url: str) -> None:
    """Check a running host simulator."""

    async def check() -> None:
        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{url}/health")
        except httpx.ConnectError:
            click.echo(f"Cannot connect to simulator at {url}", err=True)
            sys.exit(1)

        if response.status_code != 200:
            click.echo(f"Simulator returned {response.status_code}", err=True)
            sys.exit(1)
        data = response.json()
        click.echo(f"Simulator is healthy ({data.get('connections', 0)} connected games)")

    asyncio.run(check())


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def version(as_json: bool) -> None:
    """Show SDK version information."""
    if as_json:
        click.echo(json.dumps(SDK_INFO, indent=2))
        return
    for key, value in SDK_INFO.items():
        click.echo(f"{key}: {value}")


if __name__ == "__main__":
    main()

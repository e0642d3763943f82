"""Main CLI entry point for the ``comms`` command."""

import json
import sys
from typing import Any

import click

from comms_sdk.cli.utils import coro, error, info, load_json, success
from comms_sdk.core.config import CHANNELS
from comms_sdk.core.exceptions import ConfigurationError
from comms_sdk.infra.logging import setup_logging
from comms_sdk.providers import get_provider_factory
from comms_sdk.sdk import CommsSdk


@click.group()
@click.version_option(version="0.1.0", prog_name="comms")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Comms CLI - send notifications across channels from the shell.

    \b
    Quick Start:
      comms providers                                  # List provider types per channel
      comms validate --config comms.json               # Check a configuration
      comms send --config comms.json --request n.json  # Send a notification
      comms send --request n.json --catcher            # Send to the local catcher
    """
    ctx.ensure_object(dict)


def _build_sdk(config: dict[str, Any], catcher: bool) -> CommsSdk:
    overrides = {"use_notification_catcher": True} if catcher else {}
    try:
        return CommsSdk(config, **overrides)
    except ConfigurationError as e:
        error(f"Invalid configuration: {e}")
        sys.exit(2)


@cli.command()
@click.option("--config", "config_file", type=click.File("r"), help="SDK configuration (JSON)")
@click.option(
    "--request",
    "request_file",
    type=click.File("r"),
    required=True,
    help="Notification request (JSON), '-' for stdin",
)
@click.option("--catcher", is_flag=True, default=False, help="Route every channel to the notification catcher")
@coro
async def send(config_file: Any, request_file: Any, catcher: bool) -> None:
    """Send one notification and print the aggregate status as JSON.

    Exits with status 1 when any channel failed.
    """
    config = load_json(config_file, "Configuration") if config_file else {}
    request = load_json(request_file, "Request")
    sdk = _build_sdk(config, catcher)

    status = await sdk.send(request)
    click.echo(json.dumps(status.to_dict(), indent=2))
    if status.status == "error":
        error(f"Failed channels: {', '.join(sorted(status.errors or {}))}")
        sys.exit(1)
    success("Notification sent")


@cli.command()
@click.option("--config", "config_file", type=click.File("r"), required=True, help="SDK configuration (JSON)")
def validate(config_file: Any) -> None:
    """Build the SDK from a configuration and list the resolved providers."""
    sdk = _build_sdk(load_json(config_file, "Configuration"), catcher=False)
    for channel, channel_config in sdk.config.channels.items():
        types = [
            entry.get("type", "?") if isinstance(entry, dict) else type(entry).__name__
            for entry in channel_config.providers
        ]
        strategy = channel_config.multi_provider_strategy
        strategy_name = strategy if isinstance(strategy, str) else getattr(strategy, "__name__", "custom")
        click.echo(f"{channel}: {', '.join(types) or 'logger (default)'} [{strategy_name}]")
    success("Configuration is valid")


@cli.command()
@click.option("--channel", type=str, default=None, help="Only list this channel")
def providers(channel: str | None) -> None:
    """List the provider types available on each channel."""
    factory = get_provider_factory()
    channels = [channel] if channel else list(dict.fromkeys([*CHANNELS, *factory.list_channels()]))
    if channel and channel not in CHANNELS:
        info(f'"{channel}" is not a standard channel; only generic providers apply')
    for name in channels:
        click.echo(f"{name}: {', '.join(factory.list_types(name))}")


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()

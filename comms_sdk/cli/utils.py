"""Helpers shared by CLI commands: async bridging, output and file loading."""

import asyncio
import json
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, TypeVar

import click

T = TypeVar("T")


def coro(f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """
    Decorator that makes an async function synchronous for Click.

    Usage:
        @cli.command()
        @coro
        async def my_command():
            result = await some_async_function()
            click.echo(result)
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def success(message: str) -> None:
    """Print a success message in green."""
    click.secho(f"✓ {message}", fg="green", err=True)


def error(message: str) -> None:
    """Print an error message in red."""
    click.secho(f"✗ {message}", fg="red", err=True)


def info(message: str) -> None:
    """Print an info message in blue."""
    click.secho(f"ℹ {message}", fg="blue", err=True)


def load_json(stream: Any, what: str) -> dict[str, Any]:
    """Parse a JSON object from an open click file, failing with a usage error."""
    try:
        data = json.load(stream)
    except json.JSONDecodeError as e:
        msg = f"{what} is not valid JSON: {e}"
        raise click.BadParameter(msg) from e
    if not isinstance(data, dict):
        msg = f"{what} must be a JSON object"
        raise click.BadParameter(msg)
    return data


__all__ = ["coro", "error", "info", "load_json", "success"]

"""Command line interface for sending notifications and inspecting configuration."""

from comms_sdk.cli.main import cli, main

__all__ = ["cli", "main"]

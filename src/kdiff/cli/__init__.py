"""
CLI module for kdiff.

Provides the command-line interface using Click.
"""

from kdiff.cli.main import cli, main

__all__ = ["main", "cli"]

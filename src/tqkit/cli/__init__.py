"""Command-line interface."""

from tqkit.cli.main import main

__all__ = ['main']

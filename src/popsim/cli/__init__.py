"""Command line interface for popsim."""

from .main import app, main

__all__ = ["app", "main"]

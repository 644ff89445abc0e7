"""Command-line interface module for XML to JSON conversion.

This module provides the ``xml-to-json`` tool, which converts one document
read from a file or standard input.
"""

from .main import main

__all__ = ["main"]

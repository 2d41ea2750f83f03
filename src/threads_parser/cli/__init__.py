"""Command-line interface module for the Threads parser.

This module provides the ``threads-parse`` tool for parsing layout files and
inspecting the resulting element trees.
"""

from .main import main

__all__ = ["main"]

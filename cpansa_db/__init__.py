"""
CPAN Security Advisory Database Generator

A tool for merging per-distribution CPAN security advisories into one
database, enriched with release history and module ownership.
"""

__version__ = "0.1.0"
__author__ = "Imranur Rahman"

from .cli import main

__all__ = ["main"]

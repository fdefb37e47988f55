"""Annotate PGN games with engine-backed move-quality arrows."""

__version__ = "0.1.0"

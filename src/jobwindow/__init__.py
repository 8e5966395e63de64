"""Windowed bidirectional pagination over cursor-paged job listings."""

__all__ = ["__version__"]

__version__ = "0.1.0"

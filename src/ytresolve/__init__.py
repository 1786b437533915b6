"""Resolve YouTube page URLs into direct media streams and metadata."""

__version__ = "0.1.0"

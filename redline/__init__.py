"""Redline: entity alignment, redaction and aggregation for transcripts."""

__version__ = "0.1.0"

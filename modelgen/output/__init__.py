"""Output formatting for the command-line interface."""

from .formatter import format_summary

__all__ = ["format_summary"]

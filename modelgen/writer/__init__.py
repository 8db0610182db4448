"""Write coordinator: stages and commits generated files atomically."""

from .coordinator import STAGING_PREFIX, WriteCoordinator, read_text
from .summary import FileFailure, Summary

__all__ = [
    "STAGING_PREFIX",
    "WriteCoordinator",
    "read_text",
    "FileFailure",
    "Summary",
]

"""Protected-region extraction and merging."""

from .errors import MalformedRegion, RegionError, TemplateMismatch, UnterminatedRegion
from .extractor import Region, extract, scan_regions
from .markers import begin_marker, end_marker, parse_marker
from .merge import MergeResult, merge

__all__ = [
    "MalformedRegion",
    "RegionError",
    "TemplateMismatch",
    "UnterminatedRegion",
    "Region",
    "extract",
    "scan_regions",
    "begin_marker",
    "end_marker",
    "parse_marker",
    "MergeResult",
    "merge",
]

"""Extraction of developer-authored protected regions from existing files."""

from dataclasses import dataclass

from .errors import MalformedRegion, UnterminatedRegion
from .markers import BEGIN, parse_marker, split_lines


@dataclass(frozen=True)
class Region:
    """A protected region found in a text."""

    key: str
    begin: int  # 1-based line of the BEGIN marker
    end: int  # 1-based line of the END marker
    text: str  # Raw lines between the markers, line endings included


def scan_regions(text: str, path: str | None = None) -> list[Region]:
    """Find every protected region in a text, in file order.

    Regions cannot nest and keys must be unique within one text.

    Args:
        text: The text to scan.
        path: File name used in error messages.

    Returns:
        The regions in the order they appear.

    Raises:
        MalformedRegion: On a nested BEGIN, a stray or mismatched END, or a
            duplicate key.
        UnterminatedRegion: If a BEGIN marker is never closed.
    """
    lines = split_lines(text)
    regions: list[Region] = []
    seen: dict[str, int] = {}
    open_key: str | None = None
    open_line = 0

    for number, line in enumerate(lines, start=1):
        marker = parse_marker(line)
        if marker is None:
            continue
        tag, key = marker

        if tag == BEGIN:
            if open_key is not None:
                raise MalformedRegion(
                    f"Region '{key}' begins inside region '{open_key}' "
                    f"(opened on line {open_line}); regions cannot nest",
                    key,
                    number,
                    path,
                )
            if key in seen:
                raise MalformedRegion(
                    f"Region '{key}' appears twice (first on line {seen[key]})",
                    key,
                    number,
                    path,
                )
            open_key, open_line = key, number
            continue

        if open_key is None:
            raise MalformedRegion(
                f"END of region '{key}' without a matching BEGIN", key, number, path
            )
        if key != open_key:
            raise MalformedRegion(
                f"END of region '{key}' while region '{open_key}' is open",
                key,
                number,
                path,
            )
        regions.append(
            Region(
                key=key,
                begin=open_line,
                end=number,
                text="".join(lines[open_line : number - 1]),
            )
        )
        seen[key] = open_line
        open_key = None

    if open_key is not None:
        raise UnterminatedRegion(open_key, open_line, path)

    return regions


def extract(existing_text: str | None, path: str | None = None) -> dict[str, str]:
    """Extract protected regions from an existing file's text.

    Args:
        existing_text: The current file content, or None if the file does
            not exist yet (first generation).
        path: File name used in error messages.

    Returns:
        Mapping of region key to the raw text between its markers, in file
        order. Empty when the file is absent.

    Raises:
        MalformedRegion: If the markers are structurally invalid.
        UnterminatedRegion: If a region is never closed.
    """
    if existing_text is None:
        return {}
    return {region.key: region.text for region in scan_regions(existing_text, path)}

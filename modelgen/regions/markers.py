"""Protected-region marker syntax.

A marker occupies a whole line: optional indentation, an optional comment
token, then ``<BEGIN key>`` or ``<END key>``. This syntax is the on-disk
contract between engine versions and must not change.
"""

import re

BEGIN = "BEGIN"
END = "END"

MARKER_RE = re.compile(
    r"^[ \t]*(?:[^\s<]+[ \t]+)?<(?P<tag>BEGIN|END) (?P<key>[^\s<>]+)>[ \t]*$"
)
KEY_RE = re.compile(r"^[^\s<>]+$")


def parse_marker(line: str) -> tuple[str, str] | None:
    """Parse a marker line.

    Args:
        line: One line, with or without its line ending.

    Returns:
        ``(tag, key)`` for a marker line, otherwise None.
    """
    match = MARKER_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    return match.group("tag"), match.group("key")


def begin_marker(key: str, comment: str = "#") -> str:
    """Format a BEGIN marker (without line ending)."""
    return _marker(BEGIN, key, comment)


def end_marker(key: str, comment: str = "#") -> str:
    """Format an END marker (without line ending)."""
    return _marker(END, key, comment)


def _marker(tag: str, key: str, comment: str) -> str:
    if not KEY_RE.match(key):
        raise ValueError(f"Invalid region key: {key!r}")
    return f"{comment} <{tag} {key}>" if comment else f"<{tag} {key}>"


def split_lines(text: str) -> list[str]:
    """Split text on ``\\n`` only, keeping line endings.

    Unlike ``str.splitlines`` this leaves other Unicode line breaks inside
    developer text alone, so joining the result gives back ``text``.
    """
    if not text:
        return []
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines

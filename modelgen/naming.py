"""Name conversions shared by the graph and plan layers."""

import re

_WORD_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def snake_case(s: str) -> str:
    """Convert a string to snake_case.

    >>> snake_case("OrderLine")
    'order_line'
    >>> snake_case("HTTPRequest")
    'http_request'
    """
    s = _WORD_BOUNDARY.sub("_", s.strip())
    s = re.sub(r"[\s\-]+", "_", s)
    return s.lower()


def upper_snake_case(s: str) -> str:
    """Convert a string to UPPER_SNAKE_CASE."""
    return snake_case(s).upper()


def pascal_case(s: str) -> str:
    """Convert a string to PascalCase, keeping existing inner capitals."""
    parts = re.split(r"[_\s\-]+", s.strip())
    return "".join(p[:1].upper() + p[1:] for p in parts if p)

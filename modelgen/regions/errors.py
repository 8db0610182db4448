"""Protected-region exceptions."""

from ..errors import EngineError


class RegionError(EngineError):
    """Base class for structural errors in protected regions."""

    def __init__(
        self,
        message: str,
        key: str | None = None,
        line: int | None = None,
        path: str | None = None,
    ):
        self.key = key
        self.line = line
        self.path = path
        self.reason = message
        super().__init__(self._format())

    def _format(self) -> str:
        location = ""
        if self.path:
            location = self.path
        if self.line is not None:
            location = f"{location}:{self.line}" if location else f"line {self.line}"
        return f"{location}: {self.reason}" if location else self.reason


class MalformedRegion(RegionError):
    """Raised for nested, mismatched, stray or duplicate markers."""

    pass


class UnterminatedRegion(RegionError):
    """Raised when a BEGIN marker has no matching END before end of input."""

    def __init__(self, key: str, line: int | None = None, path: str | None = None):
        super().__init__(f"Region '{key}' is never closed", key, line, path)


class TemplateMismatch(RegionError):
    """Raised when a generated body does not carry the expected region keys."""

    pass

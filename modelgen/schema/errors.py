"""Model loading exceptions."""

from ..errors import LoadError


class SchemaLoadError(LoadError):
    """Raised when a YAML or JSON source cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class SchemaValidationError(LoadError):
    """Raised when a model or profile fails schema validation."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)


class DanglingReference(LoadError):
    """Raised when a relationship end or container names an absent entity."""

    def __init__(self, construct: str, reference: str):
        self.construct = construct
        self.reference = reference
        super().__init__(
            f"'{construct}' references undefined entity '{reference}'"
        )


class ContainmentCycle(LoadError):
    """Raised when an entity contains itself, directly or transitively."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(
            "Containment cycle: " + " -> ".join(cycle + cycle[:1])
        )

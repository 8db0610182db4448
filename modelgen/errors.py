"""Engine-level exceptions.

Every error raised across the engine boundary derives from ``EngineError``.
Layer-specific errors live next to their layer (``schema.errors``,
``regions.errors``) and subclass the types defined here.
"""


class EngineError(Exception):
    """Base class for all errors raised by the generation engine."""

    pass


class InvalidIdentifierInput(EngineError):
    """Raised when a namespace or qualified name cannot be hashed."""

    def __init__(self, message: str, value: object = None):
        self.value = value
        super().__init__(message)


class LoadError(EngineError):
    """Raised when a model source cannot be turned into a model graph."""

    pass


class PlanError(EngineError):
    """Raised when the code plan is inconsistent (e.g. two targets share a path)."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class StructuralRegionError(EngineError):
    """Raised when protected-region errors abort a batch in strict mode."""

    def __init__(self, message: str, failures: list | None = None):
        self.failures = failures or []
        super().__init__(message)


class WriteError(EngineError):
    """Raised when staging or committing generated files fails."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)

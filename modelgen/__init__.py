"""modelgen: model-driven code generation with protected regions."""

from .engine import generate
from .errors import (
    EngineError,
    InvalidIdentifierInput,
    LoadError,
    PlanError,
    StructuralRegionError,
    WriteError,
)
from .graph import ModelGraph, load
from .identity import namespace_id, resolve
from .plan import GenerationTarget, build_plan
from .regions import (
    MalformedRegion,
    MergeResult,
    RegionError,
    TemplateMismatch,
    UnterminatedRegion,
    extract,
    merge,
)
from .schema import (
    ContainmentCycle,
    DanglingReference,
    SchemaLoadError,
    SchemaValidationError,
    TargetProfile,
    load_profile,
)
from .writer import Summary, WriteCoordinator

__all__ = [
    "generate",
    "EngineError",
    "InvalidIdentifierInput",
    "LoadError",
    "PlanError",
    "StructuralRegionError",
    "WriteError",
    "ModelGraph",
    "load",
    "namespace_id",
    "resolve",
    "GenerationTarget",
    "build_plan",
    "MalformedRegion",
    "MergeResult",
    "RegionError",
    "TemplateMismatch",
    "UnterminatedRegion",
    "extract",
    "merge",
    "ContainmentCycle",
    "DanglingReference",
    "SchemaLoadError",
    "SchemaValidationError",
    "TargetProfile",
    "load_profile",
    "Summary",
    "WriteCoordinator",
]

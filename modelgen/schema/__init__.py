"""Schema layer for parsing and validating model sources and profiles."""

from .errors import (
    ContainmentCycle,
    DanglingReference,
    SchemaLoadError,
    SchemaValidationError,
)
from .models import (
    AttributeSpec,
    EntitySpec,
    ModelSource,
    RelationshipEndSpec,
    RelationshipSpec,
)
from .loader import load_yaml, parse_data, parse_model, parse_model_from_string
from .profile import ALL_SHAPES, TargetProfile, load_profile

__all__ = [
    "ContainmentCycle",
    "DanglingReference",
    "SchemaLoadError",
    "SchemaValidationError",
    "AttributeSpec",
    "EntitySpec",
    "ModelSource",
    "RelationshipEndSpec",
    "RelationshipSpec",
    "load_yaml",
    "parse_data",
    "parse_model",
    "parse_model_from_string",
    "ALL_SHAPES",
    "TargetProfile",
    "load_profile",
]

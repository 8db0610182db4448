"""Graph layer: the immutable, validated model graph."""

from .node_types import Cardinality, EdgeType, EntityKind, RelationshipKind
from .model_graph import Entity, ModelGraph, Relationship, RelationshipEnd
from .builder import build_graph, load

__all__ = [
    "Cardinality",
    "EdgeType",
    "EntityKind",
    "RelationshipKind",
    "Entity",
    "ModelGraph",
    "Relationship",
    "RelationshipEnd",
    "build_graph",
    "load",
]

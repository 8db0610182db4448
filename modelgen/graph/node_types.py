"""Node and edge type definitions for the model graph."""

from enum import Enum


class EntityKind(str, Enum):
    """Kinds of entities in a model."""

    OBJECT = "object"
    RELATIONSHIP_END = "relationship_end"
    ENUMERATION = "enumeration"
    ATTRIBUTE = "attribute"


class RelationshipKind(str, Enum):
    """Kinds of relationships between entities."""

    ONE_TO_ONE = "one_to_one"
    ONE_TO_MANY = "one_to_many"
    MANY_TO_MANY = "many_to_many"
    ASSOCIATIVE = "associative"


class Cardinality(str, Enum):
    """Multiplicity of one relationship end."""

    ONE = "one"
    MANY = "many"


class EdgeType(str, Enum):
    """Types of edges in the model graph."""

    CONTAINS = "contains"  # Container -> contained entity
    RELATES = "relates"  # Entity -> entity, one edge per pair of ends

"""Pydantic models for the serialized model source."""

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from ..naming import upper_snake_case

NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"

EntityKindName = Literal["object", "relationship_end", "enumeration", "attribute"]
RelationshipKindName = Literal["one_to_one", "one_to_many", "many_to_many", "associative"]


class AttributeSpec(BaseModel):
    """An attribute declared inline on an entity."""

    name: str = Field(pattern=NAME_PATTERN)
    type: str = "string"
    optional: bool = False
    description: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class EntitySpec(BaseModel):
    """An entity in the model source."""

    name: str = Field(default="", pattern=NAME_PATTERN)  # Set from the key
    kind: EntityKindName = "object"
    container: str | None = None
    description: str | None = None
    values: list[str] = Field(default_factory=list)
    attributes: list[AttributeSpec] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_entity(cls, data: Any) -> Any:
        """Normalize shorthand attributes and enumeration values."""
        if not isinstance(data, dict):
            return data

        # Attributes from list of strings or dicts
        attributes = data.get("attributes", [])
        if attributes:
            normalized_attrs = []
            for attr in attributes:
                if isinstance(attr, str):
                    normalized_attrs.append({"name": attr, "type": "string"})
                else:
                    normalized_attrs.append(attr)
            data["attributes"] = normalized_attrs

        # Enumeration values may be given as a mapping of name -> description
        values = data.get("values")
        if isinstance(values, dict):
            data["values"] = list(values.keys())

        return data

    @model_validator(mode="after")
    def check_values(self) -> "EntitySpec":
        """Only enumerations carry values, each naming a distinct member."""
        if self.values and self.kind != "enumeration":
            raise ValueError(f"only enumerations declare values, not {self.kind}")
        members: dict[str, str] = {}
        for value in self.values:
            if not value.isidentifier():
                raise ValueError(f"enumeration value {value!r} is not an identifier")
            member = upper_snake_case(value)
            if member in members:
                raise ValueError(
                    f"enumeration values {members[member]!r} and {value!r} "
                    f"both become member {member}"
                )
            members[member] = value
        return self


class RelationshipEndSpec(BaseModel):
    """One side of a relationship."""

    entity: str
    role: str = Field(pattern=NAME_PATTERN)
    cardinality: Literal["one", "many"] = "one"
    conditional: bool = False


class RelationshipSpec(BaseModel):
    """A relationship between two or more entities."""

    name: str = Field(pattern=NAME_PATTERN)
    kind: RelationshipKindName = "one_to_many"
    ends: list[RelationshipEndSpec] = Field(min_length=2)
    via: str | None = None
    description: str | None = None

    @model_validator(mode="after")
    def check_associative(self) -> "RelationshipSpec":
        """Associative relationships name their associative object."""
        if self.kind == "associative" and not self.via:
            raise ValueError("associative relationships require 'via'")
        if self.kind != "associative" and self.via:
            raise ValueError("'via' is only valid on associative relationships")
        return self


class ModelSource(BaseModel):
    """Root model for a serialized domain model."""

    namespace: str = Field(default="model", min_length=1)
    version: str | None = None
    entities: dict[str, EntitySpec] = Field(default_factory=dict)
    relationships: list[RelationshipSpec] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_model(cls, data: Any) -> Any:
        """Normalize the model data."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        # Set entity names from keys
        entities = data.get("entities") or {}
        if isinstance(entities, dict):
            normalized = {}
            for name, entity_data in entities.items():
                if entity_data is None:
                    entity_data = {}
                if isinstance(entity_data, dict):
                    entity_data = {**entity_data, "name": name}
                normalized[name] = entity_data
            data["entities"] = normalized

        # Relationships may be keyed by name
        relationships = data.get("relationships")
        if isinstance(relationships, dict):
            data["relationships"] = [
                {**(rel or {}), "name": name} for name, rel in relationships.items()
            ]
        elif relationships is None:
            data["relationships"] = []

        return data

    def get_entity(self, name: str) -> EntitySpec | None:
        """Get an entity by name."""
        return self.entities.get(name)

    def get_all_entity_names(self) -> list[str]:
        """Get all entity names."""
        return list(self.entities.keys())

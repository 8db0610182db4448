"""Builder for converting a ModelSource into a validated ModelGraph."""

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

import networkx as nx

from ..errors import InvalidIdentifierInput
from ..identity import namespace_id, resolve
from ..logs import get_logger
from ..naming import snake_case
from ..schema.errors import ContainmentCycle, DanglingReference, SchemaValidationError
from ..schema.loader import parse_data, parse_model, parse_model_from_string
from ..schema.models import EntitySpec, ModelSource
from .model_graph import Entity, ModelGraph, Relationship, RelationshipEnd
from .node_types import Cardinality, EntityKind, RelationshipKind

logger = get_logger(__name__)

# Kinds that only exist inside another entity
_MEMBER_KINDS = {"attribute", "relationship_end"}


def load(source: ModelSource | Mapping | str | Path) -> ModelGraph:
    """Load a model source into a ModelGraph.

    Args:
        source: A parsed ModelSource, a raw mapping, YAML/JSON text, or a
            ``Path`` to a YAML/JSON file.

    Returns:
        The validated, immutable model graph.

    Raises:
        SchemaLoadError: If the source cannot be read or parsed.
        SchemaValidationError: If the source fails schema validation.
        DanglingReference: If a relationship end or container is undefined.
        ContainmentCycle: If containment is cyclic.
    """
    if isinstance(source, ModelSource):
        model = source
    elif isinstance(source, Path):
        model = parse_model(source)
    elif isinstance(source, str):
        model = parse_model_from_string(source)
    elif isinstance(source, Mapping):
        model = parse_data(dict(source), ModelSource)
    else:
        raise TypeError(f"Cannot load a model from {type(source).__name__}")
    return build_graph(model)


def build_graph(model: ModelSource) -> ModelGraph:
    """Build a ModelGraph from a ModelSource.

    Args:
        model: The parsed model source.

    Returns:
        A ModelGraph representing the model.

    Raises:
        SchemaValidationError: If member entities lack a container or names clash,
            or the namespace cannot be encoded.
        DanglingReference: If a relationship end or container is undefined.
        ContainmentCycle: If containment is cyclic.
    """
    namespace = model.namespace
    try:
        namespace_id(namespace)
    except InvalidIdentifierInput as e:
        raise SchemaValidationError(
            f"Invalid namespace: {e}",
            [{"loc": "namespace", "msg": str(e), "type": "invalid_identifier"}],
        ) from e

    _check_containers(model)
    qualified = _qualified_names(model)

    entities: list[Entity] = []
    ids: dict[str, Entity] = {}

    def add(
        name: str,
        qualified_name: str,
        kind: str,
        container: str | None,
        properties: dict,
    ) -> Entity:
        if qualified_name in ids:
            raise SchemaValidationError(
                f"Duplicate entity '{qualified_name}'",
                [{"loc": qualified_name, "msg": "duplicate qualified name", "type": "duplicate"}],
            )
        entity = Entity(
            id=resolve(namespace, qualified_name),
            name=name,
            qualified_name=qualified_name,
            kind=EntityKind(kind),
            index=len(entities),
            container=resolve(namespace, container) if container else None,
            properties=MappingProxyType(properties),
        )
        entities.append(entity)
        ids[qualified_name] = entity
        return entity

    for name, spec in model.entities.items():
        container = qualified[spec.container] if spec.container else None
        entity = add(name, qualified[name], spec.kind, container, _entity_properties(spec))

        # Inline attributes become contained entities, declared right after their owner
        for attr in spec.attributes:
            add(
                attr.name,
                f"{entity.qualified_name}.{attr.name}",
                "attribute",
                entity.qualified_name,
                {
                    "type": attr.type,
                    "optional": attr.optional,
                    "description": attr.description,
                    **attr.properties,
                },
            )

    relationships = _build_relationships(model, ids, qualified)

    graph = ModelGraph(namespace, entities, relationships)
    logger.debug(
        "Loaded model '%s': %d entities, %d relationships",
        namespace,
        len(entities),
        len(relationships),
    )
    return graph


def _entity_properties(spec: EntitySpec) -> dict:
    properties = dict(spec.properties)
    if spec.description is not None:
        properties["description"] = spec.description
    if spec.values:
        properties["values"] = tuple(spec.values)
    return properties


def _check_containers(model: ModelSource) -> None:
    """Check container references and containment acyclicity."""
    names = set(model.get_all_entity_names())
    containment = nx.DiGraph()

    for name, spec in model.entities.items():
        containment.add_node(name)
        if spec.kind in _MEMBER_KINDS and not spec.container:
            raise SchemaValidationError(
                f"Entity '{name}' of kind {spec.kind} must declare a container",
                [{"loc": f"entities.{name}.container", "msg": "required", "type": "missing"}],
            )
        if spec.container is None:
            continue
        if spec.container not in names:
            raise DanglingReference(name, spec.container)
        containment.add_edge(spec.container, name)

    try:
        cycle = nx.find_cycle(containment)
    except nx.NetworkXNoCycle:
        return
    raise ContainmentCycle([source for source, _ in cycle])


def _qualified_names(model: ModelSource) -> dict[str, str]:
    """Compute dotted names along the (acyclic) containment chain."""
    qualified: dict[str, str] = {}

    def qualify(name: str) -> str:
        if name not in qualified:
            container = model.entities[name].container
            qualified[name] = f"{qualify(container)}.{name}" if container else name
        return qualified[name]

    for name in model.entities:
        qualify(name)
    return qualified


def _build_relationships(
    model: ModelSource, ids: dict[str, Entity], qualified: dict[str, str]
) -> list[Relationship]:
    relationships: list[Relationship] = []
    seen: set[str] = set()

    def lookup(rel_name: str, reference: str) -> Entity:
        entity = ids.get(reference) or ids.get(qualified.get(reference, ""))
        if entity is None:
            raise DanglingReference(rel_name, reference)
        return entity

    for spec in model.relationships:
        if spec.name in seen:
            raise SchemaValidationError(
                f"Duplicate relationship '{spec.name}'",
                [{"loc": spec.name, "msg": "duplicate relationship", "type": "duplicate"}],
            )
        seen.add(spec.name)

        ends = [
            RelationshipEnd(
                entity=lookup(spec.name, end.entity).id,
                role=end.role,
                cardinality=Cardinality(end.cardinality),
                conditional=end.conditional,
            )
            for end in spec.ends
        ]
        if spec.via:
            via = lookup(spec.name, spec.via)
            ends.append(
                RelationshipEnd(entity=via.id, role=snake_case(via.name))
            )

        relationships.append(
            Relationship(
                id=resolve(model.namespace, f"relationship:{spec.name}"),
                name=spec.name,
                kind=RelationshipKind(spec.kind),
                ends=tuple(ends),
                index=len(relationships),
                description=spec.description,
            )
        )

    return relationships

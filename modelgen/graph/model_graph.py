"""Read-only model graph built once per generation run."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import networkx as nx

from ..errors import LoadError
from ..identity import Identifier
from .node_types import Cardinality, EdgeType, EntityKind, RelationshipKind

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class Entity:
    """A named construct in the model."""

    id: Identifier
    name: str
    qualified_name: str
    kind: EntityKind
    index: int  # Position in declaration order
    container: Identifier | None = None
    properties: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, compare=False)


@dataclass(frozen=True)
class RelationshipEnd:
    """One side of a relationship."""

    entity: Identifier
    role: str
    cardinality: Cardinality = Cardinality.ONE
    conditional: bool = False


@dataclass(frozen=True)
class Relationship:
    """A relationship linking two or more entities."""

    id: Identifier
    name: str
    kind: RelationshipKind
    ends: tuple[RelationshipEnd, ...]
    index: int
    description: str | None = None

    def involves(self, entity: Entity | Identifier) -> bool:
        """Check whether an entity participates in this relationship."""
        entity_id = entity.id if isinstance(entity, Entity) else entity
        return any(end.entity == entity_id for end in self.ends)


class _KindView:
    """Lazy, restartable view over the entities of one kind."""

    def __init__(self, entities: tuple[Entity, ...], kind: EntityKind):
        self._entities = entities
        self._kind = kind

    def __iter__(self) -> Iterator[Entity]:
        return (e for e in self._entities if e.kind == self._kind)

    def __repr__(self) -> str:
        return f"<entities of kind {self._kind.value}>"


class ModelGraph:
    """A graph representation of one model version.

    Entities and relationships live in arenas (tuples in declaration order);
    containment and relationship edges are kept in a frozen networkx
    MultiDiGraph keyed by entity identifier. Relationship edges may form
    cycles, containment edges may not (checked by the builder).
    """

    def __init__(
        self,
        namespace: str,
        entities: list[Entity],
        relationships: list[Relationship],
    ):
        """Assemble a graph from validated arenas.

        Args:
            namespace: The model namespace.
            entities: Entities in declaration order.
            relationships: Relationships in declaration order.

        Raises:
            LoadError: If identifiers collide or an edge names an unknown entity.
        """
        self._namespace = namespace
        self._entities = tuple(entities)
        self._relationships = tuple(relationships)
        self._by_id: dict[Identifier, Entity] = {}
        self._by_name: dict[str, Entity] = {}

        graph = nx.MultiDiGraph()
        for entity in self._entities:
            if entity.id in self._by_id:
                raise LoadError(f"Duplicate entity '{entity.qualified_name}'")
            self._by_id[entity.id] = entity
            self._by_name[entity.qualified_name] = entity
            graph.add_node(entity.id, kind=entity.kind, index=entity.index)

        for entity in self._entities:
            if entity.container is not None:
                if entity.container not in self._by_id:
                    raise LoadError(
                        f"Container of '{entity.qualified_name}' is not in the graph"
                    )
                graph.add_edge(
                    entity.container, entity.id, edge_type=EdgeType.CONTAINS
                )

        rel_index: dict[Identifier, list[Relationship]] = {}
        for rel in self._relationships:
            for end in rel.ends:
                if end.entity not in self._by_id:
                    raise LoadError(f"Relationship '{rel.name}' has an unknown end")
            for i, near in enumerate(rel.ends):
                for far in rel.ends[i + 1 :]:
                    graph.add_edge(
                        near.entity,
                        far.entity,
                        key=(rel.id, near.role, far.role),
                        edge_type=EdgeType.RELATES,
                        relationship=rel.index,
                    )
            seen: set[Identifier] = set()
            for end in rel.ends:
                if end.entity not in seen:
                    seen.add(end.entity)
                    rel_index.setdefault(end.entity, []).append(rel)

        self._rel_index = {k: tuple(v) for k, v in rel_index.items()}
        self._graph = nx.freeze(graph)

    @property
    def namespace(self) -> str:
        """The model namespace."""
        return self._namespace

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Get the underlying (frozen) networkx graph."""
        return self._graph

    @property
    def entities(self) -> tuple[Entity, ...]:
        """All entities in declaration order."""
        return self._entities

    @property
    def relationships(self) -> tuple[Relationship, ...]:
        """All relationships in declaration order."""
        return self._relationships

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._entities)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Entity):
            return self._by_id.get(item.id) == item
        return item in self._by_id

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def entities_of_kind(self, kind: EntityKind | str) -> _KindView:
        """Get the entities of one kind, in declaration order.

        The returned view is lazy and can be iterated any number of times.
        """
        return _KindView(self._entities, EntityKind(kind))

    def relationships_of(self, entity: Entity | Identifier) -> tuple[Relationship, ...]:
        """Get the relationships an entity participates in, in declaration order."""
        entity_id = entity.id if isinstance(entity, Entity) else entity
        return self._rel_index.get(entity_id, ())

    def get_entity(self, entity_id: Identifier) -> Entity | None:
        """Get an entity by identifier."""
        return self._by_id.get(entity_id)

    def entity_named(self, qualified_name: str) -> Entity | None:
        """Get an entity by qualified name."""
        return self._by_name.get(qualified_name)

    def container_of(self, entity: Entity) -> Entity | None:
        """Get the containing entity, if any."""
        if entity.container is None:
            return None
        return self._by_id[entity.container]

    def children_of(
        self, entity: Entity, kind: EntityKind | None = None
    ) -> list[Entity]:
        """Get directly contained entities in declaration order."""
        children = [
            self._by_id[target]
            for _, target, data in self._graph.out_edges(entity.id, data=True)
            if data.get("edge_type") == EdgeType.CONTAINS
        ]
        if kind is not None:
            children = [c for c in children if c.kind == kind]
        # networkx keeps insertion order, but sort to make it explicit
        return sorted(set(children), key=lambda c: c.index)

    def far_ends(
        self, relationship: Relationship, entity: Entity
    ) -> list[RelationshipEnd]:
        """Get the ends of a relationship seen from one participant.

        For a reflexive relationship (both ends on the same entity) each end
        is the far end of the other, so both are returned.
        """
        own = [end for end in relationship.ends if end.entity == entity.id]
        if len(own) > 1:
            return list(relationship.ends)
        return [end for end in relationship.ends if end.entity != entity.id]

    def iter_relationship_edges(self) -> Iterator[tuple[Entity, Entity, Relationship]]:
        """Iterate over relationship edges between entities.

        Yields:
            Tuples of (entity, entity, relationship).
        """
        for source, target, data in self._graph.edges(data=True):
            if data.get("edge_type") == EdgeType.RELATES:
                yield (
                    self._by_id[source],
                    self._by_id[target],
                    self._relationships[data["relationship"]],
                )

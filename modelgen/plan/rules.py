"""Generation rules: pure functions from an entity to a template context.

Rules are keyed by entity kind. Objects and enumerations each produce one
file; attributes and relationship ends contribute members to the file of
their container.
"""

import keyword
from collections import defaultdict
from typing import Any, Callable

from ..errors import PlanError
from ..graph.model_graph import Entity, ModelGraph, Relationship, RelationshipEnd
from ..graph.node_types import Cardinality, EntityKind, RelationshipKind
from ..identity import namespace_id, resolve
from ..naming import pascal_case, snake_case, upper_snake_case
from ..schema.profile import TargetProfile
from .models import AccessorSpec, FieldSpec

# Model type name -> (Python type, import needed)
_TYPE_MAP: dict[str, tuple[str, tuple[str, str] | None]] = {
    "string": ("str", None),
    "str": ("str", None),
    "text": ("str", None),
    "integer": ("int", None),
    "int": ("int", None),
    "float": ("float", None),
    "real": ("float", None),
    "decimal": ("Decimal", ("decimal", "Decimal")),
    "boolean": ("bool", None),
    "bool": ("bool", None),
    "uuid": ("UUID", ("uuid", "UUID")),
    "date": ("date", ("datetime", "date")),
    "datetime": ("datetime", ("datetime", "datetime")),
    "bytes": ("bytes", None),
}

_EXAMPLES = {
    "str": '"example"',
    "int": "0",
    "float": "0.0",
    "Decimal": 'Decimal("0")',
    "bool": "False",
    "UUID": "uuid4()",
    "date": "date(2000, 1, 1)",
    "datetime": "datetime(2000, 1, 1)",
    "bytes": 'b""',
}

# Entity kinds that own a generated file
FILE_KINDS = (EntityKind.OBJECT, EntityKind.ENUMERATION)


def class_name(entity: Entity) -> str:
    """Class name for an entity, unique across containers."""
    return "".join(pascal_case(part) for part in entity.qualified_name.split("."))


def module_name(entity: Entity) -> str:
    """Module (file stem) for an entity, unique across containers."""
    return "_".join(snake_case(part) for part in entity.qualified_name.split("."))


def _identifier(name: str) -> str:
    name = snake_case(name)
    return f"{name}_" if keyword.iskeyword(name) else name


class _Imports:
    """Collects ``from module import name`` pairs and renders them sorted."""

    def __init__(self):
        self.runtime: dict[str, set[str]] = defaultdict(set)
        self.type_only: dict[str, set[str]] = defaultdict(set)

    def add(self, module: str, name: str) -> None:
        self.runtime[module].add(name)

    def add_type_only(self, module: str, name: str) -> None:
        self.type_only[module].add(name)

    def lines(self) -> list[str]:
        lines = [
            f"from {module} import {', '.join(sorted(names))}"
            for module, names in sorted(self.runtime.items())
        ]
        if self.type_only:
            lines.append("")
            lines.append("if TYPE_CHECKING:")
            lines.extend(
                f"    from {module} import {', '.join(sorted(names))}"
                for module, names in sorted(self.type_only.items())
            )
        return lines


def _resolve_type(
    type_name: str, owner: Entity, graph: ModelGraph, imports: _Imports
) -> str:
    """Map a model type name to a Python annotation."""
    mapped = _TYPE_MAP.get(type_name.lower())
    if mapped is not None:
        py_type, needed = mapped
        if needed:
            imports.add(*needed)
        return py_type

    # Reference to another generated entity, by qualified or top-level name
    target = graph.entity_named(type_name)
    if target is not None and target.kind in FILE_KINDS:
        name = class_name(target)
        if target.id != owner.id:
            imports.add_type_only(f".{module_name(target)}", name)
        return name

    imports.add("typing", "Any")
    return "Any"


def _fields(entity: Entity, graph: ModelGraph, imports: _Imports) -> list[FieldSpec]:
    fields: list[FieldSpec] = []

    for member in graph.children_of(entity):
        if member.kind == EntityKind.ATTRIBUTE:
            fields.append(
                FieldSpec(
                    name=_identifier(member.name),
                    type=_resolve_type(
                        str(member.properties.get("type", "string")), entity, graph, imports
                    ),
                    optional=bool(member.properties.get("optional", False)),
                    description=member.properties.get("description"),
                    validator=f"validate_{_identifier(member.name)}",
                )
            )
        elif member.kind == EntityKind.RELATIONSHIP_END:
            imports.add("uuid", "UUID")
            fields.append(
                FieldSpec(
                    name=f"{_identifier(member.name)}_id",
                    type="UUID",
                    optional=True,
                    description=member.properties.get("description"),
                )
            )

    for rel in graph.relationships_of(entity):
        for far in _formalized_ends(rel, entity):
            imports.add("uuid", "UUID")
            fields.append(
                FieldSpec(
                    name=f"{_identifier(far.role)}_id",
                    type="UUID",
                    optional=far.conditional,
                    description=f"Referential attribute formalizing {rel.name}.",
                )
            )

    # Generated members share one namespace with the id field
    names: set[str] = {"id"}
    for spec in fields:
        if spec.name in names:
            raise PlanError(
                f"Field '{spec.name}' of '{entity.qualified_name}' clashes with another member"
            )
        names.add(spec.name)
    return fields


def _formalized_ends(rel: Relationship, entity: Entity) -> list[RelationshipEnd]:
    """Far ends this entity holds a referential attribute for.

    The "many" side formalizes a one-to-many relationship, the second end
    formalizes a one-to-one, and the associative object formalizes all the
    others. Many-to-many relationships are not formalized.
    """
    ends = rel.ends
    own = [end for end in ends if end.entity == entity.id]
    if not own:
        return []

    if rel.kind == RelationshipKind.ASSOCIATIVE:
        if ends[-1].entity == entity.id:
            return list(ends[:-1])
        return []
    if rel.kind == RelationshipKind.ONE_TO_ONE:
        if ends[1].entity == entity.id:
            return [ends[0]]
        return []
    if rel.kind == RelationshipKind.ONE_TO_MANY:
        holders = [end for end in own if end.cardinality == Cardinality.MANY]
        if not holders:
            return []
        return [end for end in ends if end.cardinality == Cardinality.ONE]
    return []


def _accessors(
    entity: Entity, graph: ModelGraph, imports: _Imports
) -> list[AccessorSpec]:
    accessors: list[AccessorSpec] = []
    seen: set[str] = set()

    for rel in graph.relationships_of(entity):
        for far in graph.far_ends(rel, entity):
            target = graph.get_entity(far.entity)
            name = f"{snake_case(rel.name)}_{_identifier(far.role)}"
            if name in seen:
                raise PlanError(
                    f"Accessor '{name}' of '{entity.qualified_name}' is declared twice"
                )
            seen.add(name)

            if target.kind in FILE_KINDS:
                target_class = class_name(target)
                if target.id != entity.id:
                    imports.add_type_only(f".{module_name(target)}", target_class)
            else:
                imports.add("typing", "Any")
                target_class = "Any"

            accessors.append(
                AccessorSpec(
                    name=name,
                    relationship=rel.name,
                    relationship_const=f"{upper_snake_case(rel.name)}_ID",
                    role=far.role,
                    target=target_class,
                    target_module=module_name(target),
                    many=far.cardinality == Cardinality.MANY,
                    conditional=far.conditional,
                    region=name,
                )
            )
    if accessors:
        imports.add("typing", "Any")
    return accessors


def object_context(
    entity: Entity, graph: ModelGraph, profile: TargetProfile
) -> dict[str, Any]:
    """Build the template context for an object file."""
    imports = _Imports()
    imports.add("uuid", "UUID")

    has_structure = profile.has_shape("data_structure")
    fields = _fields(entity, graph, imports) if has_structure else []
    accessors = (
        _accessors(entity, graph, imports)
        if has_structure and profile.has_shape("accessor_set")
        else []
    )
    if has_structure:
        imports.add("dataclasses", "dataclass")
        if profile.emit_new:
            imports.add("uuid", "uuid4")
    if profile.has_shape("store_adapter"):
        imports.add("typing", "Callable")
    if imports.type_only:
        imports.add("typing", "TYPE_CHECKING")

    cls = class_name(entity)
    # Dataclass fields without defaults must precede those with defaults
    ordered = [f for f in fields if not f.optional] + [f for f in fields if f.optional]

    declarations = [
        f"{f.name}: {f.type} | None = None" if f.optional else f"{f.name}: {f.type}"
        for f in ordered
    ]
    parameters = [
        f"{f.name}: {f.type} | None = None" if f.optional else f"{f.name}: {f.type}"
        for f in ordered
    ]
    doc_args = ", ".join(
        f"{f.name}={_EXAMPLES.get(f.type, 'None')}" for f in ordered if not f.optional
    )

    rel_ids = []
    for rel in graph.relationships_of(entity):
        rel_ids.append((f"{upper_snake_case(rel.name)}_ID", str(rel.id)))

    return {
        "obj": {
            "class_name": cls,
            "title": f"{cls} object",
            "qualified_name": entity.qualified_name,
            "description": entity.properties.get("description"),
            "id_const": f"{upper_snake_case(cls)}_ID",
            "id": str(entity.id),
            "imports": imports.lines(),
            "relationship_ids": rel_ids,
            "declarations": declarations,
            "new_signature": ", ".join(["cls", *parameters]),
            "new_kwargs": "".join(f", {f.name}={f.name}" for f in ordered),
            "doc_args": doc_args,
            "validated": [f for f in fields if f.validator],
            "accessors": accessors,
        },
    }


def enumeration_context(
    entity: Entity, graph: ModelGraph, profile: TargetProfile
) -> dict[str, Any]:
    """Build the template context for an enumeration file."""
    cls = class_name(entity)
    members = [
        (upper_snake_case(value), str(resolve(graph.namespace, f"{entity.qualified_name}.{value}")))
        for value in entity.properties.get("values", ())
    ]
    return {
        "enum": {
            "class_name": cls,
            "title": f"{cls} enumeration",
            "description": entity.properties.get("description"),
            "id_const": f"{upper_snake_case(cls)}_ID",
            "id": str(entity.id),
            "members": members,
        },
    }


def module_context(graph: ModelGraph, profile: TargetProfile) -> dict[str, Any]:
    """Build the template context for the package module."""
    exports: list[tuple[str, list[str]]] = []
    for entity in graph.entities:
        if entity.kind not in FILE_KINDS:
            continue
        names = [class_name(entity)]
        if entity.kind == EntityKind.OBJECT and profile.has_shape("store_adapter"):
            names.append(f"{class_name(entity)}Store")
        exports.append((module_name(entity), names))

    return {
        "module": {
            "title": f"The {graph.namespace} domain",
            "namespace_id": str(namespace_id(graph.namespace)),
            "exports": exports,
            "all": sorted(name for _, names in exports for name in names),
        },
    }


Rule = Callable[[Entity, ModelGraph, TargetProfile], dict[str, Any]]

RULES: dict[EntityKind, tuple[str, Rule]] = {
    EntityKind.OBJECT: ("object.py.j2", object_context),
    EntityKind.ENUMERATION: ("enumeration.py.j2", enumeration_context),
}

"""Tests for generation rules."""

import pytest

from modelgen.errors import PlanError
from modelgen.graph.builder import load
from modelgen.identity import namespace_id, resolve
from modelgen.plan.rules import (
    class_name,
    enumeration_context,
    module_context,
    module_name,
    object_context,
)
from modelgen.schema.profile import TargetProfile


def _obj(graph, name, profile=None):
    return object_context(graph.entity_named(name), graph, profile or TargetProfile())["obj"]


class TestNames:
    def test_top_level(self, rich_graph):
        book = rich_graph.entity_named("Book")
        assert class_name(book) == "Book"
        assert module_name(book) == "book"

    def test_contained(self, rich_graph):
        shelf = rich_graph.entity_named("Book.Shelf")
        assert class_name(shelf) == "BookShelf"
        assert module_name(shelf) == "book_shelf"


class TestObjectContext:
    def test_identifier_constant(self, order_graph):
        obj = _obj(order_graph, "Order")
        assert obj["id_const"] == "ORDER_ID"
        assert obj["id"] == str(resolve("shop", "Order"))

    def test_attribute_fields(self, order_graph):
        obj = _obj(order_graph, "Order")

        assert obj["declarations"] == ["total: Decimal", "note: str | None = None"]
        assert "from decimal import Decimal" in obj["imports"]
        assert [f.validator for f in obj["validated"]] == ["validate_total", "validate_note"]

    def test_required_fields_first(self):
        graph = load(
            """
entities:
  Order:
    attributes:
      - {name: note, optional: true}
      - {name: total, type: integer}
"""
        )
        obj = _obj(graph, "Order")
        assert obj["declarations"] == ["total: int", "note: str | None = None"]
        assert obj["new_kwargs"] == ", total=total, note=note"

    def test_referential_field_on_many_side(self, shop_graph):
        order = _obj(shop_graph, "Order")
        customer = _obj(shop_graph, "Customer")

        assert "places_id: UUID" in order["declarations"]
        assert not any(d.endswith("_id: UUID") for d in customer["declarations"])

    def test_accessors(self, shop_graph):
        order = _obj(shop_graph, "Order")
        customer = _obj(shop_graph, "Customer")

        (places,) = order["accessors"]
        assert places.name == "r1_places"
        assert places.return_type == "Customer | None"
        assert places.relationship_const == "R1_ID"

        (placed,) = customer["accessors"]
        assert placed.name == "r1_is_placed_by"
        assert placed.return_type == "list[Order]"

    def test_related_classes_imported_for_type_checking(self, shop_graph):
        imports = _obj(shop_graph, "Order")["imports"]

        assert "if TYPE_CHECKING:" in imports
        assert "    from .customer import Customer" in imports

    def test_relationship_ids(self, shop_graph):
        obj = _obj(shop_graph, "Order")
        assert obj["relationship_ids"] == [("R1_ID", str(resolve("shop", "relationship:R1")))]

    def test_associative_object_formalizes_ends(self, rich_graph):
        loan = _obj(rich_graph, "Loan")

        assert "borrows_id: UUID | None = None" in loan["declarations"]
        assert "is_borrowed_by_id: UUID | None = None" in loan["declarations"]
        assert [a.name for a in loan["accessors"]] == ["r1_borrows", "r1_is_borrowed_by"]

    def test_reflexive_relationship(self, rich_graph):
        member = _obj(rich_graph, "Member")

        assert "sponsors_id: UUID" in member["declarations"]
        names = [a.name for a in member["accessors"]]
        assert names == ["r1_is_borrowed_by", "r1_loan", "r2_sponsors", "r2_is_sponsored_by"]

    def test_relationship_end_member(self, rich_graph):
        book = _obj(rich_graph, "Book")
        assert "barcode_id: UUID | None = None" in book["declarations"]

    def test_enumeration_typed_attribute(self, rich_graph):
        book = _obj(rich_graph, "Book")

        assert "status: Status" in book["declarations"]
        assert "    from .status import Status" in book["imports"]

    def test_unknown_type_is_any(self):
        graph = load("entities:\n  Order:\n    attributes: [{name: blob, type: mystery}]\n")
        obj = _obj(graph, "Order")

        assert "blob: Any" in obj["declarations"]
        assert "from typing import Any, Callable" in obj["imports"]

    def test_keyword_attribute_names(self):
        graph = load("entities:\n  Order:\n    attributes: [class]\n")
        assert "class_: str" in _obj(graph, "Order")["declarations"]

    def test_field_clash(self):
        graph = load(
            """
entities:
  Order:
    attributes: [places_id]
  Customer: {}
relationships:
  - name: R1
    ends:
      - {entity: Customer, role: places}
      - {entity: Order, role: is_placed_by, cardinality: many}
"""
        )
        with pytest.raises(PlanError) as exc_info:
            _obj(graph, "Order")
        assert "places_id" in str(exc_info.value)

    def test_id_attribute_clashes(self):
        graph = load("entities:\n  Order:\n    attributes: [id]\n")
        with pytest.raises(PlanError):
            _obj(graph, "Order")

    def test_accessor_clash(self):
        graph = load(
            """
entities:
  A: {}
  B: {}
  C: {}
relationships:
  - name: R1
    kind: many_to_many
    ends:
      - {entity: A, role: x, cardinality: many}
      - {entity: B, role: y, cardinality: many}
      - {entity: C, role: y, cardinality: many}
"""
        )
        with pytest.raises(PlanError):
            _obj(graph, "A")

    def test_without_data_structure(self, shop_graph):
        obj = _obj(shop_graph, "Order", TargetProfile(shapes=()))
        assert obj["declarations"] == []
        assert obj["accessors"] == []


class TestEnumerationContext:
    def test_members(self, rich_graph):
        status = rich_graph.entity_named("Status")
        enum = enumeration_context(status, rich_graph, TargetProfile())["enum"]

        assert enum["class_name"] == "Status"
        assert [m for m, _ in enum["members"]] == ["AVAILABLE", "ON_LOAN", "LOST"]
        assert enum["members"][0][1] == str(resolve("library", "Status.available"))


class TestModuleContext:
    def test_exports(self, rich_graph):
        module = module_context(rich_graph, TargetProfile(shapes=("data_structure",)))["module"]

        assert module["namespace_id"] == str(namespace_id("library"))
        assert ("status", ["Status"]) in module["exports"]
        assert ("book_shelf", ["BookShelf"]) in module["exports"]
        assert module["all"] == sorted(module["all"])

"""Shared fixtures for tests."""

import pytest

from modelgen.graph.builder import load
from modelgen.schema.loader import parse_model_from_string
from modelgen.schema.profile import TargetProfile


@pytest.fixture
def order_model_yaml() -> str:
    """Return a model with a single object."""
    return """
namespace: shop
entities:
  Order:
    attributes:
      - name: total
        type: decimal
      - name: note
        optional: true
"""


@pytest.fixture
def shop_model_yaml() -> str:
    """Return a model with two objects linked by a one-to-many relationship."""
    return """
namespace: shop
entities:
  Customer:
    attributes:
      - name: email
  Order:
    attributes:
      - name: total
        type: decimal
relationships:
  - name: R1
    kind: one_to_many
    ends:
      - {entity: Customer, role: places, cardinality: one}
      - {entity: Order, role: is_placed_by, cardinality: many}
"""


@pytest.fixture
def rich_model_yaml() -> str:
    """Return a model exercising every entity and relationship kind."""
    return """
namespace: library
version: "2"
entities:
  Member:
    description: A registered library member.
    attributes:
      - name: name
      - name: joined
        type: date
  Book:
    properties: {table: books}
    attributes:
      - name: title
      - name: status
        type: Status
  Loan:
    attributes:
      - name: due
        type: date
  Status:
    kind: enumeration
    values: [available, on_loan, lost]
  Shelf:
    container: Book
  Barcode:
    kind: relationship_end
    container: Book
relationships:
  - name: R1
    kind: associative
    via: Loan
    ends:
      - {entity: Member, role: borrows, cardinality: many, conditional: true}
      - {entity: Book, role: is_borrowed_by, cardinality: many, conditional: true}
  - name: R2
    kind: one_to_one
    ends:
      - {entity: Member, role: sponsors, cardinality: one}
      - {entity: Member, role: is_sponsored_by, cardinality: one, conditional: true}
"""


@pytest.fixture
def order_graph(order_model_yaml):
    """Return the loaded single-object graph."""
    return load(order_model_yaml)


@pytest.fixture
def shop_graph(shop_model_yaml):
    """Return the loaded Customer/Order graph."""
    return load(shop_model_yaml)


@pytest.fixture
def rich_graph(rich_model_yaml):
    """Return the loaded library graph."""
    return load(rich_model_yaml)


@pytest.fixture
def shop_model(shop_model_yaml):
    """Return the parsed (unbuilt) Customer/Order source."""
    return parse_model_from_string(shop_model_yaml)


@pytest.fixture
def profile() -> TargetProfile:
    """Return the default target profile."""
    return TargetProfile()

"""Tests for name conversions."""

import pytest

from modelgen.naming import pascal_case, snake_case, upper_snake_case


class TestSnakeCase:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Order", "order"),
            ("OrderLine", "order_line"),
            ("HTTPRequest", "http_request"),
            ("R1", "r1"),
            ("is_placed_by", "is_placed_by"),
            ("line item", "line_item"),
        ],
    )
    def test_conversion(self, name, expected):
        assert snake_case(name) == expected


class TestOtherCases:
    def test_upper_snake_case(self):
        assert upper_snake_case("OrderLine") == "ORDER_LINE"

    def test_pascal_case(self):
        assert pascal_case("order_line") == "OrderLine"

    def test_pascal_case_keeps_inner_capitals(self):
        assert pascal_case("OrderLine") == "OrderLine"

"""Tests for the merge engine."""

import pytest

from modelgen.regions.errors import TemplateMismatch
from modelgen.regions.extractor import extract
from modelgen.regions.merge import UNRECOVERED_NOTICE, merge

BODY = (
    "# header\n"
    "# <BEGIN imports>\n"
    "# Add imports here.\n"
    "# <END imports>\n"
    "\n"
    "class Order:\n"
    "    # <BEGIN custom_logic>\n"
    "    # Add custom methods here.\n"
    "    # <END custom_logic>\n"
)
KEYS = ("imports", "custom_logic")


class TestMerge:
    def test_first_generation_keeps_stubs(self):
        result = merge(BODY, KEYS, {})

        assert result.text == BODY
        assert result.missing == KEYS
        assert result.recovered == ()
        assert not result.has_orphans

    def test_preserved_text_replaces_stub(self):
        custom = "    def total(self):\n        return 42\n"
        result = merge(BODY, KEYS, {"custom_logic": custom})

        assert custom in result.text
        assert "Add custom methods here." not in result.text
        assert "Add imports here." in result.text
        assert result.recovered == ("custom_logic",)
        assert result.missing == ("imports",)

    def test_generated_markers_are_kept(self):
        result = merge(BODY, KEYS, {"custom_logic": "pass\n"})

        assert "    # <BEGIN custom_logic>\n" in result.text
        assert "    # <END custom_logic>\n" in result.text

    def test_preserved_text_is_byte_exact(self):
        custom = "\tx = 1   \r\n\n odd = True\n"
        result = merge(BODY, KEYS, {"custom_logic": custom})

        assert extract(result.text)["custom_logic"] == custom

    def test_empty_preserved_region(self):
        result = merge(BODY, KEYS, {"imports": ""})

        assert "# <BEGIN imports>\n# <END imports>\n" in result.text
        assert extract(result.text)["imports"] == ""

    def test_merge_is_stable(self):
        preserved = {"imports": "import os\n", "custom_logic": "    pass\n"}
        once = merge(BODY, KEYS, preserved).text
        twice = merge(BODY, KEYS, extract(once)).text

        assert once == twice


class TestOrphans:
    def test_orphans_are_appended(self):
        preserved = {"r1_places": "    # lookup by email\n", "custom_logic": "    pass\n"}
        result = merge(BODY, KEYS, preserved)

        assert result.orphans == ("r1_places",)
        assert result.has_orphans
        assert result.text.index("# <END custom_logic>") < result.text.index(
            "# <BEGIN r1_places>"
        )
        assert UNRECOVERED_NOTICE[0] in result.text
        assert result.diagnostics and "r1_places" in result.diagnostics[0]

    def test_orphan_text_survives(self):
        result = merge(BODY, KEYS, {"gone": "keep me\n"})
        assert extract(result.text)["gone"] == "keep me\n"

    def test_orphans_keep_original_order(self):
        result = merge(BODY, KEYS, {"b": "2\n", "a": "1\n"})
        assert result.orphans == ("b", "a")
        assert result.text.index("<BEGIN b>") < result.text.index("<BEGIN a>")

    def test_orphan_without_newline(self):
        result = merge(BODY, KEYS, {"gone": "no newline"})
        assert "no newline\n# <END gone>\n" in result.text

    def test_repeated_runs_do_not_duplicate(self):
        first = merge(BODY, KEYS, {"gone": "keep me\n"}).text
        second = merge(BODY, KEYS, extract(first)).text
        third = merge(BODY, KEYS, extract(second)).text

        assert first == second == third
        assert second.count("<BEGIN gone>") == 1
        assert second.count(UNRECOVERED_NOTICE[0]) == 1

    def test_comment_leader(self):
        result = merge("<BEGIN a>\nx\n<END a>\n", ("a",), {"b": "y\n"}, comment="//")
        assert "// <BEGIN b>\n" in result.text
        assert "// " + UNRECOVERED_NOTICE[1] in result.text


class TestTemplateMismatch:
    def test_keys_differ(self):
        with pytest.raises(TemplateMismatch):
            merge(BODY, ("imports",), {})

    def test_keys_out_of_order(self):
        with pytest.raises(TemplateMismatch):
            merge(BODY, ("custom_logic", "imports"), {})

    def test_malformed_body(self):
        with pytest.raises(TemplateMismatch):
            merge("# <BEGIN a>\n", ("a",), {})

"""Tests for protected-region extraction."""

import pytest

from modelgen.errors import EngineError
from modelgen.regions.errors import MalformedRegion, RegionError, UnterminatedRegion
from modelgen.regions.extractor import extract, scan_regions
from modelgen.regions.markers import begin_marker, end_marker, parse_marker, split_lines


class TestMarkers:
    @pytest.mark.parametrize(
        "line, expected",
        [
            ("# <BEGIN custom_logic>\n", ("BEGIN", "custom_logic")),
            ("    # <END custom_logic>", ("END", "custom_logic")),
            ("\t// <BEGIN r1_places>  \r\n", ("BEGIN", "r1_places")),
            ("<BEGIN bare>", ("BEGIN", "bare")),
        ],
    )
    def test_parse_marker(self, line, expected):
        assert parse_marker(line) == expected

    @pytest.mark.parametrize(
        "line",
        [
            "x = 1  # <BEGIN inline>",
            "# note <BEGIN custom_logic>",
            "# <BEGIN>",
            "# <begin custom_logic>",
            "# <BEGIN two words>",
        ],
    )
    def test_not_a_marker(self, line):
        assert parse_marker(line) is None

    def test_format(self):
        assert begin_marker("custom_logic") == "# <BEGIN custom_logic>"
        assert end_marker("custom_logic", "//") == "// <END custom_logic>"

    def test_invalid_key(self):
        with pytest.raises(ValueError):
            begin_marker("two words")

    def test_split_lines_keeps_endings(self):
        text = "a\r\nb c\nd"
        lines = split_lines(text)
        assert lines == ["a\r\n", "b c\n", "d"]
        assert "".join(lines) == text

    def test_split_empty(self):
        assert split_lines("") == []


class TestExtract:
    def test_absent_file(self):
        assert extract(None) == {}

    def test_no_regions(self):
        assert extract("x = 1\n") == {}

    def test_raw_text_between_markers(self):
        text = (
            "class Order:\n"
            "    # <BEGIN custom_logic>\n"
            "    def total(self):\n"
            "\n"
            "        return 1  \n"
            "    # <END custom_logic>\n"
        )
        assert extract(text) == {
            "custom_logic": "    def total(self):\n\n        return 1  \n"
        }

    def test_empty_region(self):
        assert extract("# <BEGIN imports>\n# <END imports>\n") == {"imports": ""}

    def test_keeps_crlf(self):
        text = "# <BEGIN a>\r\nx = 1\r\n# <END a>\r\n"
        assert extract(text) == {"a": "x = 1\r\n"}

    def test_file_order(self):
        text = "# <BEGIN b>\n# <END b>\n# <BEGIN a>\n# <END a>\n"
        assert list(extract(text)) == ["b", "a"]

    def test_marker_look_alikes_inside_text(self):
        text = "# <BEGIN a>\nprint('<BEGIN b>')\n# <END a>\n"
        assert extract(text) == {"a": "print('<BEGIN b>')\n"}

    def test_end_without_newline(self):
        assert extract("# <BEGIN a>\nx\n# <END a>") == {"a": "x\n"}


class TestExtractErrors:
    def test_nested(self):
        text = "# <BEGIN a>\n# <BEGIN b>\n# <END b>\n# <END a>\n"
        with pytest.raises(MalformedRegion) as exc_info:
            extract(text)
        assert exc_info.value.key == "b"
        assert exc_info.value.line == 2
        assert "nest" in str(exc_info.value)

    def test_end_without_begin(self):
        with pytest.raises(MalformedRegion) as exc_info:
            extract("x\n# <END a>\n")
        assert exc_info.value.line == 2

    def test_mismatched_end(self):
        with pytest.raises(MalformedRegion) as exc_info:
            extract("# <BEGIN a>\n# <END b>\n")
        assert exc_info.value.key == "b"

    def test_duplicate_key(self):
        text = "# <BEGIN a>\n# <END a>\n# <BEGIN a>\n# <END a>\n"
        with pytest.raises(MalformedRegion) as exc_info:
            extract(text)
        assert exc_info.value.line == 3
        assert "twice" in str(exc_info.value)

    def test_unterminated(self):
        with pytest.raises(UnterminatedRegion) as exc_info:
            extract("x\n# <BEGIN a>\ny\n")
        assert exc_info.value.key == "a"
        assert exc_info.value.line == 2

    def test_path_in_message(self):
        with pytest.raises(RegionError) as exc_info:
            extract("# <BEGIN a>\n", "order.py")
        assert str(exc_info.value) == "order.py:1: Region 'a' is never closed"

    def test_message_without_path(self):
        error = UnterminatedRegion("a", 4)
        assert str(error) == "line 4: Region 'a' is never closed"

    def test_region_errors_are_engine_errors(self):
        with pytest.raises(EngineError):
            extract("# <END a>\n")


class TestScanRegions:
    def test_spans(self):
        text = "x\n# <BEGIN a>\ny\n# <END a>\n"
        (region,) = scan_regions(text)

        assert (region.key, region.begin, region.end) == ("a", 2, 4)
        assert region.text == "y\n"

"""Tests for the section text codec."""

import pytest

from structural_exchange.converters.section_codec import (
    SECTION_ORDER,
    format_number,
    iter_records,
    join_sections,
    keyword_values,
    read_sections,
    split_sections,
    tokenize_record,
    write_sections,
)


class TestSplitAndJoin:

    def test_split_sections(self):
        text = (
            "preamble line\n"
            "$ STORIES - IN SEQUENCE FROM TOP\n"
            '  STORY "Story1"  HEIGHT 120\n'
            '  STORY "Base"  ELEV 0\n'
            "\n"
            "$ POINT COORDINATES\n"
            '  POINT "1"  0  0\n'
        )
        sections = split_sections(text)
        assert list(sections) == ["STORIES - IN SEQUENCE FROM TOP", "POINT COORDINATES"]
        assert sections["POINT COORDINATES"] == '  POINT "1"  0  0'

    def test_repeated_header_appends(self):
        text = '$ GRIDS\n  GRID "A"\n$ GRIDS\n  GRID "B"\n'
        assert split_sections(text)["GRIDS"] == '  GRID "A"\n  GRID "B"'

    def test_join_uses_canonical_order(self):
        sections = {"POINT COORDINATES": '  POINT "1"  0  0', "CUSTOM": "", "CONTROLS": '  UNITS "LB" "IN" "F"'}
        text = join_sections(sections)
        assert text.index("$ CONTROLS") < text.index("$ POINT COORDINATES") < text.index("$ CUSTOM")
        assert SECTION_ORDER.index("CONTROLS") < SECTION_ORDER.index("POINT COORDINATES")

    def test_join_then_split(self):
        sections = {"CONTROLS": '  UNITS  "LB"  "IN"  "F"', "GRIDS": '  GRID "G1"  LABEL "A"'}
        assert split_sections(join_sections(sections)) == sections

    def test_read_write_files(self, tmp_path):
        path = tmp_path / "model.e2k"
        write_sections({"CONTROLS": '  UNITS  "KIP"  "FT"  "F"'}, path)
        assert read_sections(path) == {"CONTROLS": '  UNITS  "KIP"  "FT"  "F"'}


class TestRecords:

    def test_tokenize_quoted_names(self):
        assert tokenize_record('LINE  "B 1"  BEAM  "1"  "2"  0') == ["LINE", "B 1", "BEAM", "1", "2", "0"]

    def test_tokenize_keeps_slashes_and_hashes(self):
        assert tokenize_record('FRAMESECTION "HSS6X6X1/4" SHAPE "#3"') == ["FRAMESECTION", "HSS6X6X1/4", "SHAPE", "#3"]

    def test_unbalanced_quote_raises(self):
        with pytest.raises(ValueError):
            tokenize_record('POINT "1  0  0')

    def test_iter_records_skips_blank_lines(self):
        body = '  POINT "1"  0  0\n\n  POINT "2  5  5\n  POINT "3"  1  1'
        records = list(iter_records(body))
        assert [r.line_number for r in records] == [1, 3, 4]
        assert records[0].keyword == "POINT"
        assert records[1].tokens == []
        assert records[2].tokens[1] == "3"

    def test_keyword_values(self):
        tokens = ["SHELLPROP", "Slab8", "PROPTYPE", "Slab", "slabthickness", "8", "DANGLING"]
        assert keyword_values(tokens, 2) == {"PROPTYPE": "Slab", "SLABTHICKNESS": "8", "DANGLING": ""}


@pytest.mark.parametrize("value,expected", [
    (120.0, "120"),
    (0.125, "0.125"),
    (-36.5, "-36.5"),
    (0.0, "0"),
    (-0.0, "0"),
    (-0.0000001, "0"),
    (1.0 / 3.0, "0.333333"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected

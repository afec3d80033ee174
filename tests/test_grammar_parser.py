"""Tests for grammar_parser.py – DUT single-line rows."""
import pytest

from tkb_parser.grammar_parser import make_line_parser, parse_line
from tkb_parser.institutions import DUT, UFL
from tkb_parser.models import Meeting, WeekRange

DUT_ROW = (
    "6\t5070040.2420.24.99\tTiếng Nhật 2 (CNTT)\t1\t\t\tTrần Thị Kim Ngân\t"
    "Thứ 2,4-5,C128; Thứ 4,4-5,C128; Thứ 6,4-5,C128\t29-44"
)


class TestParseLine:
    def test_full_row(self):
        record = parse_line(DUT_ROW, DUT)
        assert record is not None
        assert record.id == "5070040.2420.24.99"
        assert record.name == "Tiếng Nhật 2 (CNTT)"
        assert record.instructor == "Trần Thị Kim Ngân"
        assert record.meetings == [
            Meeting(2, "C128", 4, 5),
            Meeting(4, "C128", 4, 5),
            Meeting(6, "C128", 4, 5),
        ]
        assert record.active_weeks == [WeekRange(29, 44)]

    def test_identifier_matches_grammar(self):
        record = parse_line(DUT_ROW, DUT)
        assert DUT.grammar.identifier.search(record.id)

    def test_idempotent(self):
        assert parse_line(DUT_ROW, DUT) == parse_line(DUT_ROW, DUT)

    def test_without_sequence_column(self):
        line = DUT_ROW.split("\t", 1)[1]
        record = parse_line(line, DUT)
        assert record.id == "5070040.2420.24.99"
        assert record.name == "Tiếng Nhật 2 (CNTT)"
        assert len(record.meetings) == 3

    def test_sunday_defaults_to_8(self):
        line = "1\t1234567.2420.24.10\tGiáo dục thể chất\t1\t\t\tNguyễn Văn C\tChủ nhật,1-3,SVĐ\t1-15"
        record = parse_line(line, DUT)
        assert record.meetings == [Meeting(8, "SVĐ", 1, 3)]
        assert record.active_weeks == [WeekRange(1, 15)]

    def test_several_week_ranges(self):
        line = DUT_ROW.replace("\t29-44", "\t22-27;31-40")
        record = parse_line(line, DUT)
        assert record.active_weeks == [WeekRange(22, 27), WeekRange(31, 40)]

    def test_week_cell_with_other_separators(self):
        line = DUT_ROW.replace("\t29-44", "\t22-27,31-40.")
        record = parse_line(line, DUT)
        assert record.active_weeks == [WeekRange(22, 27), WeekRange(31, 40)]

    def test_single_week_without_dash_is_ignored(self):
        line = DUT_ROW.replace("\t29-44", "\t29")
        record = parse_line(line, DUT)
        assert record.active_weeks == []

    def test_inverted_lessons_kept_verbatim(self):
        line = DUT_ROW.replace("Thứ 2,4-5,C128; Thứ 4,4-5,C128; Thứ 6,4-5,C128", "Thứ 3,10-9,C101")
        record = parse_line(line, DUT)
        assert record.meetings == [Meeting(3, "C101", 10, 9)]

    def test_no_match(self):
        assert parse_line("hello world", DUT) is None
        assert parse_line("", DUT) is None

    def test_missing_identifier_degrades_to_blank_record(self):
        line = "6\tTiếng Nhật\t1\t\t\tGV\tThứ 2,4-5,C128\t29-44"
        record = parse_line(line, DUT)
        assert record is not None
        assert record.id == ""
        assert record.name == ""
        assert record.meetings == []
        assert record.active_weeks == []

    def test_profile_without_grammar(self):
        assert parse_line(DUT_ROW, UFL) is None


class TestMakeLineParser:
    @pytest.mark.parametrize("line", [DUT_ROW, "garbage"])
    def test_same_as_parse_line(self, line):
        parse = make_line_parser(DUT)
        assert parse(line) == parse_line(line, DUT)

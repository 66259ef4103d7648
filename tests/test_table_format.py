import pytest

from core.table_format import (
    FLAG, INT, MONEY, POINTS, Column, RowFormatError, TableSchema, split_cells
)
from core.utils import format_date, month_name, round_money, truncate

SCHEMA = TableSchema(
    title="TEST LIST",
    footer_label="Total Test",
    columns=(
        Column("ID", 5, "id", INT),
        Column("Name", 10, "name"),
        Column("Paid", 8, "paid", MONEY),
        Column("Status", 8, "active", FLAG),
    ),
)


def test_truncate():
    assert truncate("Short", 15) == "Short"
    assert truncate("Exactly15Chars!", 15) == "Exactly15Chars!"
    assert truncate("Christopherson Longname", 15) == "Christophers..."
    assert truncate(None, 5) == ""


def test_round_money_rounds_half_up():
    assert round_money(0.125) == 0.13
    assert round_money(975.0000000000001) == 975.0


def test_date_helpers():
    assert month_name(3) == "March"
    assert format_date(2001, 3, 7) == "2001-3-7"


def test_column_formats():
    assert Column("Name", 10, "name").format("Asha") == "Asha      "
    assert Column("Name", 10, "name").format("a|b") == "a/b       "
    assert Column("Name", 10, "name").format("Christopherson") == "Christo..."
    assert Column("Price", 7, "price", MONEY).format(6500.0) == "6500.00"
    assert Column("Price", 7, "price", MONEY).format(18500.0) == "18500.00"
    assert Column("Pts", 7, "pts", POINTS).format(35.0) == "35     "
    assert Column("ID", 5, "id", INT).format(42) == "42   "


def test_flag_column_is_never_truncated():
    status = Column("Status", 7, "active", FLAG)
    assert status.format(False) == "Inactive"
    assert status.format(True) == "Active "
    assert status.parse(" Active ") is True
    assert status.parse("Inactive") is False


def test_column_parse_numbers():
    assert Column("ID", 5, "id", INT).parse(" 12 ") == 12
    assert Column("Charge", 10, "c", MONEY).parse("£50000.00") == 50000.0
    with pytest.raises(RowFormatError):
        Column("ID", 5, "id", INT).parse("abc")
    with pytest.raises(RowFormatError):
        Column("Charge", 10, "c", MONEY).parse("lots")


def test_split_cells():
    assert split_cells("| a | b  |") == ["a", "b"]
    assert split_cells("+-----+") == []
    assert split_cells("no pipes here") == []


def test_render_layout():
    lines = SCHEMA.render([{"id": 1, "name": "Asha", "paid": 10.0, "active": True}])

    assert len(lines) == 9
    assert lines[0] == lines[2] == lines[4] == lines[6] == lines[8] == SCHEMA.border()
    assert "TEST LIST" in lines[1]
    assert split_cells(lines[3]) == ["ID", "Name", "Paid", "Status"]
    assert split_cells(lines[5]) == ["1", "Asha", "10.00", "Active"]
    assert split_cells(lines[7]) == ["Total Test: 1"]
    assert all(len(line) == SCHEMA.line_width for line in lines)


def test_parse_reads_back_rendered_rows():
    rows = [
        {"id": 1, "name": "Asha", "paid": 10.5, "active": True},
        {"id": 2, "name": "Bina", "paid": 0.0, "active": False},
    ]
    parsed = SCHEMA.parse(SCHEMA.render(rows))
    assert parsed.rows == rows
    assert parsed.rejected == []


def test_parse_skips_malformed_rows():
    lines = SCHEMA.render([{"id": 1, "name": "Asha", "paid": 10.0, "active": True}])
    lines.insert(6, "| x     | Bad        | 1.00     | Active   |")
    lines.insert(6, "| 3     | Too few    |")
    lines.insert(6, "")

    parsed = SCHEMA.parse(lines)

    assert [row["id"] for row in parsed.rows] == [1]
    assert len(parsed.rejected) == 2
    reasons = [reason for _, _, reason in parsed.rejected]
    assert "expected 4 columns, found 2" in reasons
    assert any("not a number" in reason for reason in reasons)


def test_parse_ignores_rows_before_header():
    lines = ["| 9     | Stray      | 1.00     | Active   |"] + SCHEMA.render([])
    parsed = SCHEMA.parse(lines)
    assert parsed.rows == []
    assert parsed.rejected == []


def test_header_must_match_schema_exactly():
    assert SCHEMA.is_header(SCHEMA.header_row())
    assert not SCHEMA.is_header("| ID | Name | Location |")


@pytest.mark.parametrize("cell", ["nan", "inf", "-Infinity", "£NaN"])
def test_numeric_columns_reject_non_finite_values(cell):
    with pytest.raises(RowFormatError):
        Column("Price", 7, "price", MONEY).parse(cell)
    with pytest.raises(RowFormatError):
        Column("Pts", 7, "pts", POINTS).parse(cell)


def test_points_are_written_as_whole_points_rounding_half_up():
    points = Column("Pts", 7, "pts", POINTS)
    assert points.format(2.5).strip() == "3"
    assert points.format(3.5).strip() == "4"
    assert points.format(2.4).strip() == "2"

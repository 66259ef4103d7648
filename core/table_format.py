import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from core.utils import truncate

# Column kinds
TEXT = "text"
INT = "int"
MONEY = "money"
POINTS = "points"
FLAG = "flag"

ACTIVE = "Active"
INACTIVE = "Inactive"
CURRENCY_SYMBOL = "£"


class RowFormatError(ValueError):
    """A data row that does not fit its table schema."""


@dataclass(frozen=True)
class Column:
    """
    One column of a fixed-width table.

    Attributes:
        header (str): Text of the column-header cell.
        width (int): Minimum cell width. Text is truncated to it; numbers may overflow.
        field (str): Key of the value in a row dictionary.
        kind (str): One of TEXT, INT, MONEY, POINTS, FLAG.
    """
    header: str
    width: int
    field: str
    kind: str = TEXT

    def format(self, value: Any) -> str:
        if self.kind == INT:
            return f"{int(value):<{self.width}d}"
        if self.kind == MONEY:
            return f"{float(value):<{self.width}.2f}"
        if self.kind == POINTS:
            return f"{math.floor(float(value) + 0.5):<{self.width}d}"
        if self.kind == FLAG:
            return f"{ACTIVE if value else INACTIVE:<{self.width}}"

        # The pipe is the cell separator, so it cannot appear inside text
        text = "" if value is None else str(value).replace("|", "/")
        return f"{truncate(text, self.width):<{self.width}}"

    def parse(self, cell: str) -> Any:
        cell = cell.strip()
        try:
            if self.kind == INT:
                return int(cell)
            if self.kind in (MONEY, POINTS):
                number = float(cell.replace(CURRENCY_SYMBOL, ""))
                if not math.isfinite(number):
                    raise ValueError(cell)
                return number
        except ValueError:
            raise RowFormatError(f"{self.header}: {cell!r} is not a number") from None

        if self.kind == FLAG:
            return cell == ACTIVE
        return cell


def split_cells(line: str) -> List[str]:
    """
    Splits a '| a | b |' line into stripped cell texts.
    Returns an empty list for lines that are not pipe-delimited.
    """
    stripped = line.strip()
    if len(stripped) < 2 or not (stripped.startswith("|") and stripped.endswith("|")):
        return []
    return [cell.strip() for cell in stripped[1:-1].split("|")]


@dataclass
class ParsedTable:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    # (line number, line text, reason)
    rejected: List[Tuple[int, str, str]] = field(default_factory=list)


@dataclass(frozen=True)
class TableSchema:
    """
    Ordered column list for one member file, plus its banner and footer text.
    Both writing and reading go through the same schema, so the header row
    is recognised by its exact column names.
    """
    title: str
    footer_label: str
    columns: Tuple[Column, ...]

    @property
    def headers(self) -> List[str]:
        return [c.header for c in self.columns]

    @property
    def line_width(self) -> int:
        # "| " + cell + " " per column, then the closing "|"
        return sum(c.width + 3 for c in self.columns) + 1

    def border(self) -> str:
        return "+" + "-" * (self.line_width - 2) + "+"

    def banner(self) -> str:
        return f"|{self.title:^{self.line_width - 2}}|"

    def footer(self, count: int) -> str:
        text = f"{self.footer_label}: {count}"
        return f"| {text:<{self.line_width - 4}} |"

    @staticmethod
    def _join(cells: Iterable[str]) -> str:
        return "".join(f"| {cell} " for cell in cells) + "|"

    def header_row(self) -> str:
        return self._join(f"{c.header:<{c.width}}" for c in self.columns)

    def format_row(self, values: Dict[str, Any]) -> str:
        return self._join(c.format(values.get(c.field)) for c in self.columns)

    def render(self, rows: Sequence[Dict[str, Any]]) -> List[str]:
        """Builds every line of the file, without line terminators."""
        lines = [self.border(), self.banner(), self.border(), self.header_row(), self.border()]
        lines.extend(self.format_row(row) for row in rows)
        lines.append(self.border())
        lines.append(self.footer(len(rows)))
        lines.append(self.border())
        return lines

    def is_header(self, line: str) -> bool:
        return split_cells(line) == self.headers

    def is_footer(self, line: str) -> bool:
        cells = split_cells(line)
        return len(cells) == 1 and cells[0].startswith(self.footer_label)

    def parse_row(self, line: str) -> Dict[str, Any]:
        cells = split_cells(line)
        if len(cells) != len(self.columns):
            raise RowFormatError(f"expected {len(self.columns)} columns, found {len(cells)}")
        return {c.field: c.parse(cell) for c, cell in zip(self.columns, cells)}

    def parse(self, lines: Iterable[str]) -> ParsedTable:
        """
        Reads data rows from the lines of a file.
        Rows are taken between the header row and the footer; border and blank
        lines are ignored. Malformed rows are collected in `rejected`.
        """
        result = ParsedTable()
        in_data = False

        for line_no, raw in enumerate(lines, start=1):
            line = raw.rstrip("\r\n")
            stripped = line.strip()

            if self.is_header(line):
                in_data = True
                continue
            if not in_data or not stripped or stripped.startswith("+"):
                continue
            if self.is_footer(line):
                in_data = False
                continue

            try:
                result.rows.append(self.parse_row(line))
            except RowFormatError as e:
                result.rejected.append((line_no, stripped, str(e)))

        return result

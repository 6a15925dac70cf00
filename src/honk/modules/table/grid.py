"""
Row/column grid over an on-screen table.

The engine has no notion of tables; this layer maps (row, col) to a Zone
and drives ordinary Click / Check verbs against it.
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import accumulate
from typing import List, Optional, Sequence, Tuple

from ...core.logger import logger
from ..verbs.engine import VerbEngine
from ..verbs.types import VerbRequest, VerbResult
from ..vision.zone import Point, Zone


@dataclass(frozen=True)
class CellGrid:
    """Table layout in screen pixels.

    Attributes:
        origin: top-left corner of cell (0, 0)
        column_widths: width of each column, left to right
        row_heights: height of each row, top to bottom
    """

    origin: Point
    column_widths: Tuple[int, ...]
    row_heights: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "column_widths", tuple(int(w) for w in self.column_widths))
        object.__setattr__(self, "row_heights", tuple(int(h) for h in self.row_heights))
        if not self.column_widths or not self.row_heights:
            raise ValueError("grid needs at least one row and one column")
        if min(self.column_widths) <= 0 or min(self.row_heights) <= 0:
            raise ValueError("row heights and column widths must be positive")

    @classmethod
    def uniform(cls, origin: Point, cell_w: int, cell_h: int, rows: int, cols: int) -> "CellGrid":
        return cls(origin, (cell_w,) * cols, (cell_h,) * rows)

    @property
    def rows(self) -> int:
        return len(self.row_heights)

    @property
    def cols(self) -> int:
        return len(self.column_widths)

    @property
    def zone(self) -> Zone:
        return Zone(self.origin[0], self.origin[1], sum(self.column_widths), sum(self.row_heights))

    def cell_zone(self, row: int, col: int) -> Zone:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        x = self.origin[0] + sum(self.column_widths[:col])
        y = self.origin[1] + sum(self.row_heights[:row])
        return Zone(x, y, self.column_widths[col], self.row_heights[row])

    def cell_at(self, point: Point) -> Optional[Tuple[int, int]]:
        """(row, col) containing ``point``, or None outside the grid."""
        if not self.zone.contains_point(point):
            return None
        dx, dy = point[0] - self.origin[0], point[1] - self.origin[1]
        col = next(i for i, edge in enumerate(accumulate(self.column_widths)) if dx < edge)
        row = next(i for i, edge in enumerate(accumulate(self.row_heights)) if dy < edge)
        return row, col


class TableDriver:
    """Per-cell Click and Check through the public engine contract."""

    def __init__(self, engine: VerbEngine, grid: CellGrid):
        self.engine = engine
        self.grid = grid
        self.logger = logger.bind(module="TableDriver")

    def click_cell(self, row: int, col: int, **kwargs) -> VerbResult:
        zone = self.grid.cell_zone(row, col)
        kwargs.setdefault("check_zone", zone)
        return self.engine.execute(VerbRequest.click(point=zone.center, **kwargs))

    def check_cell(self, row: int, col: int, condition: Optional[str] = None, **kwargs) -> VerbResult:
        zone = self.grid.cell_zone(row, col)
        return self.engine.execute(VerbRequest.check(condition=condition, check_zone=zone, **kwargs))

    def read_row(self, row: int, condition: Optional[str] = None) -> List[VerbResult]:
        return [self.check_cell(row, col, condition) for col in range(self.grid.cols)]

    def read_column(self, col: int, condition: Optional[str] = None) -> List[VerbResult]:
        return [self.check_cell(row, col, condition) for row in range(self.grid.rows)]

    def find_row(self, col: int, condition: str) -> Optional[int]:
        """First row whose cell in ``col`` satisfies ``condition``."""
        for row in range(self.grid.rows):
            result = self.check_cell(row, col, condition)
            if result.verdict:
                self.logger.debug(f"Row {row} matches {condition!r} in column {col}")
                return row
        return None

    def rows_matching(self, col: int, condition: str) -> Sequence[int]:
        return [row for row, r in enumerate(self.read_column(col, condition)) if r.verdict]

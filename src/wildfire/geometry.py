"""Grid geometry: conversion between pixels and grid cells, and adjacency."""

import logging
import math
from typing import Iterator, NamedTuple

from mesa.space import MultiGrid

from .constants import DEFAULT_CELL_SIZE
from .region import Rect

logger = logging.getLogger(__name__)


class Cell(NamedTuple):
    """A discrete (row, col) address on the grid."""
    row: int
    col: int


class GridGeometry:
    """Bounded square grid of fixed-size cells backed by a mesa ``MultiGrid``.

    Mesa addresses grid positions as ``(x, y)``, which here is ``(col, row)``.
    Every public method speaks in :class:`Cell` so callers never deal with the
    swapped order.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        cell_size: int = DEFAULT_CELL_SIZE,
        diagonals: bool = True,
    ):
        """
        Initialize the grid geometry.

        Args:
            rows: Number of grid rows
            cols: Number of grid columns
            cell_size: Width and height of a grid space in pixels
            diagonals: Use the Moore neighbourhood (8 neighbours) when True,
                the von Neumann neighbourhood (4 neighbours) otherwise
        """
        if rows <= 0 or cols <= 0:
            raise ValueError("Grid must have at least one row and one column")
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.rows = rows
        self.cols = cols
        self.cell_size = cell_size
        self.diagonals = diagonals
        self.grid = MultiGrid(cols, rows, torus=False)

    @property
    def width(self) -> int:
        """Width of the whole grid in pixels."""
        return self.cols * self.cell_size

    @property
    def height(self) -> int:
        """Height of the whole grid in pixels."""
        return self.rows * self.cell_size

    def cell_of(self, x: float, y: float) -> Cell:
        """Return the cell that contains the pixel ``(x, y)``."""
        return Cell(math.floor(y / self.cell_size), math.floor(x / self.cell_size))

    def pixel_of(self, cell: Cell) -> tuple[int, int]:
        """Return the ``(x, y)`` pixel at the top-left corner of ``cell``."""
        row, col = cell
        return col * self.cell_size, row * self.cell_size

    def cell_rect(self, cell: Cell) -> Rect:
        x, y = self.pixel_of(cell)
        return Rect(x, y, self.cell_size, self.cell_size)

    def contains(self, cell: Cell) -> bool:
        row, col = cell
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell, row by row."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield Cell(row, col)

    def neighbors_of(self, cell: Cell) -> list[Cell]:
        """
        Return the cells adjacent to ``cell``.

        Neighbours outside the grid are dropped, and a cell is never its own
        neighbour. A cell outside the grid has no neighbours.
        """
        if not self.contains(cell):
            logger.debug(f"Cell {cell} is outside the grid, no neighbours")
            return []
        row, col = cell
        positions = self.grid.get_neighborhood(
            (col, row), moore=self.diagonals, include_center=False
        )
        return [Cell(y, x) for x, y in positions]

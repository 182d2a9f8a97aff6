#Maze generation and the grid model shared by every solver
#Mazes are carved with the DFS "recursive backtracker" on the odd sub-lattice of an N x N grid
#Start is always (1, 1) and the goal is always (N - 2, N - 2)
#After carving, a direct route is punched from start to goal so the maze is always solvable

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from maze_errors import ConfigurationError

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]  # (row, col)

OPEN = 0
WALL = 1

MIN_GRID_SIZE = 5
DEFAULT_GRID_SIZE = 21

#Neighbor order is part of the contract: DFS exploration order depends on it
DIRS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


def within_bounds(size: int, row: int, col: int) -> bool:
    return 0 <= row < size and 0 <= col < size


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def validate_grid_size(size) -> int:
    if isinstance(size, bool) or not isinstance(size, int):
        raise ConfigurationError(f"grid size must be an integer, got {size!r}")
    if size <= 0:
        raise ConfigurationError(f"grid size must be positive, got {size}")
    if size < MIN_GRID_SIZE:
        raise ConfigurationError(f"grid size must be at least {MIN_GRID_SIZE}, got {size}")
    if size % 2 == 0:
        raise ConfigurationError(f"grid size must be odd, got {size}")
    return size


def coerce_grid_size(size: int) -> int:
    #Used by user facing entry points, the generator itself only accepts odd sizes
    coerced = max(MIN_GRID_SIZE, int(size))
    if coerced % 2 == 0:
        coerced += 1
    if coerced != size:
        logger.warning("Grid size %s coerced to %s", size, coerced)
    return coerced


@dataclass(frozen=True)
class Grid:
    size: int
    cells: Tuple[Tuple[int, ...], ...]  # [row][col], OPEN or WALL

    @property
    def start(self) -> Cell:
        return (1, 1)

    @property
    def goal(self) -> Cell:
        return (self.size - 2, self.size - 2)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Grid":
        size = validate_grid_size(len(rows))
        if any(len(row) != size for row in rows):
            raise ConfigurationError("grid rows must form a square")
        return cls(size, tuple(tuple(WALL if v == WALL else OPEN for v in row) for row in rows))

    @classmethod
    def from_text(cls, lines: Iterable[str]) -> "Grid":
        #'#' is a wall, any other character is open floor
        rows = [[WALL if ch == "#" else OPEN for ch in line.strip()] for line in lines if line.strip()]
        return cls.from_rows(rows)

    def in_bounds(self, cell: Cell) -> bool:
        return within_bounds(self.size, cell[0], cell[1])

    def is_open(self, cell: Cell) -> bool:
        return self.in_bounds(cell) and self.cells[cell[0]][cell[1]] == OPEN

    def neighbors(self, cell: Cell) -> List[Cell]:
        row, col = cell
        return [
            (nr, nc)
            for dr, dc in DIRS.values()
            if within_bounds(self.size, nr := row + dr, nc := col + dc)
            and self.cells[nr][nc] == OPEN
        ]

    def heuristic(self, a: Cell, b: Cell) -> int:
        return manhattan(a, b)

    def index(self, cell: Cell) -> int:
        return cell[0] * self.size + cell[1]

    def open_cells(self) -> Iterator[Cell]:
        for row in range(self.size):
            for col in range(self.size):
                if self.cells[row][col] == OPEN:
                    yield (row, col)

    def render(self, path: Optional[Iterable[Cell]] = None) -> str:
        on_path = set(path or ())
        lines = []
        for row in range(self.size):
            chars = []
            for col in range(self.size):
                cell = (row, col)
                if cell == self.start:
                    chars.append("S")
                elif cell == self.goal:
                    chars.append("G")
                elif self.cells[row][col] == WALL:
                    chars.append("#")
                elif cell in on_path:
                    chars.append("*")
                else:
                    chars.append(".")
            lines.append("".join(chars))
        return "\n".join(lines)


def carve_direct_route(cells: List[List[int]], start: Cell, goal: Cell) -> None:

    #Walk greedily from start to goal (down first, then right, then up, then left)
    #opening every cell on the way. Can add a second route next to the carved tree
    row, col = start
    size = len(cells)
    while (row, col) != goal:
        if row < goal[0] and within_bounds(size, row + 1, col):
            row += 1
        elif col < goal[1] and within_bounds(size, row, col + 1):
            col += 1
        elif row > goal[0] and within_bounds(size, row - 1, col):
            row -= 1
        elif col > goal[1] and within_bounds(size, row, col - 1):
            col -= 1
        else:
            break
        cells[row][col] = OPEN


def generate_maze(size: int, rng: Optional[random.Random] = None) -> Grid:
    size = validate_grid_size(size)
    rng = rng or random.Random()
    cells = [[WALL for _ in range(size)] for _ in range(size)]
    start = (1, 1)
    goal = (size - 2, size - 2)

    cells[start[0]][start[1]] = OPEN
    stack = [start]
    while stack:
        row, col = stack[-1]
        unvisited = [
            (nr, nc, dr, dc)
            for dr, dc in DIRS.values()
            if 0 < (nr := row + 2 * dr) < size - 1
            and 0 < (nc := col + 2 * dc) < size - 1
            and cells[nr][nc] == WALL
        ]
        if not unvisited:
            stack.pop()
            continue
        nr, nc, dr, dc = rng.choice(unvisited)
        cells[nr][nc] = OPEN
        cells[row + dr][col + dc] = OPEN
        stack.append((nr, nc))

    cells[start[0]][start[1]] = OPEN
    cells[goal[0]][goal[1]] = OPEN
    carve_direct_route(cells, start, goal)

    grid = Grid(size, tuple(tuple(row) for row in cells))
    logger.info("Generated %dx%d maze with %d open cells", size, size, sum(1 for _ in grid.open_cells()))
    return grid

import random

import pytest

from maze_errors import ConfigurationError
from maze_gen import OPEN, WALL, Grid, carve_direct_route, coerce_grid_size, generate_maze, validate_grid_size
from maze_search import BFS, solve

SIZES = [5, 7, 9, 15, 21, 31]


@pytest.mark.parametrize("size", SIZES)
@pytest.mark.parametrize("seed", range(4))
def test_start_and_goal_are_open(size, seed):
    grid = generate_maze(size, random.Random(seed))

    assert grid.start == (1, 1)
    assert grid.goal == (size - 2, size - 2)
    assert grid.is_open(grid.start)
    assert grid.is_open(grid.goal)


@pytest.mark.parametrize("size", SIZES)
@pytest.mark.parametrize("seed", range(4))
def test_every_open_cell_is_reachable_from_start(size, seed, distances):
    grid = generate_maze(size, random.Random(seed))

    reachable = distances(grid, grid.start)
    assert set(grid.open_cells()) == set(reachable)


@pytest.mark.parametrize("size", SIZES)
def test_border_is_always_wall(size):
    grid = generate_maze(size, random.Random(size))

    for i in range(size):
        assert grid.cells[0][i] == WALL
        assert grid.cells[size - 1][i] == WALL
        assert grid.cells[i][0] == WALL
        assert grid.cells[i][size - 1] == WALL


def test_same_seed_gives_same_maze():
    assert generate_maze(21, random.Random(1234)) == generate_maze(21, random.Random(1234))


def test_regenerating_keeps_start_and_goal(distances):
    first = generate_maze(15)
    second = generate_maze(15)

    assert (first.start, first.goal) == (second.start, second.goal)
    for grid in (first, second):
        assert grid.goal in distances(grid, grid.start)


def test_every_odd_lattice_cell_is_carved():
    grid = generate_maze(11, random.Random(5))

    for row in range(1, 10, 2):
        for col in range(1, 10, 2):
            assert grid.is_open((row, col))


@pytest.mark.parametrize("seed", range(6))
def test_size_five_has_direct_route(seed, distances):
    grid = generate_maze(5, random.Random(seed))

    for cell in [(1, 1), (2, 1), (3, 1), (3, 2), (3, 3)]:
        assert grid.is_open(cell)
    # 4 moves apart, so the shortest path holds exactly 5 cells
    assert distances(grid, grid.start)[grid.goal] + 1 == 5
    result = solve(grid, BFS)
    assert result.path_length == 5
    assert result.nodes_explored > 0


def test_carve_direct_route_goes_down_then_right():
    cells = [[WALL] * 7 for _ in range(7)]
    cells[1][1] = OPEN
    carve_direct_route(cells, (1, 1), (5, 5))

    opened = {(r, c) for r in range(7) for c in range(7) if cells[r][c] == OPEN}
    assert opened == {(1, 1), (2, 1), (3, 1), (4, 1), (5, 1), (5, 2), (5, 3), (5, 4), (5, 5)}


@pytest.mark.parametrize("size", [0, -3, 1, 3, 4, 20, 9.0, "9", True, None])
def test_invalid_sizes_are_rejected(size):
    with pytest.raises(ConfigurationError):
        generate_maze(size)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        validate_grid_size(6)


@pytest.mark.parametrize("size,expected", [(20, 21), (21, 21), (2, 5), (-7, 5), (6, 7)])
def test_coerce_grid_size(size, expected):
    assert coerce_grid_size(size) == expected


def test_neighbors_are_up_down_left_right(detour_grid):
    assert detour_grid.neighbors((1, 1)) == [(2, 1), (1, 2)]
    assert detour_grid.neighbors((3, 5)) == [(2, 5), (4, 5), (3, 4)]
    assert detour_grid.neighbors((1, 3)) == [(1, 2), (1, 4)]


def test_neighbors_never_leave_the_grid():
    grid = Grid.from_text(["....."] * 5)

    assert grid.neighbors((0, 0)) == [(1, 0), (0, 1)]
    assert grid.neighbors((4, 4)) == [(3, 4), (4, 3)]


def test_heuristic_is_manhattan(detour_grid):
    assert detour_grid.heuristic((1, 1), (5, 5)) == 8
    assert detour_grid.heuristic((5, 2), (3, 4)) == 4
    assert detour_grid.heuristic((3, 3), (3, 3)) == 0


def test_index_is_row_major(detour_grid):
    assert detour_grid.index((0, 0)) == 0
    assert detour_grid.index((3, 1)) == 22
    assert detour_grid.index((5, 5)) == 40


def test_is_open_outside_grid(detour_grid):
    assert not detour_grid.is_open((-1, 1))
    assert not detour_grid.is_open((1, 7))
    assert not detour_grid.is_open((2, 2))


def test_render_marks_start_goal_and_path(detour_grid):
    lines = detour_grid.render(path=[(1, 1), (1, 2), (1, 3)]).splitlines()

    assert lines[0] == "#######"
    assert lines[1] == "#S**..#"
    assert lines[5] == "#...#G#"


def test_from_text_rejects_non_square():
    with pytest.raises(ConfigurationError):
        Grid.from_text(["#####", "#...#", "#####", "#...#", "####"])


def test_grid_is_immutable(detour_grid):
    with pytest.raises(AttributeError):
        detour_grid.size = 9
    with pytest.raises(TypeError):
        detour_grid.cells[1][1] = WALL

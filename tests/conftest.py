from collections import deque

import pytest

from maze_gen import Grid

# Two routes from S to G: along the top row then down the right column
# (9 cells), or down the left column and around the middle (13 cells).
DETOUR_ROWS = [
    "#######",
    "#.....#",
    "#.###.#",
    "#.#...#",
    "#.#.#.#",
    "#...#.#",
    "#######",
]

# Goal (3, 3) is open but walled off from the start column.
WALLED_GOAL_ROWS = [
    "#####",
    "#.#.#",
    "#.#.#",
    "#.#.#",
    "#####",
]


# Two equal-length routes into (5, 5): along the top and down column 6, or
# through the left pocket and along row 5. The top route reaches (5, 5) first,
# so A* sees (5, 4) from the wrong side before (5, 3) offers a cheaper g.
LOOP_ROWS = [
    "#########",
    "#......##",
    "##.###.##",
    "#..###.##",
    "#.###..##",
    "#.....###",
    "###.#.###",
    "#####...#",
    "#########",
]


@pytest.fixture
def loop_grid():
    return Grid.from_text(LOOP_ROWS)


@pytest.fixture
def detour_grid():
    return Grid.from_text(DETOUR_ROWS)


@pytest.fixture
def walled_goal_grid():
    return Grid.from_text(WALLED_GOAL_ROWS)


def bfs_distances(grid, source):
    dist = {source: 0}
    q = deque([source])
    while q:
        r, c = q.popleft()
        for nxt in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
            if grid.is_open(nxt) and nxt not in dist:
                dist[nxt] = dist[(r, c)] + 1
                q.append(nxt)
    return dist


@pytest.fixture
def distances():
    return bfs_distances

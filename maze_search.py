#Solvers for the generated mazes
#Every solver is a generator: it yields a NodeExplored each time a cell is closed,
#then a PathCellDrawn for each cell of the start -> goal path once the goal is closed
#Searches share nothing but the (immutable) Grid, so any number can run side by side

from __future__ import annotations

import heapq
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple, Union

from maze_errors import ConfigurationError, UnreachableGoalError
from maze_gen import Cell, Grid

logger = logging.getLogger(__name__)

BFS = "BFS"
DFS = "DFS"
ASTAR = "A*"
GREEDY = "GREEDY"

ALGORITHM_NAMES = (BFS, DFS, ASTAR, GREEDY)

NO_PARENT = -1


#Events


@dataclass(frozen=True)
class NodeExplored:
    algorithm: str
    cell: Cell


@dataclass(frozen=True)
class PathCellDrawn:
    algorithm: str
    cell: Cell
    index: int


@dataclass(frozen=True)
class RunResult:
    algorithm: str
    explored: FrozenSet[Cell]
    path: Tuple[Cell, ...]
    elapsed_ms: float = 0.0

    @property
    def nodes_explored(self) -> int:
        return len(self.explored)

    @property
    def path_length(self) -> int:
        return len(self.path)

    @property
    def found(self) -> bool:
        return bool(self.path)

    @property
    def failure(self) -> Optional[UnreachableGoalError]:
        if self.path:
            return None
        return UnreachableGoalError(self.algorithm, len(self.explored))


@dataclass(frozen=True)
class RunComplete:
    algorithm: str
    result: RunResult


@dataclass(frozen=True)
class CompareComplete:
    results: Dict[str, RunResult] = field(default_factory=dict)


SearchEvent = Union[NodeExplored, PathCellDrawn]
Event = Union[NodeExplored, PathCellDrawn, RunComplete, CompareComplete]


class ResultBuilder:
    #Folds a run's event stream into its RunResult, so the result always matches what was emitted

    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        self.explored: Set[Cell] = set()
        self.path: List[Cell] = []

    def add(self, event: SearchEvent) -> None:
        if isinstance(event, NodeExplored):
            self.explored.add(event.cell)
        elif isinstance(event, PathCellDrawn):
            self.path.append(event.cell)

    def build(self, elapsed_ms: float) -> RunResult:
        return RunResult(self.algorithm, frozenset(self.explored), tuple(self.path), elapsed_ms)


#Search tree


class SearchTree:
    """Parent links of a single run.

    Stored as a flat arena indexed by ``row * size + col``; each slot holds the
    index of the parent cell or ``NO_PARENT``. Owned by exactly one run.
    """

    def __init__(self, grid: Grid):
        self.grid = grid
        self.size = grid.size
        self.parent: List[int] = [NO_PARENT] * (grid.size * grid.size)

    def index(self, cell: Cell) -> int:
        return self.grid.index(cell)

    def cell(self, index: int) -> Cell:
        return divmod(index, self.size)

    def link(self, child: Cell, parent: Cell) -> None:
        self.parent[self.index(child)] = self.index(parent)

    def has_parent(self, cell: Cell) -> bool:
        return self.parent[self.index(cell)] != NO_PARENT

    def path_to(self, start: Cell, goal: Cell) -> List[Cell]:
        if goal != start and not self.has_parent(goal):
            return []
        start_idx = self.index(start)
        cur = self.index(goal)
        result = [cur]
        while cur != start_idx:
            cur = self.parent[cur]
            if cur == NO_PARENT:
                return []
            result.append(cur)
        result.reverse()
        return [self.cell(idx) for idx in result]


def draw_path(algorithm: str, tree: SearchTree, start: Cell, goal: Cell) -> Iterator[PathCellDrawn]:
    for index, cell in enumerate(tree.path_to(start, goal)):
        yield PathCellDrawn(algorithm, cell, index)


def _explored(algorithm: str, cell: Cell, count: int) -> NodeExplored:
    logger.debug("%s exploring node %d at %s", algorithm, count, cell)
    return NodeExplored(algorithm, cell)


def _no_path(algorithm: str, explored: int) -> None:
    logger.warning("%s: no path found after exploring %d nodes", algorithm, explored)


#Solver generators


def bfs_search(grid: Grid) -> Iterator[SearchEvent]:

    #FIFO queue, a cell is marked seen when enqueued so it is never enqueued twice
    #First time the goal is closed is along a shortest path
    start, goal = grid.start, grid.goal
    tree = SearchTree(grid)
    q = deque([start])
    seen = {start}
    closed = 0

    while q:
        current = q.popleft()
        closed += 1
        yield _explored(BFS, current, closed)
        if current == goal:
            yield from draw_path(BFS, tree, start, goal)
            return
        for nxt in grid.neighbors(current):
            if nxt in seen:
                continue
            seen.add(nxt)
            tree.link(nxt, current)
            q.append(nxt)

    _no_path(BFS, closed)


def dfs_search(grid: Grid) -> Iterator[SearchEvent]:

    #LIFO stack of (cell, parent) entries. A cell can sit on the stack more than once,
    #the first entry popped closes it and the parent it carries becomes the cell's parent
    start, goal = grid.start, grid.goal
    tree = SearchTree(grid)
    stack: List[Tuple[Cell, Optional[Cell]]] = [(start, None)]
    closed: Set[Cell] = set()

    while stack:
        current, parent = stack.pop()
        if current in closed:
            continue
        closed.add(current)
        if parent is not None:
            tree.link(current, parent)
        yield _explored(DFS, current, len(closed))
        if current == goal:
            yield from draw_path(DFS, tree, start, goal)
            return
        for nxt in grid.neighbors(current):
            if nxt not in closed:
                stack.append((nxt, current))

    _no_path(DFS, len(closed))


def astar_search(grid: Grid) -> Iterator[SearchEvent]:

    #A* with f = g + h, h = Manhattan distance to the goal
    #Heap entries are (f, seq, cell); seq is fixed the first time a cell enters the frontier,
    #so equal-f cells leave in the order they were first added
    #A strictly better g re-pushes the cell under its original seq, entries whose f no longer
    #matches the cell's current g are stale and dropped
    start, goal = grid.start, grid.goal
    tree = SearchTree(grid)
    g_score: Dict[Cell, int] = {start: 0}
    first_seq: Dict[Cell, int] = {start: 0}
    open_heap: List[Tuple[int, int, Cell]] = [(grid.heuristic(start, goal), 0, start)]
    closed: Set[Cell] = set()

    while open_heap:
        f, _, current = heapq.heappop(open_heap)
        if current in closed or f != g_score[current] + grid.heuristic(current, goal):
            continue
        closed.add(current)
        yield _explored(ASTAR, current, len(closed))
        if current == goal:
            yield from draw_path(ASTAR, tree, start, goal)
            return
        tentative_g = g_score[current] + 1
        for nxt in grid.neighbors(current):
            if nxt in closed:
                continue
            if nxt in g_score and tentative_g >= g_score[nxt]:
                continue
            g_score[nxt] = tentative_g
            tree.link(nxt, current)
            if nxt not in first_seq:
                first_seq[nxt] = len(first_seq)
            heapq.heappush(open_heap, (tentative_g + grid.heuristic(nxt, goal), first_seq[nxt], nxt))

    _no_path(ASTAR, len(closed))


def greedy_search(grid: Grid) -> Iterator[SearchEvent]:

    #Greedy best-first: the heap is keyed on h alone, g is never tracked
    #First discoverer wins, once a cell has a parent it is never pushed or relinked again,
    #which is why the path it returns is valid but often longer than the shortest one
    start, goal = grid.start, grid.goal
    tree = SearchTree(grid)
    seq = 0
    open_heap: List[Tuple[int, int, Cell]] = [(grid.heuristic(start, goal), seq, start)]
    closed: Set[Cell] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current in closed:
            continue
        closed.add(current)
        yield _explored(GREEDY, current, len(closed))
        if current == goal:
            yield from draw_path(GREEDY, tree, start, goal)
            return
        for nxt in grid.neighbors(current):
            if nxt in closed or tree.has_parent(nxt):
                continue
            tree.link(nxt, current)
            seq += 1
            heapq.heappush(open_heap, (grid.heuristic(nxt, goal), seq, nxt))

    _no_path(GREEDY, len(closed))


SEARCHES: Dict[str, Callable[[Grid], Iterator[SearchEvent]]] = {
    BFS: bfs_search,
    DFS: dfs_search,
    ASTAR: astar_search,
    GREEDY: greedy_search,
}


def check_algorithm(algorithm: str) -> str:
    if algorithm not in SEARCHES:
        raise ConfigurationError(f"unknown algorithm {algorithm!r}, expected one of {', '.join(ALGORITHM_NAMES)}")
    return algorithm


def search_events(grid: Grid, algorithm: str) -> Iterator[SearchEvent]:
    return SEARCHES[check_algorithm(algorithm)](grid)


def consume_search(algorithm: str, events: Iterable[SearchEvent]) -> RunResult:
    builder = ResultBuilder(algorithm)
    start_time = time.perf_counter()
    for event in events:
        builder.add(event)
    return builder.build((time.perf_counter() - start_time) * 1000.0)


def solve(grid: Grid, algorithm: str) -> RunResult:
    #Runs a search to completion without any pacing
    return consume_search(algorithm, search_events(grid, algorithm))

"""Run coordination for one maze.

A ``MazeSession`` owns the current grid and the single "a run is active" flag.
It starts either one paced search (single view) or all four searches at once
against the same grid (compare mode), forwards every event to its listeners,
and keeps the last result of each algorithm for display.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, Dict, List, Optional

from maze_animation import DEFAULT_SPEED_MS, CancelToken, PacingConfig, run_with_pacing
from maze_errors import ReentrancyError
from maze_gen import DEFAULT_GRID_SIZE, Grid, generate_maze, validate_grid_size
from maze_search import ALGORITHM_NAMES, CompareComplete, Event, RunComplete, RunResult, check_algorithm, search_events

logger = logging.getLogger(__name__)

Listener = Callable[[Event], None]


class _Batch:
    #The run (or the four compare runs) started by one request, sharing one cancel token

    def __init__(self, algorithms):
        self.algorithms = tuple(algorithms)
        self.token = CancelToken()
        self.task: Optional[asyncio.Task] = None


class MazeSession:
    def __init__(self, grid_size: int = DEFAULT_GRID_SIZE, seed: Optional[int] = None, speed_ms: float = DEFAULT_SPEED_MS):
        self.rng = random.Random(seed)
        self.grid_size = validate_grid_size(grid_size)
        self.speed_ms = speed_ms
        self.grid: Grid = generate_maze(self.grid_size, self.rng)
        self.results: Dict[str, RunResult] = {}
        self.compare_mode = False
        self.running = False
        self._batch: Optional[_Batch] = None
        self._listeners: List[Listener] = []

    # listeners

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: Event) -> None:
        if isinstance(event, RunComplete):
            self.results[event.algorithm] = event.result
        for listener in list(self._listeners):
            listener(event)

    # maze

    def new_maze(self, size: Optional[int] = None) -> Grid:
        size = self.grid_size if size is None else validate_grid_size(size)
        self.cancel()
        self.grid_size = size
        self.grid = generate_maze(size, self.rng)
        self.results.clear()
        self.compare_mode = False
        return self.grid

    # runs

    def pacing_for(self, algorithm: str, compare: bool = False) -> PacingConfig:
        return PacingConfig.from_speed(self.speed_ms, algorithm, compare=compare)

    def _claim(self, algorithms, preempt: bool) -> _Batch:
        if self._batch is not None:
            if not preempt:
                raise ReentrancyError("a run is already in progress")
            logger.info("Preempting active run of %s", ", ".join(self._batch.algorithms))
            self.cancel()
        batch = _Batch(algorithms)
        self._batch = batch
        self.running = True
        self.results.clear()
        return batch

    def _release(self, batch: _Batch) -> None:
        #A batch that was cancelled (and possibly replaced) must not clear the newer batch's flag
        if self._batch is batch:
            self._batch = None
            self.running = False

    def cancel(self) -> bool:
        batch = self._batch
        if batch is None:
            return False
        batch.token.cancel()
        self._batch = None
        self.running = False
        logger.info("Cancelled run of %s", ", ".join(batch.algorithms))
        return True

    async def _play(self, batch: _Batch, algorithm: str, pacing: PacingConfig) -> Optional[RunResult]:
        grid = self.grid
        logger.info("Starting %s on %dx%d maze", algorithm, grid.size, grid.size)
        result = await run_with_pacing(algorithm, search_events(grid, algorithm), pacing, self._emit, batch.token)
        if result is not None:
            logger.info(
                "%s complete: %d nodes, path %d, %.0fms",
                algorithm, result.nodes_explored, result.path_length, result.elapsed_ms,
            )
        return result

    def start_run(self, algorithm: str, pacing: Optional[PacingConfig] = None, preempt: bool = False) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        algorithm = check_algorithm(algorithm)
        batch = self._claim([algorithm], preempt)
        self.compare_mode = False
        pacing = pacing or self.pacing_for(algorithm)

        async def single() -> Optional[RunResult]:
            try:
                return await self._play(batch, algorithm, pacing)
            finally:
                self._release(batch)

        batch.task = loop.create_task(single())
        return batch.task

    async def run(self, algorithm: str, pacing: Optional[PacingConfig] = None, preempt: bool = False) -> Optional[RunResult]:
        return await self.start_run(algorithm, pacing, preempt)

    def start_compare(self, pacing: Optional[PacingConfig] = None, preempt: bool = False) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        batch = self._claim(ALGORITHM_NAMES, preempt)
        self.compare_mode = True

        async def compare() -> Optional[Dict[str, RunResult]]:
            try:
                outcomes = await asyncio.gather(*(
                    self._play(batch, algorithm, pacing or self.pacing_for(algorithm, compare=True))
                    for algorithm in ALGORITHM_NAMES
                ))
            except Exception:
                #One run failed (a listener raised), silence the other three before propagating
                batch.token.cancel()
                raise
            finally:
                self._release(batch)
            if batch.token.cancelled or any(result is None for result in outcomes):
                return None
            results = dict(zip(ALGORITHM_NAMES, outcomes))
            logger.info(
                "Compare complete: %s",
                ", ".join(f"{name}={r.nodes_explored}/{r.path_length}" for name, r in results.items()),
            )
            self._emit(CompareComplete(results))
            return results

        batch.task = loop.create_task(compare())
        return batch.task

    async def compare(self, pacing: Optional[PacingConfig] = None, preempt: bool = False) -> Optional[Dict[str, RunResult]]:
        return await self.start_compare(pacing, preempt)

#Paced playback of a solver's event stream
#Each event is handed to the listeners first, then the run sleeps for the phase delay
#Those sleeps are the only places a run yields to the event loop, so several runs
#can interleave on one loop while each keeps its own solver state

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from maze_search import ASTAR, BFS, DFS, GREEDY, Event, NodeExplored, ResultBuilder, RunComplete, RunResult, SearchEvent

logger = logging.getLogger(__name__)

DEFAULT_SPEED_MS = 150

#Divisors applied to the speed slider value, per algorithm
EXPLORE_DIVISORS = {BFS: 50, DFS: 50, ASTAR: 10, GREEDY: 10}
COMPARE_EXPLORE_DIVISORS = {BFS: 100, DFS: 100, ASTAR: 10, GREEDY: 10}
PATH_DIVISOR = 20


@dataclass(frozen=True)
class PacingConfig:
    explore_delay_ms: float = DEFAULT_SPEED_MS / EXPLORE_DIVISORS[BFS]
    path_delay_ms: float = DEFAULT_SPEED_MS / PATH_DIVISOR

    @classmethod
    def from_speed(cls, speed_ms: float, algorithm: str, compare: bool = False) -> "PacingConfig":
        divisors = COMPARE_EXPLORE_DIVISORS if compare else EXPLORE_DIVISORS
        return cls(
            explore_delay_ms=max(1.0, speed_ms / divisors[algorithm]),
            path_delay_ms=max(1.0, speed_ms / PATH_DIVISOR),
        )

    @classmethod
    def immediate(cls) -> "PacingConfig":
        #No delay, but every event still yields to the loop
        return cls(0.0, 0.0)

    def delay_for(self, event: SearchEvent) -> float:
        ms = self.explore_delay_ms if isinstance(event, NodeExplored) else self.path_delay_ms
        return max(0.0, ms) / 1000.0


class CancelToken:
    #Checked before every emission; once cancelled a run emits nothing more

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


async def run_with_pacing(
    algorithm: str,
    events: Iterable[SearchEvent],
    pacing: PacingConfig,
    emit: Callable[[Event], None],
    token: CancelToken,
) -> Optional[RunResult]:
    builder = ResultBuilder(algorithm)
    logger.debug(
        "%s pacing: explore %.1fms, path %.1fms", algorithm, pacing.explore_delay_ms, pacing.path_delay_ms
    )
    start_time = time.perf_counter()

    for event in events:
        if token.cancelled:
            logger.debug("%s cancelled, dropping remaining events", algorithm)
            return None
        builder.add(event)
        emit(event)
        await asyncio.sleep(pacing.delay_for(event))

    if token.cancelled:
        logger.debug("%s cancelled before completion", algorithm)
        return None

    result = builder.build((time.perf_counter() - start_time) * 1000.0)
    emit(RunComplete(algorithm, result))
    return result

#Pygame visualization for a MazeSession
#Single view shows the selected solver, compare view shows all four solvers in a 2x2 grid
#The viewer never touches solver state, it only redraws from the events the session emits

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

import pygame

from maze_errors import ConfigurationError, ReentrancyError
from maze_gen import Cell, WALL
from maze_search import ALGORITHM_NAMES, ASTAR, BFS, DFS, GREEDY, CompareComplete, NodeExplored, PathCellDrawn, RunComplete, RunResult
from maze_session import MazeSession

logger = logging.getLogger(__name__)

ALGORITHM_COLORS = {
    BFS: (0, 212, 255),
    DFS: (255, 0, 255),
    ASTAR: (0, 255, 136),
    GREEDY: (255, 170, 0),
}

ALGORITHM_KEYS = {
    pygame.K_b: BFS,
    pygame.K_d: DFS,
    pygame.K_a: ASTAR,
    pygame.K_g: GREEDY,
}

#color schemes for visual aspects
COLORS = {
    "background": (10, 14, 39),
    "wall": (26, 31, 58),
    "floor": (15, 18, 32),
    "start": (0, 255, 102),
    "goal": (255, 51, 68),
    "path": (255, 215, 0),
    "stats": (25, 25, 25),
    "text": (235, 235, 235),
}

SPEED_STEP_MS = 25
MIN_SPEED_MS = 10
MAX_SPEED_MS = 1000


@dataclass
class PanelState:
    algorithm: str
    explored: List[Cell] = field(default_factory=list)
    explored_set: Set[Cell] = field(default_factory=set)
    path: List[Cell] = field(default_factory=list)
    result: Optional[RunResult] = None

    def stat_lines(self) -> List[str]:
        if self.result is None:
            return [
                f"{self.algorithm}",
                f"nodes: {len(self.explored_set)}",
                f"path length: {len(self.path) or '-'}",
                "time: -",
            ]
        return [
            f"{self.algorithm}",
            f"nodes: {self.result.nodes_explored}",
            f"path length: {self.result.path_length or '-'}",
            f"time: {self.result.elapsed_ms:.0f}ms",
        ]


class MazeVisualizer:

    def __init__(
        self,
        session: MazeSession,
        algorithm: str = BFS,
        tile_size=24,
        stats_height=110,
        max_cols=2,
        fps=60,
    ):
        self.session = session
        self.algorithm = algorithm
        self.tile_size = tile_size
        self.stats_height = stats_height
        self.max_cols = max_cols
        self.fps = fps
        self.panels: Dict[str, PanelState] = {}
        self.status = "ready"
        self.quit_requested = False
        self.reset_panels()
        session.subscribe(self.handle_event)

    # state

    def visible_algorithms(self) -> Tuple[str, ...]:
        return ALGORITHM_NAMES if self.session.compare_mode else (self.algorithm,)

    def reset_panels(self) -> None:
        self.panels = {name: PanelState(name) for name in ALGORITHM_NAMES}

    def handle_event(self, event) -> None:
        if isinstance(event, NodeExplored):
            panel = self.panels[event.algorithm]
            if event.cell not in panel.explored_set:
                panel.explored_set.add(event.cell)
                panel.explored.append(event.cell)
        elif isinstance(event, PathCellDrawn):
            self.panels[event.algorithm].path.append(event.cell)
        elif isinstance(event, RunComplete):
            self.panels[event.algorithm].result = event.result
            if not self.session.compare_mode:
                self.status = "no path" if not event.result.found else "done"
        elif isinstance(event, CompareComplete):
            self.status = "compare done"

    # actions

    def select_algorithm(self, algorithm: str) -> None:
        if self.session.running:
            logger.info("Run in progress, ignoring algorithm change to %s", algorithm)
            return
        self.algorithm = algorithm
        self.status = f"selected {algorithm}"

    def solve(self) -> None:
        try:
            self.session.start_run(self.algorithm)
        except ReentrancyError:
            logger.info("Run already in progress, ignoring solve request")
            return
        self.reset_panels()
        self.status = f"running {self.algorithm}"

    def toggle_compare(self) -> None:
        if self.session.running:
            logger.info("Run in progress, ignoring compare toggle")
            return
        if self.session.compare_mode:
            self.reset()
            return
        self.session.start_compare()
        self.reset_panels()
        self.status = "comparing"

    def reset(self) -> None:
        self.session.cancel()
        self.session.compare_mode = False
        self.session.results.clear()
        self.reset_panels()
        self.status = "ready"

    def new_maze(self, size: Optional[int] = None) -> None:
        try:
            self.session.new_maze(size)
        except ConfigurationError as exc:
            logger.warning("Cannot build maze: %s", exc)
            return
        self.reset_panels()
        self.status = f"new {self.session.grid_size}x{self.session.grid_size} maze"

    def change_speed(self, delta_ms: int) -> None:
        self.session.speed_ms = max(MIN_SPEED_MS, min(MAX_SPEED_MS, self.session.speed_ms + delta_ms))
        self.status = f"speed {self.session.speed_ms:.0f}ms"

    def handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.quit_requested = True
        elif key in ALGORITHM_KEYS:
            self.select_algorithm(ALGORITHM_KEYS[key])
        elif key == pygame.K_SPACE:
            self.solve()
        elif key == pygame.K_c:
            self.toggle_compare()
        elif key == pygame.K_n:
            self.new_maze()
        elif key == pygame.K_r:
            self.reset()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self.change_speed(SPEED_STEP_MS)
        elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.change_speed(-SPEED_STEP_MS)
        elif key == pygame.K_UP:
            self.new_maze(self.session.grid_size + 2)
        elif key == pygame.K_DOWN:
            self.new_maze(self.session.grid_size - 2)

    # layout

    def _compute_layout(self, grid_cols, grid_rows, num_visualizers, container_w, container_h):
        num_cols = min(self.max_cols, max(1, num_visualizers))
        num_rows = (num_visualizers + num_cols - 1) // num_cols

        usable_w = max(320, container_w - 16)
        usable_h = max(240, container_h - 16)

        tile_size = self.tile_size
        stats_height = self.stats_height
        for _ in range(4):
            max_tile_w = max(4, usable_w // (grid_cols * num_cols))
            max_tile_h = max(4, (usable_h - stats_height * num_rows) // (grid_rows * num_rows))
            tile_size = max(4, min(max_tile_w, max_tile_h))
            line_height = max(16, int(18 * tile_size / 24))
            stats_height = max(70, line_height * 5)

        view_width = grid_cols * tile_size
        panel_height = grid_rows * tile_size + stats_height
        return tile_size, stats_height, view_width, panel_height, num_cols, num_rows

    # drawing

    def _draw_panel(self, screen, font, panel: PanelState, offset_x, offset_y, tile_size, view_width, stats_height):
        grid = self.session.grid
        color = ALGORITHM_COLORS[panel.algorithm]

        #Draws semi transparent overlays for visited cells (helps visualize the algorithms working)
        def draw_alpha_rect(cell_color, cell, alpha):
            row, col = cell
            rect = pygame.Rect(offset_x + col * tile_size, offset_y + row * tile_size, tile_size, tile_size)
            overlay = pygame.Surface((rect.width, rect.height), pygame.SRCALPHA)
            overlay.fill((*cell_color, alpha))
            screen.blit(overlay, rect.topleft)

        for row, grid_row in enumerate(grid.cells):
            for col, value in enumerate(grid_row):
                rect = pygame.Rect(offset_x + col * tile_size, offset_y + row * tile_size, tile_size, tile_size)
                pygame.draw.rect(screen, COLORS["wall"] if value == WALL else COLORS["floor"], rect)

        for cell in panel.explored:
            draw_alpha_rect(color, cell, 150)
        for cell in panel.path:
            draw_alpha_rect(COLORS["path"], cell, 220)
        if panel.explored and not panel.path:
            draw_alpha_rect((255, 255, 255), panel.explored[-1], 200)

        for cell, key in ((grid.start, "start"), (grid.goal, "goal")):
            row, col = cell
            pygame.draw.rect(
                screen,
                COLORS[key],
                pygame.Rect(offset_x + col * tile_size, offset_y + row * tile_size, tile_size, tile_size),
            )

        line_height = max(16, int(18 * tile_size / 24))
        pad = 6
        stats_rect = pygame.Rect(offset_x, offset_y + grid.size * tile_size, view_width, stats_height)
        pygame.draw.rect(screen, COLORS["stats"], stats_rect)
        for i, text in enumerate(panel.stat_lines()):
            surface = font.render(text, True, color if i == 0 else COLORS["text"])
            screen.blit(surface, (stats_rect.x + pad, stats_rect.y + pad + i * line_height))

    def draw(self, screen, font) -> None:
        grid_size = self.session.grid.size
        shown = self.visible_algorithms()
        tile_size, stats_height, view_width, panel_height, num_cols, _ = self._compute_layout(
            grid_size, grid_size, len(shown), *screen.get_size()
        )
        screen.fill(COLORS["background"])
        for idx, name in enumerate(shown):
            offset_x = (idx % num_cols) * view_width
            offset_y = (idx // num_cols) * panel_height
            self._draw_panel(screen, font, self.panels[name], offset_x, offset_y, tile_size, view_width, stats_height)

    def caption(self) -> str:
        mode = "compare" if self.session.compare_mode else self.algorithm
        return f"Maze Pathfinding - {mode} - {self.status} (B/D/A/G select, SPACE solve, C compare, N new, R reset)"

    async def run(self):
        pygame.init()
        display_info = pygame.display.Info()
        default_w = max(640, int(display_info.current_w * 0.9))
        default_h = max(480, int(display_info.current_h * 0.8))
        screen = pygame.display.set_mode((default_w, default_h), pygame.RESIZABLE)
        font = pygame.font.SysFont(None, 18)
        fullscreen = False
        last_window_size = screen.get_size()

        try:
            while not self.quit_requested:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.quit_requested = True
                    elif event.type == pygame.VIDEORESIZE and not fullscreen:
                        last_window_size = (event.w, event.h)
                        screen = pygame.display.set_mode(last_window_size, pygame.RESIZABLE)
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_f:
                        fullscreen = not fullscreen
                        if fullscreen:
                            display_info = pygame.display.Info()
                            screen = pygame.display.set_mode((display_info.current_w, display_info.current_h), pygame.FULLSCREEN)
                        else:
                            screen = pygame.display.set_mode(last_window_size, pygame.RESIZABLE)
                    elif event.type == pygame.KEYDOWN:
                        self.handle_key(event.key)

                pygame.display.set_caption(self.caption())
                self.draw(screen, font)
                pygame.display.flip()

                #Sleeping (not clock.tick) lets the solver runs advance between frames
                await asyncio.sleep(1 / self.fps)
        finally:
            self.session.cancel()
            pygame.quit()

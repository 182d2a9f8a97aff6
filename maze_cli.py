#Command line entry point
#Visual mode opens the pygame viewer, cli mode runs all four solvers side by side with no pacing
#and prints their metrics

#To run the viewer: "python3 maze_cli.py --mode visual --size 21"
#To save multiple runs to a csv file: "python3 maze_cli.py --mode cli --runs 10 --csv-output results.csv"

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from maze_animation import DEFAULT_SPEED_MS, PacingConfig
from maze_gen import DEFAULT_GRID_SIZE, coerce_grid_size
from maze_search import ALGORITHM_NAMES, BFS, RunResult
from maze_session import MazeSession

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "run",
    "seed",
    "size",
    "algorithm",
    "success",
    "elapsed_ms",
    "nodes_explored",
    "path_length",
]


@dataclass
class MazeConfig:
    size: int = DEFAULT_GRID_SIZE
    seed: Optional[int] = None
    speed_ms: float = DEFAULT_SPEED_MS


def build_maze_config(args) -> MazeConfig:
    return MazeConfig(
        size=coerce_grid_size(args.size),
        seed=args.seed,
        speed_ms=args.speed,
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper()), format="%(asctime)s - %(levelname)s - %(message)s")


def run_visual_mode(args):
    from visualizer import MazeVisualizer

    config = build_maze_config(args)
    session = MazeSession(config.size, config.seed, config.speed_ms)
    viewer = MazeVisualizer(session, algorithm=args.algorithm, tile_size=args.tile_size)
    asyncio.run(viewer.run())


def compare_once(size: int, seed: int) -> Tuple[Dict[str, RunResult], MazeSession]:
    session = MazeSession(size, seed)
    results = asyncio.run(session.compare(PacingConfig.immediate()))
    return results, session


def result_row(run_idx: int, seed: int, size: int, result: RunResult) -> Dict[str, object]:
    return {
        "run": run_idx + 1,
        "seed": seed,
        "size": size,
        "algorithm": result.algorithm,
        "success": result.found,
        "elapsed_ms": f"{result.elapsed_ms:.3f}",
        "nodes_explored": result.nodes_explored,
        "path_length": result.path_length,
    }


def run_cli_mode(args) -> List[Dict[str, object]]:
    config = build_maze_config(args)
    logger.info("Running %d headless comparison(s) on %dx%d mazes", args.runs, config.size, config.size)
    rows = []
    for run_idx in range(args.runs):
        seed = config.seed + run_idx if config.seed is not None else random.randint(0, 1_000_000_000)
        results, session = compare_once(config.size, seed)
        print(f"\nRun {run_idx + 1}/{args.runs} | maze {config.size}x{config.size} | seed: {seed}")
        if args.show_maze:
            print(session.grid.render(results[BFS].path))
        for name in ALGORITHM_NAMES:
            result = results[name]
            success = "yes" if result.found else "no"
            path_length = result.path_length if result.found else "-"
            print(f"[{name}] success={success} elapsed={result.elapsed_ms:.3f}ms explored={result.nodes_explored} path_len={path_length}")
            rows.append(result_row(run_idx, seed, config.size, result))

    if args.csv_output:
        with open(args.csv_output, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            writer.writerows(rows)
        print(f"\nWrote {len(rows)} rows to {args.csv_output}")
    return rows


def prompt_for_mode():
    response = input("Run visualizer? (y/n): ").strip().lower()
    return "visual" if response.startswith("y") else "cli"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Maze generator with animated BFS/DFS/A*/Greedy solvers.")
    parser.add_argument("--mode", choices=["visual", "cli"], help="Choose 'visual' for the pygame viewer or 'cli' for text metrics.")
    parser.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE, help="Grid size in cells (even sizes are bumped to the next odd size).")
    parser.add_argument("--seed", type=int, default=None, help="Seed for maze generation (default: random).")
    parser.add_argument("--algorithm", choices=list(ALGORITHM_NAMES), default=BFS, help="Initially selected algorithm in visual mode.")
    parser.add_argument("--speed", type=float, default=DEFAULT_SPEED_MS, help="Animation speed baseline in milliseconds.")
    parser.add_argument("--runs", type=int, default=1, help="Number of mazes to run in CLI mode.")
    parser.add_argument("--csv-output", type=str, default=None, help="Path to write CSV metrics.")
    parser.add_argument("--show-maze", action="store_true", help="Print each maze with the BFS path in CLI mode.")
    parser.add_argument("--tile-size", type=int, default=24, help="Base tile size for visual mode; auto-scales to fit the screen.")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging level.")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.log_level)
    mode = args.mode or prompt_for_mode()
    if mode == "visual":
        run_visual_mode(args)
    else:
        run_cli_mode(args)


if __name__ == "__main__":
    main()

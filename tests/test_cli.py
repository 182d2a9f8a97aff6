import csv

from maze_cli import CSV_FIELDS, build_maze_config, main, parse_args, run_cli_mode
from maze_search import ALGORITHM_NAMES, BFS


def test_parse_args_defaults():
    args = parse_args([])

    assert args.mode is None
    assert args.size == 21
    assert args.seed is None
    assert args.algorithm == BFS
    assert args.speed == 150
    assert args.runs == 1
    assert args.csv_output is None
    assert not args.show_maze
    assert args.log_level == "WARNING"


def test_even_size_is_bumped_to_odd():
    config = build_maze_config(parse_args(["--size", "20", "--seed", "4"]))

    assert config.size == 21
    assert config.seed == 4


def test_tiny_size_is_raised_to_minimum():
    assert build_maze_config(parse_args(["--size", "1"])).size == 5


def test_cli_mode_writes_csv(tmp_path, capsys):
    out = tmp_path / "runs.csv"
    args = parse_args(["--mode", "cli", "--runs", "2", "--seed", "3", "--size", "11", "--csv-output", str(out)])

    rows = run_cli_mode(args)

    assert len(rows) == 2 * len(ALGORITHM_NAMES)
    assert [row["seed"] for row in rows] == [3] * 4 + [4] * 4
    assert all(row["success"] for row in rows)

    with open(out, newline="") as f:
        reader = csv.DictReader(f)
        assert reader.fieldnames == CSV_FIELDS
        written = list(reader)
    assert len(written) == 8
    assert {row["algorithm"] for row in written} == set(ALGORITHM_NAMES)

    printed = capsys.readouterr().out
    assert "Run 2/2" in printed
    assert "[A*] success=yes" in printed
    assert "Wrote 8 rows" in printed


def test_cli_mode_is_reproducible_with_a_seed():
    args = parse_args(["--mode", "cli", "--seed", "17", "--size", "15"])

    first = run_cli_mode(args)
    second = run_cli_mode(args)

    strip = lambda rows: [(r["algorithm"], r["nodes_explored"], r["path_length"]) for r in rows]
    assert strip(first) == strip(second)


def test_show_maze_prints_the_grid(capsys):
    run_cli_mode(parse_args(["--mode", "cli", "--seed", "2", "--size", "9", "--show-maze"]))

    printed = capsys.readouterr().out
    assert "S" in printed
    assert "#########" in printed


def test_main_runs_cli_mode(capsys):
    main(["--mode", "cli", "--size", "9", "--seed", "1"])

    printed = capsys.readouterr().out
    for name in ALGORITHM_NAMES:
        assert f"[{name}]" in printed

import random

import pytest

from advent_verifier.domain.entities.maze import (
    CellKind,
    Maze,
    MazeConfigurationError,
    MazeFormatError,
    MazeInvariantError,
    Move,
    Position,
)
from advent_verifier.domain.services.maze_generator import generate_maze, is_perfect_maze
from advent_verifier.domain.services.maze_move_validator import validate_moves
from advent_verifier.domain.services.maze_solver import solve_maze
from advent_verifier.domain.value_objects.maze_outcome import ReplayFailureReason

_GLYPH_TO_CELL = {"#": "wall", ".": "path", "S": "start", "E": "end"}


def _maze_from_ascii(*rows: str) -> Maze:
    return Maze.from_cell_names([[_GLYPH_TO_CELL[glyph] for glyph in row] for row in rows])


def _corridor_maze() -> Maze:
    return _maze_from_ascii(
        "#####",
        "#S..#",
        "###.#",
        "#..E#",
        "#####",
    )


@pytest.mark.parametrize(
    ("width", "height"),
    [(5, 5), (7, 5), (5, 9), (15, 11), (21, 21)],
)
@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_generated_maze_is_perfect_and_solvable(width: int, height: int, seed: int) -> None:
    generated = generate_maze(width, height, rng=random.Random(seed))
    maze = generated.maze

    assert maze.width == width
    assert maze.height == height
    assert sum(row.count(CellKind.START) for row in maze.cells) == 1
    assert sum(row.count(CellKind.END) for row in maze.cells) == 1
    assert maze.start == Position(1, 1)
    assert maze.end == Position(width - 2, height - 2)
    assert is_perfect_maze(maze)
    assert generated.solution
    assert solve_maze(maze) == generated.solution


@pytest.mark.parametrize("seed", range(10))
def test_solver_path_replays_to_the_exit_without_early_arrival(seed: int) -> None:
    generated = generate_maze(15, 11, rng=random.Random(seed))

    replay = validate_moves(generated.maze, generated.solution)

    assert replay.success
    assert replay.failure is None
    assert replay.ignored_moves == 0
    assert replay.path[-1] == generated.maze.end
    assert generated.maze.end not in replay.path[:-1]
    assert replay.steps_taken == len(generated.solution)


def test_five_by_five_maze_places_start_and_end() -> None:
    generated = generate_maze(5, 5, rng=random.Random(42))

    assert generated.maze.start == Position(1, 1)
    assert generated.maze.end == Position(3, 3)
    assert len(generated.solution) == 4


def test_generation_is_reproducible_with_the_same_seed() -> None:
    first = generate_maze(15, 11, rng=random.Random(7))
    second = generate_maze(15, 11, rng=random.Random(7))

    assert first == second


@pytest.mark.parametrize(("width", "height"), [(6, 5), (5, 8)])
def test_generate_maze_rejects_even_dimensions(width: int, height: int) -> None:
    with pytest.raises(MazeConfigurationError, match="奇数"):
        generate_maze(width, height)


def test_generate_maze_rejects_too_small_dimensions() -> None:
    with pytest.raises(MazeConfigurationError, match="5 以上"):
        generate_maze(3, 5)


def test_solver_uses_fixed_neighbor_order() -> None:
    maze = _maze_from_ascii(
        "S..",
        "...",
        "..E",
    )

    assert solve_maze(maze) == (Move.DOWN, Move.DOWN, Move.RIGHT, Move.RIGHT)


def test_solver_raises_invariant_error_when_exit_is_unreachable() -> None:
    maze = _maze_from_ascii("S#E")

    with pytest.raises(MazeInvariantError):
        solve_maze(maze)


def test_validator_succeeds_on_corridor() -> None:
    replay = validate_moves(_corridor_maze(), (Move.RIGHT, Move.RIGHT, Move.DOWN, Move.DOWN))

    assert replay.success
    assert replay.path == (
        Position(1, 1),
        Position(2, 1),
        Position(3, 1),
        Position(3, 2),
        Position(3, 3),
    )


def test_validator_ignores_moves_after_reaching_exit() -> None:
    moves = (Move.RIGHT, Move.RIGHT, Move.DOWN, Move.DOWN, Move.LEFT, Move.UP)

    replay = validate_moves(_corridor_maze(), moves)

    assert replay.success
    assert replay.ignored_moves == 2
    assert replay.path[-1] == Position(3, 3)


def test_validator_reports_wall_hit_with_step() -> None:
    replay = validate_moves(_corridor_maze(), (Move.RIGHT, Move.DOWN))

    assert not replay.success
    assert replay.failure is not None
    assert replay.failure.step == 2
    assert replay.failure.move is Move.DOWN
    assert replay.failure.reason is ReplayFailureReason.HIT_WALL
    assert replay.failure.reason.value == "hit a wall"
    assert replay.path == (Position(1, 1), Position(2, 1))


def test_validator_reports_out_of_bounds() -> None:
    maze = _maze_from_ascii(
        "S..",
        ".#.",
        "..E",
    )

    replay = validate_moves(maze, (Move.UP,))

    assert replay.failure is not None
    assert replay.failure.reason is ReplayFailureReason.OUT_OF_BOUNDS
    assert replay.failure.step == 1
    assert replay.path == (Position(0, 0),)


def test_validator_reports_unfinished_path() -> None:
    replay = validate_moves(_corridor_maze(), (Move.RIGHT,))

    assert replay.failure is not None
    assert replay.failure.reason is ReplayFailureReason.DID_NOT_REACH_EXIT
    assert replay.failure.step == 1
    assert replay.path == (Position(1, 1), Position(2, 1))


def test_maze_render_uses_contest_glyphs() -> None:
    rendering = _corridor_maze().render()

    assert rendering.splitlines() == ["█████", "█S  █", "███ █", "█  E█", "█████"]


def test_maze_round_trips_through_cell_names() -> None:
    maze = generate_maze(7, 7, rng=random.Random(3)).maze

    assert Maze.from_cell_names(maze.to_cell_names()) == maze


def test_maze_rejects_malformed_grids() -> None:
    with pytest.raises(MazeFormatError, match="未知のセル種別"):
        Maze.from_cell_names([["start", "lava", "end"]])
    with pytest.raises(MazeFormatError, match="同じ幅"):
        Maze.from_cell_names([["start", "path"], ["end"]])
    with pytest.raises(MazeFormatError, match="Start"):
        Maze.from_cell_names([["start", "start", "end"]])
    with pytest.raises(MazeFormatError, match="End"):
        Maze.from_cell_names([["start", "path"]])

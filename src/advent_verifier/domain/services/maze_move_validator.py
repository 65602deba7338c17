"""外部から渡された移動列を迷路上で 1 手ずつ再生する。"""

from __future__ import annotations

from collections.abc import Sequence

from advent_verifier.domain.entities.maze import CellKind, Maze, Move, Position
from advent_verifier.domain.value_objects.maze_outcome import (
    MazeReplay,
    ReplayFailure,
    ReplayFailureReason,
)


def validate_moves(maze: Maze, moves: Sequence[Move]) -> MazeReplay:
    """Start から移動を適用し、最初の失敗か End 到達で止まる。"""
    current = maze.start
    path: list[Position] = [current]

    for index, move in enumerate(moves):
        step = index + 1
        candidate = current.moved(move)
        if not maze.in_bounds(candidate):
            return _failed(path, step=step, move=move, reason=ReplayFailureReason.OUT_OF_BOUNDS)
        if maze.cell_at(candidate) is CellKind.WALL:
            return _failed(path, step=step, move=move, reason=ReplayFailureReason.HIT_WALL)

        current = candidate
        path.append(current)
        if current == maze.end:
            return MazeReplay(
                success=True,
                path=tuple(path),
                ignored_moves=len(moves) - step,
            )

    return _failed(
        path,
        step=len(moves),
        move=None,
        reason=ReplayFailureReason.DID_NOT_REACH_EXIT,
    )


def _failed(
    path: list[Position],
    *,
    step: int,
    move: Move | None,
    reason: ReplayFailureReason,
) -> MazeReplay:
    return MazeReplay(
        success=False,
        path=tuple(path),
        failure=ReplayFailure(step=step, reason=reason, move=move),
    )

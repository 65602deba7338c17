"""迷路の生成結果とリプレイ結果。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from advent_verifier.domain.entities.maze import Maze, Move, Position


@dataclass(frozen=True, slots=True)
class GeneratedMaze:
    """生成した迷路と BFS による最短解。"""

    maze: Maze
    solution: tuple[Move, ...]


class ReplayFailureReason(str, Enum):
    OUT_OF_BOUNDS = "out of bounds"
    HIT_WALL = "hit a wall"
    DID_NOT_REACH_EXIT = "did not reach the exit"


@dataclass(frozen=True, slots=True)
class ReplayFailure:
    """失敗したステップ (1 始まり) と理由。"""

    step: int
    reason: ReplayFailureReason
    move: Move | None = None


@dataclass(frozen=True, slots=True)
class MazeReplay:
    """移動列を迷路上で再生した結果。"""

    success: bool
    path: tuple[Position, ...]
    failure: ReplayFailure | None = None
    ignored_moves: int = 0

    def __post_init__(self) -> None:
        """成功と失敗情報の排他を検証する。"""
        if self.success == (self.failure is not None):
            raise ValueError("success のときは failure を持てず、失敗時は必須です。")
        if not self.path:
            raise ValueError("path は Start を含む 1 件以上が必要です。")
        if self.ignored_moves < 0:
            raise ValueError("ignored_moves は 0 以上である必要があります。")

    @property
    def steps_taken(self) -> int:
        return len(self.path) - 1

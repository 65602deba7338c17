"""迷路チャレンジの出題と検証を行うユースケース。"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass

from advent_verifier.domain.entities.maze import Maze, Move
from advent_verifier.domain.services.maze_generator import generate_maze
from advent_verifier.domain.services.maze_move_validator import validate_moves
from advent_verifier.domain.services.output_extractor import MOVE_VOCABULARY, extract_moves
from advent_verifier.domain.services.verdict_assembler import (
    extraction_miss_verdict,
    maze_verdict,
)
from advent_verifier.domain.value_objects.maze_outcome import MazeReplay
from advent_verifier.domain.value_objects.verdict import Verdict

DEFAULT_MAZE_WIDTH = 15
DEFAULT_MAZE_HEIGHT = 11


@dataclass(frozen=True, slots=True)
class MazeInstance:
    """ユーザーへ提示する迷路。解そのものは含めない。"""

    maze: Maze
    rendering: str
    solution_length: int


@dataclass(frozen=True, slots=True)
class MazeVerification:
    """迷路検証の結果。"""

    verdict: Verdict
    moves: tuple[Move, ...]
    replay: MazeReplay | None


class MazeChallengeUseCase:
    """迷路を生成し、モデル出力の移動列を検証する。"""

    def __init__(
        self,
        *,
        width: int = DEFAULT_MAZE_WIDTH,
        height: int = DEFAULT_MAZE_HEIGHT,
        rng: random.Random | None = None,
    ) -> None:
        """迷路サイズと乱数源を受け取る。"""
        self._width = width
        self._height = height
        self._rng = rng or random.Random()

    def create_instance(self) -> MazeInstance:
        """新しい迷路と最短解の長さを返す。"""
        generated = generate_maze(self._width, self._height, rng=self._rng)
        return MazeInstance(
            maze=generated.maze,
            rendering=generated.maze.render(),
            solution_length=len(generated.solution),
        )

    def verify(self, maze: Maze, raw_text: str) -> MazeVerification:
        """モデル出力から移動列を抽出して検証する。"""
        extraction = extract_moves(raw_text or "")
        if not extraction.found:
            return MazeVerification(
                verdict=extraction_miss_verdict(
                    MOVE_VOCABULARY,
                    subject="moves",
                    metadata={"path": [(maze.start.x, maze.start.y)]},
                ),
                moves=(),
                replay=None,
            )
        return self.verify_moves(maze, extraction.moves)

    def verify_moves(self, maze: Maze, moves: Sequence[Move]) -> MazeVerification:
        """抽出済みの移動列を検証する。"""
        move_tuple = tuple(moves)
        if not move_tuple:
            return MazeVerification(
                verdict=extraction_miss_verdict(MOVE_VOCABULARY, subject="moves"),
                moves=(),
                replay=None,
            )
        replay = validate_moves(maze, move_tuple)
        return MazeVerification(
            verdict=maze_verdict(replay, move_count=len(move_tuple)),
            moves=move_tuple,
            replay=replay,
        )

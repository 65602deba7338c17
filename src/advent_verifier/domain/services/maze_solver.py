"""BFS による迷路の最短経路探索。"""

from __future__ import annotations

import logging
from collections import deque

from advent_verifier.domain.entities.maze import Maze, MazeInvariantError, Move, Position

_LOG = logging.getLogger(__name__)

# 同じ長さの経路が複数ある場合はこの訪問順で先に見つかった経路を返す。
NEIGHBOR_ORDER: tuple[Move, ...] = (Move.UP, Move.DOWN, Move.LEFT, Move.RIGHT)


def solve_maze(maze: Maze) -> tuple[Move, ...]:
    """Start から End への最短移動列を返す。Start と End が同じなら空。"""
    start = maze.start
    end = maze.end
    if start == end:
        return ()

    parents: dict[Position, tuple[Position, Move]] = {}
    visited: set[Position] = {start}
    queue: deque[Position] = deque([start])

    while queue:
        current = queue.popleft()
        if current == end:
            return _reconstruct_path(parents, start=start, end=end)
        for move in NEIGHBOR_ORDER:
            neighbor = current.moved(move)
            if neighbor in visited or not maze.is_open(neighbor):
                continue
            visited.add(neighbor)
            parents[neighbor] = (current, move)
            queue.append(neighbor)

    _LOG.error(
        "maze has no path: size=%sx%s start=%s end=%s",
        maze.width,
        maze.height,
        start,
        end,
    )
    raise MazeInvariantError("Start から End への経路が存在しません。")


def _reconstruct_path(
    parents: dict[Position, tuple[Position, Move]],
    *,
    start: Position,
    end: Position,
) -> tuple[Move, ...]:
    moves: list[Move] = []
    current = end
    while current != start:
        previous, move = parents[current]
        moves.append(move)
        current = previous
    moves.reverse()
    return tuple(moves)

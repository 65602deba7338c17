"""再帰的バックトラッキングで完全迷路を生成する。

奇数座標をセル、偶数座標を壁とみなし、(1, 1) から未訪問の 2 マス先の
セルへ壁を掘り進める。すべての奇数セルを訪問してから終了するため、
End (W-2, H-2) は必ず到達可能になる。
"""

from __future__ import annotations

import random
from collections.abc import Iterator

from advent_verifier.domain.entities.maze import (
    CellKind,
    Maze,
    MazeConfigurationError,
    MazeInvariantError,
)
from advent_verifier.domain.services.maze_solver import solve_maze
from advent_verifier.domain.value_objects.maze_outcome import GeneratedMaze

MIN_DIMENSION = 5
_CARVE_STEPS: tuple[tuple[int, int], ...] = ((0, -2), (0, 2), (-2, 0), (2, 0))


def generate_maze(
    width: int,
    height: int,
    *,
    rng: random.Random | None = None,
) -> GeneratedMaze:
    """奇数サイズ (5 以上) の完全迷路と最短解を返す。"""
    _validate_dimension(width, field_name="width")
    _validate_dimension(height, field_name="height")
    random_source = rng or random.Random()

    grid = [[CellKind.WALL] * width for _ in range(height)]
    _carve(grid, width=width, height=height, rng=random_source)
    grid[1][1] = CellKind.START
    grid[height - 2][width - 2] = CellKind.END

    maze = Maze(cells=tuple(tuple(row) for row in grid))
    solution = solve_maze(maze)
    if not solution:
        raise MazeInvariantError("生成した迷路の解が空です。")
    return GeneratedMaze(maze=maze, solution=solution)


def is_perfect_maze(maze: Maze) -> bool:
    """開いたセルがすべて連結し、閉路を持たないかを返す。"""
    open_cells = {
        (x, y)
        for y, row in enumerate(maze.cells)
        for x, cell in enumerate(row)
        if cell is not CellKind.WALL
    }
    if not open_cells:
        return False

    edge_count = sum(
        1
        for x, y in open_cells
        for neighbor in ((x + 1, y), (x, y + 1))
        if neighbor in open_cells
    )
    # 連結な木は辺数 = 頂点数 - 1
    if edge_count != len(open_cells) - 1:
        return False

    origin = next(iter(open_cells))
    seen = {origin}
    stack = [origin]
    while stack:
        x, y = stack.pop()
        for neighbor in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if neighbor in open_cells and neighbor not in seen:
                seen.add(neighbor)
                stack.append(neighbor)
    return len(seen) == len(open_cells)


def _carve(
    grid: list[list[CellKind]],
    *,
    width: int,
    height: int,
    rng: random.Random,
) -> None:
    """明示スタックで再帰的バックトラッキングを行う。"""
    grid[1][1] = CellKind.PATH
    stack: list[tuple[int, int, Iterator[tuple[int, int]]]] = [(1, 1, _shuffled_steps(rng))]

    while stack:
        x, y, steps = stack[-1]
        for dx, dy in steps:
            nx, ny = x + dx, y + dy
            if 0 < nx < width - 1 and 0 < ny < height - 1 and grid[ny][nx] is CellKind.WALL:
                grid[y + dy // 2][x + dx // 2] = CellKind.PATH
                grid[ny][nx] = CellKind.PATH
                stack.append((nx, ny, _shuffled_steps(rng)))
                break
        else:
            stack.pop()


def _shuffled_steps(rng: random.Random) -> Iterator[tuple[int, int]]:
    steps = list(_CARVE_STEPS)
    rng.shuffle(steps)
    return iter(steps)


def _validate_dimension(value: int, *, field_name: str) -> None:
    if value < MIN_DIMENSION:
        raise MazeConfigurationError(f"{field_name} は {MIN_DIMENSION} 以上である必要があります。")
    if value % 2 == 0:
        raise MazeConfigurationError(f"{field_name} は奇数である必要があります。")

"""迷路グリッドと移動を表すエンティティ。"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum


class MazeFormatError(ValueError):
    """迷路グリッドの形式不正を表す例外。"""


class MazeConfigurationError(ValueError):
    """迷路生成パラメータの不正を表す例外。"""


class MazeInvariantError(RuntimeError):
    """生成済み迷路で到達不能など内部不変条件が破れたことを表す例外。"""


class CellKind(str, Enum):
    """迷路セルの種別。"""

    WALL = "wall"
    PATH = "path"
    START = "start"
    END = "end"


_CELL_GLYPHS: dict[CellKind, str] = {
    CellKind.WALL: "█",
    CellKind.PATH: " ",
    CellKind.START: "S",
    CellKind.END: "E",
}


class Move(str, Enum):
    """1 セル分の移動方向。"""

    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> tuple[int, int]:
        """(dx, dy) を返す。y は下向きが正。"""
        return _MOVE_DELTAS[self]


_MOVE_DELTAS: dict[Move, tuple[int, int]] = {
    Move.UP: (0, -1),
    Move.DOWN: (0, 1),
    Move.LEFT: (-1, 0),
    Move.RIGHT: (1, 0),
}


@dataclass(frozen=True, slots=True)
class Position:
    """グリッド上の座標。"""

    x: int
    y: int

    def moved(self, move: Move) -> Position:
        dx, dy = move.delta
        return Position(x=self.x + dx, y=self.y + dy)


@dataclass(frozen=True, slots=True)
class Maze:
    """生成後は不変な迷路グリッド。"""

    cells: tuple[tuple[CellKind, ...], ...]

    def __post_init__(self) -> None:
        """矩形であることと Start/End が 1 つずつであることを検証する。"""
        if not self.cells or not self.cells[0]:
            raise MazeFormatError("迷路グリッドは空にできません。")
        width = len(self.cells[0])
        if any(len(row) != width for row in self.cells):
            raise MazeFormatError("迷路グリッドの各行は同じ幅である必要があります。")

        start_count = sum(row.count(CellKind.START) for row in self.cells)
        end_count = sum(row.count(CellKind.END) for row in self.cells)
        if start_count != 1:
            raise MazeFormatError(f"Start セルはちょうど 1 つ必要です: {start_count} 件")
        if end_count != 1:
            raise MazeFormatError(f"End セルはちょうど 1 つ必要です: {end_count} 件")

    @classmethod
    def from_cell_names(cls, rows: Sequence[Sequence[str]]) -> Maze:
        """セル名 (wall/path/start/end) の 2 次元配列から迷路を復元する。"""
        parsed_rows: list[tuple[CellKind, ...]] = []
        for y, row in enumerate(rows):
            if isinstance(row, str):
                raise MazeFormatError(f"rows[{y}] はセル名の配列である必要があります。")
            parsed_row: list[CellKind] = []
            for x, name in enumerate(row):
                try:
                    parsed_row.append(CellKind(str(name).strip().lower()))
                except ValueError as exc:
                    raise MazeFormatError(f"未知のセル種別です: ({x}, {y}) = {name!r}") from exc
            parsed_rows.append(tuple(parsed_row))
        return cls(cells=tuple(parsed_rows))

    @property
    def width(self) -> int:
        return len(self.cells[0])

    @property
    def height(self) -> int:
        return len(self.cells)

    @property
    def start(self) -> Position:
        return self._locate(CellKind.START)

    @property
    def end(self) -> Position:
        return self._locate(CellKind.END)

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.x < self.width and 0 <= position.y < self.height

    def cell_at(self, position: Position) -> CellKind:
        """座標のセル種別を返す。範囲外は IndexError。"""
        if not self.in_bounds(position):
            raise IndexError(f"座標が迷路の範囲外です: ({position.x}, {position.y})")
        return self.cells[position.y][position.x]

    def is_open(self, position: Position) -> bool:
        """範囲内かつ壁でないかを返す。"""
        return self.in_bounds(position) and self.cell_at(position) is not CellKind.WALL

    def to_cell_names(self) -> list[list[str]]:
        return [[cell.value for cell in row] for row in self.cells]

    def render(self) -> str:
        """モデルへ提示する文字列表現を返す。"""
        return "\n".join("".join(_CELL_GLYPHS[cell] for cell in row) for row in self.cells)

    def _locate(self, kind: CellKind) -> Position:
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                if cell is kind:
                    return Position(x=x, y=y)
        raise MazeFormatError(f"{kind.value} セルが見つかりません。")

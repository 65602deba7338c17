"""自由記述テキストから抽出した構造化結果。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from advent_verifier.domain.entities.economy import ToolCall
from advent_verifier.domain.entities.maze import Move


class ValueStatus(str, Enum):
    """単一値抽出の状態。"""

    FOUND = "found"
    NOT_A_VALUE = "not_a_value"
    NO_VALUE = "no_value"


@dataclass(frozen=True, slots=True)
class MoveExtraction:
    """出現順の移動列。"""

    moves: tuple[Move, ...]

    @property
    def found(self) -> bool:
        return bool(self.moves)


@dataclass(frozen=True, slots=True)
class ToolCallExtraction:
    """ツール呼び出し列と、採用された抽出戦略名。"""

    calls: tuple[ToolCall, ...]
    strategy: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.calls)


@dataclass(frozen=True, slots=True)
class NumericExtraction:
    """数値出力の抽出結果。"""

    status: ValueStatus
    value: float | None = None
    raw: str | None = None

    def __post_init__(self) -> None:
        """FOUND のときだけ value を持つことを検証する。"""
        if (self.status is ValueStatus.FOUND) != (self.value is not None):
            raise ValueError("value は status が FOUND のときだけ設定できます。")

    @property
    def found(self) -> bool:
        return self.status is ValueStatus.FOUND


@dataclass(frozen=True, slots=True)
class BooleanExtraction:
    """真偽値出力の抽出結果。"""

    status: ValueStatus
    value: bool | None = None
    raw: str | None = None

    def __post_init__(self) -> None:
        """FOUND のときだけ value を持つことを検証する。"""
        if (self.status is ValueStatus.FOUND) != (self.value is not None):
            raise ValueError("value は status が FOUND のときだけ設定できます。")

    @property
    def found(self) -> bool:
        return self.status is ValueStatus.FOUND

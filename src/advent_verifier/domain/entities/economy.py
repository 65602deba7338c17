"""ツール経済シミュレーションのエンティティ。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ToolCall(str, Enum):
    """経済シミュレーションで使える 5 つの操作。"""

    GATHER = "gather"
    MULTIPLY = "multiply"
    BUILD = "build"
    ALLOCATE = "allocate"
    DESTROY = "destroy"


TOOL_NAMES: tuple[str, ...] = tuple(tool.value for tool in ToolCall)


@dataclass(frozen=True, slots=True)
class EconomySnapshot:
    """1 ステップ実行後のカウンタ値。"""

    materials: int
    built_things: int
    allocated: bool
    portions: int
    gather_count: int
    destroy_count: int


@dataclass(frozen=True, slots=True)
class EconomyStep:
    """トレースの 1 エントリ。"""

    step: int
    token: str
    accepted: bool
    message: str
    snapshot: EconomySnapshot


@dataclass(frozen=True, slots=True)
class EconomyHalt:
    """シミュレーションを停止させた違反。"""

    step: int
    token: str
    reason: str


@dataclass(frozen=True, slots=True)
class EconomyState:
    """ツール経済の状態。1 回の解釈ごとに新規作成される。"""

    materials: int = 0
    built_things: int = 1
    allocated: bool = False
    portions: int = 0
    gather_count: int = 0
    destroy_count: int = 0
    error: EconomyHalt | None = None
    trace: tuple[EconomyStep, ...] = ()

    def __post_init__(self) -> None:
        """カウンタが非負であることを検証する。"""
        for field_name in (
            "materials",
            "built_things",
            "portions",
            "gather_count",
            "destroy_count",
        ):
            if getattr(self, field_name) < 0:
                raise ValueError(f"{field_name} は 0 以上である必要があります。")

    @classmethod
    def initial(cls) -> EconomyState:
        """壊れた遺物 1 つだけを持つ初期状態を返す。"""
        return cls()

    @property
    def halted(self) -> bool:
        return self.error is not None

    def snapshot(self) -> EconomySnapshot:
        return EconomySnapshot(
            materials=self.materials,
            built_things=self.built_things,
            allocated=self.allocated,
            portions=self.portions,
            gather_count=self.gather_count,
            destroy_count=self.destroy_count,
        )

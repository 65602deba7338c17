"""検証結果として外部へ渡す値オブジェクト群。"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ChecklistItem:
    """ルールチェックリストの 1 項目。"""

    name: str
    passed: bool
    weight: int
    detail: str = ""

    def __post_init__(self) -> None:
        """項目名と配点を検証する。"""
        if not self.name:
            raise ValueError("name は空にできません。")
        _validate_score_range(self.weight, field_name="weight")


@dataclass(frozen=True, slots=True)
class Verdict:
    """全チャレンジ共通の判定結果。"""

    passed: bool
    score: int
    rationale: str
    checklist: tuple[ChecklistItem, ...] = ()
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """スコア範囲と合否の整合性を検証する。"""
        _validate_score_range(self.score, field_name="score")
        if not self.rationale:
            raise ValueError("rationale は空にできません。")
        if self.passed and self.checklist and not all(item.passed for item in self.checklist):
            raise ValueError("未達成のチェック項目がある場合 passed にはできません。")


def _validate_score_range(score: int, *, field_name: str) -> None:
    if not 0 <= score <= 100:
        raise ValueError(f"{field_name} は 0 から 100 の範囲である必要があります。")

"""シミュレーションを伴わない直接比較チャレンジの要件定義。"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class KeywordRequirement:
    """いずれかの表記が出力に含まれれば満たされる 1 要件。"""

    label: str
    alternatives: tuple[str, ...]
    weight: int

    def __post_init__(self) -> None:
        """表記候補と配点を検証する。"""
        if not self.label:
            raise ValueError("label は空にできません。")
        if not self.alternatives or any(not item.strip() for item in self.alternatives):
            raise ValueError("alternatives は空でない文字列を 1 件以上含む必要があります。")
        if not 0 <= self.weight <= 100:
            raise ValueError("weight は 0 から 100 の範囲である必要があります。")

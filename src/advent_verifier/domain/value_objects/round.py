"""ラウンド制推測ゲームの値オブジェクト。"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RoundContext:
    """試行回数から導出したラウンド情報。保存せず毎回再計算する。"""

    identity: int
    attempt_index: int
    round_size: int
    round_index: int
    secret: str
    attempts_used_in_round: int
    attempts_remaining_in_round: int

    def __post_init__(self) -> None:
        """試行回数とラウンドの整合性を検証する。"""
        if self.attempt_index < 0:
            raise ValueError("attempt_index は 0 以上である必要があります。")
        if self.round_size < 1:
            raise ValueError("round_size は 1 以上である必要があります。")
        if self.round_index != self.attempt_index // self.round_size:
            raise ValueError("round_index が attempt_index と一致しません。")
        if self.attempts_used_in_round + self.attempts_remaining_in_round != self.round_size:
            raise ValueError("ラウンド内の使用数と残数の合計が round_size と一致しません。")

    @property
    def starts_new_round(self) -> bool:
        """この試行が 2 ラウンド目以降の先頭かを返す。"""
        return self.attempts_used_in_round == 0 and self.round_index > 0

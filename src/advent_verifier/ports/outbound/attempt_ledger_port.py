"""推測ゲームの試行回数台帳の契約。"""

from __future__ import annotations

from typing import Protocol


class AttemptLedgerPort(Protocol):
    """identity ごとの試行回数とラウンド勝利を保持する抽象ポート。

    読み取りと加算の直列化は実装側の責務とする。
    """

    def begin_attempt(self, identity: int) -> int:
        """試行を 1 件記録し、記録前の試行回数を返す。"""

    def has_won_round(self, identity: int, round_index: int) -> bool:
        """指定ラウンドが勝利済みかを返す。"""

    def claim_round_win(self, identity: int, round_index: int) -> bool:
        """未勝利なら勝利を記録して True、勝利済みなら False を返す。"""

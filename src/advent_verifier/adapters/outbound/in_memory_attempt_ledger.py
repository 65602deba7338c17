"""プロセス内で試行回数を保持する台帳アダプタ。"""

from __future__ import annotations

import threading
from collections import defaultdict

from advent_verifier.ports.outbound.attempt_ledger_port import AttemptLedgerPort


class InMemoryAttemptLedgerAdapter(AttemptLedgerPort):
    """ロックで読み取りと加算を直列化する簡易台帳。"""

    def __init__(self) -> None:
        """空の台帳を初期化する。"""
        self._lock = threading.Lock()
        self._attempts: dict[int, int] = defaultdict(int)
        self._won_rounds: dict[int, set[int]] = defaultdict(set)

    def attempt_count(self, identity: int) -> int:
        with self._lock:
            return self._attempts[identity]

    def begin_attempt(self, identity: int) -> int:
        """試行を 1 件記録し、記録前の試行回数を返す。"""
        with self._lock:
            prior_attempts = self._attempts[identity]
            self._attempts[identity] = prior_attempts + 1
            return prior_attempts

    def has_won_round(self, identity: int, round_index: int) -> bool:
        with self._lock:
            return round_index in self._won_rounds[identity]

    def claim_round_win(self, identity: int, round_index: int) -> bool:
        """勝利済み判定と記録を 1 つのロック内で行う。"""
        with self._lock:
            won_rounds = self._won_rounds[identity]
            if round_index in won_rounds:
                return False
            won_rounds.add(round_index)
            return True

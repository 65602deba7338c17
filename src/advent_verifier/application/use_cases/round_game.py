"""ラウンド制の単語推測ゲームを判定するユースケース。"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from advent_verifier.domain.services.round_deriver import (
    DEFAULT_ROUND_SIZE,
    DEFAULT_WORD_POOL,
    derive_round,
    guess_matches,
)
from advent_verifier.domain.services.verdict_assembler import checklist_verdict
from advent_verifier.domain.value_objects.round import RoundContext
from advent_verifier.domain.value_objects.verdict import ChecklistItem, Verdict
from advent_verifier.ports.outbound.attempt_ledger_port import AttemptLedgerPort

_LOG = logging.getLogger(__name__)


class AttemptLedgerNotConfiguredError(RuntimeError):
    """台帳なしで記録付きプレイを呼んだ場合の例外。"""


@dataclass(frozen=True, slots=True)
class RoundGameOutcome:
    """1 試行分の判定結果。"""

    verdict: Verdict
    round_index: int
    attempts_remaining: int
    new_round_started: bool
    round_exhausted: bool
    revealed_secret: str | None


class RoundGameUseCase:
    """試行回数から秘密の単語を導出して推測を判定する。"""

    def __init__(
        self,
        *,
        round_size: int = DEFAULT_ROUND_SIZE,
        pool: Sequence[str] = DEFAULT_WORD_POOL,
        attempt_ledger: AttemptLedgerPort | None = None,
    ) -> None:
        """ラウンドサイズ・単語プールと任意の試行台帳を受け取る。"""
        if round_size < 1:
            raise ValueError("round_size は 1 以上である必要があります。")
        if not pool:
            raise ValueError("pool は 1 件以上必要です。")
        self._round_size = round_size
        self._pool = tuple(pool)
        self._attempt_ledger = attempt_ledger

    def play(
        self,
        *,
        identity: int,
        prior_attempts: int,
        guess_text: str,
        round_already_won: bool = False,
    ) -> RoundGameOutcome:
        """外部から渡された試行回数だけを使って 1 試行を判定する。"""
        context = derive_round(
            identity,
            prior_attempts,
            round_size=self._round_size,
            pool=self._pool,
        )
        if context.starts_new_round:
            _LOG.info(
                "new round started: identity=%s round_index=%s",
                identity,
                context.round_index,
            )

        attempts_remaining = context.attempts_remaining_in_round - 1
        if round_already_won:
            return self._already_won_outcome(context, attempts_remaining=attempts_remaining)

        guessed = guess_matches(context.secret, guess_text or "")
        round_exhausted = not guessed and attempts_remaining == 0
        revealed_secret = context.secret if guessed or round_exhausted else None

        if guessed:
            headline = f"Correct! The secret word was '{context.secret}'."
        elif round_exhausted:
            headline = (
                f"Out of attempts. The secret word was '{context.secret}'. "
                "A new word is chosen for the next round."
            )
        else:
            headline = f"Not quite. {attempts_remaining} attempts left in this round."

        verdict = checklist_verdict(
            (
                ChecklistItem(
                    name="guessed the secret word",
                    passed=guessed,
                    weight=100,
                    detail=f"attempt {context.attempts_used_in_round + 1} of {self._round_size}",
                ),
            ),
            headline=headline,
            metadata={"round_index": context.round_index},
        )
        return RoundGameOutcome(
            verdict=verdict,
            round_index=context.round_index,
            attempts_remaining=attempts_remaining,
            new_round_started=context.starts_new_round,
            round_exhausted=round_exhausted,
            revealed_secret=revealed_secret,
        )

    def play_recorded(self, *, identity: int, guess_text: str) -> RoundGameOutcome:
        """台帳で試行を記録してから判定し、勝利は 1 ラウンド 1 回だけ認める。"""
        if self._attempt_ledger is None:
            raise AttemptLedgerNotConfiguredError("attempt_ledger が設定されていません。")

        prior_attempts = self._attempt_ledger.begin_attempt(identity)
        round_index = prior_attempts // self._round_size
        outcome = self.play(
            identity=identity,
            prior_attempts=prior_attempts,
            guess_text=guess_text,
            round_already_won=self._attempt_ledger.has_won_round(identity, round_index),
        )
        if outcome.verdict.passed and not self._attempt_ledger.claim_round_win(
            identity, round_index
        ):
            _LOG.info(
                "duplicate round win ignored: identity=%s round_index=%s",
                identity,
                round_index,
            )
            return self.play(
                identity=identity,
                prior_attempts=prior_attempts,
                guess_text=guess_text,
                round_already_won=True,
            )
        return outcome

    def _already_won_outcome(
        self,
        context: RoundContext,
        *,
        attempts_remaining: int,
    ) -> RoundGameOutcome:
        verdict = checklist_verdict(
            (
                ChecklistItem(
                    name="round not yet won",
                    passed=False,
                    weight=0,
                    detail=f"round {context.round_index} was already won",
                ),
            ),
            headline=(
                f"This round was already won with '{context.secret}'. "
                "No additional credit is awarded."
            ),
            metadata={"round_index": context.round_index, "already_won": True},
        )
        return RoundGameOutcome(
            verdict=verdict,
            round_index=context.round_index,
            attempts_remaining=attempts_remaining,
            new_round_started=context.starts_new_round,
            round_exhausted=attempts_remaining == 0,
            revealed_secret=context.secret,
        )

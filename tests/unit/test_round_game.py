import threading

import pytest

from advent_verifier.adapters.outbound.in_memory_attempt_ledger import (
    InMemoryAttemptLedgerAdapter,
)
from advent_verifier.application.use_cases.round_game import (
    AttemptLedgerNotConfiguredError,
    RoundGameUseCase,
)


def _use_case(**kwargs) -> RoundGameUseCase:
    return RoundGameUseCase(pool=("bell",), **kwargs)


def test_correct_guess_reveals_secret() -> None:
    outcome = _use_case().play(identity=1, prior_attempts=0, guess_text="Is it a BELL?")

    assert outcome.verdict.passed
    assert outcome.verdict.score == 100
    assert outcome.revealed_secret == "bell"
    assert outcome.attempts_remaining == 4
    assert outcome.round_index == 0
    assert not outcome.new_round_started


def test_wrong_guess_mid_round_keeps_secret_hidden() -> None:
    outcome = _use_case().play(identity=1, prior_attempts=2, guess_text="candle")

    assert not outcome.verdict.passed
    assert outcome.verdict.score == 0
    assert outcome.revealed_secret is None
    assert outcome.attempts_remaining == 2
    assert not outcome.round_exhausted
    assert outcome.verdict.rationale.startswith("Not quite. 2 attempts left")


def test_last_wrong_guess_exhausts_round_and_reveals_secret() -> None:
    outcome = _use_case().play(identity=1, prior_attempts=4, guess_text="candle")

    assert outcome.round_exhausted
    assert outcome.attempts_remaining == 0
    assert outcome.revealed_secret == "bell"
    assert outcome.verdict.rationale.startswith("Out of attempts.")


def test_first_attempt_after_round_size_starts_new_round() -> None:
    outcome = _use_case().play(identity=1, prior_attempts=5, guess_text="candle")

    assert outcome.new_round_started
    assert outcome.round_index == 1
    assert outcome.attempts_remaining == 4


def test_play_is_repeatable_for_the_same_inputs() -> None:
    use_case = RoundGameUseCase()

    first = use_case.play(identity=77, prior_attempts=3, guess_text="reindeer")
    second = use_case.play(identity=77, prior_attempts=3, guess_text="reindeer")

    assert first == second


def test_round_win_is_credited_once_per_round() -> None:
    use_case = _use_case(attempt_ledger=InMemoryAttemptLedgerAdapter())

    first = use_case.play_recorded(identity=3, guess_text="bell")
    second = use_case.play_recorded(identity=3, guess_text="bell")

    assert first.verdict.passed
    assert not second.verdict.passed
    assert second.verdict.score == 0
    assert second.verdict.metadata["already_won"] is True

    for _ in range(3):
        use_case.play_recorded(identity=3, guess_text="candle")
    next_round = use_case.play_recorded(identity=3, guess_text="bell")

    assert next_round.round_index == 1
    assert next_round.new_round_started
    assert next_round.verdict.passed


def test_play_recorded_requires_a_ledger() -> None:
    with pytest.raises(AttemptLedgerNotConfiguredError):
        _use_case().play_recorded(identity=1, guess_text="bell")


def test_use_case_rejects_invalid_configuration() -> None:
    with pytest.raises(ValueError, match="round_size"):
        RoundGameUseCase(round_size=0)
    with pytest.raises(ValueError, match="pool"):
        RoundGameUseCase(pool=())


def test_ledger_hands_out_unique_attempt_counts_across_threads() -> None:
    ledger = InMemoryAttemptLedgerAdapter()
    seen: list[int] = []
    seen_lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            prior = ledger.begin_attempt(9)
            with seen_lock:
                seen.append(prior)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(seen) == list(range(400))
    assert ledger.attempt_count(9) == 400


def test_ledger_claims_a_round_win_exactly_once_across_threads() -> None:
    ledger = InMemoryAttemptLedgerAdapter()
    results: list[bool] = []
    results_lock = threading.Lock()

    def worker() -> None:
        claimed = ledger.claim_round_win(4, 0)
        with results_lock:
            results.append(claimed)

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert ledger.has_won_round(4, 0)
    assert not ledger.has_won_round(4, 1)


def test_exhausted_round_is_followed_by_a_different_secret() -> None:
    use_case = RoundGameUseCase()

    for identity in range(50):
        exhausted = use_case.play(identity=identity, prior_attempts=4, guess_text="")
        revealed = exhausted.revealed_secret
        next_round = use_case.play(identity=identity, prior_attempts=5, guess_text=revealed)

        assert exhausted.round_exhausted
        assert not next_round.verdict.passed

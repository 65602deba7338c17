"""抽出結果とドメイン判定を共通の Verdict にまとめる。

score は満たしたチェック項目の配点合計、passed はチェックリストから
導出する。個別に設定することはない。
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence

from advent_verifier.domain.entities.economy import EconomyState
from advent_verifier.domain.value_objects.comparison import KeywordRequirement
from advent_verifier.domain.value_objects.extraction import NumericExtraction, ValueStatus
from advent_verifier.domain.value_objects.maze_outcome import MazeReplay, ReplayFailureReason
from advent_verifier.domain.value_objects.verdict import ChecklistItem, Verdict

_LOG = logging.getLogger(__name__)

# 満点は passed のときだけ
MAX_FAILING_SCORE = 99


def extraction_miss_verdict(
    expected_vocabulary: Sequence[str],
    *,
    subject: str,
    metadata: Mapping[str, object] | None = None,
) -> Verdict:
    """何も抽出できなかった場合の 0 点判定を返す。"""
    vocabulary = ", ".join(expected_vocabulary)
    _LOG.info("extraction miss: subject=%s", subject)
    return Verdict(
        passed=False,
        score=0,
        rationale=(
            f"No {subject} could be found in the output. "
            f"Expected any of: {vocabulary}."
        ),
        metadata={"extraction_miss": True, **(metadata or {})},
    )


def checklist_verdict(
    items: Sequence[ChecklistItem],
    *,
    headline: str | None = None,
    halted_reason: str | None = None,
    extra_lines: Sequence[str] = (),
    metadata: Mapping[str, object] | None = None,
) -> Verdict:
    """チェックリストから score と passed を導出する。"""
    checklist = tuple(items)
    if not checklist:
        raise ValueError("items は 1 件以上必要です。")

    score = min(100, sum(item.weight for item in checklist if item.passed))
    passed = halted_reason is None and all(item.passed for item in checklist)
    if not passed:
        score = min(score, MAX_FAILING_SCORE)

    lines: list[str] = []
    if headline:
        lines.append(headline)
    if halted_reason:
        lines.append(f"Stopped early: {halted_reason}")
        if all(item.passed for item in checklist):
            lines.append(
                "Every rule holds on the final state; the rejected step is the only failure."
            )
    for item in checklist:
        marker = "PASS" if item.passed else "FAIL"
        suffix = f" ({item.detail})" if item.detail else ""
        lines.append(f"[{marker}] {item.name}{suffix}")
    lines.extend(extra_lines)

    _LOG.info(
        "verdict assembled: passed=%s score=%s items=%s",
        passed,
        score,
        len(checklist),
    )
    return Verdict(
        passed=passed,
        score=score,
        rationale="\n".join(lines),
        checklist=checklist,
        metadata=dict(metadata or {}),
    )


def maze_verdict(replay: MazeReplay, *, move_count: int) -> Verdict:
    """迷路リプレイ結果を 100/0 の判定にする。"""
    failure = replay.failure
    if failure is None:
        headline = f"Maze solved! Reached the exit in {replay.steps_taken} moves."
        if replay.ignored_moves:
            headline += f" {replay.ignored_moves} trailing moves were ignored."
    elif failure.reason is ReplayFailureReason.DID_NOT_REACH_EXIT:
        headline = (
            f"The path {failure.reason.value} after {failure.step} moves. Need more moves!"
        )
    else:
        move_name = failure.move.value if failure.move is not None else "?"
        headline = f"Move {failure.step} ({move_name}) {failure.reason.value}."

    metadata: dict[str, object] = {
        "move_count": move_count,
        "path": [(position.x, position.y) for position in replay.path],
        "failure_step": failure.step if failure else None,
        "failure_reason": failure.reason.value if failure else None,
    }
    return checklist_verdict(
        (
            ChecklistItem(
                name="reached the exit",
                passed=replay.success,
                weight=100,
                detail=f"walked {replay.steps_taken} of {move_count} moves",
            ),
        ),
        headline=headline,
        metadata=metadata,
    )


def economy_verdict(state: EconomyState, checklist: Sequence[ChecklistItem]) -> Verdict:
    """経済シミュレーションの最終状態とトレースから判定を作る。"""
    trace_lines = ["Operation trace:"]
    for entry in state.trace:
        status = "ok" if entry.accepted else "rejected"
        snapshot = entry.snapshot
        trace_lines.append(
            f"  {entry.step}. {entry.token} -> {status}: {entry.message} "
            f"[materials={snapshot.materials}, built={snapshot.built_things}, "
            f"portions={snapshot.portions}, gathers={snapshot.gather_count}, "
            f"destroys={snapshot.destroy_count}]"
        )

    halted_reason = None
    if state.error is not None:
        halted_reason = (
            f"step {state.error.step} ({state.error.token}) rejected: {state.error.reason}"
        )
    return checklist_verdict(
        checklist,
        halted_reason=halted_reason,
        extra_lines=trace_lines,
        metadata={
            "halted_at_step": state.error.step if state.error else None,
            "operations": [entry.token for entry in state.trace],
        },
    )


def numeric_verdict(
    extraction: NumericExtraction,
    *,
    expected: float,
    tolerance: float = 1e-9,
) -> Verdict:
    """数値出力と期待値を比較する。値なし・非数値は誤答と区別して説明する。"""
    if extraction.status is ValueStatus.NO_VALUE:
        detail = "the program produced no value"
    elif extraction.status is ValueStatus.NOT_A_VALUE:
        detail = f"output {extraction.raw!r} is not a number"
    else:
        detail = f"expected {_format_number(expected)}, got {_format_number(extraction.value)}"

    matched = extraction.value is not None and math.isclose(
        extraction.value, expected, rel_tol=0.0, abs_tol=tolerance
    )
    return checklist_verdict(
        (
            ChecklistItem(
                name="produced the expected value",
                passed=matched,
                weight=100,
                detail=detail,
            ),
        ),
        metadata={"status": extraction.status.value, "value": extraction.value},
    )


def keyword_verdict(text: str, requirements: Sequence[KeywordRequirement]) -> Verdict:
    """重み付きキーワード要件ごとの部分点で判定する。"""
    normalized = text.upper()
    items = tuple(
        ChecklistItem(
            name=f"mentions {requirement.label}",
            passed=any(
                alternative.upper() in normalized for alternative in requirement.alternatives
            ),
            weight=requirement.weight,
        )
        for requirement in requirements
    )
    found = [requirement.label for requirement, item in zip(requirements, items) if item.passed]
    missing = [
        requirement.label for requirement, item in zip(requirements, items) if not item.passed
    ]
    return checklist_verdict(
        items,
        extra_lines=(
            f"Found: {', '.join(found) or 'nothing yet'}",
            f"Missing: {', '.join(missing) or 'nothing'}",
        ),
        metadata={"found": found, "missing": missing},
    )


def _format_number(value: float | None) -> str:
    if value is None:
        return "nothing"
    if float(value).is_integer():
        return str(int(value))
    return str(value)

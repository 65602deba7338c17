"""5 操作のツール経済を実行し、最初の違反で停止するインタプリタ。"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace

from advent_verifier.domain.entities.economy import (
    EconomyHalt,
    EconomyState,
    EconomyStep,
    ToolCall,
)
from advent_verifier.domain.value_objects.verdict import ChecklistItem

GATHER_LIMIT = 3
BUILD_COST = 5
ALLOCATED_PORTIONS = 4
TARGET_BUILT_THINGS = 1
TARGET_DESTROY_COUNT = 1
CHECKLIST_ITEM_WEIGHT = 20


class EconomyRuleViolation(Exception):
    """1 ステップの実行が拒否されたことを表す内部例外。"""


def run_economy(calls: Sequence[ToolCall | str]) -> EconomyState:
    """初期状態から順に操作を適用し、最終状態とトレースを返す。"""
    state = EconomyState.initial()
    trace: list[EconomyStep] = []

    for index, raw_call in enumerate(calls):
        step = index + 1
        token = raw_call.value if isinstance(raw_call, ToolCall) else str(raw_call)
        try:
            tool = _resolve_tool(token)
            state, message = _OPERATIONS[tool](state)
        except EconomyRuleViolation as exc:
            reason = str(exc)
            trace.append(
                EconomyStep(
                    step=step,
                    token=token,
                    accepted=False,
                    message=reason,
                    snapshot=state.snapshot(),
                )
            )
            return replace(
                state,
                error=EconomyHalt(step=step, token=token, reason=reason),
                trace=tuple(trace),
            )

        trace.append(
            EconomyStep(
                step=step,
                token=tool.value,
                accepted=True,
                message=message,
                snapshot=state.snapshot(),
            )
        )

    return replace(state, trace=tuple(trace))


def evaluate_economy(state: EconomyState) -> tuple[ChecklistItem, ...]:
    """最終状態に対する 5 つのチェック項目を固定順で返す。"""
    return (
        ChecklistItem(
            name="exactly one built thing",
            passed=state.built_things == TARGET_BUILT_THINGS,
            weight=CHECKLIST_ITEM_WEIGHT,
            detail=f"built things = {state.built_things}",
        ),
        ChecklistItem(
            name="no loose materials",
            passed=state.materials == 0,
            weight=CHECKLIST_ITEM_WEIGHT,
            detail=f"materials = {state.materials}",
        ),
        ChecklistItem(
            name="allocated into 4 portions",
            passed=state.allocated and state.portions == ALLOCATED_PORTIONS,
            weight=CHECKLIST_ITEM_WEIGHT,
            detail=f"allocated = {state.allocated}, portions = {state.portions}",
        ),
        ChecklistItem(
            name="gathered at most 3 times",
            passed=state.gather_count <= GATHER_LIMIT,
            weight=CHECKLIST_ITEM_WEIGHT,
            detail=f"gathers = {state.gather_count}",
        ),
        ChecklistItem(
            name="destroyed exactly one item",
            passed=state.destroy_count == TARGET_DESTROY_COUNT,
            weight=CHECKLIST_ITEM_WEIGHT,
            detail=f"destroys = {state.destroy_count}",
        ),
    )


def _resolve_tool(token: str) -> ToolCall:
    try:
        return ToolCall(token.strip().lower())
    except ValueError as exc:
        raise EconomyRuleViolation(f"unknown tool '{token}'") from exc


def _gather(state: EconomyState) -> tuple[EconomyState, str]:
    if state.gather_count >= GATHER_LIMIT:
        raise EconomyRuleViolation("gather limit exceeded")
    return (
        replace(state, materials=state.materials + 1, gather_count=state.gather_count + 1),
        "gathered 1 material",
    )


def _multiply(state: EconomyState) -> tuple[EconomyState, str]:
    if state.materials < 1:
        raise EconomyRuleViolation("multiply needs at least 1 material")
    return replace(state, materials=state.materials - 1 + 2), "turned 1 material into 2"


def _build(state: EconomyState) -> tuple[EconomyState, str]:
    if state.materials < BUILD_COST:
        raise EconomyRuleViolation(f"build needs {BUILD_COST} materials, have {state.materials}")
    return (
        replace(
            state,
            materials=state.materials - BUILD_COST,
            built_things=state.built_things + 1,
        ),
        f"built 1 thing from {BUILD_COST} materials",
    )


def _allocate(state: EconomyState) -> tuple[EconomyState, str]:
    if state.allocated:
        raise EconomyRuleViolation("already allocated")
    if state.built_things < 1:
        raise EconomyRuleViolation("nothing built to allocate")
    return (
        replace(state, allocated=True, portions=ALLOCATED_PORTIONS),
        f"allocated into {ALLOCATED_PORTIONS} portions",
    )


def _destroy(state: EconomyState) -> tuple[EconomyState, str]:
    destroy_count = state.destroy_count + 1
    if state.built_things > 0:
        return (
            replace(state, built_things=state.built_things - 1, destroy_count=destroy_count),
            "destroyed 1 built thing",
        )
    if state.materials > 0:
        return (
            replace(state, materials=state.materials - 1, destroy_count=destroy_count),
            "destroyed 1 material",
        )
    raise EconomyRuleViolation("nothing to destroy")


_OPERATIONS: dict[ToolCall, Callable[[EconomyState], tuple[EconomyState, str]]] = {
    ToolCall.GATHER: _gather,
    ToolCall.MULTIPLY: _multiply,
    ToolCall.BUILD: _build,
    ToolCall.ALLOCATE: _allocate,
    ToolCall.DESTROY: _destroy,
}

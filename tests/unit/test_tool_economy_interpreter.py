import pytest

from advent_verifier.domain.entities.economy import EconomyState, ToolCall
from advent_verifier.domain.services.tool_economy_interpreter import (
    evaluate_economy,
    run_economy,
)

G, M, B, A, D = (
    ToolCall.GATHER,
    ToolCall.MULTIPLY,
    ToolCall.BUILD,
    ToolCall.ALLOCATE,
    ToolCall.DESTROY,
)

_WINNING_SEQUENCE = (G, G, G, M, M, B, D, A)


def test_initial_state_holds_one_broken_relic() -> None:
    state = EconomyState.initial()

    assert state.materials == 0
    assert state.built_things == 1
    assert state.allocated is False
    assert state.portions == 0
    assert state.gather_count == 0
    assert state.destroy_count == 0
    assert state.error is None
    assert state.trace == ()


def test_winning_sequence_satisfies_every_rule() -> None:
    state = run_economy(_WINNING_SEQUENCE)

    assert state.error is None
    assert state.materials == 0
    assert state.built_things == 1
    assert state.allocated is True
    assert state.portions == 4
    assert state.gather_count == 3
    assert state.destroy_count == 1
    assert len(state.trace) == 8
    assert all(entry.accepted for entry in state.trace)
    assert all(item.passed for item in evaluate_economy(state))


def test_fourth_gather_halts_the_simulation() -> None:
    state = run_economy((G, G, G, G, B, A))

    assert state.halted
    assert state.error is not None
    assert state.error.step == 4
    assert state.error.reason == "gather limit exceeded"
    assert state.materials == 3
    assert state.gather_count == 3
    assert state.allocated is False
    assert len(state.trace) == 4
    assert state.trace[-1].accepted is False


def test_multiply_requires_a_material() -> None:
    state = run_economy((M,))

    assert state.error is not None
    assert state.error.step == 1
    assert "multiply needs" in state.error.reason


def test_multiply_nets_one_material() -> None:
    state = run_economy((G, M, M))

    assert state.materials == 3


def test_build_requires_five_materials() -> None:
    state = run_economy((G, G, B))

    assert state.error is not None
    assert state.error.step == 3
    assert state.error.reason == "build needs 5 materials, have 2"


def test_allocate_only_once() -> None:
    state = run_economy((A, A))

    assert state.portions == 4
    assert state.error is not None
    assert state.error.step == 2
    assert state.error.reason == "already allocated"


def test_allocate_requires_a_built_thing() -> None:
    state = run_economy((D, A))

    assert state.built_things == 0
    assert state.error is not None
    assert state.error.reason == "nothing built to allocate"


def test_destroy_prefers_built_things_then_materials() -> None:
    state = run_economy((G, G, D, D))

    assert state.built_things == 0
    assert state.materials == 1
    assert state.destroy_count == 2
    assert state.trace[2].message == "destroyed 1 built thing"
    assert state.trace[3].message == "destroyed 1 material"


def test_destroy_with_nothing_left_is_rejected() -> None:
    state = run_economy((D, D))

    assert state.error is not None
    assert state.error.step == 2
    assert state.error.reason == "nothing to destroy"
    assert state.destroy_count == 1


def test_unknown_token_is_a_terminal_error() -> None:
    state = run_economy(["gather", "teleport", "build"])

    assert state.error is not None
    assert state.error.step == 2
    assert state.error.token == "teleport"
    assert state.error.reason == "unknown tool 'teleport'"
    assert len(state.trace) == 2


def test_string_tokens_are_accepted_case_insensitively() -> None:
    state = run_economy(["Gather", " MULTIPLY "])

    assert state.error is None
    assert state.materials == 2


def test_interpreter_is_deterministic() -> None:
    assert run_economy(_WINNING_SEQUENCE) == run_economy(_WINNING_SEQUENCE)


def test_trace_snapshots_follow_each_step() -> None:
    state = run_economy((G, M))

    assert [entry.snapshot.materials for entry in state.trace] == [1, 2]
    assert [entry.step for entry in state.trace] == [1, 2]


def test_checklist_on_untouched_state() -> None:
    checklist = evaluate_economy(EconomyState.initial())

    assert [item.passed for item in checklist] == [True, True, False, True, False]
    assert all(item.weight == 20 for item in checklist)


def test_economy_state_rejects_negative_counters() -> None:
    with pytest.raises(ValueError, match="materials"):
        EconomyState(materials=-1)

"""FastAPI ベースの検証コア API。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from fastapi import APIRouter, FastAPI, HTTPException, status

from advent_verifier.adapters.inbound.http.schemas import (
    MAX_MAZE_DIMENSION,
    ChecklistItemResponse,
    EconomyTraceEntryResponse,
    EconomyVerificationResponse,
    EconomyVerifyRequest,
    ErrorResponse,
    HealthResponse,
    MazeInstanceResponse,
    MazeRequest,
    MazeVerificationResponse,
    NumericCompareRequest,
    PositionResponse,
    RoundGuessRequest,
    RoundGuessResponse,
    VerdictResponse,
)
from advent_verifier.adapters.outbound.in_memory_attempt_ledger import (
    InMemoryAttemptLedgerAdapter,
)
from advent_verifier.application.use_cases.direct_comparison import DirectComparisonUseCase
from advent_verifier.application.use_cases.economy_challenge import EconomyChallengeUseCase
from advent_verifier.application.use_cases.maze_challenge import (
    DEFAULT_MAZE_HEIGHT,
    DEFAULT_MAZE_WIDTH,
    MazeChallengeUseCase,
)
from advent_verifier.application.use_cases.round_game import RoundGameUseCase
from advent_verifier.domain.entities.maze import Maze, Move
from advent_verifier.domain.services.maze_generator import MIN_DIMENSION
from advent_verifier.domain.services.round_deriver import DEFAULT_ROUND_SIZE
from advent_verifier.domain.value_objects.verdict import Verdict

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {400: {"model": ErrorResponse}}


@dataclass(frozen=True, slots=True)
class VerifierUseCases:
    """API が利用するユースケース一式。"""

    maze: MazeChallengeUseCase
    economy: EconomyChallengeUseCase
    round_game: RoundGameUseCase
    comparison: DirectComparisonUseCase


def create_app(*, use_cases: VerifierUseCases | None = None) -> FastAPI:
    """検証コア API アプリを構築する。"""
    _load_runtime_env()
    resolved_use_cases = use_cases or _build_default_use_cases()

    app = FastAPI(
        title="Advent Verifier API",
        version="0.1.0",
    )
    app.state.use_cases = resolved_use_cases
    _register_routes(app)
    return app


def _register_routes(app: FastAPI) -> None:
    api = APIRouter(prefix="/api")

    @api.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @api.post(
        "/maze",
        response_model=MazeInstanceResponse | MazeVerificationResponse,
        responses=_ERROR_RESPONSES,
    )
    def maze(request: MazeRequest) -> MazeInstanceResponse | MazeVerificationResponse:
        use_cases: VerifierUseCases = app.state.use_cases
        if request.maze is None:
            instance = use_cases.maze.create_instance()
            return MazeInstanceResponse(
                maze=instance.maze.to_cell_names(),
                maze_string=instance.rendering,
                solution_length=instance.solution_length,
            )

        try:
            parsed_maze = Maze.from_cell_names(request.maze)
            if request.moves is not None:
                verification = use_cases.maze.verify_moves(
                    parsed_maze, [Move(move.strip().upper()) for move in request.moves]
                )
            elif request.raw_text is not None:
                verification = use_cases.maze.verify(parsed_maze, request.raw_text)
            else:
                raise ValueError("raw_text か moves のどちらかが必要です。")
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

        replay = verification.replay
        failure = replay.failure if replay is not None else None
        path = replay.path if replay is not None else (parsed_maze.start,)
        return MazeVerificationResponse(
            passed=verification.verdict.passed,
            moves=[move.value for move in verification.moves],
            path=[PositionResponse(x=position.x, y=position.y) for position in path],
            failure_step=failure.step if failure else None,
            failure_reason=failure.reason.value if failure else None,
            verdict=_to_verdict_response(verification.verdict),
        )

    @api.post("/economy/verify", response_model=EconomyVerificationResponse)
    def verify_economy(request: EconomyVerifyRequest) -> EconomyVerificationResponse:
        use_cases: VerifierUseCases = app.state.use_cases
        verification = use_cases.economy.verify(request.raw_text)
        trace = verification.final_state.trace if verification.final_state else ()
        return EconomyVerificationResponse(
            passed=verification.verdict.passed,
            score=verification.verdict.score,
            operations=[call.value for call in verification.extraction.calls],
            strategy=verification.extraction.strategy,
            trace=[
                EconomyTraceEntryResponse(
                    step=entry.step,
                    token=entry.token,
                    accepted=entry.accepted,
                    message=entry.message,
                    materials=entry.snapshot.materials,
                    built_things=entry.snapshot.built_things,
                    portions=entry.snapshot.portions,
                    gather_count=entry.snapshot.gather_count,
                    destroy_count=entry.snapshot.destroy_count,
                )
                for entry in trace
            ],
            verdict=_to_verdict_response(verification.verdict),
        )

    @api.post("/round/guess", response_model=RoundGuessResponse, responses=_ERROR_RESPONSES)
    def guess(request: RoundGuessRequest) -> RoundGuessResponse:
        use_cases: VerifierUseCases = app.state.use_cases
        try:
            outcome = use_cases.round_game.play_recorded(
                identity=request.identity,
                guess_text=request.guess,
            )
        except ValueError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
        return RoundGuessResponse(
            passed=outcome.verdict.passed,
            secret=outcome.revealed_secret,
            round_index=outcome.round_index,
            attempts_remaining=outcome.attempts_remaining,
            new_round_started=outcome.new_round_started,
            verdict=_to_verdict_response(outcome.verdict),
        )

    @api.post("/compare/numeric", response_model=VerdictResponse)
    def compare_numeric(request: NumericCompareRequest) -> VerdictResponse:
        use_cases: VerifierUseCases = app.state.use_cases
        verdict = use_cases.comparison.verify_numeric(request.raw_output, expected=request.expected)
        return _to_verdict_response(verdict)

    app.include_router(api)


def _to_verdict_response(verdict: Verdict) -> VerdictResponse:
    return VerdictResponse(
        passed=verdict.passed,
        score=verdict.score,
        rationale=verdict.rationale,
        checklist=[
            ChecklistItemResponse(
                name=item.name,
                passed=item.passed,
                weight=item.weight,
                detail=item.detail,
            )
            for item in verdict.checklist
        ],
    )


def _build_default_use_cases() -> VerifierUseCases:
    return VerifierUseCases(
        maze=MazeChallengeUseCase(
            width=_resolve_odd_dimension_env("ADVENT_MAZE_WIDTH", default=DEFAULT_MAZE_WIDTH),
            height=_resolve_odd_dimension_env("ADVENT_MAZE_HEIGHT", default=DEFAULT_MAZE_HEIGHT),
        ),
        economy=EconomyChallengeUseCase(),
        round_game=RoundGameUseCase(
            round_size=_resolve_positive_int_env("ADVENT_ROUND_SIZE", default=DEFAULT_ROUND_SIZE),
            attempt_ledger=InMemoryAttemptLedgerAdapter(),
        ),
        comparison=DirectComparisonUseCase(),
    )


def _resolve_positive_int_env(name: str, *, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError:
        return default
    if value < 1:
        return default
    return value


def _resolve_odd_dimension_env(name: str, *, default: int) -> int:
    value = _resolve_positive_int_env(name, default=default)
    if value < MIN_DIMENSION or value > MAX_MAZE_DIMENSION or value % 2 == 0:
        return default
    return value


def _load_runtime_env() -> None:
    app_env = os.getenv("APP_ENV", "development")
    env_file = Path(f".env.{app_env}")
    if env_file.exists():
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)

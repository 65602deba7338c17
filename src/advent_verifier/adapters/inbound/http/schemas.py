"""HTTP API の入出力スキーマ。"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

MAX_MAZE_DIMENSION = 101


class HealthResponse(BaseModel):
    """ヘルスチェックレスポンス。"""

    status: str = "ok"


class ChecklistItemResponse(BaseModel):
    """判定チェック項目。"""

    name: str
    passed: bool
    weight: int = Field(ge=0, le=100)
    detail: str


class VerdictResponse(BaseModel):
    """共通判定結果。"""

    passed: bool
    score: int = Field(ge=0, le=100)
    rationale: str
    checklist: list[ChecklistItemResponse]


class MazeRequest(BaseModel):
    """迷路リクエスト。maze がなければ新規出題。"""

    maze: list[Annotated[list[str], Field(max_length=MAX_MAZE_DIMENSION)]] | None = Field(
        default=None,
        max_length=MAX_MAZE_DIMENSION,
    )
    raw_text: str | None = Field(default=None, max_length=20_000)
    moves: list[str] | None = Field(
        default=None,
        max_length=MAX_MAZE_DIMENSION * MAX_MAZE_DIMENSION,
    )


class PositionResponse(BaseModel):
    x: int
    y: int


class MazeInstanceResponse(BaseModel):
    """出題レスポンス。解そのものは返さない。"""

    maze: list[list[str]]
    maze_string: str
    solution_length: int = Field(ge=0)


class MazeVerificationResponse(BaseModel):
    """迷路検証レスポンス。"""

    passed: bool
    moves: list[str]
    path: list[PositionResponse]
    failure_step: int | None
    failure_reason: str | None
    verdict: VerdictResponse


class EconomyVerifyRequest(BaseModel):
    """経済チャレンジ検証リクエスト。"""

    raw_text: str = Field(max_length=20_000)


class EconomyTraceEntryResponse(BaseModel):
    step: int
    token: str
    accepted: bool
    message: str
    materials: int
    built_things: int
    portions: int
    gather_count: int
    destroy_count: int


class EconomyVerificationResponse(BaseModel):
    """経済チャレンジ検証レスポンス。"""

    passed: bool
    score: int = Field(ge=0, le=100)
    operations: list[str]
    strategy: str | None
    trace: list[EconomyTraceEntryResponse]
    verdict: VerdictResponse


class RoundGuessRequest(BaseModel):
    """推測ゲームの 1 試行リクエスト。"""

    identity: int
    guess: str = Field(max_length=10_000)


class RoundGuessResponse(BaseModel):
    """推測ゲームの 1 試行レスポンス。"""

    passed: bool
    secret: str | None
    round_index: int = Field(ge=0)
    attempts_remaining: int = Field(ge=0)
    new_round_started: bool
    verdict: VerdictResponse


class NumericCompareRequest(BaseModel):
    """数値出力比較リクエスト。"""

    raw_output: str | None = Field(default=None, max_length=20_000)
    expected: float


class ErrorResponse(BaseModel):
    """API エラーレスポンス。"""

    detail: str

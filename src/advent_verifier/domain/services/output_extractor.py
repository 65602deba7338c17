"""モデルの自由記述出力から移動列・ツール呼び出し列・単一値を抽出する。

抽出はパターンベースで、何も見つからない場合も例外にせず空の結果を返す。
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence

from advent_verifier.domain.entities.economy import TOOL_NAMES, ToolCall
from advent_verifier.domain.entities.maze import Move
from advent_verifier.domain.value_objects.extraction import (
    BooleanExtraction,
    MoveExtraction,
    NumericExtraction,
    ToolCallExtraction,
    ValueStatus,
)

MOVE_SYNONYMS: dict[str, Move] = {
    "UP": Move.UP,
    "DOWN": Move.DOWN,
    "LEFT": Move.LEFT,
    "RIGHT": Move.RIGHT,
    "ARRIBA": Move.UP,
    "ABAJO": Move.DOWN,
    "IZQUIERDA": Move.LEFT,
    "DERECHA": Move.RIGHT,
}
MOVE_VOCABULARY: tuple[str, ...] = tuple(move.value for move in Move)

_MOVE_PATTERN = re.compile(r"\b(" + "|".join(MOVE_SYNONYMS) + r")\b", re.IGNORECASE)

_TOOL_ALTERNATION = "|".join(TOOL_NAMES)
_NUMBERED_LINE_PATTERN = re.compile(r"^[ \t]*(\d+)[ \t]*[.)]([^\n]*)$", re.MULTILINE)
_ANCHORED_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "- build" / "* gather" / "• destroy"
    re.compile(rf"^[ \t]*[-*•][ \t]*[`*_]*({_TOOL_ALTERNATION})\b", re.IGNORECASE | re.MULTILINE),
    # ツール名だけの行
    re.compile(
        rf"^[ \t]*[`*_]*({_TOOL_ALTERNATION})[`*_]*[ \t]*[,;.]?[ \t]*$",
        re.IGNORECASE | re.MULTILINE,
    ),
    re.compile(
        rf"\b(?:use|call|run|invoke|apply|then)[ \t]+[`*_]*({_TOOL_ALTERNATION})\b",
        re.IGNORECASE,
    ),
    re.compile(rf"\b({_TOOL_ALTERNATION})[ \t]*\([ \t]*\)", re.IGNORECASE),
)
_BARE_TOOL_PATTERN = re.compile(rf"\b({_TOOL_ALTERNATION})\b", re.IGNORECASE)

_NUMBER_PATTERN = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?$")
_NO_VALUE_MARKERS: frozenset[str] = frozenset({"undefined", "null", "none", "nil"})
_TRUE_MARKERS: frozenset[str] = frozenset({"true", "yes", "sí", "si"})
_FALSE_MARKERS: frozenset[str] = frozenset({"false", "no"})
_VALUE_DECORATION = "`*_\"' \t"

ToolCallStrategy = Callable[[str], tuple[ToolCall, ...] | None]


def extract_moves(text: str) -> MoveExtraction:
    """方向語 (英語・スペイン語) を出現順に重複込みで抽出する。"""
    moves = tuple(MOVE_SYNONYMS[match.group(1).upper()] for match in _MOVE_PATTERN.finditer(text))
    return MoveExtraction(moves=moves)


def extract_tool_calls(
    text: str,
    *,
    strategies: Sequence[tuple[str, ToolCallStrategy]] | None = None,
) -> ToolCallExtraction:
    """戦略を優先順に試し、最初に 1 件以上を返した戦略の結果だけを採用する。"""
    for name, strategy in strategies or TOOL_CALL_STRATEGIES:
        calls = strategy(text)
        if calls:
            return ToolCallExtraction(calls=calls, strategy=name)
    return ToolCallExtraction(calls=())


def numbered_line_strategy(text: str) -> tuple[ToolCall, ...] | None:
    """番号付き行 ("1. gather") を番号順に並べる。

    1 行に複数のツール名があれば行内の出現順ですべて採用する。
    同じ番号の行は出現順を保つ。
    """
    numbered: list[tuple[int, tuple[ToolCall, ...]]] = []
    for match in _NUMBERED_LINE_PATTERN.finditer(text):
        calls = tuple(
            ToolCall(tool_match.group(1).lower())
            for tool_match in _BARE_TOOL_PATTERN.finditer(match.group(2))
        )
        if calls:
            numbered.append((int(match.group(1)), calls))
    if not numbered:
        return None
    numbered.sort(key=lambda entry: entry[0])
    return tuple(call for _, calls in numbered for call in calls)


def anchored_mention_strategy(text: str) -> tuple[ToolCall, ...] | None:
    """箇条書き・動詞前置・関数呼び出し形式の言及を出現順に集める。"""
    positioned: dict[int, ToolCall] = {}
    for pattern in _ANCHORED_PATTERNS:
        for match in pattern.finditer(text):
            positioned.setdefault(match.start(1), ToolCall(match.group(1).lower()))
    if not positioned:
        return None
    return tuple(positioned[offset] for offset in sorted(positioned))


def bare_mention_strategy(text: str) -> tuple[ToolCall, ...] | None:
    """最後の手段として、ツール名の出現をすべて拾う。"""
    calls = tuple(ToolCall(match.group(1).lower()) for match in _BARE_TOOL_PATTERN.finditer(text))
    return calls or None


TOOL_CALL_STRATEGIES: tuple[tuple[str, ToolCallStrategy], ...] = (
    ("numbered_lines", numbered_line_strategy),
    ("anchored_mentions", anchored_mention_strategy),
    ("bare_mentions", bare_mention_strategy),
)


def extract_numeric_result(text: str | None) -> NumericExtraction:
    """最初の出力値を数値として解釈する。"""
    raw = _first_output_value(text)
    if raw is None or raw.lower() in _NO_VALUE_MARKERS:
        return NumericExtraction(status=ValueStatus.NO_VALUE, raw=raw)

    candidate = raw.replace(",", "").replace("_", "")
    if not _NUMBER_PATTERN.match(candidate):
        return NumericExtraction(status=ValueStatus.NOT_A_VALUE, raw=raw)
    return NumericExtraction(status=ValueStatus.FOUND, value=float(candidate), raw=raw)


def extract_boolean_result(text: str | None) -> BooleanExtraction:
    """最初の出力値を真偽値として解釈する。"""
    raw = _first_output_value(text)
    if raw is None or raw.lower() in _NO_VALUE_MARKERS:
        return BooleanExtraction(status=ValueStatus.NO_VALUE, raw=raw)

    normalized = raw.lower().rstrip(".!")
    if normalized in _TRUE_MARKERS:
        return BooleanExtraction(status=ValueStatus.FOUND, value=True, raw=raw)
    if normalized in _FALSE_MARKERS:
        return BooleanExtraction(status=ValueStatus.FOUND, value=False, raw=raw)
    return BooleanExtraction(status=ValueStatus.NOT_A_VALUE, raw=raw)


def _first_output_value(text: str | None) -> str | None:
    """最初の非空行を装飾を除いて返す。"""
    if not text:
        return None
    for line in text.splitlines():
        if line.strip().startswith("```"):
            continue
        stripped = line.strip().strip(_VALUE_DECORATION)
        if stripped:
            return stripped
    return None

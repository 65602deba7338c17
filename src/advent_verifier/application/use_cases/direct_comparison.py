"""シミュレーションを伴わないチャレンジを直接比較で判定するユースケース。"""

from __future__ import annotations

from collections.abc import Sequence

from advent_verifier.domain.services.output_extractor import (
    extract_boolean_result,
    extract_numeric_result,
)
from advent_verifier.domain.services.verdict_assembler import (
    checklist_verdict,
    extraction_miss_verdict,
    keyword_verdict,
    numeric_verdict,
)
from advent_verifier.domain.value_objects.comparison import KeywordRequirement
from advent_verifier.domain.value_objects.extraction import ValueStatus
from advent_verifier.domain.value_objects.verdict import ChecklistItem, Verdict

# 隠しメッセージ解読チャレンジの要件 (合計 100 点)
ACROSTIC_REQUIREMENTS: tuple[KeywordRequirement, ...] = (
    KeywordRequirement(label="GUATEMALA", alternatives=("GUATEMALA", "GUATE MALA"), weight=40),
    KeywordRequirement(label="CURSOR", alternatives=("CURSOR",), weight=40),
    KeywordRequirement(label="2025", alternatives=("2025", "TWO OH TWO FIVE"), weight=20),
)


class DirectComparisonUseCase:
    """外部で得た出力値を期待値と比較する。"""

    def verify_numeric(self, raw_output: str | None, *, expected: float) -> Verdict:
        """評価済みプログラム出力の先頭値を期待値と比較する。"""
        return numeric_verdict(extract_numeric_result(raw_output), expected=expected)

    def verify_boolean(self, raw_output: str | None, *, expected: bool) -> Verdict:
        """先頭の真偽値を期待値と比較する。"""
        extraction = extract_boolean_result(raw_output)
        if extraction.status is ValueStatus.NO_VALUE:
            detail = "no value was produced"
        elif extraction.status is ValueStatus.NOT_A_VALUE:
            detail = f"output {extraction.raw!r} is not a boolean"
        else:
            detail = f"expected {expected}, got {extraction.value}"
        return checklist_verdict(
            (
                ChecklistItem(
                    name="produced the expected answer",
                    passed=extraction.value is expected,
                    weight=100,
                    detail=detail,
                ),
            ),
            metadata={"status": extraction.status.value, "value": extraction.value},
        )

    def verify_keywords(
        self,
        raw_text: str | None,
        requirements: Sequence[KeywordRequirement] = ACROSTIC_REQUIREMENTS,
    ) -> Verdict:
        """重み付きキーワード要件で部分点を付ける。"""
        if not requirements:
            raise ValueError("requirements は 1 件以上必要です。")
        if not raw_text or not raw_text.strip():
            return extraction_miss_verdict(
                [requirement.label for requirement in requirements],
                subject="text",
            )
        return keyword_verdict(raw_text, requirements)

"""ツール経済チャレンジを検証するユースケース。"""

from __future__ import annotations

from dataclasses import dataclass

from advent_verifier.domain.entities.economy import TOOL_NAMES, EconomyState
from advent_verifier.domain.services.output_extractor import extract_tool_calls
from advent_verifier.domain.services.tool_economy_interpreter import (
    evaluate_economy,
    run_economy,
)
from advent_verifier.domain.services.verdict_assembler import (
    economy_verdict,
    extraction_miss_verdict,
)
from advent_verifier.domain.value_objects.extraction import ToolCallExtraction
from advent_verifier.domain.value_objects.verdict import Verdict


@dataclass(frozen=True, slots=True)
class EconomyVerification:
    """経済チャレンジ検証の結果。"""

    verdict: Verdict
    extraction: ToolCallExtraction
    final_state: EconomyState | None


class EconomyChallengeUseCase:
    """モデル出力からツール呼び出し列を抽出し、シミュレーションで採点する。"""

    def verify(self, raw_text: str) -> EconomyVerification:
        """抽出できなければ 0 点、できれば 5 項目のチェックリストで採点する。"""
        extraction = extract_tool_calls(raw_text or "")
        if not extraction.found:
            return EconomyVerification(
                verdict=extraction_miss_verdict(TOOL_NAMES, subject="tool calls"),
                extraction=extraction,
                final_state=None,
            )

        final_state = run_economy(extraction.calls)
        verdict = economy_verdict(final_state, evaluate_economy(final_state))
        return EconomyVerification(
            verdict=verdict,
            extraction=extraction,
            final_state=final_state,
        )

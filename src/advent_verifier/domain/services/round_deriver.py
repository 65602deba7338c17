"""試行回数からラウンドと秘密の単語を導出する純粋関数。

秘密の単語は (identity, round_index) だけから決まり、保存されない。
外部から渡される単調増加の試行回数だけで、セッション状態なしに
同じ単語を再現できる。
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from advent_verifier.domain.value_objects.round import RoundContext

DEFAULT_ROUND_SIZE = 5
DEFAULT_WORD_POOL: tuple[str, ...] = (
    "reindeer",
    "snowflake",
    "chimney",
    "mistletoe",
    "gingerbread",
    "ornament",
    "sleigh",
    "stocking",
    "candle",
    "wreath",
    "lantern",
    "icicle",
    "snowman",
    "cocoa",
    "tinsel",
    "nutcracker",
    "carol",
    "present",
    "fireplace",
    "evergreen",
    "mitten",
    "chestnut",
    "bell",
    "scarf",
)

_MASK32 = 0xFFFFFFFF


class RoundConfigurationError(ValueError):
    """ラウンド導出の入力不正を表す例外。"""


def derive_round(
    identity: int,
    attempt_count: int,
    *,
    round_size: int = DEFAULT_ROUND_SIZE,
    pool: Sequence[str] = DEFAULT_WORD_POOL,
) -> RoundContext:
    """(identity, attempt_count) からラウンド情報を返す。"""
    if attempt_count < 0:
        raise RoundConfigurationError("attempt_count は 0 以上である必要があります。")
    if round_size < 1:
        raise RoundConfigurationError("round_size は 1 以上である必要があります。")
    if not pool:
        raise RoundConfigurationError("pool は 1 件以上必要です。")

    round_index = attempt_count // round_size
    attempts_used = attempt_count % round_size
    return RoundContext(
        identity=identity,
        attempt_index=attempt_count,
        round_size=round_size,
        round_index=round_index,
        secret=select_secret(identity, round_index, pool=pool),
        attempts_used_in_round=attempts_used,
        attempts_remaining_in_round=round_size - attempts_used,
    )


def select_secret(
    identity: int,
    round_index: int,
    *,
    pool: Sequence[str] = DEFAULT_WORD_POOL,
) -> str:
    """ラウンドの秘密の単語を返す。

    ラウンド 0 は混合値で選び、以降は直前のラウンドの位置から 1 以上
    len(pool) - 1 以下だけ進めるので、連続するラウンドで同じ単語にならない。
    """
    if not pool:
        raise RoundConfigurationError("pool は 1 件以上必要です。")
    if round_index < 0:
        raise RoundConfigurationError("round_index は 0 以上である必要があります。")

    size = len(pool)
    index = mix_round_key(identity, 0) % size
    if size == 1:
        return pool[index]
    for current_round in range(1, round_index + 1):
        index = (index + 1 + mix_round_key(identity, current_round) % (size - 1)) % size
    return pool[index]


def mix_round_key(identity: int, round_index: int) -> int:
    """2 つの整数を 32bit に混ぜ合わせる (murmur3 の finalizer)。"""
    value = ((identity & _MASK32) * 0x9E3779B1) & _MASK32
    value ^= ((round_index & _MASK32) * 0x85EBCA77) & _MASK32
    value ^= value >> 16
    value = (value * 0x85EBCA6B) & _MASK32
    value ^= value >> 13
    value = (value * 0xC2B2AE35) & _MASK32
    value ^= value >> 16
    return value


def guess_matches(secret: str, text: str) -> bool:
    """秘密の単語が大文字小文字を無視した単語単位で含まれるかを返す。"""
    if not secret or not text:
        return False
    return re.search(rf"\b{re.escape(secret)}\b", text, re.IGNORECASE) is not None

"""
相手ボットの意思決定。

提供物:
- OpponentType: 対戦相手の種類（Player 2 / Randomizer / 5 段階のボット）
- BotConfig: 12 スロットの難易度設定（名前付き）
- BotMemory: ボットが見た札（タイル番号 -> pair_id）
- weighted_choice: 重み付き選択
- choose_first_card / choose_second_card: 2 段階の札選び

契約:
- 候補が空でも例外を投げず、"random" へ退避する。全く選べない場合のみ None。
- 成立済み・表向きの札は選ばない。
- 記憶の更新は呼び出し側（ターン処理）が行う。
"""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from dataclasses import astuple, dataclass, fields
from enum import Enum
from typing import TypeVar

from src.kanji_memory_game.domain.board import Board
from src.kanji_memory_game.domain.errors import InvalidSettingError

T = TypeVar("T")


class OpponentType(str, Enum):
    PLAYER2 = "Player 2"
    RANDOMIZER = "Randomizer"
    BOT_NOVICE = "Bot (Level 1: Novice)"
    BOT_CASUAL = "Bot (Level 2: Casual)"
    BOT_SHREWD = "Bot (Level 3: Shrewd)"
    BOT_MASTER = "Bot (Level 4: Master)"
    BOT_ELITE = "Bot (Level 5: Elite)"

    @property
    def is_bot(self) -> bool:
        return self != OpponentType.PLAYER2

    @property
    def short_name(self) -> str:
        if self == OpponentType.PLAYER2:
            return "Player 2"
        return self.value.split(": ")[-1].rstrip(")") if ": " in self.value else self.value


def parse_opponent_type(value: OpponentType | str) -> OpponentType:
    if isinstance(value, OpponentType):
        return value
    for t in OpponentType:
        if value in (t.value, t.name):
            return t
    raise InvalidSettingError(f"unknown opponent type: {value}")


@dataclass(frozen=True)
class BotConfig:
    """難易度設定（12 スロット、各 0〜100）。

    スロット順:
    0: 既知ペアを狙う確率(%)
    1-3: 1枚目の重み known / new / random
    4-6: 2枚目（相方不明）の重み known / new / random
    7-11: 2枚目（相方既知）の重み match / random_close / random / new / known

    重みはグループ内で合計 100 である必要はない。
    """

    known_pair_chance: float
    first_known: float
    first_new: float
    first_random: float
    second_known: float
    second_new: float
    second_random: float
    partner_match: float
    partner_random_close: float
    partner_random: float
    partner_new: float
    partner_known: float

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
                raise InvalidSettingError(f"bot slot '{f.name}' must be numeric: {v!r}")
            if not 0 <= v <= 100:
                raise InvalidSettingError(f"bot slot '{f.name}' must be within 0..100: {v!r}")

    @classmethod
    def from_slots(cls, slots: Sequence[float]) -> BotConfig:
        if len(slots) != 12:
            raise InvalidSettingError(f"bot config needs 12 slots, got {len(slots)}")
        return cls(*slots)

    def as_slots(self) -> tuple[float, ...]:
        return astuple(self)


# 難易度ごとの既定値（相手の種類 -> 設定）
BOT_CONFIGS: dict[OpponentType, BotConfig] = {
    OpponentType.RANDOMIZER: BotConfig.from_slots([0, 0, 0, 100, 0, 0, 100, 0, 0, 100, 0, 0]),
    OpponentType.BOT_NOVICE: BotConfig.from_slots([0, 5, 90, 5, 0, 0, 100, 20, 0, 80, 0, 0]),
    OpponentType.BOT_CASUAL: BotConfig.from_slots([0, 20, 70, 10, 25, 75, 0, 30, 0, 70, 0, 0]),
    OpponentType.BOT_SHREWD: BotConfig.from_slots([50, 20, 80, 0, 25, 75, 0, 40, 0, 0, 30, 30]),
    OpponentType.BOT_MASTER: BotConfig.from_slots([75, 30, 60, 10, 25, 75, 0, 70, 0, 0, 5, 25]),
    OpponentType.BOT_ELITE: BotConfig.from_slots([100, 5, 95, 0, 25, 75, 0, 80, 0, 20, 0, 0]),
}


def bot_config_for(opponent: OpponentType) -> BotConfig:
    """相手の種類に対応する設定。未定義（Player 2 など）は Randomizer。"""
    return BOT_CONFIGS.get(opponent, BOT_CONFIGS[OpponentType.RANDOMIZER])


class BotMemory:
    """ボットの記憶（挿入順を保持）。セッション中は削除しない。"""

    def __init__(self) -> None:
        self._seen: dict[int, int] = {}

    def record(self, index: int, pair_id: int) -> None:
        self._seen[index] = pair_id

    def __contains__(self, index: object) -> bool:
        return index in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def items(self) -> list[tuple[int, int]]:
        return list(self._seen.items())

    def get(self, index: int) -> int | None:
        return self._seen.get(index)


def weighted_choice(options: Sequence[tuple[float, T]], rng: random.Random) -> T | None:
    """重み付きで1つ選ぶ。

    - 重みの合計が 0 以下なら先頭を返す（乱数を使わない）。
    - [0, 合計) の一様乱数が入る累積区間の要素を返す（並び順どおり線形走査）。
    - 浮動小数の端数で走査を抜けた場合は、重みを持つ最後の要素を返す。
    """
    if not options:
        return None
    total = sum(w for w, _ in options)
    if total <= 0:
        return options[0][1]
    r = rng.random() * total
    cumulative = 0.0
    for w, action in options:
        if w <= 0:
            continue
        cumulative += w
        if r < cumulative:
            return action
    return next(a for w, a in reversed(options) if w > 0)


@dataclass(frozen=True)
class Decision:
    index: int
    action: str


def _pick(pool: list[int], rng: random.Random) -> int | None:
    return rng.choice(pool) if pool else None


def random_available(board: Board, rng: random.Random, exclude: Sequence[int] = ()) -> int | None:
    return _pick([i for i in board.available_indices() if i not in exclude], rng)


def random_known(board: Board, memory: BotMemory, rng: random.Random, exclude: Sequence[int] = ()) -> int | None:
    return _pick([i for i in board.available_indices() if i in memory and i not in exclude], rng)


def random_new(board: Board, memory: BotMemory, rng: random.Random) -> int | None:
    return _pick([i for i in board.available_indices() if i not in memory], rng)


def find_known_pair(board: Board, memory: BotMemory) -> tuple[int, int] | None:
    """記憶の中から、2枚とも覚えていて未成立・裏向きのペアを探す（記憶順で最初のもの）。"""
    for idx, pair_id in memory.items():
        if not board.is_available(idx) or board.card(idx).pair_id != pair_id:
            continue
        for other, other_pair in memory.items():
            if other != idx and other_pair == pair_id and board.is_available(other):
                return idx, other
    return None


def known_partner(board: Board, memory: BotMemory, first: int) -> int | None:
    """1枚目の相方を覚えていて、まだ取れる状態ならその番号。"""
    pair_id = board.card(first).pair_id
    if board.is_matched(pair_id):
        return None
    for idx, remembered in memory.items():
        if idx != first and remembered == pair_id and board.is_available(idx):
            return idx
    return None


def _resolve_pool_action(
    action: str | None,
    board: Board,
    memory: BotMemory,
    rng: random.Random,
    exclude_known: Sequence[int] = (),
) -> int | None:
    if action == "known":
        idx = random_known(board, memory, rng, exclude=exclude_known)
    elif action == "new":
        idx = random_new(board, memory, rng)
    else:
        idx = None
    return idx if idx is not None else random_available(board, rng)


def choose_first_card(
    board: Board, memory: BotMemory, config: BotConfig, rng: random.Random
) -> Decision | None:
    """1枚目を選ぶ。盤面に取れる札が無ければ None。"""
    pair = find_known_pair(board, memory)
    if pair is not None and rng.random() * 100 < config.known_pair_chance:
        return Decision(pair[0], "known_pair")
    action = weighted_choice(
        [
            (config.first_known, "known"),
            (config.first_new, "new"),
            (config.first_random, "random"),
        ],
        rng,
    )
    idx = _resolve_pool_action(action, board, memory, rng)
    if idx is None:
        return None
    return Decision(idx, action or "random")


def choose_second_card(
    board: Board, memory: BotMemory, config: BotConfig, first: int, rng: random.Random
) -> Decision | None:
    """2枚目を選ぶ（1枚目は表向きで board.flipped に入っている前提）。

    候補が無効（None・1枚目と同じ・もう取れない）の場合は、
    1枚目以外の取れる札から一様に選び直す。それも無ければ None。
    """
    partner = known_partner(board, memory, first)
    if partner is not None:
        action = weighted_choice(
            [
                (config.partner_match, "match"),
                (config.partner_random_close, "random_close"),
                (config.partner_random, "random"),
                (config.partner_new, "new"),
                (config.partner_known, "known"),
            ],
            rng,
        )
        if action == "match":
            idx: int | None = partner
        else:
            idx = _resolve_pool_action(action, board, memory, rng, exclude_known=(partner,))
    else:
        action = weighted_choice(
            [
                (config.second_known, "known"),
                (config.second_new, "new"),
                (config.second_random, "random"),
            ],
            rng,
        )
        idx = _resolve_pool_action(action, board, memory, rng)

    if idx is None or idx == first or not board.is_available(idx):
        idx = random_available(board, rng, exclude=(first,))
        action = "fallback"
    if idx is None:
        return None
    return Decision(idx, action or "random")

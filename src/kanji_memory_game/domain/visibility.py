"""
札の表示内容の決定（純粋関数）。

提供物:
- VisibilityLevel / ContentField / CardOrderMode
- ContentVisibility: 項目ごとの (matched, flipped) 表示レベル
- 役割（1枚目/2枚目）の決定と事前割り当て
- resolve_tile_view: 盤面状態から1枚の見え方を決める

契約:
- 同じ入力に対しては常に同じ出力を返す（状態を書き換えない）。
- 役割の永続化（初回めくり時・成立時）は呼び出し側（ターン処理）で行う。
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum

from src.kanji_memory_game.domain.board import Board, Card
from src.kanji_memory_game.domain.errors import InvalidSettingError

ROLE_FIRST = 1
ROLE_SECOND = 2


class VisibilityLevel(str, Enum):
    NEVER = "NEVER"
    BOTH = "BOTH"
    FIRST_ONLY = "FIRST_ONLY"
    SECOND_ONLY = "SECOND_ONLY"


# 設定画面での巡回順
VISIBILITY_CYCLE: tuple[VisibilityLevel, ...] = (
    VisibilityLevel.NEVER,
    VisibilityLevel.BOTH,
    VisibilityLevel.FIRST_ONLY,
    VisibilityLevel.SECOND_ONLY,
)

VISIBILITY_LABELS: dict[VisibilityLevel, str] = {
    VisibilityLevel.NEVER: "Never Show",
    VisibilityLevel.BOTH: "Show on Both Flips",
    VisibilityLevel.FIRST_ONLY: "Show on 1st Flip Only",
    VisibilityLevel.SECOND_ONLY: "Show on 2nd Flip Only",
}


class ContentField(str, Enum):
    KANJI = "kanji"
    FREQUENCY = "frequency"
    MEANING = "meaning"
    HEISIG = "heisig"
    ON = "on"
    KUN = "kun"
    KUN_ROMAJI = "kun_romaji"
    ON_ROMAJI = "on_romaji"
    STROKE_COUNT = "stroke_count"
    UNICODE = "unicode"


FIELD_LABELS: dict[ContentField, str] = {
    ContentField.KANJI: "Kanji Character (Main)",
    ContentField.FREQUENCY: "Frequency Rank",
    ContentField.MEANING: "English Meaning",
    ContentField.HEISIG: "Heisig Keyword",
    ContentField.ON: "On-Yomi Reading",
    ContentField.KUN: "Kun-Yomi Reading",
    ContentField.KUN_ROMAJI: "Kun-Yomi Reading (Romaji)",
    ContentField.ON_ROMAJI: "On-Yomi Reading (Romaji)",
    ContentField.STROKE_COUNT: "Stroke Count",
    ContentField.UNICODE: "Unicode",
}


class CardOrderMode(str, Enum):
    FLIP_ORDER = "FLIP_ORDER"
    FIRST_FLIP_STICKY = "FIRST_FLIP_STICKY"
    RANDOM_PER_PAIR = "RANDOM_PER_PAIR"
    RANDOM_GLOBAL = "RANDOM_GLOBAL"

    @property
    def is_precomputed(self) -> bool:
        return self in (CardOrderMode.RANDOM_PER_PAIR, CardOrderMode.RANDOM_GLOBAL)


CARD_ORDER_LABELS: dict[CardOrderMode, str] = {
    CardOrderMode.FLIP_ORDER: "Flip Order (Reset on Fail)",
    CardOrderMode.FIRST_FLIP_STICKY: "First Flip Sticky (Permanent)",
    CardOrderMode.RANDOM_PER_PAIR: "Random per Pair (50/50 Split)",
    CardOrderMode.RANDOM_GLOBAL: "Random Global (True 50/50)",
}


@dataclass(frozen=True)
class FieldVisibility:
    matched: VisibilityLevel = VisibilityLevel.NEVER
    flipped: VisibilityLevel = VisibilityLevel.NEVER


def _default_fields() -> dict[ContentField, FieldVisibility]:
    v = VisibilityLevel
    return {
        ContentField.KANJI: FieldVisibility(matched=v.BOTH, flipped=v.BOTH),
        ContentField.FREQUENCY: FieldVisibility(),
        ContentField.MEANING: FieldVisibility(matched=v.BOTH, flipped=v.NEVER),
        ContentField.HEISIG: FieldVisibility(),
        ContentField.ON: FieldVisibility(matched=v.FIRST_ONLY, flipped=v.NEVER),
        ContentField.KUN: FieldVisibility(matched=v.SECOND_ONLY, flipped=v.NEVER),
        ContentField.KUN_ROMAJI: FieldVisibility(),
        ContentField.ON_ROMAJI: FieldVisibility(),
        ContentField.STROKE_COUNT: FieldVisibility(),
        ContentField.UNICODE: FieldVisibility(),
    }


@dataclass
class ContentVisibility:
    """10 項目それぞれの表示設定（成立済み用 / めくり中用）。"""

    fields: dict[ContentField, FieldVisibility] = field(default_factory=_default_fields)

    def get(self, f: ContentField) -> FieldVisibility:
        return self.fields.get(f, FieldVisibility())

    def set_level(self, f: ContentField | str, kind: str, level: VisibilityLevel | str) -> None:
        """`kind` は "matched" または "flipped"。"""
        f = parse_field(f)
        level = parse_level(level)
        current = self.get(f)
        if kind == "matched":
            self.fields[f] = FieldVisibility(matched=level, flipped=current.flipped)
        elif kind == "flipped":
            self.fields[f] = FieldVisibility(matched=current.matched, flipped=level)
        else:
            raise InvalidSettingError(f"unknown visibility type: {kind}")

    def cycle(self, f: ContentField | str, kind: str) -> VisibilityLevel:
        """表示レベルを巡回順で1つ進め、新しいレベルを返す。"""
        f = parse_field(f)
        current = getattr(self.get(f), kind, None)
        if current is None:
            raise InvalidSettingError(f"unknown visibility type: {kind}")
        nxt = VISIBILITY_CYCLE[(VISIBILITY_CYCLE.index(current) + 1) % len(VISIBILITY_CYCLE)]
        self.set_level(f, kind, nxt)
        return nxt


def parse_level(value: VisibilityLevel | str) -> VisibilityLevel:
    try:
        return VisibilityLevel(value)
    except ValueError:
        raise InvalidSettingError(f"unknown visibility level: {value}") from None


def parse_field(value: ContentField | str) -> ContentField:
    try:
        return ContentField(value)
    except ValueError:
        raise InvalidSettingError(f"unknown content field: {value}") from None


def parse_card_order_mode(value: CardOrderMode | str) -> CardOrderMode:
    try:
        return CardOrderMode(value)
    except ValueError:
        raise InvalidSettingError(f"unknown card order mode: {value}") from None


def assign_initial_roles(
    cards: list[Card], mode: CardOrderMode, rng: random.Random | None = None
) -> dict[int, int]:
    """事前割り当てモードの役割を決める（card.id -> 1|2）。

    - RANDOM_PER_PAIR: 各ペアで一方を 1、他方を 2（独立に 50/50）。
    - RANDOM_GLOBAL: 全札を並べ替えた前半を 1、残りを 2（ペアは考慮しない）。
    - それ以外のモードは空の割り当てを返す。
    """
    rng = rng or random.Random()
    assignments: dict[int, int] = {}
    if mode == CardOrderMode.RANDOM_PER_PAIR:
        by_pair: dict[int, list[Card]] = {}
        for c in cards:
            by_pair.setdefault(c.pair_id, []).append(c)
        for pair_cards in by_pair.values():
            a, b = pair_cards
            if rng.random() < 0.5:
                assignments[a.id], assignments[b.id] = ROLE_FIRST, ROLE_SECOND
            else:
                assignments[a.id], assignments[b.id] = ROLE_SECOND, ROLE_FIRST
    elif mode == CardOrderMode.RANDOM_GLOBAL:
        order = list(range(len(cards)))
        rng.shuffle(order)
        half = len(order) // 2
        for pos, idx in enumerate(order):
            assignments[cards[idx].id] = ROLE_FIRST if pos < half else ROLE_SECOND
    return assignments


def flip_order_role(board: Board, index: int) -> int | None:
    """現在の表向き順から役割を返す。表向きでなければ None。"""
    if board.flipped and board.flipped[0] == index:
        return ROLE_FIRST
    if len(board.flipped) == 2 and board.flipped[1] == index:
        return ROLE_SECOND
    return None


def resolve_role(
    board: Board, index: int, mode: CardOrderMode, assignments: dict[int, int]
) -> int | None:
    """表向き（めくり中または成立済み）の札の役割を返す。裏向きなら None。"""
    if not board.is_face_up(index):
        return None
    card = board.card(index)
    if mode == CardOrderMode.FLIP_ORDER:
        role = flip_order_role(board, index)
        if role is None and board.is_tile_matched(index):
            # 成立時に保存した役割
            role = assignments.get(card.id)
        return role
    if mode == CardOrderMode.FIRST_FLIP_STICKY:
        stored = assignments.get(card.id)
        if stored is not None:
            return stored
        if board.is_flipped(index):
            return ROLE_FIRST if board.flipped[0] == index else ROLE_SECOND
        return None
    return assignments.get(card.id)


def is_field_visible(
    board: Board,
    index: int,
    f: ContentField,
    config: ContentVisibility,
    role: int | None,
) -> bool:
    """項目 f を表示するか。

    1. 成立済み: matched 設定が NEVER 以外なら表示。
    2. めくり中: flipped 設定に従う（FIRST_ONLY/SECOND_ONLY は役割で判定）。
    3. 裏向き: 非表示。
    """
    setting = config.get(f)
    if board.is_tile_matched(index):
        return setting.matched != VisibilityLevel.NEVER
    if board.is_flipped(index):
        level = setting.flipped
        if level == VisibilityLevel.BOTH:
            return True
        if level == VisibilityLevel.FIRST_ONLY:
            return role == ROLE_FIRST
        if level == VisibilityLevel.SECOND_ONLY:
            return role == ROLE_SECOND
        return False
    return False


@dataclass(frozen=True)
class TileView:
    """1枚の見え方。

    - face: "back" | "front"
    - role: 表向きのときの 1|2（未決定なら None）
    - fields: 表示する項目の集合（KANJI を含まない場合、主文字はプレースホルダ）
    - owner: 成立済みならペアを取ったプレイヤー
    """

    index: int
    face: str
    role: int | None
    fields: frozenset[ContentField]
    matched: bool
    owner: int | None

    @property
    def is_front(self) -> bool:
        return self.face == "front"

    @property
    def shows_glyph(self) -> bool:
        return ContentField.KANJI in self.fields


def resolve_tile_view(
    board: Board,
    index: int,
    config: ContentVisibility,
    mode: CardOrderMode,
    assignments: dict[int, int],
) -> TileView:
    card = board.card(index)
    matched = board.is_matched(card.pair_id)
    if not board.is_face_up(index):
        return TileView(index, "back", None, frozenset(), False, None)
    role = resolve_role(board, index, mode, assignments)
    visible = frozenset(f for f in ContentField if is_field_visible(board, index, f, config, role))
    return TileView(
        index=index,
        face="front",
        role=role,
        fields=visible,
        matched=matched,
        owner=board.match_owners.get(card.pair_id) if matched else None,
    )

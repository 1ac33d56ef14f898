from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.kanji_memory_game.domain.data import KanjiDetail, Word
from src.kanji_memory_game.domain.errors import InvalidSettingError


@dataclass
class Card:
    """盤面の1枚。

    現状の契約:
    - id: 物理的な札ごとに一意（pair_id * 2 または pair_id * 2 + 1）
    - pair_id: 同じ漢字の2枚で共有（選択順の 0 始まり）
    - detail: 不変の漢字情報
    - words: 遅延取得する単語一覧。None = 未取得、一度設定したら再取得しない
    """

    id: int
    pair_id: int
    detail: KanjiDetail
    words: list[Word] | None = None

    @property
    def kanji(self) -> str:
        return self.detail.kanji


def build_board(details: Sequence[KanjiDetail], rng: random.Random | None = None) -> list[Card]:
    """漢字情報 N 件から 2N 枚の札を作り、一様にシャッフルして返す。"""
    if not details:
        raise InvalidSettingError("cannot build a board from zero kanji")
    rng = rng or random.Random()
    cards = [
        Card(id=pair_id * 2 + offset, pair_id=pair_id, detail=d)
        for pair_id, d in enumerate(details)
        for offset in (0, 1)
    ]
    rng.shuffle(cards)
    return cards


@dataclass
class Board:
    """札の並びと、表向き集合・成立済み集合。

    不変条件:
    - 各 pair_id はちょうど 2 枚。
    - flipped は 0〜2 要素で、成立済みペアの札を含まない。
    - matched は単調増加（セッション中に減らない）。
    """

    cards: list[Card] = field(default_factory=list)
    flipped: list[int] = field(default_factory=list)
    matched: set[int] = field(default_factory=set)
    match_owners: dict[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        counts: dict[int, int] = {}
        for c in self.cards:
            counts[c.pair_id] = counts.get(c.pair_id, 0) + 1
        if any(n != 2 for n in counts.values()):
            raise InvalidSettingError("every pair_id must appear exactly twice")

    def __len__(self) -> int:
        return len(self.cards)

    @property
    def pair_count(self) -> int:
        return len(self.cards) // 2

    def card(self, index: int) -> Card:
        return self.cards[index]

    def is_valid_index(self, index: int) -> bool:
        return 0 <= index < len(self.cards)

    def is_matched(self, pair_id: int) -> bool:
        return pair_id in self.matched

    def is_flipped(self, index: int) -> bool:
        return index in self.flipped

    def is_tile_matched(self, index: int) -> bool:
        return self.cards[index].pair_id in self.matched

    def is_face_up(self, index: int) -> bool:
        return self.is_flipped(index) or self.is_tile_matched(index)

    def is_available(self, index: int) -> bool:
        """未成立かつ裏向きで、めくることができる札か。"""
        return (
            self.is_valid_index(index)
            and not self.is_tile_matched(index)
            and not self.is_flipped(index)
        )

    def available_indices(self) -> list[int]:
        return [i for i in range(len(self.cards)) if self.is_available(i)]

    def partner_index(self, index: int) -> int:
        pair_id = self.cards[index].pair_id
        return next(
            i for i, c in enumerate(self.cards) if c.pair_id == pair_id and i != index
        )

    def is_complete(self) -> bool:
        return len(self.cards) > 0 and len(self.matched) == self.pair_count

    def attach_words(self, kanji: str, words: list[Word]) -> bool:
        """同じ漢字の札に単語一覧を設定する（一度きり）。設定したら True。"""
        attached = False
        for c in self.cards:
            if c.kanji == kanji and c.words is None:
                c.words = list(words)
                attached = True
        return attached

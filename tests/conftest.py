from __future__ import annotations

import random
import threading
from typing import Any

import pytest

from src.kanji_memory_game.app.state import GameSession, Timing
from src.kanji_memory_game.domain.board import Board, Card
from src.kanji_memory_game.domain.data import KanjiDetail
from src.kanji_memory_game.domain.errors import DataLoadError, DetailFetchError
from src.kanji_memory_game.domain.opponent import OpponentType
from src.kanji_memory_game.domain.visibility import CardOrderMode, ContentVisibility
from src.kanji_memory_game.services.config_loader import set_runtime_config
from src.kanji_memory_game.services.scheduler import TimerQueue

GLYPHS = "日月火水木金土山川田人口目耳手足上下中大小本"


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class DictStore:
    """dict ベースの SessionStore。"""

    def __init__(self) -> None:
        self.data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value


class FakeDictionary:
    """呼び出し回数を数えるフェイク辞書。"""

    def __init__(
        self,
        characters: str | list[str] = GLYPHS,
        fail_details: set[str] | None = None,
        words: dict[str, list[dict[str, Any]]] | None = None,
        list_error: bool = False,
    ) -> None:
        self.characters = list(characters)
        self.fail_details = fail_details or set()
        self.words = words or {}
        self.list_error = list_error
        self.list_calls: list[str] = []
        self.detail_calls: list[str] = []
        self.word_calls: list[str] = []
        self.word_gate: threading.Event | None = None
        self._lock = threading.Lock()

    def list_kanji(self, set_id: str) -> list[str]:
        self.list_calls.append(set_id)
        if self.list_error:
            raise DataLoadError(f"Failed to load Kanji data from API (Set: {set_id}).")
        return list(self.characters)

    def get_kanji_detail(self, glyph: str) -> dict[str, Any]:
        with self._lock:
            self.detail_calls.append(glyph)
        if glyph in self.fail_details:
            raise DetailFetchError(f"Failed to fetch details for {glyph}")
        return detail_payload(glyph)

    def get_words(self, glyph: str) -> list[dict[str, Any]]:
        with self._lock:
            self.word_calls.append(glyph)
        if self.word_gate is not None:
            self.word_gate.wait(timeout=5)
        return self.words.get(glyph, [])


def detail_payload(glyph: str) -> dict[str, Any]:
    return {
        "kanji": glyph,
        "meanings": [f"meaning of {glyph}"],
        "kun_readings": ["ひ"],
        "on_readings": ["ニチ"],
        "name_readings": [],
        "stroke_count": 4,
        "grade": 1,
        "jlpt": 5,
        "heisig_en": f"heisig {glyph}",
        "freq_mainichi_shinbun": 10,
        "unicode": format(ord(glyph), "x"),
        "notes": [],
    }


def make_details(n: int) -> list[KanjiDetail]:
    return [
        KanjiDetail(kanji=g, meaning=f"meaning of {g}", kun="ひ", on="ニチ", stroke_count=4)
        for g in GLYPHS[:n]
    ]


def ordered_board(pairs: int) -> Board:
    """インデックス 2k と 2k+1 が同じペア（pair_id = k）の盤面。"""
    details = make_details(pairs)
    cards = [Card(id=i, pair_id=i // 2, detail=details[i // 2]) for i in range(pairs * 2)]
    return Board(cards=cards)


@pytest.fixture(autouse=True)
def _reset_runtime_config():
    set_runtime_config(None)
    yield
    set_runtime_config(None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_game(clock):
    def _make(
        pairs: int = 4,
        opponent: OpponentType = OpponentType.PLAYER2,
        mode: CardOrderMode = CardOrderMode.FLIP_ORDER,
        seed: int = 0,
    ) -> GameSession:
        return GameSession(
            board=ordered_board(pairs),
            opponent=opponent,
            card_order_mode=mode,
            visibility=ContentVisibility(),
            timing=Timing(),
            timers=TimerQueue(clock),
            rng=random.Random(seed),
        )

    return _make


@pytest.fixture
def store() -> DictStore:
    return DictStore()


@pytest.fixture
def dictionary() -> FakeDictionary:
    return FakeDictionary()

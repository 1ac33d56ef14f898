from __future__ import annotations

import pytest

from src.kanji_memory_game.domain.data import KanjiDetail
from src.kanji_memory_game.domain.opponent import OpponentType
from src.kanji_memory_game.domain.visibility import ContentField, VisibilityLevel
from src.kanji_memory_game.services import audio
from src.kanji_memory_game.services.render import field_text, render_board, render_tile

DETAIL = KanjiDetail(
    kanji="日",
    meaning="day, sun",
    kun="ひ, -び, -か",
    on="ニチ, ジツ",
    stroke_count=4,
    heisig_en="day",
    freq_mainichi_shinbun=1,
    unicode="65e5",
)


@pytest.mark.parametrize(
    ("field", "text"),
    [
        (ContentField.KANJI, "日"),
        (ContentField.FREQUENCY, "#1"),
        (ContentField.MEANING, "day, sun"),
        (ContentField.HEISIG, "Heisig: day"),
        (ContentField.ON, "On: ニチ, ジツ"),
        (ContentField.KUN, "Kun: ひ, -び, -か"),
        (ContentField.STROKE_COUNT, "Strokes: 4"),
        (ContentField.UNICODE, "U+65e5"),
    ],
)
def test_field_text(field, text):
    assert field_text(DETAIL, field) == text


def test_missing_values_render_placeholders():
    empty = KanjiDetail(kanji="鬱")
    assert field_text(empty, ContentField.FREQUENCY) == "N/A"
    assert field_text(empty, ContentField.STROKE_COUNT) == "Strokes: N/A"
    assert field_text(empty, ContentField.KUN_ROMAJI) == "Kun: —"


def test_render_tile_uses_placeholder_glyph(make_game):
    game = make_game(pairs=2)
    game.visibility.set_level(ContentField.KANJI, "flipped", VisibilityLevel.NEVER)
    game.visibility.set_level(ContentField.MEANING, "flipped", VisibilityLevel.BOTH)
    game.board.flipped.append(0)
    tile = render_tile(game, 0)
    assert tile.glyph == "?"
    assert tile.lines == (game.board.card(0).detail.meaning,)
    back = render_tile(game, 1)
    assert back.glyph == "" and back.lines == ()


def test_memory_flag_only_on_hidden_remembered_tiles(make_game):
    game = make_game(pairs=2, opponent=OpponentType.BOT_SHREWD)
    game.memory.record(2, 1)
    game.memory.record(0, 0)
    game.board.flipped.append(0)
    tiles = render_board(game, show_memory=True)
    assert [t.remembered for t in tiles] == [False, False, True, False]
    assert not any(t.remembered for t in render_board(game, show_memory=False))


def test_reading_text_strips_markers():
    assert audio.reading_text(DETAIL) == "ひ、び、か、ニチ、ジツ"
    assert audio.reading_text(KanjiDetail(kanji="鬱")) == ""


class _FakeTTS:
    calls: list[str] = []

    def __init__(self, text: str, lang: str) -> None:
        _FakeTTS.calls.append(text)
        self.text = text

    def write_to_fp(self, fp) -> None:
        fp.write(b"mp3:" + self.text.encode("utf-8"))


class _BrokenTTS:
    def __init__(self, text: str, lang: str) -> None:
        raise RuntimeError("no network")


def test_synthesize_reading_is_memoised(monkeypatch):
    monkeypatch.setattr(audio, "gTTS", _FakeTTS)
    audio.synthesize_reading.cache_clear()
    _FakeTTS.calls = []
    first = audio.get_reading_audio(DETAIL)
    second = audio.get_reading_audio(DETAIL)
    assert first == second == "mp3:ひ、び、か、ニチ、ジツ".encode("utf-8")
    assert _FakeTTS.calls == ["ひ、び、か、ニチ、ジツ"]
    assert audio.get_reading_audio(KanjiDetail(kanji="鬱")) == "mp3:鬱".encode("utf-8")
    audio.synthesize_reading.cache_clear()


def test_synthesize_failure_yields_none(monkeypatch):
    monkeypatch.setattr(audio, "gTTS", _BrokenTTS)
    audio.synthesize_reading.cache_clear()
    assert audio.synthesize_reading("ひ") is None
    assert audio.synthesize_reading("  ") is None
    audio.synthesize_reading.cache_clear()

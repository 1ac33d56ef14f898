from __future__ import annotations

import pytest

from src.kanji_memory_game.domain.data import KanjiDetail, detail_from_api, words_from_api
from src.kanji_memory_game.domain.errors import ErrorCode, InsufficientKanjiError


def test_detail_from_api_joins_lists_and_fills_missing():
    d = detail_from_api(
        {
            "kanji": "日",
            "meanings": ["day", "sun", "Japan"],
            "kun_readings": ["ひ", "-び", "-か"],
            "on_readings": ["ニチ", "ジツ"],
            "name_readings": [],
            "stroke_count": 4,
            "grade": 1,
            "jlpt": None,
            "heisig_en": None,
            "freq_mainichi_shinbun": 1,
            "unicode": "65e5",
        }
    )
    assert d.meaning == "day, sun, Japan"
    assert d.kun == "ひ, -び, -か"
    assert d.name_readings == "—"
    assert d.heisig_en == "—"
    assert d.grade_label == "Grade 1"
    assert d.jlpt_label == "N/A"
    assert d.frequency_label == "#1"
    assert d.unicode_label == "U+65e5"


def test_detail_from_api_requires_kanji():
    with pytest.raises(ValueError):
        detail_from_api({"meanings": ["day"]})


def test_missing_numbers_render_not_available():
    d = KanjiDetail(kanji="鬱")
    assert d.frequency_label == "N/A"
    assert d.unicode_label == "N/A"
    assert d.meaning == "—"


def test_words_from_api_skips_broken_entries():
    words = words_from_api(
        [
            {
                "variants": [{"written": "日本", "pronounced": "にほん"}],
                "meanings": [{"glosses": ["Japan"]}],
            },
            "garbage",
            {"variants": [], "meanings": []},
        ]
    )
    assert len(words) == 1
    assert words[0].variants[0].written == "日本"
    assert words[0].glosses == (("Japan",),)
    assert words_from_api(None) == []


def test_insufficient_kanji_error_details():
    e = InsufficientKanjiError(6, 18, 10)
    assert e.required == 18 and e.available == 10
    payload = e.to_dict()
    assert payload["code"] == ErrorCode.ERR_INSUFFICIENT_KANJI.value
    assert payload["details"] == {"grid_size": 6, "required": 18, "available": 10}
    assert "18" in str(e) and "10" in str(e)


def test_domain_package_reexports():
    from src.kanji_memory_game import domain
    from src.kanji_memory_game.domain import board, data, opponent, visibility

    assert all(hasattr(domain, name) for name in domain.__all__)
    assert domain.Board is board.Board
    assert domain.KanjiDetail is data.KanjiDetail
    assert domain.OpponentType is opponent.OpponentType
    assert domain.resolve_tile_view is visibility.resolve_tile_view

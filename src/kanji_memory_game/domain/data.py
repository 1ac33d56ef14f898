from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from src.kanji_memory_game.domain.constants import MISSING_TEXT, NOT_AVAILABLE


@dataclass(frozen=True)
class KanjiDetail:
    """札に載せる漢字情報（不変）。

    現状の契約:
    - 読み・意味は API の配列を ", " で連結した文字列。空なら "—"。
    - heisig_en が無い場合は "—"。
    - 数値項目（画数・学年・JLPT・頻度）は欠損時 None。
    - unicode は 16 進表記（"U+" なし）。
    """

    kanji: str
    meaning: str = MISSING_TEXT
    kun: str = MISSING_TEXT
    on: str = MISSING_TEXT
    name_readings: str = MISSING_TEXT
    stroke_count: int | None = None
    grade: int | None = None
    jlpt: int | None = None
    heisig_en: str = MISSING_TEXT
    freq_mainichi_shinbun: int | None = None
    unicode: str = ""
    unihan_cjk_compatibility_variant: str | None = None
    notes: tuple[str, ...] = ()

    @property
    def grade_label(self) -> str:
        return f"Grade {self.grade}" if self.grade else NOT_AVAILABLE

    @property
    def jlpt_label(self) -> str:
        return f"N{self.jlpt}" if self.jlpt else NOT_AVAILABLE

    @property
    def frequency_label(self) -> str:
        return f"#{self.freq_mainichi_shinbun}" if self.freq_mainichi_shinbun else NOT_AVAILABLE

    @property
    def unicode_label(self) -> str:
        return f"U+{self.unicode}" if self.unicode else NOT_AVAILABLE


@dataclass(frozen=True)
class WordVariant:
    written: str
    pronounced: str


@dataclass(frozen=True)
class Word:
    """辞書の単語エントリ（表記ゆれ + 語義）。"""

    variants: tuple[WordVariant, ...]
    glosses: tuple[tuple[str, ...], ...]


def _join(values: Iterable[Any] | None) -> str:
    """配列を ", " で連結する。空なら "—"。"""
    parts = [str(v).strip() for v in (values or []) if v is not None and str(v).strip()]
    return ", ".join(parts) or MISSING_TEXT


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def detail_from_api(payload: Mapping[str, Any]) -> KanjiDetail:
    """kanjiapi.dev の `/kanji/{glyph}` 応答を `KanjiDetail` に変換する。

    - `kanji` キーが無い応答は ValueError。
    """
    kanji = payload.get("kanji")
    if not isinstance(kanji, str) or not kanji:
        raise ValueError("kanji detail payload has no 'kanji' field")
    return KanjiDetail(
        kanji=kanji,
        meaning=_join(payload.get("meanings")),
        kun=_join(payload.get("kun_readings")),
        on=_join(payload.get("on_readings")),
        name_readings=_join(payload.get("name_readings")),
        stroke_count=_as_int(payload.get("stroke_count")),
        grade=_as_int(payload.get("grade")),
        jlpt=_as_int(payload.get("jlpt")),
        heisig_en=str(payload.get("heisig_en") or MISSING_TEXT),
        freq_mainichi_shinbun=_as_int(payload.get("freq_mainichi_shinbun")),
        unicode=str(payload.get("unicode") or ""),
        unihan_cjk_compatibility_variant=payload.get("unihan_cjk_compatibility_variant") or None,
        notes=tuple(str(n) for n in (payload.get("notes") or [])),
    )


def words_from_api(payload: Iterable[Mapping[str, Any]] | None) -> list[Word]:
    """`/words/{glyph}` 応答を `Word` のリストに変換する。壊れた要素はスキップ。"""
    words: list[Word] = []
    for entry in payload or []:
        if not isinstance(entry, Mapping):
            continue
        variants = tuple(
            WordVariant(
                written=str(v.get("written") or ""),
                pronounced=str(v.get("pronounced") or ""),
            )
            for v in entry.get("variants") or []
            if isinstance(v, Mapping)
        )
        glosses = tuple(
            tuple(str(g) for g in (m.get("glosses") or []))
            for m in entry.get("meanings") or []
            if isinstance(m, Mapping)
        )
        if not variants and not glosses:
            continue
        words.append(Word(variants=variants, glosses=glosses))
    return words

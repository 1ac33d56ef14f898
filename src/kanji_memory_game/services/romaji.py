from __future__ import annotations

from functools import lru_cache

import pykakasi

from src.kanji_memory_game.domain.constants import MISSING_TEXT

_KAKASI = pykakasi.kakasi()


@lru_cache(maxsize=1024)
def to_romaji(text: str) -> str:
    """かな（ひらがな・カタカナ）をヘボン式ローマ字に変換する。

    - 空文字と "—"（値なし）はそのまま返す。
    - 読みの区切り記号（".", "-", ", "）は保持する。
    """
    if not text or text == MISSING_TEXT:
        return text
    return "".join(item["hepburn"] for item in _KAKASI.convert(text))

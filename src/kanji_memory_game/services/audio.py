from __future__ import annotations

import logging
from functools import lru_cache
from io import BytesIO

from gtts import gTTS

from src.kanji_memory_game.domain.constants import MISSING_TEXT
from src.kanji_memory_game.domain import KanjiDetail

logger = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def synthesize_reading(text: str, lang: str = "ja") -> bytes | None:
    """読みのテキストから音声(mp3)のバイト列を生成して返す。

    - gTTS のネットワーク障害などが起きた場合は None を返す。
    - lru_cache でテキストごとの結果をメモリキャッシュ。
    """
    if not text or not text.strip():
        return None
    try:
        tts = gTTS(text=text, lang=lang)
        bio = BytesIO()
        tts.write_to_fp(bio)
        return bio.getvalue()
    except Exception as e:
        logger.warning("speech synthesis failed for %r: %s", text, e)
        return None


def reading_text(detail: KanjiDetail) -> str:
    """読み上げ用のテキスト（訓読み → 音読みの順、区切りは読点）。

    送り仮名の区切り "." や接辞の "-" は読み上げに不要なので除く。
    """
    readings = [r for r in (detail.kun, detail.on) if r and r != MISSING_TEXT]
    text = "、".join(readings).replace(", ", "、")
    return text.replace(".", "").replace("-", "")


def get_reading_audio(detail: KanjiDetail) -> bytes | None:
    """漢字の読みの音声を返す。読みが無ければ漢字そのものを読み上げる。"""
    return synthesize_reading(reading_text(detail) or detail.kanji)

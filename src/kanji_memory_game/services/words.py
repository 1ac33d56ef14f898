"""
単語一覧の取得とキャッシュ。

契約:
- 漢字ごとに結果をキャッシュし、同じ漢字の取得はセッション中に高々1本しか走らせない。
- 取得失敗（WordFetchError やその他の例外）は空リストとしてキャッシュする（再取得しない）。
- 結果は `Future[list[Word]]` で返し、呼び出し側はブロックしない。
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

import pandas as pd

from src.kanji_memory_game.app.ports.dictionary import DictionaryService
from src.kanji_memory_game.domain import Word, words_from_api
from src.kanji_memory_game.services.romaji import to_romaji

logger = logging.getLogger(__name__)


class WordCache:
    def __init__(self, dictionary: DictionaryService, max_workers: int = 2) -> None:
        self._dictionary = dictionary
        self._lock = threading.Lock()
        self._results: dict[str, list[Word]] = {}
        self._inflight: dict[str, Future[list[Word]]] = {}
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="words")

    def cached(self, kanji: str) -> list[Word] | None:
        with self._lock:
            return self._results.get(kanji)

    def request(self, kanji: str) -> Future[list[Word]]:
        """単語一覧を要求する。取得済みなら完了済み Future、取得中なら同じ Future を返す。"""
        with self._lock:
            if kanji in self._results:
                done: Future[list[Word]] = Future()
                done.set_result(self._results[kanji])
                return done
            fut = self._inflight.get(kanji)
            if fut is not None:
                return fut
            fut = self._executor.submit(self._fetch, kanji)
            self._inflight[kanji] = fut
            return fut

    def _fetch(self, kanji: str) -> list[Word]:
        try:
            words = words_from_api(self._dictionary.get_words(kanji))
        except Exception as e:  # noqa: BLE001 - 失敗は「単語なし」に縮退させる
            logger.warning("word lookup failed for %s: %s", kanji, e)
            words = []
        with self._lock:
            self._results[kanji] = words
            self._inflight.pop(kanji, None)
        return words

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


def words_to_frame(words: list[Word]) -> pd.DataFrame:
    """単語一覧を表示用の DataFrame にする（1行 = 1単語）。

    列: 表記, 読み, ローマ字, 意味
    """
    rows: list[dict[str, str]] = []
    for w in words:
        written = " / ".join(v.written for v in w.variants if v.written)
        pronounced = " / ".join(v.pronounced for v in w.variants if v.pronounced)
        romaji = " / ".join(to_romaji(v.pronounced) for v in w.variants if v.pronounced)
        meanings = " | ".join("; ".join(g) for g in w.glosses if g)
        rows.append({"表記": written, "読み": pronounced, "ローマ字": romaji, "意味": meanings})
    return pd.DataFrame(rows, columns=["表記", "読み", "ローマ字", "意味"])

"""kanjiapi.dev アダプタ。

目的:
- アプリ層ポート `DictionaryService` の HTTP 実装を提供する。
- 共有の requests.Session を使い、タイムアウトを必ず指定する。
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import requests

from src.kanji_memory_game.app.ports.dictionary import DictionaryService
from src.kanji_memory_game.domain.constants import API_BASE_URL
from src.kanji_memory_game.domain.errors import DataLoadError, DetailFetchError, WordFetchError

logger = logging.getLogger(__name__)


class KanjiApiDictionary(DictionaryService):
    """kanjiapi.dev v1 実装の DictionaryService。"""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "kanji-memory-game/0.1"})

    def _get(self, path: str) -> requests.Response:
        url = f"{self.base_url}/{path}"
        logger.debug("GET %s", url)
        return self.session.get(url, timeout=self.timeout)

    def list_kanji(self, set_id: str) -> list[str]:
        try:
            res = self._get(f"kanji/{quote(set_id)}")
            res.raise_for_status()
            data = res.json()
        except (requests.RequestException, ValueError) as e:
            raise DataLoadError(
                f"Failed to load Kanji data from API (Set: {set_id}). Error: {e}",
                details={"set_id": set_id},
            ) from e
        if not isinstance(data, list) or not data:
            raise DataLoadError(
                f"API returned an empty list of kanji for this set ({set_id}).",
                details={"set_id": set_id},
            )
        return [str(k) for k in data]

    def get_kanji_detail(self, glyph: str) -> dict[str, Any]:
        try:
            res = self._get(f"kanji/{quote(glyph)}")
            res.raise_for_status()
            data = res.json()
        except (requests.RequestException, ValueError) as e:
            raise DetailFetchError(
                f"Failed to fetch details for {glyph}: {e}", details={"kanji": glyph}
            ) from e
        if not isinstance(data, dict):
            raise DetailFetchError(f"Unexpected detail payload for {glyph}", details={"kanji": glyph})
        return data

    def get_words(self, glyph: str) -> list[dict[str, Any]]:
        try:
            res = self._get(f"words/{quote(glyph)}")
            # 見つからない = 単語なし（失敗ではない）
            if res.status_code == 404:
                return []
            res.raise_for_status()
            data = res.json()
        except (requests.RequestException, ValueError) as e:
            raise WordFetchError(
                f"Could not load dictionary words for {glyph}: {e}", details={"kanji": glyph}
            ) from e
        return data if isinstance(data, list) else []

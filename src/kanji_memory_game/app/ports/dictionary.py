"""
アプリケーション層のポート: 辞書サービス

目的:
- HTTP クライアントの具体実装（kanjiapi.dev）からサービス層を切り離す。
- テストではフェイク実装を差し込む。
"""

from __future__ import annotations

from typing import Any, Protocol


class DictionaryService(Protocol):
    """漢字辞書へのアクセス抽象。

    契約:
    - list_kanji: セットの漢字一覧。失敗・空なら DataLoadError。
    - get_kanji_detail: 漢字1字の詳細（API の生 dict）。失敗なら DetailFetchError。
    - get_words: 漢字を含む単語（API の生 list）。見つからない場合は空 list、失敗なら WordFetchError。
    """

    def list_kanji(self, set_id: str) -> list[str]:
        """セット識別子に対応する漢字一覧を返す。"""

    def get_kanji_detail(self, glyph: str) -> dict[str, Any]:
        """漢字の詳細を返す。"""

    def get_words(self, glyph: str) -> list[dict[str, Any]]:
        """漢字を含む単語一覧を返す。"""

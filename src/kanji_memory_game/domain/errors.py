"""
エラー分類

- すべて `GameError` を基底とし、`code` と構造化された `details` を持つ。
- UI は `str(e)` をそのまま表示してよい（メッセージは利用者向け）。
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    ERR_DATA_LOAD = "ERR_DATA_LOAD"
    ERR_DETAIL_FETCH = "ERR_DETAIL_FETCH"
    ERR_WORD_FETCH = "ERR_WORD_FETCH"
    ERR_INSUFFICIENT_KANJI = "ERR_INSUFFICIENT_KANJI"
    ERR_INVALID_SETTING = "ERR_INVALID_SETTING"


class GameError(Exception):
    """ゲーム全体の基底例外。

    Attributes:
        code: ErrorCode
        details: 任意の構造化データ（例: {"required": 18, "available": 10}）
    """

    code: ErrorCode = ErrorCode.ERR_INVALID_SETTING

    def __init__(self, message: str = "", details: dict[str, Any] | None = None):
        super().__init__(message or self.code.value)
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code.value, "message": str(self), "details": self.details}


class DataLoadError(GameError):
    """漢字セット一覧の取得失敗（または空）。"""

    code = ErrorCode.ERR_DATA_LOAD


class DetailFetchError(GameError):
    """選択した漢字の詳細一括取得の失敗。セッション開始を中止する。"""

    code = ErrorCode.ERR_DETAIL_FETCH


class WordFetchError(GameError):
    """漢字ごとの単語検索の失敗。呼び出し側で空結果として回復する。"""

    code = ErrorCode.ERR_WORD_FETCH


class InsufficientKanjiError(GameError):
    code = ErrorCode.ERR_INSUFFICIENT_KANJI

    def __init__(self, grid_size: int, required: int, available: int):
        super().__init__(
            f"Cannot create a {grid_size}x{grid_size} grid. Need {required} unique Kanji, "
            f"but the available library only has {available}. "
            "Please choose a smaller grid or a larger kanji set.",
            details={"grid_size": grid_size, "required": required, "available": available},
        )
        self.required = required
        self.available = available


class InvalidSettingError(GameError):
    """設定値（盤面サイズ・表示レベル・ボット設定など）が不正。"""

    code = ErrorCode.ERR_INVALID_SETTING

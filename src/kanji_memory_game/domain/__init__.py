"""ドメイン層（純粋ロジック/データモデル）。

提供物:
- 盤面（札・ペア・表向き/成立済み集合）
- 表示ポリシー（項目ごとの表示レベル、1枚目/2枚目の役割）
- 相手ボットの意思決定
"""

from src.kanji_memory_game.domain.board import Board, build_board
from src.kanji_memory_game.domain.constants import (
    KANJI_SETS,
    PLACEHOLDER_GLYPH,
    PLAYER_ONE,
    PLAYER_TWO,
)
from src.kanji_memory_game.domain.data import KanjiDetail, Word, detail_from_api, words_from_api
from src.kanji_memory_game.domain.opponent import (
    BotConfig,
    BotMemory,
    OpponentType,
    bot_config_for,
    choose_first_card,
    choose_second_card,
)
from src.kanji_memory_game.domain.visibility import (
    CardOrderMode,
    ContentField,
    ContentVisibility,
    TileView,
    resolve_tile_view,
)

__all__ = [
    # board
    "Board",
    "build_board",
    # data
    "KanjiDetail",
    "Word",
    "detail_from_api",
    "words_from_api",
    # opponent
    "BotConfig",
    "BotMemory",
    "OpponentType",
    "bot_config_for",
    "choose_first_card",
    "choose_second_card",
    # visibility
    "CardOrderMode",
    "ContentField",
    "ContentVisibility",
    "TileView",
    "resolve_tile_view",
    # constants
    "KANJI_SETS",
    "PLACEHOLDER_GLYPH",
    "PLAYER_ONE",
    "PLAYER_TWO",
]

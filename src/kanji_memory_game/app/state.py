"""アプリケーションの状態モデル定義。

目的:
- UI とドメインの境界で用いる明示的な状態構造を提供する。
- 1ゲーム分の状態は `GameSession` にまとめ、サービス関数へ参照で渡す（モジュール変数に置かない）。

使い方:
- UI でセッションストアから GameSession を取り出し、ユーザー操作をサービス関数に渡す。
- 新しいゲームを始めるときは GameSession を作り直す（古いタイマーは取り消す）。
"""

from __future__ import annotations

import random
from concurrent.futures import Future
from dataclasses import dataclass, field

from src.kanji_memory_game.domain import constants as c
from src.kanji_memory_game.domain import (
    Board,
    BotConfig,
    BotMemory,
    CardOrderMode,
    ContentVisibility,
    KanjiDetail,
    OpponentType,
    Word,
    bot_config_for,
)
from src.kanji_memory_game.services.scheduler import TimerHandle, TimerQueue
from src.kanji_memory_game.services.words import WordCache


@dataclass
class Settings:
    """画面構成や動作に関する設定。

    現状の契約:
    - grid_size は盤面の一辺（4/6/8）。
    - mismatch_ms は不一致の2枚を表示し続ける時間。
    - reuse_kanji は前回取得した漢字情報を再利用するか。
    """

    grid_size: int = 6
    kanji_set: str = "joyo"
    opponent: OpponentType = OpponentType.BOT_CASUAL
    card_order_mode: CardOrderMode = CardOrderMode.FLIP_ORDER
    mismatch_ms: int = c.MISMATCH_DISPLAY_MS
    show_bot_memory: bool = False
    reuse_kanji: bool = False


@dataclass(frozen=True)
class Timing:
    """タイマー設定（秒）。"""

    reveal_s: float = c.REVEAL_DELAY_MS / 1000
    mismatch_s: float = c.MISMATCH_DISPLAY_MS / 1000
    bot_think_s: float = c.BOT_THINK_DELAY_MS / 1000
    bot_trigger_s: float = c.BOT_TRIGGER_DELAY_MS / 1000


@dataclass
class GameSession:
    """1ゲーム分の状態。

    現状の契約:
    - board は札・表向き集合・成立済み集合・取得者を保持する。
    - scores はプレイヤー ID (1/2) -> 取ったペア数。
    - current_player は不一致の解決時にのみ切り替わる。
    - is_processing は2枚目が表向きになってから解決が終わるまで（ボットの手番中も）True。
    - is_modal_loading は詳細表示の単語取得中に True（クリックを受け付けない）。
    - assignments は card.id -> 役割(1/2)。
    """

    board: Board
    opponent: OpponentType = OpponentType.BOT_CASUAL
    card_order_mode: CardOrderMode = CardOrderMode.FLIP_ORDER
    visibility: ContentVisibility = field(default_factory=ContentVisibility)
    timing: Timing = field(default_factory=Timing)
    timers: TimerQueue = field(default_factory=TimerQueue)
    rng: random.Random = field(default_factory=random.Random)
    words: WordCache | None = None

    scores: dict[int, int] = field(default_factory=lambda: {c.PLAYER_ONE: 0, c.PLAYER_TWO: 0})
    current_player: int = c.PLAYER_ONE
    memory: BotMemory = field(default_factory=BotMemory)
    assignments: dict[int, int] = field(default_factory=dict)
    is_processing: bool = False
    is_modal_loading: bool = False
    started: bool = True
    bot_trigger: TimerHandle | None = None

    # 詳細表示
    detail_index: int | None = None
    pending_detail: tuple[int, Future[list[Word]]] | None = None

    @property
    def bot_config(self) -> BotConfig:
        return bot_config_for(self.opponent)

    @property
    def is_bot_game(self) -> bool:
        return self.opponent.is_bot

    @property
    def is_game_over(self) -> bool:
        return self.board.is_complete()

    @property
    def is_bot_turn(self) -> bool:
        return self.is_bot_game and self.current_player == c.PLAYER_TWO

    @property
    def details(self) -> list[KanjiDetail]:
        """pair_id 順の漢字情報（「前回の漢字を再利用」用）。"""
        by_pair = {card.pair_id: card.detail for card in self.board.cards}
        return [by_pair[i] for i in sorted(by_pair)]

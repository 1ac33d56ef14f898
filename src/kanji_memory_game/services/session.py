"""
ゲームセッションの開始・リセット（UI フレームワーク非依存）。

- 漢字セット一覧の取得
- 盤面サイズの検証と必要ペア数の算出
- 選んだ漢字の詳細一括取得（全件成功のときのみ開始）
- GameSession の構築と、事前割り当てモードの役割決定
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from src.kanji_memory_game.app.ports.dictionary import DictionaryService
from src.kanji_memory_game.app.state import GameSession, Settings, Timing
from src.kanji_memory_game.domain import Board, KanjiDetail, build_board, detail_from_api
from src.kanji_memory_game.domain.constants import GRID_SIZES
from src.kanji_memory_game.domain.errors import (
    DataLoadError,
    DetailFetchError,
    InsufficientKanjiError,
    InvalidSettingError,
)
from src.kanji_memory_game.domain.opponent import OpponentType, parse_opponent_type
from src.kanji_memory_game.domain.visibility import (
    CardOrderMode,
    ContentVisibility,
    assign_initial_roles,
    parse_card_order_mode,
)
from src.kanji_memory_game.services.gameplay import maybe_schedule_bot_turn
from src.kanji_memory_game.services.scheduler import TimerQueue
from src.kanji_memory_game.services.words import WordCache

logger = logging.getLogger(__name__)


def pairs_needed(grid_size: int) -> int:
    """盤面サイズから必要なペア数を返す（偶数 4〜8 のみ）。"""
    if grid_size not in GRID_SIZES:
        raise InvalidSettingError(f"grid size must be one of {GRID_SIZES}: {grid_size}")
    return grid_size * grid_size // 2


def check_enough_kanji(grid_size: int, available: int) -> int:
    needed = pairs_needed(grid_size)
    if needed > available:
        raise InsufficientKanjiError(grid_size, needed, available)
    return needed


def load_kanji_list(dictionary: DictionaryService, set_id: str) -> list[str]:
    """漢字セットの一覧を取得する。失敗・空は DataLoadError。"""
    try:
        chars = list(dictionary.list_kanji(set_id))
    except DataLoadError:
        logger.exception("failed to load kanji set %s", set_id)
        raise
    if not chars:
        raise DataLoadError(f"API returned an empty list of kanji for this set ({set_id}).")
    logger.info("loaded kanji set %s (%d characters)", set_id, len(chars))
    return chars


def fetch_details(
    dictionary: DictionaryService, glyphs: Sequence[str], max_workers: int = 8
) -> list[KanjiDetail]:
    """漢字の詳細を並列に取得する。1件でも失敗したら DetailFetchError（部分結果は返さない）。"""
    if not glyphs:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(glyphs)))) as pool:
        futures = [pool.submit(dictionary.get_kanji_detail, g) for g in glyphs]
        details: list[KanjiDetail] = []
        for glyph, fut in zip(glyphs, futures, strict=True):
            try:
                details.append(detail_from_api(fut.result()))
            except DetailFetchError:
                logger.exception("failed to fetch details for %s", glyph)
                raise
            except Exception as e:
                logger.exception("failed to fetch details for %s", glyph)
                raise DetailFetchError(
                    f"Failed to fetch details for {glyph}: {e}", details={"kanji": glyph}
                ) from e
    return details


def start_session(
    details: Sequence[KanjiDetail],
    grid_size: int,
    opponent: OpponentType | str = OpponentType.BOT_CASUAL,
    card_order_mode: CardOrderMode | str = CardOrderMode.FLIP_ORDER,
    *,
    visibility: ContentVisibility | None = None,
    timing: Timing | None = None,
    words: WordCache | None = None,
    timers: TimerQueue | None = None,
    rng: random.Random | None = None,
) -> GameSession:
    """取得済みの漢字情報からゲームを開始する。

    - 盤面サイズ² / 2 が漢字の件数を超える場合は InsufficientKanjiError。
    - 先頭から必要数だけ使って盤面を作る。
    - 事前割り当てモードなら役割をここで決める。
    """
    needed = check_enough_kanji(grid_size, len(details))
    opponent = parse_opponent_type(opponent)
    mode = parse_card_order_mode(card_order_mode)
    rng = rng or random.Random()
    cards = build_board(list(details[:needed]), rng)
    game = GameSession(
        board=Board(cards=cards),
        opponent=opponent,
        card_order_mode=mode,
        visibility=visibility or ContentVisibility(),
        timing=timing or Timing(),
        timers=timers or TimerQueue(),
        rng=rng,
        words=words,
    )
    if mode.is_precomputed:
        game.assignments = assign_initial_roles(cards, mode, rng)
    logger.info(
        "session started: %dx%d, %d pairs, opponent=%s, mode=%s",
        grid_size,
        grid_size,
        needed,
        opponent.value,
        mode.value,
    )
    return game


def prepare_session(
    dictionary: DictionaryService,
    characters: Sequence[str],
    settings: Settings,
    *,
    previous: Sequence[KanjiDetail] | None = None,
    visibility: ContentVisibility | None = None,
    timing: Timing | None = None,
    timers: TimerQueue | None = None,
    rng: random.Random | None = None,
    max_workers: int = 8,
) -> GameSession:
    """設定に従って漢字を選び、詳細を取得してゲームを開始する。

    - 漢字が足りなければ、ネットワークに触れる前に InsufficientKanjiError。
    - reuse_kanji かつ前回分が足りていれば、前回の漢字情報を再利用する。
    """
    if not characters:
        raise DataLoadError("Cannot start game: the kanji set is empty or failed to load.")
    needed = check_enough_kanji(settings.grid_size, len(characters))
    rng = rng or random.Random()
    if settings.reuse_kanji and previous and len(previous) >= needed:
        details = list(previous[:needed])
        logger.info("reusing %d kanji from the previous game", needed)
    else:
        glyphs = rng.sample(list(characters), needed)
        details = fetch_details(dictionary, glyphs, max_workers=max_workers)
    game = start_session(
        details,
        settings.grid_size,
        settings.opponent,
        settings.card_order_mode,
        visibility=visibility,
        timing=timing,
        words=WordCache(dictionary),
        timers=timers,
        rng=rng,
    )
    return game


def reset_session(game: GameSession | None) -> None:
    """ゲームを終了する。予約済みのタイマーはすべて取り消す。"""
    if game is None:
        return
    game.timers.cancel_all()
    game.bot_trigger = None
    game.started = False
    if game.words is not None:
        game.words.shutdown()
    logger.info("session reset")


def pump(game: GameSession | None) -> int:
    """期限を過ぎたタイマーを実行し、ボットの手番なら予約する。実行件数を返す。"""
    if game is None or not game.started:
        return 0
    ran = game.timers.run_due()
    maybe_schedule_bot_turn(game)
    return ran

from __future__ import annotations

import logging

from src.kanji_memory_game.app.state import GameSession
from src.kanji_memory_game.domain import PLAYER_ONE, PLAYER_TWO, choose_first_card, choose_second_card
from src.kanji_memory_game.domain.visibility import ROLE_FIRST, ROLE_SECOND, CardOrderMode
from src.kanji_memory_game.services.details import request_detail

# UI からのめくり要求とボットの手番を受け取り、ターンの状態遷移を一箇所に集約する。
# 状態遷移: 0枚 → 1枚 → 2枚（ロック中・解決待ち）→ 0枚
# 遅延はすべて GameSession.timers に登録し、セッションのリセットで取り消せるようにする。
# 本モジュールは UI フレームワークに依存しない。

logger = logging.getLogger(__name__)


def can_flip(game: GameSession, index: int) -> bool:
    """めくり要求を受け付けられるか（手番の判定は含まない）。"""
    board = game.board
    return (
        game.started
        and not game.is_game_over
        and not game.is_processing
        and not game.is_modal_loading
        and len(board.flipped) < 2
        and board.is_available(index)
    )


def can_open_detail(game: GameSession, index: int) -> bool:
    """成立済みの札の詳細表示を受け付けられるか。

    ボットの手番中は、予約済みのボット操作を止めないよう受け付けない（終局後は可）。
    """
    board = game.board
    return (
        not game.is_processing
        and not game.is_modal_loading
        and not board.flipped
        and board.is_valid_index(index)
        and board.is_tile_matched(index)
        and (game.is_game_over or not game.is_bot_turn)
    )


def flip_tile(game: GameSession, index: int) -> bool:
    """人間プレイヤーのめくり要求。受け付けたら True。

    - ボット対戦でボットの手番なら拒否する。
    - ボット対戦で1枚目をめくったとき、その札をボットの記憶に加える。
    - 2枚目で処理ロックを取り、表示遅延の後に解決する。
    """
    if not can_flip(game, index) or game.is_bot_turn:
        return False
    _flip(game, index)
    if len(game.board.flipped) == 1 and game.is_bot_game:
        game.memory.record(index, game.board.card(index).pair_id)
    if len(game.board.flipped) == 2:
        _begin_resolution(game)
    return True


def _flip(game: GameSession, index: int) -> None:
    board = game.board
    board.flipped.append(index)
    if game.card_order_mode == CardOrderMode.FIRST_FLIP_STICKY:
        card = board.card(index)
        if card.id not in game.assignments:
            game.assignments[card.id] = ROLE_FIRST if len(board.flipped) == 1 else ROLE_SECOND


def _begin_resolution(game: GameSession) -> None:
    game.is_processing = True
    game.timers.schedule(game.timing.reveal_s, lambda: _resolve_pair(game), "reveal")


def _resolve_pair(game: GameSession) -> None:
    board = game.board
    if len(board.flipped) != 2:
        board.flipped.clear()
        game.is_processing = False
        return
    idx1, idx2 = board.flipped
    card1, card2 = board.card(idx1), board.card(idx2)
    player = game.current_player

    if card1.pair_id == card2.pair_id:
        board.matched.add(card1.pair_id)
        board.match_owners[card1.pair_id] = player
        if game.card_order_mode == CardOrderMode.FLIP_ORDER:
            # 成立後も表示できるよう、解決時点のめくり順を保存
            game.assignments[card1.id] = ROLE_FIRST
            game.assignments[card2.id] = ROLE_SECOND
        game.scores[player] = game.scores.get(player, 0) + 1
        board.flipped.clear()
        game.is_processing = False
        logger.info("player %s matched %s (%d/%d)", player, card1.kanji, len(board.matched), board.pair_count)
        if game.is_game_over:
            logger.info("game over: scores=%s", game.scores)
            return
        maybe_schedule_bot_turn(game)
        return

    if game.is_bot_game:
        game.memory.record(idx2, card2.pair_id)
    logger.info("player %s mismatched %s / %s", player, card1.kanji, card2.kanji)
    game.timers.schedule(game.timing.mismatch_s, lambda: _finish_mismatch(game), "mismatch")


def _finish_mismatch(game: GameSession) -> None:
    game.board.flipped.clear()
    game.current_player = PLAYER_TWO if game.current_player == PLAYER_ONE else PLAYER_ONE
    game.is_processing = False
    maybe_schedule_bot_turn(game)


def maybe_schedule_bot_turn(game: GameSession) -> bool:
    """ボットの手番なら、一定の遅延後にボットを1回だけ動かす予約をする。"""
    if not (
        game.started
        and game.is_bot_turn
        and not game.is_processing
        and not game.is_game_over
    ):
        return False
    if game.timers.is_pending(game.bot_trigger):
        return False
    game.bot_trigger = game.timers.schedule(
        game.timing.bot_trigger_s, lambda: perform_opponent_turn(game), "bot-trigger"
    )
    return True


def perform_opponent_turn(game: GameSession) -> bool:
    """ボットの1手目を選んでめくり、考える時間の後に2枚目を選ぶ。

    盤面に選べる札が無い場合は、何もめくらずロックを解放する。
    """
    game.bot_trigger = None
    board = game.board
    if not game.is_bot_turn or game.is_processing or game.is_game_over or board.flipped:
        return False
    game.is_processing = True
    decision = choose_first_card(board, game.memory, game.bot_config, game.rng)
    if decision is None:
        logger.warning("bot has no tile to flip; aborting turn")
        game.is_processing = False
        return False
    logger.info("bot first card: %d (%s)", decision.index, decision.action)
    _flip(game, decision.index)
    game.memory.record(decision.index, board.card(decision.index).pair_id)
    first = decision.index
    game.timers.schedule(game.timing.bot_think_s, lambda: _opponent_second_card(game, first), "bot-think")
    return True


def _opponent_second_card(game: GameSession, first: int) -> None:
    board = game.board
    if board.flipped != [first]:
        return
    decision = choose_second_card(board, game.memory, game.bot_config, first, game.rng)
    if decision is None:
        logger.warning("bot has no second tile; aborting turn")
        board.flipped.clear()
        game.is_processing = False
        return
    logger.info("bot second card: %d (%s)", decision.index, decision.action)
    _flip(game, decision.index)
    _begin_resolution(game)


def handle_tile_click(game: GameSession, index: int) -> str:
    """盤面の札クリックを振り分ける。

    戻り値:
    - "detail": 成立済みの札 → 詳細表示を要求した（can_open_detail を参照）
    - "flip": めくりを受け付けた
    - "ignored": 受け付けなかった
    """
    if can_open_detail(game, index):
        request_detail(game, index)
        return "detail"
    return "flip" if flip_tile(game, index) else "ignored"

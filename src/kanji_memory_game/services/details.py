from __future__ import annotations

import logging

from src.kanji_memory_game.app.state import GameSession

# 成立済みの札の詳細表示。
# 単語一覧が未取得なら WordCache に要求し、取得完了まで is_modal_loading でクリックを止める。

logger = logging.getLogger(__name__)


def request_detail(game: GameSession, index: int) -> bool:
    """詳細表示を要求する。すぐに表示できれば True、取得待ちなら False。"""
    card = game.board.card(index)
    if card.words is not None:
        game.detail_index = index
        return True
    if game.words is None:
        game.board.attach_words(card.kanji, [])
        game.detail_index = index
        return True
    game.is_modal_loading = True
    game.pending_detail = (index, game.words.request(card.kanji))
    return poll_detail(game)


def poll_detail(game: GameSession) -> bool:
    """取得待ちの単語一覧が揃っていれば札に反映して詳細を開く。開いたら True。"""
    if game.pending_detail is None:
        return False
    index, fut = game.pending_detail
    if not fut.done():
        return False
    card = game.board.card(index)
    game.board.attach_words(card.kanji, fut.result())
    game.pending_detail = None
    game.is_modal_loading = False
    game.detail_index = index
    logger.debug("detail ready for %s", card.kanji)
    return True


def close_detail(game: GameSession) -> None:
    game.detail_index = None

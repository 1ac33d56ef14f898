from __future__ import annotations

import streamlit as st

from src.kanji_memory_game.app.state import GameSession
from src.kanji_memory_game.domain import PLAYER_ONE, PLAYER_TWO


def _opponent_name(game: GameSession) -> str:
    return game.opponent.short_name if game.is_bot_game else "Player 2"


def render_status(game: GameSession) -> None:
    """ステータス（得点・手番・残りペア）と終了時の結果を描画する。"""
    board = game.board
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("Player 1", game.scores.get(PLAYER_ONE, 0))
    with c2:
        st.metric(_opponent_name(game), game.scores.get(PLAYER_TWO, 0))
    with c3:
        st.metric("残りペア", f"{board.pair_count - len(board.matched)}/{board.pair_count}")

    if game.is_game_over:
        p1 = game.scores.get(PLAYER_ONE, 0)
        p2 = game.scores.get(PLAYER_TWO, 0)
        if p1 > p2:
            st.success(f"ゲーム終了！ Player 1 の勝ち（{p1} - {p2}）")
        elif p2 > p1:
            st.info(f"ゲーム終了！ {_opponent_name(game)} の勝ち（{p1} - {p2}）")
        else:
            st.info(f"ゲーム終了！ 引き分け（{p1} - {p2}）")
        return

    turn = "Player 1" if game.current_player == PLAYER_ONE else _opponent_name(game)
    if game.is_bot_turn:
        st.markdown(f"**手番: {turn}**（考え中…）")
    elif game.is_processing:
        st.markdown(f"**手番: {turn}**（判定中…）")
    elif game.is_modal_loading:
        st.markdown(f"**手番: {turn}**（単語を取得中…）")
    else:
        st.markdown(f"**手番: {turn}**")

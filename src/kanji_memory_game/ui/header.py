from __future__ import annotations

import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.domain.errors import GameError
from src.kanji_memory_game.services import app_state


def render_header(store: StSessionStore) -> None:
    """ゲーム中のヘッダー操作（同じ設定でもう一度 / 設定に戻る）を描画する。"""
    c1, c2, _ = st.columns([2, 2, 6])
    with c1:
        if st.button("もう一度", use_container_width=True):
            try:
                with st.spinner("漢字の情報を取得しています…"):
                    app_state.new_game(store)
            except GameError as e:
                st.error(str(e))
            else:
                st.rerun()
    with c2:
        if st.button("設定に戻る", type="primary", use_container_width=True):
            app_state.reset_game(store)
            st.rerun()

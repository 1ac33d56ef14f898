from __future__ import annotations

import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.domain import OpponentType
from src.kanji_memory_game.domain.visibility import CARD_ORDER_LABELS
from src.kanji_memory_game.services import app_state, data_access
from src.kanji_memory_game.services.config_loader import (
    load_content_visibility,
    load_default_settings,
    set_runtime_toml_bytes,
)


def render_sidebar(store: StSessionStore) -> None:
    """サイドバーの設定 UI を描画する。

    - config.toml のアップロードはゲーム中は無効化する。
    - 現在のゲームの設定を要約して表示する。
    - ページリンクは利用可能な場合のみ表示する。
    """
    with st.sidebar:
        st.subheader("設定ファイル")
        running = app_state.is_game_running(store)
        up = st.file_uploader(
            "config.toml（任意）",
            type=["toml"],
            accept_multiple_files=False,
            disabled=running,
        )
        # 同じファイルを毎回適用しないよう、名前とサイズで識別する
        if up is not None and not running:
            token = f"{up.name}:{up.size}"
            if store.get("config_token") != token:
                if set_runtime_toml_bytes(up.getvalue()):
                    store.set("settings", load_default_settings())
                    store.set("visibility", load_content_visibility())
                    store.set("dictionary", None)
                    st.success("設定を読み込みました。")
                else:
                    st.error("config.toml を読み込めませんでした。")
                store.set("config_token", token)

        game = data_access.get_game(store)
        if game is not None:
            st.divider()
            st.subheader("現在のゲーム")
            st.write(f"対戦相手: {game.opponent.value}")
            st.write(f"札の順番: {CARD_ORDER_LABELS[game.card_order_mode]}")
            if game.opponent != OpponentType.PLAYER2:
                st.write(f"ボットの記憶: {len(game.memory)} 枚")

        # ページ移動リンク（Streamlit が対応している場合はサイドバーに表示）
        if hasattr(st.sidebar, "page_link"):
            st.divider()
            st.page_link("pages/content_settings.py", label="表示設定")
            st.page_link("pages/bot_memory.py", label="ボットの記憶")

import logging
import time

import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.domain.constants import WORDS_PAGE_SIZE
from src.kanji_memory_game.services import app_state, data_access
from src.kanji_memory_game.services.config_loader import get_app_title, load_env_config
from src.kanji_memory_game.services.details import close_detail, poll_detail
from src.kanji_memory_game.services.session import pump
from src.kanji_memory_game.ui.board import handle_click, render_board
from src.kanji_memory_game.ui.detail import show_detail
from src.kanji_memory_game.ui.header import render_header
from src.kanji_memory_game.ui.landing import render_setup
from src.kanji_memory_game.ui.sidebar import render_sidebar
from src.kanji_memory_game.ui.status import render_status

# タイマー待ちのときの再実行間隔の上限（秒）
POLL_INTERVAL_S = 0.25


def main():
    # Streamlit の仕様上 set_page_config は最初に 1 度だけ呼ぶ必要があるため、
    # 固定の既定タイトルを使い、見出しは設定を反映して別途描画する。
    default_title = "漢字神経衰弱"
    st.set_page_config(page_title=default_title, layout="wide")
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    load_env_config()

    store = StSessionStore()
    app_state.initialize_state(store)
    st.title(get_app_title(default_title))

    # サイドバー: 設定ファイルとページリンク
    render_sidebar(store)

    # ランディング: ゲームが無ければメインエリアを設定画面にする
    game = data_access.get_game(store)
    if game is None:
        render_setup(store)
        return

    # ここから下はゲーム中の UI
    render_header(store)

    # 期限を過ぎたタイマーを処理してから描画する
    pump(game)
    poll_detail(game)

    render_status(game)
    st.divider()
    settings = data_access.get_settings(store)
    render_board(game, settings.show_bot_memory, lambda i: handle_click(game, i))

    if game.detail_index is not None:
        index = game.detail_index
        close_detail(game)
        store.set("words_shown", WORDS_PAGE_SIZE)
        show_detail(store, game, index)
        return

    # タイマーや単語取得が残っている間は、期限まで待って再実行する
    if game.timers.pending_count() or game.pending_detail is not None:
        due = game.timers.next_due_in()
        time.sleep(POLL_INTERVAL_S if due is None else max(0.0, min(due, POLL_INTERVAL_S)))
        st.rerun()

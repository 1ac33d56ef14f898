from __future__ import annotations

import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.domain import KANJI_SETS, OpponentType
from src.kanji_memory_game.domain.constants import (
    GRID_SIZES,
    MISMATCH_DISPLAY_MAX_MS,
    MISMATCH_DISPLAY_MIN_MS,
)
from src.kanji_memory_game.domain.errors import (
    DataLoadError,
    DetailFetchError,
    InsufficientKanjiError,
    InvalidSettingError,
)
from src.kanji_memory_game.services import app_state, data_access
from src.kanji_memory_game.services.session import pairs_needed


def _load_set(store: StSessionStore, set_id: str) -> bool:
    """漢字セットを読み込む。失敗したらエラーと再試行ボタンを出して False。"""
    try:
        with st.spinner("漢字セットを読み込んでいます…"):
            app_state.load_kanji_set(store, set_id)
    except DataLoadError as e:
        st.error(str(e))
        if st.button("再試行", key="retry_load_set"):
            st.rerun()
        return False
    return True


def render_setup(store: StSessionStore) -> None:
    """ゲーム開始前の設定画面を描画する。

    使用者は、呼び出し元で進行中のゲームが無いときに本関数を呼び出し、
    その直後に return すること。
    """
    settings = data_access.get_settings(store)
    st.header("ゲーム設定")

    names = list(KANJI_SETS.keys())
    ids = list(KANJI_SETS.values())
    current = ids.index(settings.kanji_set) if settings.kanji_set in ids else 0
    name = st.selectbox("漢字セット", options=names, index=current)
    set_id = KANJI_SETS[name]
    if set_id != data_access.get_loaded_set(store) or not data_access.get_characters(store):
        if not _load_set(store, set_id):
            return
    chars = data_access.get_characters(store)
    st.caption(f"{len(chars)} 字を読み込みました。")

    grid = st.select_slider(
        "盤面サイズ",
        options=list(GRID_SIZES),
        value=settings.grid_size if settings.grid_size in GRID_SIZES else GRID_SIZES[1],
        format_func=lambda n: f"{n}x{n}（{n * n} 枚）",
    )
    opponents = list(OpponentType)
    opponent = st.selectbox(
        "対戦相手",
        options=opponents,
        index=opponents.index(settings.opponent),
        format_func=lambda o: o.value,
    )
    mismatch_ms = st.slider(
        "不一致の表示時間（ミリ秒）",
        min_value=MISMATCH_DISPLAY_MIN_MS,
        max_value=MISMATCH_DISPLAY_MAX_MS,
        value=settings.mismatch_ms,
        step=100,
    )
    previous = data_access.get_previous_details(store) or []
    reuse = st.checkbox(
        "前回の漢字を再利用する",
        value=settings.reuse_kanji,
        disabled=len(previous) < pairs_needed(grid),
    )
    show_memory = st.checkbox("ボットの記憶を表示する（デバッグ）", value=settings.show_bot_memory)

    settings.grid_size = int(grid)
    settings.mismatch_ms = int(mismatch_ms)
    settings.reuse_kanji = bool(reuse)
    settings.show_bot_memory = bool(show_memory)
    app_state.change_opponent_type(store, opponent)

    err_holder = st.empty()
    if st.button("スタート", type="primary"):
        try:
            with st.spinner("漢字の情報を取得しています…"):
                app_state.new_game(store)
        except InsufficientKanjiError as e:
            err_holder.error(
                f"このセットの漢字が足りません（必要 {e.required} 字 / {e.available} 字）。"
            )
        except (DetailFetchError, DataLoadError, InvalidSettingError) as e:
            err_holder.error(f"ゲームを開始できませんでした: {e}")
        else:
            st.rerun()

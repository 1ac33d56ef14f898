"""
表示設定ページ
- 札に表示する10項目それぞれについて、成立済み / めくり中の表示レベルを切り替えます。
- ボタンを押すたびに「表示しない → 両方 → 1枚目のみ → 2枚目のみ」の順に巡回します。
- 1枚目 / 2枚目の決め方（札の順番）もここで選びます（次のゲームから有効）。
"""

import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.domain.visibility import (
    CARD_ORDER_LABELS,
    FIELD_LABELS,
    VISIBILITY_LABELS,
    CardOrderMode,
    ContentField,
)
from src.kanji_memory_game.services import app_state, data_access

# ページ設定
st.set_page_config(page_title="表示設定", layout="wide")
st.title("表示設定")

store = StSessionStore()
app_state.initialize_state(store)
visibility = data_access.get_visibility(store)
settings = data_access.get_settings(store)

st.caption("変更は進行中のゲームにもすぐに反映されます。")
head = st.columns([3, 2, 2])
head[0].markdown("**項目**")
head[1].markdown("**成立済み**")
head[2].markdown("**めくり中**")
for f in ContentField:
    level = visibility.get(f)
    row = st.columns([3, 2, 2])
    row[0].write(FIELD_LABELS[f])
    if row[1].button(VISIBILITY_LABELS[level.matched], key=f"vis-{f.value}-matched", use_container_width=True):
        app_state.change_content_visibility(store, f, "matched")
        st.rerun()
    if row[2].button(VISIBILITY_LABELS[level.flipped], key=f"vis-{f.value}-flipped", use_container_width=True):
        app_state.change_content_visibility(store, f, "flipped")
        st.rerun()

st.divider()
st.subheader("札の順番（1枚目 / 2枚目の決め方）")
modes = list(CardOrderMode)
mode = st.selectbox(
    "決め方",
    options=modes,
    index=modes.index(settings.card_order_mode),
    format_func=lambda m: CARD_ORDER_LABELS[m],
)
if mode != settings.card_order_mode:
    app_state.change_card_order_mode(store, mode)
    st.success("次のゲームから有効になります。")
st.markdown(
    """
    - **Flip Order**: 先にめくった札が 1枚目、後が 2枚目。不一致のたびにリセットされます。
    - **First Flip Sticky**: 初めてめくったときの順番をゲーム中ずっと保持します。
    - **Random per Pair**: ゲーム開始時に各ペアの一方を 1枚目、他方を 2枚目に割り当てます。
    - **Random Global**: 全札の半分を 1枚目、残りを 2枚目に割り当てます（ペアは考慮しません）。
    """
)

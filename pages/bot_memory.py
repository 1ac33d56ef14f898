"""
ボットの記憶ページ（デバッグ用）
- 進行中のゲームでボットが覚えている札を、記憶した順に一覧表示します。
"""

import math

import pandas as pd
import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.services import app_state, data_access

# ページ設定
st.set_page_config(page_title="ボットの記憶", layout="wide")
st.title("ボットの記憶")

store = StSessionStore()
app_state.initialize_state(store)
game = data_access.get_game(store)

if game is None:
    st.info("ゲームが始まっていません。トップページからゲームを開始してください。")
    st.stop()
if not game.is_bot_game:
    st.info("対戦相手が Player 2 のため、記憶はありません。")
    st.stop()

board = game.board
side = math.isqrt(len(board)) or 1
rows = []
for order, (index, pair_id) in enumerate(game.memory.items(), start=1):
    if board.is_matched(pair_id):
        state = "成立済み"
    elif board.is_flipped(index):
        state = "表向き"
    else:
        state = "裏向き"
    rows.append(
        {
            "順": order,
            "位置": index,
            "行": index // side + 1,
            "列": index % side + 1,
            "漢字": board.card(index).kanji,
            "状態": state,
        }
    )
st.caption(f"{game.opponent.value} / {len(rows)} 枚")
if rows:
    st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)
else:
    st.write("まだ何も覚えていません。")

"""Streamlit セッション状態アダプタ。

目的:
- UI 層でのみ `st.session_state` を扱うための薄い抽象を提供する。
- アプリ層ポート `SessionStore` の実装を提供する。

使い方:
- UI コードで `StSessionStore` を生成し、app_state / data_access の関数へ渡す。
- GameSession はリラン間で同じオブジェクトとして保持される（タイマーもそのまま残る）。
"""

from __future__ import annotations

from typing import Any

import streamlit as st

from src.kanji_memory_game.app.ports.session_store import SessionStore


class StSessionStore(SessionStore):
    """Streamlit 実装の SessionStore。"""

    def get(self, key: str, default: Any = None) -> Any:  # noqa: ANN401 - 任意のセッション値を扱うため Any 許容
        return st.session_state.get(key, default)

    def set(self, key: str, value: Any) -> None:  # noqa: ANN401 - 任意のセッション値を扱うため Any 許容
        st.session_state[key] = value

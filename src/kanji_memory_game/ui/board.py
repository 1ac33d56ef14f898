from __future__ import annotations

import math
from collections.abc import Callable

import streamlit as st

from src.kanji_memory_game.app.state import GameSession
from src.kanji_memory_game.domain import PLAYER_ONE
from src.kanji_memory_game.services.gameplay import can_open_detail, handle_tile_click
from src.kanji_memory_game.services.render import TileRender, render_board as build_tiles

# 裏向きの札のラベル
BACK_LABEL = "■"


def render_board(game: GameSession, show_memory: bool, on_click: Callable[[int], None]) -> None:
    """盤面を描画し、クリックで on_click(index) を呼び出す。"""
    tiles = build_tiles(game, show_memory)
    side = int(math.isqrt(len(tiles))) or 1
    locked = game.is_processing or game.is_modal_loading
    for r in range(side):
        cols = st.columns(side)
        for c in range(side):
            index = r * side + c
            if index >= len(tiles):
                continue
            with cols[c]:
                _render_tile(game, tiles[index], locked, on_click)


def _owner_label(game: GameSession, owner: int | None) -> str:
    if owner is None:
        return ""
    if owner == PLAYER_ONE:
        return "P1"
    return game.opponent.short_name if game.is_bot_game else "P2"


def _render_tile(
    game: GameSession, tile: TileRender, locked: bool, on_click: Callable[[int], None]
) -> None:
    view = tile.view
    if view.matched:
        label = tile.glyph
        # 成立済みの札は詳細表示のために押せる（終局後も可）
        disabled = not can_open_detail(game, tile.index)
        kind = "primary"
    elif view.is_front:
        label = tile.glyph
        disabled = True
        kind = "secondary"
    else:
        label = BACK_LABEL
        disabled = locked or game.is_bot_turn or game.is_game_over
        kind = "secondary"
    if st.button(
        label,
        key=f"tile-{tile.index}",
        use_container_width=True,
        disabled=disabled,
        type=kind,
    ):
        on_click(tile.index)
        st.rerun()
    notes: list[str] = list(tile.lines)
    if view.matched:
        notes.append(f"取得: {_owner_label(game, view.owner)}")
    if tile.remembered:
        notes.append("MEM")
    if notes:
        st.caption("  \n".join(notes))


def handle_click(game: GameSession, index: int) -> None:
    """盤面セルクリック時の処理をサービスに委譲する。"""
    handle_tile_click(game, index)

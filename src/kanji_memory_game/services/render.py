"""
盤面描画用のデータ組み立て（UI フレームワーク非依存）。

- resolve_tile_view の結果から、札に表示する文字列を項目ごとに作る。
- 主文字が非表示の表向きの札はプレースホルダのグリフを出す。
- デバッグ用に「ボットが記憶している裏向きの札」を示すフラグを付ける。
"""

from __future__ import annotations

from dataclasses import dataclass

from src.kanji_memory_game.app.state import GameSession
from src.kanji_memory_game.domain import (
    PLACEHOLDER_GLYPH,
    ContentField,
    KanjiDetail,
    TileView,
    resolve_tile_view,
)
from src.kanji_memory_game.services.romaji import to_romaji

# 札の下段に並べる順（主文字は別扱い）
FIELD_ORDER: tuple[ContentField, ...] = (
    ContentField.FREQUENCY,
    ContentField.MEANING,
    ContentField.HEISIG,
    ContentField.ON,
    ContentField.KUN,
    ContentField.ON_ROMAJI,
    ContentField.KUN_ROMAJI,
    ContentField.STROKE_COUNT,
    ContentField.UNICODE,
)


@dataclass(frozen=True)
class TileRender:
    """1枚分の描画データ。

    - glyph: 裏向きなら空文字、表向きで主文字非表示なら "?"。
    - lines: 表示する項目の文字列（FIELD_ORDER 順）。
    - remembered: ボットの記憶にある裏向きの札（デバッグ表示用）。
    """

    view: TileView
    glyph: str
    lines: tuple[str, ...]
    remembered: bool = False

    @property
    def index(self) -> int:
        return self.view.index


def field_text(detail: KanjiDetail, f: ContentField) -> str:
    """項目の表示文字列を返す。"""
    if f == ContentField.KANJI:
        return detail.kanji
    if f == ContentField.FREQUENCY:
        return detail.frequency_label
    if f == ContentField.MEANING:
        return detail.meaning
    if f == ContentField.HEISIG:
        return f"Heisig: {detail.heisig_en}"
    if f == ContentField.ON:
        return f"On: {detail.on}"
    if f == ContentField.KUN:
        return f"Kun: {detail.kun}"
    if f == ContentField.ON_ROMAJI:
        return f"On: {to_romaji(detail.on)}"
    if f == ContentField.KUN_ROMAJI:
        return f"Kun: {to_romaji(detail.kun)}"
    if f == ContentField.STROKE_COUNT:
        return f"Strokes: {detail.stroke_count}" if detail.stroke_count else "Strokes: N/A"
    return detail.unicode_label


def render_tile(game: GameSession, index: int, show_memory: bool = False) -> TileRender:
    view = resolve_tile_view(
        game.board, index, game.visibility, game.card_order_mode, game.assignments
    )
    if not view.is_front:
        remembered = show_memory and game.is_bot_game and index in game.memory
        return TileRender(view=view, glyph="", lines=(), remembered=remembered)
    detail = game.board.card(index).detail
    glyph = detail.kanji if view.shows_glyph else PLACEHOLDER_GLYPH
    lines = tuple(field_text(detail, f) for f in FIELD_ORDER if f in view.fields)
    return TileRender(view=view, glyph=glyph, lines=lines)


def render_board(game: GameSession, show_memory: bool = False) -> list[TileRender]:
    """盤面全体の描画データ（インデックス順）。"""
    return [render_tile(game, i, show_memory) for i in range(len(game.board))]

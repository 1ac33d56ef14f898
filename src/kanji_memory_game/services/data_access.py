from __future__ import annotations

from src.kanji_memory_game.app.ports.session_store import SessionStore
from src.kanji_memory_game.app.state import GameSession, Settings
from src.kanji_memory_game.domain import ContentVisibility, KanjiDetail


def get_game(store: SessionStore) -> GameSession | None:
    """セッション（store）内の進行中ゲームを返す。未開始なら None。"""
    game = store.get("game")
    return game if isinstance(game, GameSession) else None


def set_game(store: SessionStore, game: GameSession | None) -> None:
    """進行中ゲームを設定する（None で解除）。

    - UI やコントローラ層からは本関数経由で設定することで、参照箇所の統一を図る。
    """
    store.set("game", game)


def get_settings(store: SessionStore) -> Settings:
    """セッションの設定を返す（未設定時は既定値）。"""
    settings = store.get("settings")
    return settings if isinstance(settings, Settings) else Settings()


def get_visibility(store: SessionStore) -> ContentVisibility:
    """表示設定を返す。未設定なら既定値を作ってセッションに保存する。"""
    visibility = store.get("visibility")
    if not isinstance(visibility, ContentVisibility):
        visibility = ContentVisibility()
        store.set("visibility", visibility)
    return visibility


# ---- Kanji set helpers ----


def set_characters(store: SessionStore, set_id: str, characters: list[str]) -> None:
    """読み込んだ漢字セットの一覧と識別子をセッションに設定する。"""
    store.set("kanji_characters", characters)
    store.set("kanji_set_loaded", set_id)


def get_characters(store: SessionStore) -> list[str]:
    """漢字セットの一覧を返す（未読込時は空リスト）。"""
    return store.get("kanji_characters", [])


def get_loaded_set(store: SessionStore) -> str | None:
    """読み込み済みの漢字セット識別子。未読込なら None。"""
    return store.get("kanji_set_loaded")


def set_previous_details(store: SessionStore, details: list[KanjiDetail] | None) -> None:
    store.set("previous_details", details)


def get_previous_details(store: SessionStore) -> list[KanjiDetail] | None:
    """前回のゲームで取得した漢字情報（「前回の漢字を再利用」用）。"""
    return store.get("previous_details")

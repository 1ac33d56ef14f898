from __future__ import annotations

import logging

from src.kanji_memory_game.adapters.dictionary_kanjiapi import KanjiApiDictionary
from src.kanji_memory_game.app.ports.dictionary import DictionaryService
from src.kanji_memory_game.app.ports.session_store import SessionStore
from src.kanji_memory_game.app.state import GameSession, Settings, Timing
from src.kanji_memory_game.domain.constants import WORDS_PAGE_SIZE
from src.kanji_memory_game.domain.opponent import OpponentType, parse_opponent_type
from src.kanji_memory_game.domain.visibility import (
    CardOrderMode,
    ContentField,
    VisibilityLevel,
    parse_card_order_mode,
    parse_field,
)
from src.kanji_memory_game.services import data_access
from src.kanji_memory_game.services.config_loader import (
    clamp_mismatch_ms,
    get_api_settings,
    get_timing_ms,
    load_content_visibility,
    load_default_settings,
)
from src.kanji_memory_game.services.session import load_kanji_list, prepare_session, reset_session

logger = logging.getLogger(__name__)


def initialize_state(store: SessionStore) -> None:
    """アプリ起動時に必要なセッション状態を初期化する。

    既に存在するキーは上書きせず、未定義のときのみ初期値を設定する。
    設定と表示設定は TOML の既定値（無ければコード既定値）から作る。
    """
    if store.get("settings") is None:
        store.set("settings", load_default_settings())
    if store.get("visibility") is None:
        store.set("visibility", load_content_visibility())
    if store.get("game") is None:
        data_access.set_game(store, None)
    if store.get("kanji_characters") is None:
        store.set("kanji_characters", [])
        store.set("kanji_set_loaded", None)
    if store.get("previous_details") is None:
        data_access.set_previous_details(store, None)
    # 詳細表示の単語の表示件数
    if store.get("words_shown") is None:
        store.set("words_shown", WORDS_PAGE_SIZE)


def get_dictionary(store: SessionStore) -> DictionaryService:
    """辞書サービスを返す。未生成なら API 設定から作ってセッションに保持する。"""
    dictionary = store.get("dictionary")
    if dictionary is None:
        api = get_api_settings()
        dictionary = KanjiApiDictionary(base_url=api["base_url"], timeout=api["timeout"])
        store.set("dictionary", dictionary)
    return dictionary


def is_game_running(store: SessionStore) -> bool:
    game = data_access.get_game(store)
    return game is not None and game.started


def load_kanji_set(store: SessionStore, set_id: str | None = None) -> bool:
    """漢字セットの一覧を読み込む。ゲーム中は何もしない（False）。

    - 失敗・空のときは DataLoadError を送出する（呼び出し側で再試行 UI を出す）。
    - セットが変わったら前回の漢字情報は破棄する。
    """
    if is_game_running(store):
        logger.info("kanji set reload ignored while a game is running")
        return False
    settings = data_access.get_settings(store)
    target = set_id or settings.kanji_set
    if target != data_access.get_loaded_set(store):
        data_access.set_previous_details(store, None)
    chars = load_kanji_list(get_dictionary(store), target)
    settings.kanji_set = target
    data_access.set_characters(store, target, chars)
    return True


def ensure_kanji_set(store: SessionStore) -> bool:
    """設定中のセットが未読込なら読み込む。読み込んだら True。"""
    settings = data_access.get_settings(store)
    if data_access.get_loaded_set(store) == settings.kanji_set and data_access.get_characters(store):
        return False
    return load_kanji_set(store, settings.kanji_set)


def build_timing(settings: Settings) -> Timing:
    """TOML のタイマー設定と不一致表示時間からゲーム用の Timing を作る。"""
    ms = get_timing_ms()
    return Timing(
        reveal_s=ms["reveal_ms"] / 1000,
        mismatch_s=clamp_mismatch_ms(settings.mismatch_ms) / 1000,
        bot_think_s=ms["bot_think_ms"] / 1000,
        bot_trigger_s=ms["bot_trigger_ms"] / 1000,
    )


def new_game(store: SessionStore) -> GameSession:
    """現在の設定で新しいゲームを始める。

    - 進行中のゲームがあればタイマーを取り消してから作り直す。
    - 失敗（InsufficientKanjiError / DetailFetchError など）は呼び出し側へ送出し、
      セッションの状態は変えない。
    """
    settings = data_access.get_settings(store)
    dictionary = get_dictionary(store)
    game = prepare_session(
        dictionary,
        data_access.get_characters(store),
        settings,
        previous=data_access.get_previous_details(store),
        visibility=data_access.get_visibility(store),
        timing=build_timing(settings),
        max_workers=get_api_settings()["max_workers"],
    )
    reset_session(data_access.get_game(store))
    data_access.set_game(store, game)
    data_access.set_previous_details(store, game.details)
    store.set("words_shown", WORDS_PAGE_SIZE)
    return game


def reset_game(store: SessionStore) -> None:
    """ゲームを終了して設定画面に戻る。予約済みのタイマーは取り消す。"""
    reset_session(data_access.get_game(store))
    data_access.set_game(store, None)


def change_content_visibility(
    store: SessionStore,
    field: ContentField | str,
    kind: str,
    level: VisibilityLevel | str | None = None,
) -> VisibilityLevel:
    """表示設定を変更する。level 省略時は巡回順で1つ進める。

    進行中のゲームにも即座に反映される（同じ ContentVisibility を共有する）。
    """
    visibility = data_access.get_visibility(store)
    if level is None:
        return visibility.cycle(field, kind)
    visibility.set_level(field, kind, level)
    return getattr(visibility.get(parse_field(field)), kind)


def change_card_order_mode(store: SessionStore, mode: CardOrderMode | str) -> CardOrderMode:
    """札の順番（1枚目/2枚目）の決め方を変更する。次のゲームから有効。"""
    settings = data_access.get_settings(store)
    settings.card_order_mode = parse_card_order_mode(mode)
    return settings.card_order_mode


def change_opponent_type(store: SessionStore, opponent: OpponentType | str) -> OpponentType:
    """相手の種類を変更する。次のゲームから有効。"""
    settings = data_access.get_settings(store)
    settings.opponent = parse_opponent_type(opponent)
    return settings.opponent

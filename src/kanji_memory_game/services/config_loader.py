from __future__ import annotations

import logging
import os
import tomllib
from typing import Any

from src.kanji_memory_game.domain import constants as c
from src.kanji_memory_game.domain.errors import InvalidSettingError
from src.kanji_memory_game.app.state import Settings
from src.kanji_memory_game.domain.opponent import parse_opponent_type
from src.kanji_memory_game.domain.visibility import ContentVisibility, parse_card_order_mode

logger = logging.getLogger(__name__)

# 設定ファイルのパスを指定する環境変数
CONFIG_ENV_VAR = "KANJI_MEMORY_CONFIG"


class _RuntimeStore:
    config: dict[str, Any] | None = None


_RUNTIME_STORE = _RuntimeStore()


def set_runtime_config(cfg: dict[str, Any] | None) -> None:
    """実行時（アップロード）で与えられた設定を保持する。None で解除。"""
    _RUNTIME_STORE.config = cfg if isinstance(cfg, dict) else None


def set_runtime_toml_bytes(data: bytes) -> bool:
    """アップロードされた TOML バイト列から実行時設定を反映する。反映できたら True。"""
    try:
        cfg = tomllib.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("ignoring invalid config.toml: %s", e)
        set_runtime_config(None)
        return False
    set_runtime_config(cfg)
    return True


def load_env_config() -> None:
    """環境変数で指定された TOML があれば読み込む（実行時設定が未設定のときのみ）。"""
    path = os.environ.get(CONFIG_ENV_VAR)
    if not path or _RUNTIME_STORE.config is not None:
        return
    try:
        with open(path, "rb") as f:
            set_runtime_toml_bytes(f.read())
    except OSError as e:
        logger.warning("cannot read %s=%s: %s", CONFIG_ENV_VAR, path, e)


def _get_config() -> dict[str, Any]:
    """現在有効な設定を返す。

    方針: 実行時設定があればそれを返し、無ければ空辞書（呼び出し側で既定値へフォールバック）。
    """
    if isinstance(_RUNTIME_STORE.config, dict):
        return _RUNTIME_STORE.config
    return {}


def _section(name: str) -> dict[str, Any]:
    sec = _get_config().get(name)
    return sec if isinstance(sec, dict) else {}


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def get_app_title(default: str = "漢字神経衰弱") -> str:
    title = _get_config().get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return default


def get_api_settings() -> dict[str, Any]:
    """辞書 API の接続設定（base_url, timeout, max_workers）。"""
    api = _section("api")
    base_url = api.get("base_url")
    timeout = _number(api.get("timeout"))
    workers = api.get("max_workers")
    return {
        "base_url": base_url.strip() if isinstance(base_url, str) and base_url.strip() else c.API_BASE_URL,
        "timeout": timeout if timeout and timeout > 0 else 10.0,
        "max_workers": int(workers) if isinstance(workers, int) and workers > 0 else 8,
    }


def get_timing_ms() -> dict[str, int]:
    """タイマー既定値（ミリ秒）。不正値はコード既定値。"""
    timing = _section("timing")
    defaults = {
        "reveal_ms": c.REVEAL_DELAY_MS,
        "bot_think_ms": c.BOT_THINK_DELAY_MS,
        "bot_trigger_ms": c.BOT_TRIGGER_DELAY_MS,
    }
    result: dict[str, int] = {}
    for key, default in defaults.items():
        v = _number(timing.get(key))
        result[key] = int(v) if v is not None and v >= 0 else default
    return result


def clamp_mismatch_ms(value: int) -> int:
    return max(c.MISMATCH_DISPLAY_MIN_MS, min(c.MISMATCH_DISPLAY_MAX_MS, int(value)))


def load_default_settings_values() -> dict[str, int | str]:
    result: dict[str, int | str] = {}
    settings = _section("settings")
    # ゲーム設定の既定値（TOML からの読み込み）。
    # 不正な型の場合は各呼び出し側でコード既定値へフォールバックする。
    if isinstance(settings.get("grid_size"), int) and settings["grid_size"] in c.GRID_SIZES:
        result["grid_size"] = int(settings["grid_size"])
    if isinstance(settings.get("kanji_set"), str) and settings["kanji_set"] in c.KANJI_SETS.values():
        result["kanji_set"] = settings["kanji_set"]
    if isinstance(settings.get("opponent"), str):
        result["opponent"] = settings["opponent"]
    if isinstance(settings.get("card_order_mode"), str):
        result["card_order_mode"] = settings["card_order_mode"]
    if isinstance(settings.get("mismatch_ms"), int):
        result["mismatch_ms"] = clamp_mismatch_ms(settings["mismatch_ms"])
    return result


def load_content_visibility() -> ContentVisibility:
    """既定の表示設定に `[visibility.<field>]` の上書きを適用して返す。不正な項目は無視。"""
    config = ContentVisibility()
    for field_name, levels in _section("visibility").items():
        if not isinstance(levels, dict):
            continue
        for kind in ("matched", "flipped"):
            level = levels.get(kind)
            if level is None:
                continue
            try:
                config.set_level(field_name, kind, str(level))
            except InvalidSettingError as e:
                logger.warning("ignoring visibility override %s.%s: %s", field_name, kind, e)
    return config


def load_default_settings() -> Settings:
    """TOML の既定値から Settings を作る（不正値はコード既定値）。"""
    values = load_default_settings_values()
    defaults = Settings()
    try:
        opponent = parse_opponent_type(str(values.get("opponent", defaults.opponent.value)))
    except InvalidSettingError:
        opponent = defaults.opponent
    try:
        mode = parse_card_order_mode(str(values.get("card_order_mode", defaults.card_order_mode.value)))
    except InvalidSettingError:
        mode = defaults.card_order_mode
    return Settings(
        grid_size=int(values.get("grid_size", defaults.grid_size)),
        kanji_set=str(values.get("kanji_set", defaults.kanji_set)),
        opponent=opponent,
        card_order_mode=mode,
        mismatch_ms=int(values.get("mismatch_ms", defaults.mismatch_ms)),
    )

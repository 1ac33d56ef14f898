"""
共通定数
- コメントは現状の目的・契約・使い方のみを記載する。
"""

# 辞書 API の既定ベース URL
API_BASE_URL: str = "https://kanjiapi.dev/v1"

# 漢字セット（表示名 -> API のセット識別子）
KANJI_SETS: dict[str, str] = {
    "Jōyō (Standard)": "joyo",
    "Jinmeiyō (Names)": "jinmeiyo",
    "Heisig (Keywords)": "heisig",
    "Kyōiku (School)": "kyouiku",
    "Grade 1": "grade-1",
    "Grade 2": "grade-2",
    "Grade 3": "grade-3",
    "Grade 4": "grade-4",
    "Grade 5": "grade-5",
    "Grade 6": "grade-6",
    "Jōyō (excluding Kyōiku)": "grade-8",
    "JLPT N5": "jlpt-5",
    "JLPT N4": "jlpt-4",
    "JLPT N3": "jlpt-3",
    "JLPT N2": "jlpt-2",
    "JLPT N1": "jlpt-1",
    "All Kanji (13k+)": "all",
}

# 盤面サイズ（一辺）の許容範囲。偶数のみ
GRID_SIZES: tuple[int, ...] = (4, 6, 8)

# プレイヤー ID（1 = 人間、2 = 相手）
PLAYER_ONE: int = 1
PLAYER_TWO: int = 2

# 表向きだが主文字が非表示のときに代わりに出すグリフ
PLACEHOLDER_GLYPH: str = "?"

# 値が無い項目の表示
MISSING_TEXT: str = "—"
NOT_AVAILABLE: str = "N/A"

# タイマー既定値（ミリ秒）
REVEAL_DELAY_MS: int = 1000
MISMATCH_DISPLAY_MS: int = 1500
MISMATCH_DISPLAY_MIN_MS: int = 500
MISMATCH_DISPLAY_MAX_MS: int = 3000
BOT_THINK_DELAY_MS: int = 1000
BOT_TRIGGER_DELAY_MS: int = 500

# 詳細表示で一度に見せる単語数
WORDS_PAGE_SIZE: int = 10

from __future__ import annotations

import streamlit as st

from src.kanji_memory_game.adapters.session_store_streamlit import StSessionStore
from src.kanji_memory_game.app.state import GameSession
from src.kanji_memory_game.domain.constants import NOT_AVAILABLE, WORDS_PAGE_SIZE
from src.kanji_memory_game.services.audio import get_reading_audio
from src.kanji_memory_game.services.romaji import to_romaji
from src.kanji_memory_game.services.words import words_to_frame


@st.dialog("漢字の詳細", width="large")
def show_detail(store: StSessionStore, game: GameSession, index: int) -> None:
    """成立済みの札の詳細（読み・意味・単語一覧・読み上げ）をダイアログで表示する。

    「さらに表示」はダイアログ内だけを再実行するため、開いたまま件数を増やせる。
    """
    card = game.board.card(index)
    d = card.detail
    st.markdown(f"<div style='font-size:5rem; text-align:center;'>{d.kanji}</div>", unsafe_allow_html=True)
    st.markdown(f"**意味**: {d.meaning}")

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("画数", d.stroke_count if d.stroke_count else NOT_AVAILABLE)
    c2.metric("学年", d.grade_label)
    c3.metric("JLPT", d.jlpt_label)
    c4.metric("頻度", d.frequency_label)

    st.markdown(f"**訓読み**: {d.kun}（{to_romaji(d.kun)}）")
    st.markdown(f"**音読み**: {d.on}（{to_romaji(d.on)}）")
    st.markdown(f"**名乗り**: {d.name_readings}")
    st.markdown(f"**Heisig**: {d.heisig_en}　**Unicode**: {d.unicode_label}")
    if d.unihan_cjk_compatibility_variant:
        st.markdown(f"**互換漢字**: {d.unihan_cjk_compatibility_variant}")
    if d.notes:
        st.caption(" / ".join(d.notes))

    if st.button("読みを再生", key=f"tts-{index}"):
        audio_bytes = get_reading_audio(d)
        if audio_bytes:
            st.audio(audio_bytes, format="audio/mp3")
        else:
            st.warning("音声生成に失敗しました（ネットワーク状況等をご確認ください）。")

    st.subheader("単語")
    words = card.words or []
    if not words:
        st.info("単語が見つかりませんでした。")
        return
    shown = int(store.get("words_shown") or WORDS_PAGE_SIZE)
    st.dataframe(words_to_frame(words[:shown]), hide_index=True, use_container_width=True)
    st.caption(f"{min(shown, len(words))} / {len(words)} 件")
    if shown < len(words) and st.button("さらに表示", key=f"more-{index}"):
        store.set("words_shown", shown + WORDS_PAGE_SIZE)
        st.rerun(scope="fragment")

from __future__ import annotations

import random
from collections import Counter

import pytest
from conftest import ordered_board

from src.kanji_memory_game.domain.errors import InvalidSettingError
from src.kanji_memory_game.domain.visibility import (
    ROLE_FIRST,
    ROLE_SECOND,
    CardOrderMode,
    ContentField,
    ContentVisibility,
    VisibilityLevel,
    assign_initial_roles,
    is_field_visible,
    resolve_role,
    resolve_tile_view,
)


def test_face_down_tile_shows_nothing():
    board = ordered_board(2)
    view = resolve_tile_view(board, 0, ContentVisibility(), CardOrderMode.FLIP_ORDER, {})
    assert view.face == "back"
    assert view.fields == frozenset()
    assert view.role is None


def test_default_flipped_and_matched_fields():
    board = ordered_board(2)
    config = ContentVisibility()
    board.flipped.append(0)
    view = resolve_tile_view(board, 0, config, CardOrderMode.FLIP_ORDER, {})
    assert view.is_front and view.role == ROLE_FIRST
    assert view.fields == frozenset({ContentField.KANJI})

    board.flipped.clear()
    board.matched.add(1)
    board.match_owners[1] = 2
    view = resolve_tile_view(board, 2, config, CardOrderMode.FLIP_ORDER, {})
    # 成立済みは matched 設定が NEVER 以外なら役割に関係なく表示
    assert view.fields == frozenset(
        {ContentField.KANJI, ContentField.MEANING, ContentField.ON, ContentField.KUN}
    )
    assert view.matched and view.owner == 2


def test_first_and_second_only_follow_role():
    board = ordered_board(2)
    config = ContentVisibility()
    config.set_level(ContentField.MEANING, "flipped", VisibilityLevel.FIRST_ONLY)
    config.set_level(ContentField.HEISIG, "flipped", VisibilityLevel.SECOND_ONLY)
    board.flipped.extend([0, 2])
    assert is_field_visible(board, 0, ContentField.MEANING, config, ROLE_FIRST)
    assert not is_field_visible(board, 0, ContentField.HEISIG, config, ROLE_FIRST)
    assert not is_field_visible(board, 2, ContentField.MEANING, config, ROLE_SECOND)
    assert is_field_visible(board, 2, ContentField.HEISIG, config, ROLE_SECOND)


def test_hidden_glyph_on_face_up_tile():
    board = ordered_board(2)
    config = ContentVisibility()
    config.set_level(ContentField.KANJI, "flipped", VisibilityLevel.SECOND_ONLY)
    board.flipped.append(0)
    view = resolve_tile_view(board, 0, config, CardOrderMode.FLIP_ORDER, {})
    assert view.is_front
    assert not view.shows_glyph


def test_resolution_is_idempotent():
    board = ordered_board(3)
    config = ContentVisibility()
    board.flipped.extend([4, 1])
    board.matched.add(1)
    for i in range(len(board)):
        a = resolve_tile_view(board, i, config, CardOrderMode.FLIP_ORDER, {})
        b = resolve_tile_view(board, i, config, CardOrderMode.FLIP_ORDER, {})
        assert a == b
    assert board.flipped == [4, 1]
    assert board.matched == {1}


def test_flip_order_uses_stored_role_after_match():
    board = ordered_board(2)
    board.matched.add(0)
    assignments = {board.card(1).id: ROLE_FIRST, board.card(0).id: ROLE_SECOND}
    assert resolve_role(board, 1, CardOrderMode.FLIP_ORDER, assignments) == ROLE_FIRST
    assert resolve_role(board, 0, CardOrderMode.FLIP_ORDER, assignments) == ROLE_SECOND


def test_random_per_pair_splits_each_pair():
    board = ordered_board(6)
    roles = assign_initial_roles(board.cards, CardOrderMode.RANDOM_PER_PAIR, random.Random(3))
    for pair_id in range(6):
        ids = [c.id for c in board.cards if c.pair_id == pair_id]
        assert sorted(roles[i] for i in ids) == [ROLE_FIRST, ROLE_SECOND]


def test_random_global_assigns_exactly_half():
    board = ordered_board(8)
    roles = assign_initial_roles(board.cards, CardOrderMode.RANDOM_GLOBAL, random.Random(5))
    counts = Counter(roles.values())
    assert counts[ROLE_FIRST] == 8
    assert counts[ROLE_SECOND] == 8


def test_flip_modes_have_no_precomputed_roles():
    board = ordered_board(2)
    assert assign_initial_roles(board.cards, CardOrderMode.FLIP_ORDER) == {}
    assert assign_initial_roles(board.cards, CardOrderMode.FIRST_FLIP_STICKY) == {}


def test_cycle_order():
    config = ContentVisibility()
    seen = [config.cycle(ContentField.FREQUENCY, "matched") for _ in range(4)]
    assert seen == [
        VisibilityLevel.BOTH,
        VisibilityLevel.FIRST_ONLY,
        VisibilityLevel.SECOND_ONLY,
        VisibilityLevel.NEVER,
    ]


def test_invalid_visibility_settings():
    config = ContentVisibility()
    with pytest.raises(InvalidSettingError):
        config.set_level("colour", "matched", "BOTH")
    with pytest.raises(InvalidSettingError):
        config.set_level(ContentField.KANJI, "matched", "SOMETIMES")
    with pytest.raises(InvalidSettingError):
        config.set_level(ContentField.KANJI, "hovered", "BOTH")

from __future__ import annotations

import random

from src.kanji_memory_game.domain.opponent import OpponentType
from src.kanji_memory_game.domain.visibility import (
    ROLE_FIRST,
    ROLE_SECOND,
    CardOrderMode,
    resolve_role,
    resolve_tile_view,
)
from src.kanji_memory_game.services.gameplay import (
    can_open_detail,
    flip_tile,
    handle_tile_click,
    perform_opponent_turn,
)
from src.kanji_memory_game.services.session import pump, reset_session


def _advance(game, clock, seconds):
    clock.advance(seconds)
    return pump(game)


def test_match_scores_and_keeps_turn(make_game, clock):
    game = make_game(pairs=4)
    assert flip_tile(game, 0)
    assert flip_tile(game, 1)
    assert game.is_processing
    _advance(game, clock, 1.0)
    assert game.board.matched == {0}
    assert game.board.match_owners[0] == 1
    assert game.scores[1] == 1
    assert game.current_player == 1
    assert game.board.flipped == []
    assert not game.is_processing
    assert game.timers.pending_count() == 0


def test_mismatch_flips_back_and_switches_player(make_game, clock):
    game = make_game(pairs=4)
    flip_tile(game, 0)
    flip_tile(game, 2)
    _advance(game, clock, 1.0)
    # 判定後も不一致表示の間は表向きのまま
    assert game.board.flipped == [0, 2]
    assert game.is_processing
    for i in (0, 2):
        view = resolve_tile_view(
            game.board, i, game.visibility, game.card_order_mode, game.assignments
        )
        assert view.is_front
    _advance(game, clock, 1.5)
    assert game.board.flipped == []
    assert game.current_player == 2
    assert game.scores == {1: 0, 2: 0}
    assert not game.is_processing


def test_flips_rejected_while_locked(make_game, clock):
    game = make_game(pairs=4)
    flip_tile(game, 0)
    flip_tile(game, 2)
    assert not flip_tile(game, 4)
    assert handle_tile_click(game, 4) == "ignored"
    assert game.board.flipped == [0, 2]


def test_cannot_flip_same_or_matched_tile(make_game, clock):
    game = make_game(pairs=4)
    flip_tile(game, 0)
    assert not flip_tile(game, 0)
    flip_tile(game, 1)
    _advance(game, clock, 1.0)
    assert not flip_tile(game, 0)
    assert not flip_tile(game, 99)


def test_game_over_rejects_flips_and_opens_details(make_game, clock):
    game = make_game(pairs=2)
    for a, b in ((0, 1), (2, 3)):
        flip_tile(game, a)
        flip_tile(game, b)
        _advance(game, clock, 1.0)
    assert game.is_game_over
    assert game.scores[1] == 2
    assert not flip_tile(game, 0)
    for i in range(len(game.board)):
        view = resolve_tile_view(
            game.board, i, game.visibility, game.card_order_mode, game.assignments
        )
        assert view.matched
    assert handle_tile_click(game, 0) == "detail"


def test_matched_tile_detail_refused_on_bot_turn(make_game, clock):
    game = make_game(pairs=3, opponent=OpponentType.BOT_NOVICE)
    flip_tile(game, 0)
    flip_tile(game, 1)
    _advance(game, clock, 1.0)
    flip_tile(game, 2)
    flip_tile(game, 4)
    _advance(game, clock, 1.0)
    _advance(game, clock, 1.5)
    assert game.is_bot_turn and not game.is_processing
    assert game.timers.is_pending(game.bot_trigger)

    assert not can_open_detail(game, 0)
    assert handle_tile_click(game, 0) == "ignored"
    assert game.detail_index is None and game.pending_detail is None
    # 予約済みのボット操作はそのまま進む
    _advance(game, clock, 0.5)
    assert len(game.board.flipped) == 1


def test_detail_allowed_after_bot_finishes_game(make_game, clock):
    game = make_game(pairs=2, opponent=OpponentType.BOT_NOVICE)
    flip_tile(game, 0)
    flip_tile(game, 1)
    _advance(game, clock, 1.0)
    game.current_player = 2
    game.board.matched.add(1)
    assert game.is_game_over and game.is_bot_turn
    assert can_open_detail(game, 3)
    assert handle_tile_click(game, 3) == "detail"


def test_player_two_flips_through_same_intent(make_game, clock):
    game = make_game(pairs=4, opponent=OpponentType.PLAYER2)
    flip_tile(game, 0)
    flip_tile(game, 2)
    _advance(game, clock, 1.0)
    _advance(game, clock, 1.5)
    assert game.current_player == 2
    assert flip_tile(game, 2)
    assert flip_tile(game, 3)
    _advance(game, clock, 1.0)
    assert game.scores[2] == 1
    assert len(game.memory) == 0


def test_human_first_flip_and_mismatch_feed_bot_memory(make_game, clock):
    game = make_game(pairs=4, opponent=OpponentType.BOT_CASUAL)
    flip_tile(game, 0)
    assert 0 in game.memory
    flip_tile(game, 2)
    assert 2 not in game.memory
    _advance(game, clock, 1.0)
    assert game.memory.get(2) == 1


def test_human_cannot_flip_on_bot_turn(make_game):
    game = make_game(pairs=4, opponent=OpponentType.BOT_NOVICE)
    game.current_player = 2
    assert not flip_tile(game, 0)
    assert handle_tile_click(game, 0) == "ignored"


def test_bot_turn_flow(make_game, clock):
    game = make_game(pairs=4, opponent=OpponentType.RANDOMIZER, seed=7)
    flip_tile(game, 0)
    flip_tile(game, 2)
    _advance(game, clock, 1.0)
    _advance(game, clock, 1.5)
    assert game.is_bot_turn
    assert game.timers.is_pending(game.bot_trigger)
    # 同じ手番で二重に予約しない
    pending = game.timers.pending_count()
    pump(game)
    assert game.timers.pending_count() == pending

    _advance(game, clock, 0.5)
    assert len(game.board.flipped) == 1
    assert game.is_processing
    first = game.board.flipped[0]
    assert first in game.memory

    _advance(game, clock, 1.0)
    assert len(game.board.flipped) == 2
    assert game.is_processing
    assert game.board.flipped[0] == first


def test_opponent_turn_refused_when_not_its_turn(make_game):
    game = make_game(pairs=4, opponent=OpponentType.BOT_SHREWD)
    assert not perform_opponent_turn(game)
    assert game.board.flipped == []


def test_full_game_against_bot_keeps_invariants(make_game, clock):
    game = make_game(pairs=8, opponent=OpponentType.BOT_MASTER, seed=11)
    human = random.Random(99)
    for _ in range(20000):
        if game.is_game_over:
            break
        if not game.is_bot_turn and not game.is_processing:
            flip_tile(game, human.choice(game.board.available_indices()))
        _advance(game, clock, 0.25)
        assert len(game.board.flipped) <= 2
        if len(game.board.flipped) == 2:
            assert game.is_processing
        assert not (set(game.board.flipped) & {
            i for i in range(len(game.board)) if game.board.is_tile_matched(i)
        })
    assert game.is_game_over
    assert game.scores[1] + game.scores[2] == game.board.pair_count
    assert not game.is_processing


def test_reset_cancels_pending_timers(make_game, clock):
    game = make_game(pairs=4)
    flip_tile(game, 0)
    flip_tile(game, 2)
    reset_session(game)
    assert game.timers.pending_count() == 0
    clock.advance(10)
    assert game.timers.run_due() == 0
    assert game.board.flipped == [0, 2]
    assert game.current_player == 1
    assert pump(game) == 0


def test_first_flip_sticky_role_survives_mismatch(make_game, clock):
    game = make_game(pairs=4, mode=CardOrderMode.FIRST_FLIP_STICKY)
    flip_tile(game, 2)
    flip_tile(game, 0)
    assert resolve_role(game.board, 2, game.card_order_mode, game.assignments) == ROLE_FIRST
    assert resolve_role(game.board, 0, game.card_order_mode, game.assignments) == ROLE_SECOND
    _advance(game, clock, 1.0)
    _advance(game, clock, 1.5)
    assert game.board.flipped == []
    # 次の手番では逆の順にめくっても役割は変わらない
    flip_tile(game, 0)
    flip_tile(game, 2)
    assert resolve_role(game.board, 0, game.card_order_mode, game.assignments) == ROLE_SECOND
    assert resolve_role(game.board, 2, game.card_order_mode, game.assignments) == ROLE_FIRST


def test_flip_order_role_persisted_on_match(make_game, clock):
    game = make_game(pairs=4, mode=CardOrderMode.FLIP_ORDER)
    flip_tile(game, 1)
    flip_tile(game, 0)
    _advance(game, clock, 1.0)
    assert resolve_role(game.board, 1, game.card_order_mode, game.assignments) == ROLE_FIRST
    assert resolve_role(game.board, 0, game.card_order_mode, game.assignments) == ROLE_SECOND

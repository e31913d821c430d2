import random

import numpy as np
import pytest

from falling_blocks.game import (
    Action,
    GameConfig,
    GameEngine,
    SequenceRandomizer,
    TetrominoType,
)


I_INDEX = int(TetrominoType.I) - 1


def test_reset_state(o_engine):
    state = o_engine.state
    assert state.score == 0
    assert state.drop_interval_ms == 1000
    assert not state.game_over
    assert not state.grid.any()
    assert (state.piece.x, state.piece.y) == (4, 0)


def test_o_piece_locks_on_the_floor(o_engine):
    for _ in range(18):
        assert o_engine.drop() == 0
    assert o_engine.piece.y == 18
    assert o_engine.pieces_locked == 0

    o_engine.drop()

    assert o_engine.pieces_locked == 1
    assert o_engine.grid.grid[18:20, 4:6].tolist() == [[2, 2], [2, 2]]
    assert int(np.count_nonzero(o_engine.grid.grid)) == 4
    assert not o_engine.game_over
    assert (o_engine.piece.x, o_engine.piece.y) == (4, 0)


def test_lock_out_ends_the_game(o_engine):
    # Everything below the spawn rows is filled, leaving column 0 open so no row clears
    o_engine.grid.grid[2:, 1:] = 7

    o_engine.drop()

    assert o_engine.game_over
    assert o_engine.grid.grid[0:2, 4:6].tolist() == [[2, 2], [2, 2]]
    frozen = o_engine.grid.clone_state()
    piece = o_engine.piece
    assert o_engine.drop() == 0
    assert not o_engine.move(-1)
    assert not o_engine.rotate()
    np.testing.assert_array_equal(o_engine.grid.grid, frozen)
    assert o_engine.piece is piece
    # Falling piece is not drawn into the observation once the game is over
    np.testing.assert_array_equal(o_engine.get_observation(), frozen)


def test_move_blocked_at_left_and_right_walls(i_engine):
    assert i_engine.rotate()
    assert i_engine.piece.width == 1
    while i_engine.move(-1):
        pass
    assert i_engine.piece.x == 0
    assert not i_engine.move(-1)
    assert i_engine.piece.x == 0
    while i_engine.move(1):
        pass
    assert i_engine.piece.x == 9


def test_move_blocked_by_stack(o_engine):
    o_engine.grid.grid[0, 3] = 1
    assert not o_engine.move(-1)
    assert o_engine.piece.x == 4
    assert o_engine.move(1)
    assert o_engine.piece.x == 5


def test_move_rejects_other_directions(o_engine):
    with pytest.raises(ValueError):
        o_engine.move(2)
    with pytest.raises(ValueError):
        o_engine.move(0)


def test_rotate_blocked_keeps_shape(i_engine):
    i_engine.grid.grid[1:4, 3] = 5
    before = i_engine.piece
    assert not i_engine.rotate()
    assert i_engine.piece is before
    assert i_engine.piece.shape.tolist() == [[1, 1, 1, 1]]


def test_rotate_keeps_position(i_engine):
    assert i_engine.rotate()
    assert (i_engine.piece.x, i_engine.piece.y) == (3, 0)
    assert i_engine.piece.shape.tolist() == [[1], [1], [1], [1]]


def test_rotate_fails_near_floor_without_kick(i_engine):
    for _ in range(19):
        i_engine.drop()
    assert i_engine.piece.y == 19
    assert not i_engine.rotate()
    assert i_engine.piece.shape.tolist() == [[1, 1, 1, 1]]


def test_double_line_clear_scores(o_engine):
    o_engine.grid.grid[18:20, :] = 6
    o_engine.grid.grid[18:20, 4:6] = 0
    for _ in range(18):
        o_engine.drop()

    assert o_engine.drop() == 2

    assert o_engine.score == 100
    assert o_engine.lines_cleared_total == 2
    assert not o_engine.grid.grid.any()


@pytest.mark.parametrize("rows,points", [(0, 0), (1, 40), (2, 100), (3, 300), (4, 1200)])
def test_update_score_table(o_engine, rows, points):
    assert o_engine.update_score(rows) == points
    assert o_engine.score == points


def test_update_score_rejects_impossible_clears(o_engine):
    with pytest.raises(ValueError):
        o_engine.update_score(5)


def test_speed_ramp_every_thousand_points(o_engine):
    intervals = []
    for k in range(1, 13):
        o_engine.score = k * 1000 - 40
        o_engine.update_score(1)
        assert o_engine.score == k * 1000
        intervals.append(o_engine.drop_interval_ms)
    assert intervals == [900, 800, 700, 600, 500, 400, 300, 200, 100, 100, 100, 100]


def test_speed_ramp_ignores_scores_off_threshold(o_engine):
    o_engine.score = 900
    o_engine.update_score(3)
    assert o_engine.score == 1200
    assert o_engine.drop_interval_ms == 1000


def test_speed_ramp_counts_one_landing_per_award(o_engine):
    o_engine.score = 800
    o_engine.update_score(4)
    assert o_engine.score == 2000
    assert o_engine.drop_interval_ms == 900


def test_zero_point_update_keeps_interval_on_fresh_game(o_engine):
    o_engine.update_score(0)
    o_engine.update_score(0)
    assert o_engine.drop_interval_ms == 1000


def test_non_clearing_lock_on_threshold_speeds_up_again(o_engine):
    o_engine.score = 960
    o_engine.update_score(1)
    assert o_engine.drop_interval_ms == 900

    for _ in range(19):
        o_engine.drop()

    assert o_engine.pieces_locked == 1
    assert o_engine.score == 1000
    assert o_engine.drop_interval_ms == 800

    for _ in range(17):
        o_engine.drop()

    assert o_engine.pieces_locked == 2
    assert o_engine.drop_interval_ms == 700


def test_tick_triggers_gravity(o_engine):
    o_engine.tick(0)
    o_engine.tick(500)
    assert o_engine.piece.y == 0
    state = o_engine.tick(1001)
    assert state.piece.y == 1
    assert o_engine.drop_counter_ms == 0
    o_engine.tick(2001)
    assert o_engine.piece.y == 1
    o_engine.tick(2002)
    assert o_engine.piece.y == 2


def test_first_tick_sets_time_base(o_engine):
    o_engine.tick(50_000)
    assert o_engine.piece.y == 0
    assert o_engine.drop_counter_ms == 0


def test_user_drop_resets_timer(o_engine):
    o_engine.tick(0)
    o_engine.tick(900)
    o_engine.drop()
    assert o_engine.piece.y == 1
    o_engine.tick(1500)
    assert o_engine.piece.y == 1
    assert o_engine.drop_counter_ms == 600


def test_tick_reports_game_over(o_engine):
    o_engine.grid.grid[2:, 1:] = 7
    o_engine.tick(0)
    state = o_engine.tick(1001)
    assert state.game_over
    assert o_engine.tick(5000).game_over


def test_step_returns_score_gain(o_engine):
    o_engine.grid.grid[19, :] = 3
    o_engine.grid.grid[19, 4:6] = 0
    reward = 0
    done = False
    for _ in range(18):
        obs, reward, done, info = o_engine.step(Action.DROP)
        assert reward == 0
    obs, reward, done, info = o_engine.step(Action.DROP)
    assert reward == 40
    assert not done
    assert info["score"] == 40
    assert info["lines_cleared_total"] == 1
    assert obs.shape == (20, 10)
    assert (obs < 0).sum() == 4


def test_state_is_a_snapshot(o_engine):
    state = o_engine.state
    state.grid[0, 0] = 5
    assert o_engine.grid.grid[0, 0] == 0


def test_state_piece_shape_cannot_be_written(i_engine):
    i_engine.rotate()
    state = i_engine.state
    with pytest.raises(ValueError):
        state.piece.shape[0, 0] = 0
    assert i_engine.piece.shape.tolist() == [[1], [1], [1], [1]]


def test_spawn_piece_does_not_mutate(o_engine):
    o_engine.score = 120
    piece = o_engine.spawn_piece()
    assert piece.color_index == int(TetrominoType.O)
    assert o_engine.score == 120
    assert not o_engine.grid.grid.any()


def test_same_seed_same_pieces():
    a = GameEngine(GameConfig(random_seed=42))
    b = GameEngine(GameConfig(random_seed=42))
    assert [a.spawn_piece().color_index for _ in range(50)] == [b.spawn_piece().color_index for _ in range(50)]


def test_reset_with_seed_reseeds():
    engine = GameEngine(randomizer=SequenceRandomizer([I_INDEX]))
    engine.reset(seed=3)
    other = GameEngine(GameConfig(random_seed=3))
    assert engine.piece.color_index == other.piece.color_index


def test_reset_clears_game(o_engine):
    o_engine.grid.grid[2:, 1:] = 7
    o_engine.drop()
    assert o_engine.game_over
    o_engine.reset()
    assert not o_engine.game_over
    assert o_engine.score == 0
    assert o_engine.pieces_locked == 0
    assert not o_engine.grid.grid.any()


def test_piece_never_overlaps_stack_during_random_play():
    engine = GameEngine(GameConfig(random_seed=1234))
    actions = random.Random(7)
    for _ in range(4000):
        engine.step(Action(actions.randrange(len(Action))))
        if engine.game_over:
            engine.reset()
            continue
        assert not engine.grid.collides(engine.piece)
        for x, y in engine.piece.cells():
            assert engine.grid.is_inside(x, y)
    assert engine.grid.grid.max() <= 7


@pytest.mark.parametrize("kwargs", [{"cols": 3}, {"rows": 1}, {"min_drop_interval_ms": 0}, {"initial_drop_interval_ms": 50}])
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        GameConfig(**kwargs)

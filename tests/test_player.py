import pytest

from gifdecoder.compositor import Animation, Frame
from gifdecoder.player import Player


def make_animation(*delays):
    return Animation([Frame(1, 1, bytes((i, 0, 0, 255)), d) for i, d in enumerate(delays)])


def test_advances_on_delay():
    player = Player(make_animation(10, 20))
    assert not player.advance(9)
    assert player.index == 0
    assert player.advance(1)
    assert player.index == 1
    assert not player.advance(19)
    assert player.advance(1)
    assert player.index == 0
    assert player.loops_completed == 1


def test_large_elapsed_skips_frames():
    player = Player(make_animation(10, 10, 10))
    player.advance(25)
    assert player.index == 2
    assert player.timer == pytest.approx(5)


def test_speed_scales_delays():
    player = Player(make_animation(10, 10), speed=2.0)
    assert player.advance(5)
    assert player.index == 1


def test_zero_delay_lasts_one_tick():
    player = Player(make_animation(0, 0))
    assert player.advance(1)
    assert player.index == 1


def test_without_looping_stops_on_last_frame():
    player = Player(make_animation(10, 10), looping=False)
    player.advance(100)
    assert player.finished
    assert player.index == 1
    assert not player.advance(100)


def test_pause_and_step():
    player = Player(make_animation(10, 10, 10))
    player.pause()
    assert not player.advance(50)
    assert player.index == 0
    assert player.step().delay_cs == 10
    assert player.index == 1
    player.step(-2)
    assert player.index == 2
    player.toggle_pause()
    assert not player.paused
    assert player.advance(10)
    assert player.index == 0


def test_invalid_arguments():
    with pytest.raises(ValueError):
        Player(make_animation())
    with pytest.raises(ValueError):
        Player(make_animation(10), speed=0)

import pytest

from blast.events.bus import EVENT_MATCH_FOUND, EVENT_SCORE_CHANGED
from blast.utils.resources import get_session
from tests.helpers import FakeClock, build_engine


@pytest.fixture
def engine():
    return build_engine(clock=FakeClock(), start=True)


def test_first_scoring_event_uses_the_base_multiplier(engine):
    changes = []
    engine.bus.subscribe(EVENT_SCORE_CHANGED, lambda sender, **payload: changes.append(payload))
    assert engine.score.add_score(30) == 30
    assert changes == [{"score": 30, "delta": 30, "multiplier": 1.0}]


def test_quick_successive_matches_build_a_combo(engine):
    engine.score.add_score(30)
    engine.clock.advance(0.5)
    assert engine.score.add_score(30) == 45
    engine.clock.advance(0.5)
    assert engine.score.add_score(80) == 160
    session = get_session(engine.world)
    assert session.combo_multiplier == 2.0
    assert session.score == 30 + 45 + 160


def test_combo_is_capped(engine):
    engine.score.add_score(10)
    for _ in range(10):
        engine.clock.advance(0.2)
        engine.score.add_score(10)
    assert get_session(engine.world).combo_multiplier == 3.0
    engine.clock.advance(0.2)
    assert engine.score.add_score(10) == 30


def test_combo_resets_after_a_pause_between_matches(engine):
    engine.score.add_score(30)
    engine.clock.advance(0.5)
    engine.score.add_score(30)
    engine.clock.advance(1.0)
    assert engine.score.add_score(30) == 30
    assert get_session(engine.world).combo_multiplier == 1.0


def test_match_found_event_feeds_the_score(engine):
    engine.bus.emit(EVENT_MATCH_FOUND, positions=["0,0", "0,1", "0,2", "1,2"], size=4, points=80)
    assert get_session(engine.world).score == 80

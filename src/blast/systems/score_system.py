from esper import World

from blast.constants import COMBO_MAX, COMBO_STEP, COMBO_WINDOW
from blast.events.bus import EventBus, EVENT_MATCH_FOUND, EVENT_SCORE_CHANGED
from blast.utils.resources import get_session


class ScoreSystem:
    """Turns committed matches into score, applying the combo multiplier.

    Matches landing within COMBO_WINDOW seconds of the previous one raise the
    multiplier by COMBO_STEP up to COMBO_MAX; any longer gap drops it back to 1.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_MATCH_FOUND, self.on_match_found)

    def on_match_found(self, sender, **kwargs):
        points = kwargs.get('points')
        if not points:
            return
        self.add_score(points)

    def add_score(self, points: int) -> int:
        session = get_session(self.world)
        now = self.world.clock()
        if session.last_match_time is not None and (now - session.last_match_time) < COMBO_WINDOW:
            multiplier = min(session.combo_multiplier + COMBO_STEP, COMBO_MAX)
        else:
            multiplier = 1.0
        delta = int(round(points * multiplier))
        session.combo_multiplier = multiplier
        session.score += delta
        session.last_match_time = now
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=session.score, delta=delta, multiplier=multiplier)
        return delta

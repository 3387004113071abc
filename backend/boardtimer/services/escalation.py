import logging
from collections import namedtuple
from typing import Optional, Tuple

from boardtimer.models import TimerState


logger = logging.getLogger(__name__)

# (upper bound of current-turn duration in ms, pulse period in seconds)
TIER_TABLE: Tuple[Tuple[int, float], ...] = (
    (20000, 2.0),
    (40000, 1.5),
    (60000, 1.0),
    (120000, 0.7),
)
WARNING_TIER = 0.4

Escalation = namedtuple('Escalation', ['tier', 'warning'])

IDLE = Escalation(None, False)


def tier_for(duration_ms: int) -> Escalation:
    """Map the duration of the current turn onto its pulse tier."""
    for bound, tier in TIER_TABLE:
        if duration_ms < bound:
            return Escalation(tier, False)
    return Escalation(WARNING_TIER, True)


class EscalationMonitor:
    """Time-pressure signal for the turn that is running right now.

    `current()` is a pure read of the timer state. `sample()` additionally
    remembers which turn and value it last published, so periodic callers
    can tell whether anything changed.
    """

    def __init__(self, state: TimerState, clock):
        self.state = state
        self.clock = clock
        self._turn_key: Optional[Tuple[int, int]] = None
        self._published: Escalation = IDLE

    @property
    def published(self) -> Escalation:
        return self._published

    def current(self, now: Optional[int] = None) -> Escalation:
        state = self.state
        if not state.running or state.active_id is None or state.turn_started_at is None:
            return IDLE
        if now is None:
            now = self.clock.now_ms()
        return tier_for(max(0, now - state.turn_started_at))

    def reset(self) -> None:
        self._turn_key = None
        self._published = IDLE

    def sample(self, now: Optional[int] = None) -> Tuple[Escalation, bool]:
        """Re-evaluate the tier; return it and whether it differs from the last sample."""
        state = self.state
        value = self.current(now)
        key = (state.active_id, state.turn_started_at) if value.tier is not None else None
        if key != self._turn_key:
            self._turn_key = key
            if key is not None:
                # a new turn instance starts from no published tier
                self._published = IDLE
        changed = value != self._published
        if changed:
            logger.debug(f"[escalation] player={state.active_id} tier={value.tier} warning={value.warning}")
            self._published = value
        return value, changed

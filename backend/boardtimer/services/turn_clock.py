import logging
from typing import Optional

from boardtimer.models import TimerState
from .escalation import EscalationMonitor
from .roster import Roster


logger = logging.getLogger(__name__)


class TurnClock:
    """Converts wall-clock turn durations into per-player elapsed time.

    Only one player accumulates at a time: starting a turn always flushes
    whoever was running before the new turn begins.
    """

    def __init__(self, roster: Roster, state: TimerState, clock, monitor: EscalationMonitor):
        self.roster = roster
        self.state = state
        self.clock = clock
        self.monitor = monitor

    def _stop_accumulation(self, now: int) -> None:
        state = self.state
        if not state.running or state.active_id is None or state.turn_started_at is None:
            return
        player = self.roster.get(state.active_id)
        delta = max(0, now - state.turn_started_at)
        if player:
            player.elapsed_ms += delta
        logger.debug(f"[turn-flush] player={state.active_id} delta={delta}ms")
        state.running = False
        state.turn_started_at = None

    def start_turn(self, player_id) -> bool:
        if self.roster.get(player_id) is None:
            logger.info(f"[turn-reject] start: unknown player={player_id}")
            return False
        now = self.clock.now_ms()
        self._stop_accumulation(now)
        self.state.active_id = player_id
        self.state.turn_started_at = now
        self.state.running = True
        self.monitor.reset()
        logger.info(f"[turn-start] player={player_id}")
        return True

    def pause(self) -> bool:
        if not self.state.running:
            return False
        self._stop_accumulation(self.clock.now_ms())
        logger.info(f"[turn-pause] player={self.state.active_id}")
        return True

    def resume(self) -> bool:
        if self.state.running or self.state.active_id is None:
            return False
        return self.start_turn(self.state.active_id)

    def toggle(self) -> bool:
        if self.state.running:
            return self.pause()
        return self.resume()

    def current_display_elapsed(self, player_id, now: Optional[int] = None) -> Optional[int]:
        player = self.roster.get(player_id)
        if player is None:
            return None
        state = self.state
        if state.running and state.active_id == player_id and state.turn_started_at is not None:
            if now is None:
                now = self.clock.now_ms()
            return player.elapsed_ms + max(0, now - state.turn_started_at)
        return player.elapsed_ms

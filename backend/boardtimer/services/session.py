import logging
import random
from typing import Callable, List, Optional

from boardtimer.models import TimerState
from .clock import SystemClock, format_elapsed
from .escalation import EscalationMonitor
from .roster import Roster
from .scheduler import TurnScheduler
from .turn_clock import TurnClock


logger = logging.getLogger(__name__)


class TimerSession:
    """One table's timer: roster, turn clock, scheduler and escalation.

    All operations are synchronous. Callers that share a session between
    threads must hold the lock the registry hands out for it.

    Listeners registered with `on_turn_change` are called with the session
    whenever the running turn starts, stops or switches player; the ticker
    uses this to restart or cancel its loops.
    """

    def __init__(self, code: str = '', clock=None, rng: random.Random = None,
                 name_prefix: str = 'Player', initial_players: int = 0):
        self.code = code
        self.name_prefix = name_prefix
        self.clock = clock or SystemClock()
        self.state = TimerState()
        self.roster = Roster(self.state)
        self.monitor = EscalationMonitor(self.state, self.clock)
        self.turn_clock = TurnClock(self.roster, self.state, self.clock, self.monitor)
        self.scheduler = TurnScheduler(self.roster, self.turn_clock, rng)
        self._listeners: List[Callable[['TimerSession'], None]] = []
        for _ in range(initial_players):
            self.roster.add(name_prefix)

    def on_turn_change(self, listener: Callable[['TimerSession'], None]) -> None:
        self._listeners.append(listener)

    def _mutate(self, action: str, fn, *args):
        before = self.state.snapshot()
        result = fn(*args)
        if not result:
            logger.debug(f"[noop] timer={self.code} action={action}")
        if self.state.snapshot() != before:
            for listener in list(self._listeners):
                listener(self)
        return result

    # Roster

    def add_player(self, prefix: Optional[str] = None):
        return self._mutate('add', self.roster.add, prefix or self.name_prefix)

    def remove_player(self, player_id) -> bool:
        return self._mutate('remove', self.roster.remove, player_id)

    def rename_player(self, player_id, name: str) -> bool:
        return self._mutate('rename', self.roster.rename, player_id, name)

    def adjust_score(self, player_id, delta: int) -> bool:
        return self._mutate('score', self.roster.adjust_score, player_id, delta)

    def reset_all(self) -> bool:
        def _reset():
            self.roster.reset_all()
            self.monitor.reset()
            return True
        return self._mutate('reset', _reset)

    # Turns

    def start_turn(self, player_id) -> bool:
        return self._mutate('start', self.scheduler.select_and_start, player_id)

    def pause(self) -> bool:
        return self._mutate('pause', self.turn_clock.pause)

    def resume(self) -> bool:
        return self._mutate('resume', self.turn_clock.resume)

    def toggle(self) -> bool:
        return self._mutate('toggle', self.turn_clock.toggle)

    def advance(self) -> bool:
        return self._mutate('advance', self.scheduler.advance)

    def shuffle_first(self) -> bool:
        return self._mutate('shuffle', self.scheduler.shuffle_first)

    # Reads

    def current_display_elapsed(self, player_id, now: Optional[int] = None) -> Optional[int]:
        return self.turn_clock.current_display_elapsed(player_id, now)

    def escalation(self, now: Optional[int] = None):
        return self.monitor.current(now)

    def elapsed_by_player(self, now: Optional[int] = None):
        if now is None:
            now = self.clock.now_ms()
        return {p.id: self.turn_clock.current_display_elapsed(p.id, now) for p in self.roster}

    def to_dict(self):
        now = self.clock.now_ms()
        escalation = self.monitor.current(now)
        players_serialized = []
        for p in self.roster:
            pd = p.to_dict()
            elapsed = self.turn_clock.current_display_elapsed(p.id, now)
            pd['elapsed_ms'] = elapsed
            pd['elapsed_display'] = format_elapsed(elapsed)
            pd['is_active'] = p.id == self.state.active_id
            players_serialized.append(pd)
        return {
            'timer_code': self.code,
            'active_id': self.state.active_id,
            'running': self.state.running,
            'tier': escalation.tier,
            'warning': escalation.warning,
            'can_add_player': not self.roster.is_full,
            'players': players_serialized,
        }

import logging
import time
from typing import Callable, Optional

from .session import TimerSession


logger = logging.getLogger(__name__)


class TurnTicker:
    """Periodic push of display and escalation values while a turn runs.

    Two loops run per turn: a display tick that publishes every player's
    live elapsed time, and an escalation tick that publishes the pulse tier
    when it changes. Both carry the generation they were started with and
    exit as soon as it is stale, so pausing, switching player or starting a
    new turn cancels them.

    `start_task` spawns a loop (e.g. socketio.start_background_task). When
    it is None nothing is spawned and `display_step` / `escalation_step`
    can be called directly.
    """

    def __init__(self, session: TimerSession, lock, emit: Callable[[str, dict], None],
                 start_task: Optional[Callable] = None, sleep: Callable[[float], None] = time.sleep,
                 display_period_ms: int = 200, escalation_period_ms: int = 1000, heartbeat_sec: int = 0):
        self.session = session
        self.lock = lock
        self.emit = emit
        self.start_task = start_task
        self.sleep = sleep
        self.display_period_ms = display_period_ms
        self.escalation_period_ms = escalation_period_ms
        self.heartbeat_sec = heartbeat_sec
        self._generation = 0
        session.on_turn_change(self._on_turn_change)

    @property
    def generation(self) -> int:
        return self._generation

    def _on_turn_change(self, session: TimerSession) -> None:
        if session.state.running:
            self.start()
        else:
            self.cancel()

    def start(self) -> int:
        self._generation += 1
        gen = self._generation
        if self.start_task is not None:
            self.start_task(self._run, gen, 'display', self.display_period_ms, self.display_step)
            self.start_task(self._run, gen, 'escalation', self.escalation_period_ms, self.escalation_step)
        logger.info(f"[ticker-start] timer={self.session.code} gen={gen}")
        return gen

    def cancel(self) -> None:
        self._generation += 1
        logger.info(f"[ticker-cancel] timer={self.session.code} gen={self._generation}")

    def is_current(self, gen: int) -> bool:
        return gen == self._generation and self.session.state.running

    def display_step(self) -> None:
        session = self.session
        elapsed = session.elapsed_by_player()
        self.emit('tick', {
            'timer_code': session.code,
            'active_id': session.state.active_id,
            'elapsed': {str(pid): ms for pid, ms in elapsed.items()},
        })

    def escalation_step(self) -> None:
        session = self.session
        value, changed = session.monitor.sample()
        if changed:
            self.emit('escalation', {
                'timer_code': session.code,
                'active_id': session.state.active_id,
                'tier': value.tier,
                'warning': value.warning,
            })

    def _run(self, gen: int, name: str, period_ms: int, step: Callable[[], None]) -> None:
        period = period_ms / 1000.0
        since_heartbeat = 0.0
        while True:
            self.sleep(period)
            with self.lock:
                if not self.is_current(gen):
                    logger.debug(f"[ticker-stop] timer={self.session.code} loop={name} gen={gen}")
                    return
                step()
            if self.heartbeat_sec and self.heartbeat_sec > 0:
                since_heartbeat += period
                if since_heartbeat >= self.heartbeat_sec:
                    since_heartbeat = 0.0
                    logger.info(f"[ticker-heartbeat] timer={self.session.code} loop={name} gen={gen}")

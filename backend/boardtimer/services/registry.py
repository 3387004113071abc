"""In-memory registry of timer sessions keyed by a short join code.

Each code gets its own lock, created and dropped with the session. HTTP
handlers, socket handlers and ticker workers hold it while touching the
session so operations never interleave.
"""

import logging
import random
import string
import threading
from typing import Dict, Optional

from .session import TimerSession


logger = logging.getLogger(__name__)


class TimerRegistry:

    def __init__(self, clock=None, seed=None, name_prefix: str = 'Player',
                 initial_players: int = 2, code_length: int = 4):
        self.clock = clock
        self.name_prefix = name_prefix
        self.initial_players = initial_players
        self.code_length = code_length
        self._rng = random.Random(seed)
        self._sessions: Dict[str, TimerSession] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _generate_code(self) -> str:
        while True:
            code = ''.join(self._rng.choices(string.ascii_uppercase + string.digits, k=self.code_length))
            if code not in self._sessions:
                return code

    def create(self) -> TimerSession:
        with self._guard:
            code = self._generate_code()
            session = TimerSession(
                code=code,
                clock=self.clock,
                rng=random.Random(self._rng.random()),
                name_prefix=self.name_prefix,
                initial_players=self.initial_players,
            )
            self._sessions[code] = session
            self._locks[code] = threading.RLock()
        logger.info(f"[timer-create] timer={code} players={len(session.roster)}")
        return session

    def get(self, code: str) -> Optional[TimerSession]:
        if not code:
            return None
        return self._sessions.get(code.upper())

    def lock(self, code: str) -> Optional[threading.RLock]:
        """Return the per-session lock, or None for a code that was never created."""
        if not code:
            return None
        with self._guard:
            return self._locks.get(code.upper())

    def drop(self, code: str) -> Optional[TimerSession]:
        code = code.upper()
        with self._guard:
            session = self._sessions.pop(code, None)
            self._locks.pop(code, None)
        if session:
            logger.info(f"[timer-drop] timer={code}")
        return session

    def codes(self):
        return list(self._sessions.keys())

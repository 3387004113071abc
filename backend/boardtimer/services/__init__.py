"""Timer domain services: roster, turn clock, scheduling and escalation.

This package contains the pure turn-timer engine. It should be imported by
HTTP routes and socket handlers, keeping transport concerns separated from
the clock rules.
"""

from .clock import SystemClock
from .escalation import Escalation, EscalationMonitor
from .roster import Roster, MAX_PLAYERS
from .turn_clock import TurnClock
from .scheduler import TurnScheduler
from .session import TimerSession
from .ticker import TurnTicker
from .registry import TimerRegistry

import logging
import random

from .roster import Roster
from .turn_clock import TurnClock


logger = logging.getLogger(__name__)


class TurnScheduler:
    """Turn order policy on top of the turn clock.

    Every operation that picks a new player also starts that player's clock
    in the same call, so there is never a selected-but-idle intermediate
    state.
    """

    def __init__(self, roster: Roster, turn_clock: TurnClock, rng: random.Random = None):
        self.roster = roster
        self.turn_clock = turn_clock
        self.rng = rng or random.Random()

    def advance(self) -> bool:
        """Start the player after the active one, wrapping to the first.

        With nobody active the first player starts. A running turn is
        flushed by start_turn before the next one begins.
        """
        if not self.roster.players:
            logger.info("[turn-reject] advance: empty roster")
            return False
        state = self.turn_clock.state
        idx = self.roster.index_of(state.active_id) if state.active_id is not None else -1
        idx = (idx + 1) % len(self.roster.players)
        next_id = self.roster.players[idx].id
        logger.info(f"[turn-advance] from={state.active_id} to={next_id}")
        return self.turn_clock.start_turn(next_id)

    def select_and_start(self, player_id) -> bool:
        return self.turn_clock.start_turn(player_id)

    def shuffle_first(self) -> bool:
        """Rotate the roster to a random starting seat and start that player."""
        size = len(self.roster.players)
        if size == 0:
            logger.info("[turn-reject] shuffle: empty roster")
            return False
        offset = self.rng.randrange(size)
        self.roster.rotate(offset)
        first_id = self.roster.players[0].id
        logger.info(f"[turn-shuffle] offset={offset} first={first_id}")
        return self.turn_clock.start_turn(first_id)

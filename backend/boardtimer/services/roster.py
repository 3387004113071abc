import logging
from typing import List, Optional

from boardtimer.models import Player, TimerState


logger = logging.getLogger(__name__)

MAX_PLAYERS = 9


class Roster:
    """Ordered, bounded collection of players.

    Holds the session's TimerState by reference so that removing the active
    player, or resetting everything, leaves no dangling turn behind.
    """

    def __init__(self, state: TimerState):
        self.state = state
        self.players: List[Player] = []
        self._next_id = 1

    def __len__(self):
        return len(self.players)

    def __iter__(self):
        return iter(self.players)

    @property
    def is_full(self) -> bool:
        return len(self.players) >= MAX_PLAYERS

    def get(self, player_id) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def index_of(self, player_id) -> int:
        for idx, p in enumerate(self.players):
            if p.id == player_id:
                return idx
        return -1

    def ids(self) -> List[int]:
        return [p.id for p in self.players]

    def _renumber(self) -> None:
        for idx, p in enumerate(self.players):
            p.number = idx + 1

    def add(self, prefix: str) -> Optional[Player]:
        if self.is_full:
            logger.info(f"[roster-reject] add: roster full ({MAX_PLAYERS})")
            return None
        number = len(self.players) + 1
        player = Player(id=self._next_id, number=number, name=f"{prefix} {number}")
        self._next_id += 1
        self.players.append(player)
        return player

    def remove(self, player_id) -> bool:
        idx = self.index_of(player_id)
        if idx < 0:
            return False
        if self.state.active_id == player_id:
            # partial time of the removed player is discarded, not flushed
            self.state.clear()
        del self.players[idx]
        self._renumber()
        return True

    def rename(self, player_id, name: str) -> bool:
        player = self.get(player_id)
        if not player:
            return False
        player.name = name
        return True

    def adjust_score(self, player_id, delta: int) -> bool:
        player = self.get(player_id)
        if not player:
            return False
        player.score += delta
        return True

    def rotate(self, offset: int) -> None:
        """Reorder so the player at `offset` comes first, keeping relative order."""
        if not self.players:
            return
        offset %= len(self.players)
        self.players = self.players[offset:] + self.players[:offset]
        self._renumber()

    def reset_all(self) -> None:
        for p in self.players:
            p.elapsed_ms = 0
            p.score = 0
        self.state.clear()

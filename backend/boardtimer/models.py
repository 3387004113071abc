from typing import Optional


class Player:
    """A seat at the table.

    `id` is stable for the player's lifetime; `number` is the 1-based
    position in the current roster order and is rewritten by the roster.
    """

    def __init__(self, id: int, number: int, name: str, elapsed_ms: int = 0, score: int = 0):
        self.id = id
        self.number = number
        self.name = name
        self.elapsed_ms = elapsed_ms
        self.score = score

    def to_dict(self):
        return {
            'id': self.id,
            'number': self.number,
            'name': self.name,
            'elapsed_ms': self.elapsed_ms,
            'score': self.score,
        }

    def __repr__(self):
        return f"<Player id={self.id} number={self.number} name={self.name!r}>"


class TimerState:
    """Which player's clock is running, and since when.

    One instance per timer session, shared by reference between the roster
    and the turn clock.
    """

    def __init__(self):
        self.active_id: Optional[int] = None
        self.running: bool = False
        self.turn_started_at: Optional[int] = None

    def clear(self) -> None:
        self.active_id = None
        self.running = False
        self.turn_started_at = None

    def snapshot(self):
        return (self.active_id, self.running, self.turn_started_at)

    def to_dict(self):
        return {
            'active_id': self.active_id,
            'running': self.running,
            'turn_started_at': self.turn_started_at,
        }

import time


class SystemClock:
    """Millisecond clock backed by time.monotonic().

    The engine only ever asks for `now_ms()`, so tests can pass any object
    with that method instead.
    """

    def now_ms(self) -> int:
        return int(time.monotonic() * 1000)


def format_elapsed(ms: int) -> str:
    """Render milliseconds as ``mm:ss.t``."""
    total_seconds = ms // 1000
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    tenths = (ms % 1000) // 100
    return f"{minutes:02d}:{seconds:02d}.{tenths}"

import time


def now_ms() -> float:
    return time.monotonic() * 1000


def format_duration(millis: float) -> str:
    """Human readable duration: `850 ms`, `12.3 s`, `2 min 5 s`."""
    if millis < 1000:
        return f"{int(millis)} ms"
    seconds = millis / 1000
    if seconds < 60:
        return f"{seconds:.1f} s"
    minutes, rest = divmod(int(seconds), 60)
    return f"{minutes} min {rest} s"


def format_duration_till(start_ms: float) -> str:
    """Duration since `start_ms`, a value previously returned by `now_ms()`."""
    return format_duration(now_ms() - start_ms)

# --- START OF FILE dwa_planner/utils/throttle.py ---
"""
Rate-limited logging for messages that would otherwise repeat every tick.
"""

import logging
import time
from typing import Callable, Dict, Hashable, Optional


class ThrottledLogger:
    """
    Wraps a logger so that each message key is emitted at most once per period.

    The key defaults to the format string, so the same warning with different
    arguments is still throttled as one message.
    """

    def __init__(self, logger: logging.Logger, period: float = 1.0,
                 clock: Callable[[], float] = time.monotonic):
        self.logger = logger
        self.period = period
        self._clock = clock
        self._last_emitted: Dict[Hashable, float] = {}

    def log(self, level: int, msg: str, *args, key: Optional[Hashable] = None) -> bool:
        """Logs `msg` at `level` unless the key was emitted within the last period."""
        key = msg if key is None else key
        now = self._clock()
        last = self._last_emitted.get(key)
        if last is not None and now - last < self.period:
            return False
        self._last_emitted[key] = now
        self.logger.log(level, msg, *args)
        return True

    def info(self, msg: str, *args, key: Optional[Hashable] = None) -> bool:
        return self.log(logging.INFO, msg, *args, key=key)

    def warning(self, msg: str, *args, key: Optional[Hashable] = None) -> bool:
        return self.log(logging.WARNING, msg, *args, key=key)

    def reset(self) -> None:
        self._last_emitted.clear()

# --- END OF FILE dwa_planner/utils/throttle.py ---

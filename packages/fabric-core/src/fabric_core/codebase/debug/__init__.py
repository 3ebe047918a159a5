import logging
import os
import time
from functools import wraps

_SPY_LOGGER = logging.getLogger("fabric.spy")
_OFF = {"", "0", "false", "no", "off"}


def spy_enabled() -> bool:
    return os.getenv("FABRIC_SPY", "0").strip().lower() not in _OFF


def spy_trace(func):
    """Log entry and exit (with wall time) of ``func`` when FABRIC_SPY is set."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        if not spy_enabled():
            return func(*args, **kwargs)
        _SPY_LOGGER.debug("Entering %s", func.__qualname__)
        started = time.perf_counter()
        result = func(*args, **kwargs)
        _SPY_LOGGER.debug("Exiting %s after %.1f ms", func.__qualname__, (time.perf_counter() - started) * 1000)
        return result

    return wrapper

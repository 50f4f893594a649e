"""
Retry decorator for network operations
"""
import functools
import time
from .logging import log, warn
from .. import config as _cfg
from ..errors import DeployConnectionError


def retried(fn):
    """
    Decorator: retry fn up to RETRY_MAX times with exponential back-off.
    A missing remote path is an answer, not a fault, and a dropped
    connection will not come back, so both are raised straight away.
    """

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        delay = _cfg.RETRY_BASE_DELAY
        for attempt in range(1, _cfg.RETRY_MAX + 1):
            try:
                return fn(*args, **kwargs)
            except (FileNotFoundError, DeployConnectionError):
                raise
            except Exception as exc:
                if attempt >= _cfg.RETRY_MAX:
                    raise
                warn(f"{fn.__name__} failed (attempt {attempt}/{_cfg.RETRY_MAX}): {exc}")
                log(f"  retrying in {delay:.0f}s …")
                time.sleep(delay)
                delay = min(delay * 2, 60)

    return wrapper

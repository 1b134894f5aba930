"""Wait for nbdkit to create its socket file."""

import logging
import os
import time

from nbdbridge.errors import NbdBridgeError

log = logging.getLogger(__name__)


def await_artifact(path: str, poll_interval_ms: int, max_wait_ms: int) -> bool:
    """Poll until ``path`` exists, giving up after ``max_wait_ms``."""
    if poll_interval_ms <= 0:
        raise ValueError(f"poll interval must be positive, got {poll_interval_ms}ms")
    elapsed_ms = 0
    while elapsed_ms <= max_wait_ms:
        try:
            os.stat(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise NbdBridgeError(f"{path}: {e.strerror}") from e
        else:
            log.debug("%s appeared after %dms", path, elapsed_ms)
            return True
        time.sleep(poll_interval_ms / 1000)
        elapsed_ms += poll_interval_ms
    log.debug("%s did not appear within %dms", path, max_wait_ms)
    return False

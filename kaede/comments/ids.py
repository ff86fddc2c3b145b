"""Thread and sub-thread ID generation.

IDs are ``seconds * 100000 + random(0..99) * 1000 + counter``: coarsely
chronological across seconds, and unlikely to collide within one second in one
process. Collisions across processes in the same second are possible.
"""

import random
import threading
import time


_counter = 0
_counter_lock = threading.Lock()


def _next_counter() -> int:
    global _counter  # noqa: PLW0603

    with _counter_lock:
        _counter = (_counter + 1) % 1000
        return _counter


def generate_id() -> int:
    """Generate an ID for a new thread or reply.

    Returns:
        Positive integer, greater than any ID generated in an earlier second.
    """
    counter = _next_counter()
    return int(time.time()) * 100000 + random.randrange(100) * 1000 + counter  # noqa: S311

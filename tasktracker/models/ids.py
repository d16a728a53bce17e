"""Server-generated record identifiers.

Ids are 24 lowercase hex characters: a 4-byte seconds timestamp, a 5-byte
per-process random value and a 3-byte counter. Ids minted later in the same
process compare greater, which the task listing uses as a tie-breaker.
"""

import itertools
import os
import re
import threading
import time

ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

_PROCESS_UNIQUE = os.urandom(5).hex()
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_lock = threading.Lock()


def new_id() -> str:
    """Generate a new 24-hex-character id."""
    with _lock:
        count = next(_counter) & 0xFFFFFF
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{_PROCESS_UNIQUE}{count:06x}"


def is_valid_id(value: str) -> bool:
    """Check that ``value`` is exactly 24 hexadecimal characters."""
    return ID_PATTERN.fullmatch(value) is not None

"""
MongoID-shaped identifiers for books and reviews.

An id is 24 lowercase hex characters: a 4-byte creation timestamp, 5 random
bytes fixed per process and a 3-byte counter, so ids sort roughly by
creation time.
"""

import itertools
import os
import re
import threading
import time

OBJECT_ID_PATTERN = re.compile(r"[0-9a-fA-F]{24}")

_PROCESS_UNIQUE = os.urandom(5).hex()
_counter = itertools.count(int.from_bytes(os.urandom(3), "big"))
_counter_lock = threading.Lock()


def new_object_id() -> str:
    with _counter_lock:
        count = next(_counter) & 0xFFFFFF
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{_PROCESS_UNIQUE}{count:06x}"


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.fullmatch(value))

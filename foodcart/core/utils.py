"""Small shared helpers: clock and identifiers."""
from __future__ import annotations

import random
import string
import time
from typing import Callable

Clock = Callable[[], int]

BASE36_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current epoch time in milliseconds."""
    return int(time.time() * 1000)


def generate_local_order_id(clock: Clock = now_ms, rng: random.Random | None = None) -> str:
    """Local order id: ``ORD-<5 base36 chars>-<last 4 digits of epoch millis>``."""
    rng = rng or random
    token = "".join(rng.choice(BASE36_ALPHABET) for _ in range(5)).upper()
    return f"ORD-{token}-{str(clock())[-4:]}"


__all__ = ["BASE36_ALPHABET", "Clock", "generate_local_order_id", "now_ms"]

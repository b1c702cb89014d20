"""
Display Name Service
Random public handles for first-time players, e.g. "kucing#0427"
"""

import random
import re
from typing import Optional

DISPLAY_NAME_LABELS = ["kucing", "panda", "ular", "burung", "ikan"]

DISPLAY_NAME_PATTERN = re.compile(
    r"^(" + "|".join(DISPLAY_NAME_LABELS) + r")#\d{4}$"
)

_rng = random.Random()


def generate_display_name(rng: Optional[random.Random] = None) -> str:
    """
    Pick a label and append a zero-padded number in 0000-9999.

    Collisions between players are possible and harmless.
    """
    rng = rng or _rng
    label = rng.choice(DISPLAY_NAME_LABELS)
    number = rng.randint(0, 9999)
    return f"{label}#{number:04d}"

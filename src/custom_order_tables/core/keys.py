"""Order key generation."""

import uuid
from typing import Callable

# Host applications may pass any zero-argument callable returning a string
KeyGenerator = Callable[[], str]


def generate_order_key() -> str:
    """Generate a process-unique order key body, e.g. ``order_5f1c2a9e0b3d4``."""
    return f"order_{uuid.uuid4().hex[:13]}"

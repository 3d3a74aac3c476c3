"""ID utilities."""

from __future__ import annotations

import secrets
import time

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def new_run_id() -> str:
    """Return a fresh run id such as ``run_1760812345678_k3j9x0q2a``."""

    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"run_{int(time.time() * 1000)}_{suffix}"

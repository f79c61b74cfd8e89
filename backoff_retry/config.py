from __future__ import annotations

import os

from .retry import RetryPolicy

_OFF = ("", "0", "false", "off", "no")


def _flag(raw: str) -> bool:
    return raw.strip().lower() not in _OFF


def policy_from_env(name: str, prefix: str = "RETRY") -> RetryPolicy:
    """
    Build a RetryPolicy from {prefix}_ATTEMPTS, {prefix}_BASE_DELAY_S,
    {prefix}_DELAY_FACTOR and {prefix}_JITTER ("0", "false", "off", "no" disable).
    """
    return RetryPolicy(
        name=name,
        attempts=int(os.getenv(f"{prefix}_ATTEMPTS", "3")),
        base_delay=float(os.getenv(f"{prefix}_BASE_DELAY_S", "0")),
        delay_factor=float(os.getenv(f"{prefix}_DELAY_FACTOR", "1.0")),
        enable_jitter=_flag(os.getenv(f"{prefix}_JITTER", "0")),
    )

import os

import aiohttp

from shared.apis.dadjokes import ENDPOINT


__all__ = ("dadjoke_endpoint", "dadjoke_timeout", "log_level")


def dadjoke_endpoint() -> str:
    return os.environ.get("DADJOKE_ENDPOINT", ENDPOINT)


def dadjoke_timeout() -> aiohttp.ClientTimeout | None:
    """Total request timeout from DADJOKE_TIMEOUT (seconds); None keeps the aiohttp default"""
    seconds = os.environ.get("DADJOKE_TIMEOUT", "").strip()
    if not seconds:
        return None
    total = float(seconds)
    if total <= 0:
        raise ValueError(f"DADJOKE_TIMEOUT must be positive, got {seconds}")
    return aiohttp.ClientTimeout(total=total)


def log_level() -> str:
    return os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

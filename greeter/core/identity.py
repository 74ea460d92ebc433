from __future__ import annotations

from typing import Optional


CLIENT_ID_MAX_LENGTH = 64
UNKNOWN = "unknown"


def derive_client_id(forwarded_for: Optional[str], user_agent: Optional[str]) -> str:
    """Bucket key for quota and block state.

    Missing headers fall back to ``unknown``, so clients without them share
    one bucket.
    """
    ip = forwarded_for or UNKNOWN
    agent = user_agent or UNKNOWN
    return f"{ip}:{agent}"[:CLIENT_ID_MAX_LENGTH]


def redact_client_id(client_id: str) -> str:
    return client_id[:10] + "..."

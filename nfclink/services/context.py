# nfclink/services/context.py
from dataclasses import dataclass

UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClientInfo:
    """Where a request came from, as recorded in attempts and audit entries."""
    ip_address: str = UNKNOWN
    user_agent: str = UNKNOWN

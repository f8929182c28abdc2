# nfclink/api/deps.py
from fastapi import Request

from nfclink.db.session import get_db
from nfclink.services.context import UNKNOWN, ClientInfo

__all__ = ["get_db", "get_client_info"]


def get_client_info(request: Request) -> ClientInfo:
    """
    Source address and user agent of the caller.

    The first X-Forwarded-For hop wins over the socket peer, since the
    service is deployed behind a proxy.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and forwarded.split(",")[0].strip():
        ip_address = forwarded.split(",")[0].strip()
    elif request.client and request.client.host:
        ip_address = request.client.host
    else:
        ip_address = UNKNOWN

    return ClientInfo(
        ip_address=ip_address,
        user_agent=request.headers.get("user-agent") or UNKNOWN,
    )

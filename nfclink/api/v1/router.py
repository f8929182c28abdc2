# nfclink/api/v1/router.py
from fastapi import APIRouter

from nfclink.api.v1.endpoints import (
    audit_logs,
    cards,
    login,
    magic_link,
    trusted_devices,
    two_factor,
    users,
)

api_router = APIRouter()
api_router.include_router(login.router, prefix="/login", tags=["auth"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(cards.router, prefix="/cards", tags=["cards"])
api_router.include_router(two_factor.router, prefix="/2fa", tags=["2fa"])
api_router.include_router(magic_link.router, prefix="/magic-link", tags=["auth"])
api_router.include_router(trusted_devices.router, prefix="/trusted-devices", tags=["trusted-devices"])
api_router.include_router(audit_logs.router, prefix="/audit-logs", tags=["audit"])

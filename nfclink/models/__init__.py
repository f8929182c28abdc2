from nfclink.models.user import User
from nfclink.models.card import Card
from nfclink.models.login_attempt import LoginAttempt
from nfclink.models.two_factor import TwoFactorAuth
from nfclink.models.trusted_device import TrustedDevice
from nfclink.models.magic_link import MagicLink
from nfclink.models.audit_log import AuditLog

__all__ = [
    "User",
    "Card",
    "LoginAttempt",
    "TwoFactorAuth",
    "TrustedDevice",
    "MagicLink",
    "AuditLog",
]

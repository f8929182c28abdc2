# nfclink/security/totp.py
"""
TOTP (Time-based One-Time Password) implementation
RFC 6238 compliant - Compatible with Google Authenticator, Authy, Aegis

Key points:
- 6-digit codes
- 30-second time step, one step of drift tolerated either way
- HMAC-SHA1 (standard)
- Base32 secret encoding
"""
import base64
import io
from typing import Optional

import pyotp
import qrcode

from nfclink.core.config import settings


def generate_totp_secret() -> str:
    """
    Generate a new random TOTP secret (Base32 encoded).
    Returns 32-character Base32 string.
    """
    return pyotp.random_base32()


def get_totp_uri(secret: str, account: str, issuer: Optional[str] = None) -> str:
    """
    Generate the otpauth:// URI for QR code encoding.

    Format: otpauth://totp/{issuer}:{account}?secret={secret}&issuer={issuer}
    """
    totp = pyotp.TOTP(secret)
    return totp.provisioning_uri(name=account, issuer_name=issuer or settings.PROJECT_NAME)


def generate_qr_code_data_url(uri: str) -> str:
    """
    Render a provisioning URI as a PNG QR code and return it as a data URL.

    Frontend can display this directly: <img src="{result}">
    """
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=4,
    )
    qr.add_data(uri)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode("utf-8")

    return f"data:image/png;base64,{encoded}"


def verify_totp(secret: str, code: str) -> bool:
    """
    Verify a 6-digit TOTP code.
    Returns True if valid, False otherwise.
    """
    if not secret or not code:
        return False

    code = code.strip().replace(" ", "")
    if len(code) != 6 or not code.isdigit():
        return False

    try:
        totp = pyotp.TOTP(secret)
        return totp.verify(code, valid_window=1)
    except (ValueError, TypeError):
        # Malformed secret
        return False


def get_current_totp(secret: str) -> str:
    """
    Get the current TOTP code for a secret.
    Useful for testing only - never expose this in production!
    """
    totp = pyotp.TOTP(secret)
    return totp.now()

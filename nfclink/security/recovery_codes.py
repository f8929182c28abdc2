# nfclink/security/recovery_codes.py
"""
Single-use recovery codes for bypassing the second factor.

Format: two blocks of five characters from A-Z0-9, joined by a hyphen
("K3P9Q-ZX81M"). Codes are stored in plain form in an ordered list;
redeeming a code removes it from the list.
"""
import secrets
import string
from typing import List, Optional, Sequence

RECOVERY_CODE_ALPHABET = string.ascii_uppercase + string.digits
BLOCK_LENGTH = 5


def generate_recovery_code() -> str:
    chars = "".join(secrets.choice(RECOVERY_CODE_ALPHABET) for _ in range(BLOCK_LENGTH * 2))
    return f"{chars[:BLOCK_LENGTH]}-{chars[BLOCK_LENGTH:]}"


def generate_recovery_codes(count: int = 10) -> List[str]:
    """Generate `count` distinct recovery codes."""
    codes: List[str] = []
    while len(codes) < count:
        code = generate_recovery_code()
        if code not in codes:
            codes.append(code)
    return codes


def constant_time_compare(a: str, b: str) -> bool:
    """
    Compare two strings in constant time to prevent timing attacks.
    """
    if len(a) != len(b):
        secrets.compare_digest(a, a)
        return False
    return secrets.compare_digest(a, b)


def find_recovery_code(codes: Sequence[str], submitted: str) -> Optional[int]:
    """
    Return the index of the stored code equal to `submitted`, or None.

    Matching is exact; every stored code is compared so the time taken
    does not reveal the position of a match.
    """
    if not submitted:
        return None

    match = None
    for index, code in enumerate(codes):
        if constant_time_compare(code, submitted) and match is None:
            match = index
    return match


def without_code(codes: Sequence[str], index: int) -> List[str]:
    """New list with the code at `index` removed."""
    return [code for i, code in enumerate(codes) if i != index]

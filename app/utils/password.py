"""자격 증명 검증 모듈 — bcrypt 해싱 및 비교.

Credential verification module built on bcrypt.
The presented secret is never logged or returned; only a boolean leaves
verify_password().
"""

import bcrypt

# bcrypt 입력 한도 — bcrypt only consumes the first 72 bytes of a secret
MAX_PASSWORD_BYTES: int = 72


def password_too_long(password: str) -> bool:
    """UTF-8 인코딩 기준 72바이트 초과 여부 (True if the UTF-8 form exceeds bcrypt's limit)."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    """평문 비밀번호를 솔트가 포함된 bcrypt 해시로 변환합니다.

    Hash a plain text password with a freshly generated bcrypt salt.

    Args:
        password: 평문 비밀번호 (Plain text password to hash)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)

    Raises:
        ValueError: 72바이트 초과 시 (Password longer than MAX_PASSWORD_BYTES)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """제시된 비밀번호를 저장된 해시와 비교합니다.

    Compare a presented password against a stored bcrypt hash.
    bcrypt re-derives the full hash before comparing, so the cost does not
    depend on how many leading characters match.
    A stored value that is not a valid bcrypt hash never matches.

    Args:
        plain_password: 검증할 평문 비밀번호 (Presented plain text password)
        hashed_password: 저장된 bcrypt 해시 (Stored bcrypt hash)

    Returns:
        bool: 일치하면 True (True only if the password matches the hash)
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError:
        # 손상된 해시 — Malformed stored hash (invalid salt)
        return False

"""
Peppered hashing for opaque secrets (refresh tokens, verification codes).

Secrets are hashed with HMAC-SHA256 keyed by a server-side pepper, so a
leaked table of hashes cannot be used to forge or brute-force secrets
without the pepper as well.
"""

import hashlib
import hmac
import secrets


class TokenHasher:
    def __init__(self, pepper: str):
        self._key = pepper.encode("utf-8")

    def digest(self, raw: str) -> str:
        return hmac.new(self._key, raw.encode("utf-8"), hashlib.sha256).hexdigest()

    def matches(self, raw: str, expected_digest: str) -> bool:
        return hmac.compare_digest(self.digest(raw), expected_digest)


def new_refresh_secret() -> str:
    """32 random bytes, hex encoded"""
    return secrets.token_hex(32)


def new_verification_code() -> str:
    """6 digit numeric code"""
    return f"{secrets.randbelow(1_000_000):06d}"

from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import uuid4

from jose import JWTError, jwt

from src.app.services.access_token_signer import IAccessTokenSigner

ALGORITHM = "HS256"


class JwtAccessTokenSigner(IAccessTokenSigner):
    """HS256 JWT access tokens"""

    def __init__(self, secret: str, ttl: timedelta):
        self._secret = secret
        self._ttl = ttl

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, user_id: int, role: str) -> str:
        """
        Generate JWT access token

        Args:
            user_id: Numeric user ID
            role: User role (client, studio_owner, admin)

        Returns:
            JWT token string (HS256, configured expiry, unique jti)
        """
        now = datetime.now(UTC)
        payload = {
            "sub": str(user_id),
            "user_id": user_id,
            "role": role,
            "jti": str(uuid4()),
            "exp": now + self._ttl,
            "iat": now,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> Optional[dict]:
        """
        Verify and decode JWT token

        Args:
            token: JWT token string

        Returns:
            Decoded payload dict or None if invalid
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError:
            return None
        if not isinstance(payload.get("user_id"), int) or "role" not in payload:
            return None
        return payload

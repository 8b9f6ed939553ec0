import bcrypt

from src.app.services.password_hasher import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt with a fixed, configured cost factor"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        self._dummy_hash = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))

    def hash(self, plaintext: str) -> str:
        hashed = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(self.rounds))
        return hashed.decode("utf-8")

    def verify(self, password_hash: str, plaintext: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("utf-8"))
        except (ValueError, AttributeError):
            # Malformed stored hash or a password bcrypt refuses (> 72 bytes)
            return False

    def verify_dummy(self, plaintext: str) -> None:
        self.verify(self._dummy_hash.decode("utf-8"), plaintext)

"""
Password hashing collaborator.

The gateway hashes secrets before they reach the backend (user create and
update) and verifies login secrets against the hash the backend returns.
"""

import bcrypt


class BcryptPasswordHasher:
    """bcrypt hashing, used directly rather than through passlib."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        """Return a bcrypt hash of ``plain``."""
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if ``plain`` matches ``hashed``.

        A stored value that is not a bcrypt hash counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            return False

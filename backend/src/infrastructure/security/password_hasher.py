"""
Bcrypt Password Hasher
"""
import bcrypt

from application.services.auth.interfaces import IPasswordHasher


class BcryptPasswordHasher(IPasswordHasher):
    """Bcrypt with a fixed cost factor"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

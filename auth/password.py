"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import secrets
from functools import cached_property

import bcrypt


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt (auto-salted)."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(password.encode(), password_hash.encode())
        except (ValueError, TypeError):
            return False

    @cached_property
    def dummy_hash(self) -> str:
        """Hash of a random secret, verified when no user matches a login."""
        return self.hash(secrets.token_urlsafe(32))

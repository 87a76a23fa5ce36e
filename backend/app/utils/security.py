"""
Samanvi Backend — Password Hashing
====================================

What:  bcrypt wrapper exposing `hash(plaintext)` and `verify(plaintext, hashed)`.
Why:   One-way, salted, deliberately slow hashing; `checkpw` compares in
       constant time.
How:   bcrypt is CPU-bound, so both calls run in a worker thread to keep the
       event loop serving other requests.

bcrypt only reads the first 72 bytes of a password (newer releases raise
instead of truncating), so input is cut to 72 bytes on both paths.
"""

import asyncio

import bcrypt

from app.config import settings

BCRYPT_MAX_BYTES = 72


def _encode(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = 12):
        self.rounds = rounds
        # Built up front: every burn() is a single checkpw, the first included
        self._dummy_hash: bytes = bcrypt.hashpw(b"samanvi-dummy-password", bcrypt.gensalt(rounds=rounds))

    async def hash(self, plaintext: str) -> str:
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, _encode(plaintext), bcrypt.gensalt(rounds=self.rounds)
        )
        return hashed.decode("utf-8")

    async def verify(self, plaintext: str, hashed: str) -> bool:
        try:
            return await asyncio.to_thread(bcrypt.checkpw, _encode(plaintext), hashed.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    async def burn(self, plaintext: str) -> None:
        """Spend one verification's worth of time; used when the user does not exist."""
        await asyncio.to_thread(bcrypt.checkpw, _encode(plaintext), self._dummy_hash)


password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

"""
Random sources.

All randomness the protocol consumes (ephemeral scalar, outer IV, AEAD
nonce) goes through a RandomSource so callers can inject their own. The
default reads from the operating system CSPRNG, which is safe to share
between threads without locking.
"""

import abc
import os

from .exceptions import RandomSourceError


class RandomSource(abc.ABC):
    """Interface: read(length) returns exactly `length` random bytes."""

    @abc.abstractmethod
    def read(self, length: int) -> bytes:
        ...


class SystemRandomSource(RandomSource):
    """os.urandom backed source."""

    def read(self, length: int) -> bytes:
        try:
            return os.urandom(length)
        except OSError as exc:
            raise RandomSourceError("Operating system random source failed.") from exc


SYSTEM_RANDOM = SystemRandomSource()


def read_random(rng: RandomSource, length: int) -> bytes:
    """Draw from rng (system source if None). Short reads are an error."""
    if rng is None:
        rng = SYSTEM_RANDOM
    data = rng.read(length)
    if len(data) != length:
        raise RandomSourceError(
            f"Random source returned {len(data)} bytes, expected {length}."
        )
    return data

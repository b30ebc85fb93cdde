"""
Layer 1 — MAC: HMAC-SHA1
========================
Keyed message authentication for the envelope's outer tag.

SHA-1 is weaker than everything else in the suite. It stays because the
tag width (20 bytes) is part of the wire format; switching digests breaks
every existing envelope.

Verification goes through cryptography's HMAC.verify, which compares in
constant time.

Dependencies: cryptography >= 41.0
"""

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac

from ..config import MAC_SIZE


class MessageAuthenticator:
    """HMAC-SHA1 over one or more message parts."""

    TAG_SIZE = MAC_SIZE

    def __init__(self, key: bytes):
        if not key:
            raise ValueError("MAC key must not be empty.")
        self._key = key

    def _hmac(self, parts) -> hmac.HMAC:
        h = hmac.HMAC(self._key, hashes.SHA1())
        for part in parts:
            h.update(part)
        return h

    def tag(self, *parts: bytes) -> bytes:
        """Tag over the concatenation of parts."""
        return self._hmac(parts).finalize()

    def verify(self, tag: bytes, *parts: bytes) -> bool:
        try:
            self._hmac(parts).verify(tag)
            return True
        except InvalidSignature:
            return False


def mac(key: bytes, message: bytes) -> bytes:
    return MessageAuthenticator(key).tag(message)


def mac_verify(key: bytes, message: bytes, tag: bytes) -> bool:
    return MessageAuthenticator(key).verify(tag, message)

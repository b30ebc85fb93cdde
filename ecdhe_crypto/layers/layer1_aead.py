"""
Layer 1 — SYMMETRIC: AES-GCM
============================
AES in Galois/Counter Mode with a random per-message nonce.

The envelope hands this layer its outer IV as associated data. GCM still
draws its own 96-bit nonce, so every sealed payload carries two independent
random values: the outer IV (authenticated, not secret) and the GCM nonce.

Key size: 128 or 256 bits, chosen by SecurityLevel.
Nonce:    96 bits (12 bytes), randomly generated per message.
Tag:      128 bits (16 bytes).

Bundle format: nonce(12) || ciphertext || tag(16)

Dependencies: cryptography >= 41.0
"""

import logging

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..config import GCM_TAG_SIZE, NONCE_SIZE
from ..exceptions import AuthenticationError
from ..randomness import RandomSource, read_random

logger = logging.getLogger(__name__)


class AEADCipher:
    """AES-GCM authenticated encryption with a prefixed random nonce."""

    KEY_SIZES  = (16, 32)
    NONCE_SIZE = NONCE_SIZE

    def __init__(self, key: bytes, rng: RandomSource = None):
        if len(key) not in self.KEY_SIZES:
            raise ValueError(f"AES-GCM key must be one of {self.KEY_SIZES} bytes.")
        self._aesgcm = AESGCM(key)
        self._rng    = rng

    def encrypt(self, plaintext: bytes, aad: bytes = None) -> bytes:
        """
        Encrypt and authenticate.
        aad is authenticated but not encrypted.
        Returns: nonce || ciphertext+tag
        """
        nonce = read_random(self._rng, self.NONCE_SIZE)
        ct    = self._aesgcm.encrypt(nonce, plaintext, aad)
        return nonce + ct

    def decrypt(self, bundle: bytes, aad: bytes = None) -> bytes:
        """
        Decrypt and verify the GCM tag.
        Raises AuthenticationError for any failure, short input included.
        """
        if len(bundle) < self.NONCE_SIZE + GCM_TAG_SIZE:
            logger.debug("AEAD bundle shorter than nonce + tag")
            raise AuthenticationError()
        nonce = bundle[:self.NONCE_SIZE]
        ct    = bundle[self.NONCE_SIZE:]
        try:
            return self._aesgcm.decrypt(nonce, ct, aad)
        except InvalidTag:
            raise AuthenticationError() from None


def aead_encrypt(plaintext: bytes, associated_iv: bytes, key: bytes,
                 rng: RandomSource = None) -> bytes:
    return AEADCipher(key, rng).encrypt(plaintext, associated_iv)


def aead_decrypt(ciphertext: bytes, associated_iv: bytes, key: bytes) -> bytes:
    return AEADCipher(key).decrypt(ciphertext, associated_iv)

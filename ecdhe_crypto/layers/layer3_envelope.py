"""
Layer 3 — ENVELOPE: ECDHE + AES-GCM + HMAC-SHA1
===============================================
Public-key encryption for a recipient's EC key. A fresh ephemeral key is
agreed with the recipient's public key, the shared X coordinate is hashed
into an AES key and an HMAC key, and the padded plaintext is sealed.

Envelope format:
    [1-byte eph_len][ephemeral public key][IV(16)][nonce(12) || GCM ct+tag][HMAC-SHA1(20)]

The HMAC covers IV || AEAD ciphertext and is checked before anything is
decrypted. The security level is not recorded in the envelope; both sides
must pass the same one.

Cipher suites:
    SecurityLevel.HIGH      ECDHE / AES-256-GCM / SHA-384 split / HMAC-SHA1
    SecurityLevel.STANDARD  ECDHE / AES-128-GCM / SHA-256 split / HMAC-SHA1

Dependencies: cryptography >= 41.0
"""

import logging

from cryptography.hazmat.primitives.asymmetric import ec

from .. import config
from ..config import IV_SIZE, MAC_SIZE, SecurityLevel
from ..exceptions import (
    AuthenticationError,
    InvalidPoint,
    KeyGenerationError,
    MalformedInput,
)
from ..randomness import RandomSource, read_random
from .layer1_aead import AEADCipher
from .layer1_mac import MessageAuthenticator
from .layer2_agreement import (
    agree,
    decode_public_key,
    derive,
    encode_public_key,
    generate_ephemeral,
    generate_keypair,
)
from .layer3_padding import add_padding, remove_padding

logger = logging.getLogger(__name__)


def encrypt(recipient_public: ec.EllipticCurvePublicKey, plaintext: bytes,
            level: SecurityLevel = config.DEFAULT_LEVEL,
            rng: RandomSource = None) -> bytes:
    """
    Seal plaintext for the holder of the private key behind recipient_public.

    The ephemeral key is generated on the recipient key's curve. Random
    bytes are drawn in a fixed order: ephemeral scalar, IV, GCM nonce.

    Raises:
        KeyGenerationError: ephemeral key generation or agreement failed
        EncodingError:      ephemeral public key could not be serialized
        RandomSourceError:  IV or nonce could not be drawn
    """
    if not isinstance(recipient_public, ec.EllipticCurvePublicKey):
        raise TypeError("recipient_public must be an EllipticCurvePublicKey")
    level = SecurityLevel(level)

    # 1. Ephemeral key pair on the recipient's curve
    ephemeral = generate_ephemeral(recipient_public.curve, rng)

    # 2. Shared secret -> (enc_key, mac_key)
    try:
        secret = agree(ephemeral, recipient_public)
    except InvalidPoint as exc:
        raise KeyGenerationError("Failed to generate encryption key") from exc
    keys = derive(secret, level)

    # 3. Pad and seal, IV as associated data
    iv = read_random(rng, IV_SIZE)
    ct = AEADCipher(keys.encryption_key, rng).encrypt(add_padding(plaintext), iv)

    # 4. Frame and tag
    eph_pub = encode_public_key(ephemeral.public_key())
    tag     = MessageAuthenticator(keys.mac_key).tag(iv, ct)
    envelope = bytes([len(eph_pub)]) + eph_pub + iv + ct + tag

    logger.debug(f"Encrypt: level={level.name} eph={len(eph_pub)}B "
                 f"envelope={len(envelope)}B")
    return envelope


def decrypt(recipient_private: ec.EllipticCurvePrivateKey, envelope: bytes,
            level: SecurityLevel = config.DEFAULT_LEVEL) -> bytes:
    """
    Open an envelope produced by encrypt().

    Raises:
        MalformedInput:      framing too short or inconsistent
        InvalidPoint:        ephemeral key does not decode or agree
        AuthenticationError: HMAC or GCM check failed
        PaddingError:        padding count out of range
    """
    if not isinstance(recipient_private, ec.EllipticCurvePrivateKey):
        raise TypeError("recipient_private must be an EllipticCurvePrivateKey")
    level = SecurityLevel(level)
    envelope = bytes(envelope)

    if len(envelope) < 1:
        logger.debug("Decrypt: empty envelope")
        raise MalformedInput("Invalid ciphertext")
    eph_len = envelope[0]
    if 1 + eph_len > len(envelope):
        logger.debug(f"Decrypt: eph_len={eph_len} exceeds envelope={len(envelope)}B")
        raise MalformedInput("Invalid ciphertext")
    eph_pub = envelope[1:1 + eph_len]
    ct      = envelope[1 + eph_len:]
    if len(ct) < MAC_SIZE + IV_SIZE:
        logger.debug(f"Decrypt: body {len(ct)}B shorter than IV + tag")
        raise MalformedInput("Invalid ciphertext")

    ephemeral = decode_public_key(eph_pub, recipient_private.curve)
    keys = derive(agree(recipient_private, ephemeral), level)

    tag_start = len(ct) - MAC_SIZE
    if not MessageAuthenticator(keys.mac_key).verify(ct[tag_start:], ct[:tag_start]):
        logger.debug("Decrypt: authentication failed")
        raise AuthenticationError()

    padded = AEADCipher(keys.encryption_key).decrypt(ct[IV_SIZE:tag_start],
                                                     ct[:IV_SIZE])
    return remove_padding(padded)


# ── Named cipher suites ──────────────────────────────────────────────────────

def encrypt_aes256_gcm_hmac_sha1(recipient_public, plaintext: bytes,
                                 rng: RandomSource = None) -> bytes:
    return encrypt(recipient_public, plaintext, SecurityLevel.HIGH, rng)


def decrypt_aes256_gcm_hmac_sha1(recipient_private, envelope: bytes) -> bytes:
    return decrypt(recipient_private, envelope, SecurityLevel.HIGH)


def encrypt_aes128_gcm_hmac_sha1(recipient_public, plaintext: bytes,
                                 rng: RandomSource = None) -> bytes:
    return encrypt(recipient_public, plaintext, SecurityLevel.STANDARD, rng)


def decrypt_aes128_gcm_hmac_sha1(recipient_private, envelope: bytes) -> bytes:
    return decrypt(recipient_private, envelope, SecurityLevel.STANDARD)


# ── Key-holding wrapper ──────────────────────────────────────────────────────

class ECDHECipher:
    """ECDHE envelope encryption bound to one recipient key and level."""

    def __init__(self, private_key: ec.EllipticCurvePrivateKey = None,
                 public_key: ec.EllipticCurvePublicKey = None,
                 level: SecurityLevel = config.DEFAULT_LEVEL):
        """
        Pass a private key (public key is derived), a public key alone for
        encrypt-only use, or neither to generate a key pair on the default
        curve.
        """
        if private_key is None and public_key is None:
            private_key = generate_keypair()
        if private_key is not None and public_key is None:
            public_key = private_key.public_key()
        self._private_key = private_key
        self._public_key  = public_key
        self._level       = SecurityLevel(level)
        logger.info(f"ECDHECipher {self._public_key.curve.name} "
                    f"level={self._level.name}")

    @classmethod
    def generate(cls, level: SecurityLevel = config.DEFAULT_LEVEL,
                 curve_name: str = config.DEFAULT_CURVE_NAME) -> "ECDHECipher":
        return cls(generate_keypair(config.curve_for(curve_name)), level=level)

    @classmethod
    def from_public_bytes(cls, data: bytes,
                          level: SecurityLevel = config.DEFAULT_LEVEL,
                          curve_name: str = config.DEFAULT_CURVE_NAME) -> "ECDHECipher":
        """Encrypt-only cipher from an uncompressed public point."""
        public_key = decode_public_key(data, config.curve_for(curve_name))
        return cls(public_key=public_key, level=level)

    @property
    def level(self) -> SecurityLevel:
        return self._level

    def public_bytes(self) -> bytes:
        return encode_public_key(self._public_key)

    def encrypt(self, plaintext: bytes, rng: RandomSource = None) -> bytes:
        return encrypt(self._public_key, plaintext, self._level, rng)

    def decrypt(self, envelope: bytes) -> bytes:
        if self._private_key is None:
            raise RuntimeError("No private key loaded.")
        return decrypt(self._private_key, envelope, self._level)

    def __repr__(self):
        return f"ECDHECipher({self._public_key.curve.name}, {self._level.name})"

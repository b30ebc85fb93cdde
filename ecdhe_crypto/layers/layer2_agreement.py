"""
Layer 2 — KEY AGREEMENT: ECDH + hash split
==========================================
Ephemeral-static ECDH on a NIST prime curve, followed by a single hash of
the shared X coordinate split into an AES key and an HMAC key.

    secret  = X(ephemeral_d * recipient_Q), big-endian, leading zeros dropped
    digest  = SHA-384(secret)  (HIGH)   or   SHA-256(secret)  (STANDARD)
    enc_key = digest[:key_size]
    mac_key = digest[key_size:]

There is no salt or info binding. Adding either changes every derived key,
so it would be a new wire version, not a fix.

Ephemeral scalars are drawn as bitsize/8 + 8 random bytes reduced into
[1, n-1]. The extra 64 bits make the modulo bias negligible.

Dependencies: cryptography >= 41.0
"""

import logging
from typing import NamedTuple

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .. import config
from ..config import SecurityLevel
from ..exceptions import (
    EncodingError,
    InvalidPoint,
    KeyGenerationError,
    RandomSourceError,
)
from ..randomness import RandomSource, read_random

logger = logging.getLogger(__name__)


class DerivedKeys(NamedTuple):
    encryption_key: bytes
    mac_key: bytes


def generate_keypair(curve: ec.EllipticCurve = None) -> ec.EllipticCurvePrivateKey:
    """Generate a long-term recipient key pair."""
    if curve is None:
        curve = config.curve_for()
    return ec.generate_private_key(curve)


def generate_ephemeral(curve: ec.EllipticCurve,
                       rng: RandomSource = None) -> ec.EllipticCurvePrivateKey:
    """
    Fresh single-use key pair for one encryption.
    Raises KeyGenerationError if randomness or the curve operation fails.
    """
    n = config.group_order(curve)
    try:
        raw = read_random(rng, curve.key_size // 8 + 8)
    except RandomSourceError as exc:
        raise KeyGenerationError("Failed to draw ephemeral scalar.") from exc
    d = int.from_bytes(raw, "big") % (n - 1) + 1
    logger.debug(f"Ephemeral key: curve={curve.name}")
    try:
        return ec.derive_private_key(d, curve)
    except (ValueError, TypeError) as exc:
        raise KeyGenerationError("Failed to generate ephemeral key.") from exc


def encode_public_key(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Uncompressed X9.62 point: 0x04 || X || Y."""
    try:
        encoded = public_key.public_bytes(
            serialization.Encoding.X962,
            serialization.PublicFormat.UncompressedPoint,
        )
    except (ValueError, TypeError) as exc:
        raise EncodingError("Public key cannot be serialized.") from exc
    if len(encoded) > config.MAX_EPHEMERAL_KEY_SIZE:
        raise EncodingError(f"Encoded public key too long ({len(encoded)} bytes).")
    return encoded


def decode_public_key(data: bytes,
                      curve: ec.EllipticCurve) -> ec.EllipticCurvePublicKey:
    """
    Parse an uncompressed point on `curve`.
    Compressed encodings, wrong lengths and off-curve points raise InvalidPoint.
    """
    if len(data) != config.uncompressed_point_size(curve) or data[:1] != b"\x04":
        logger.debug(f"Public key encoding rejected: {len(data)}B on {curve.name}")
        raise InvalidPoint("Invalid public key encoding.")
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve, bytes(data))
    except ValueError as exc:
        logger.debug(f"Public key not on {curve.name}")
        raise InvalidPoint("Invalid public key.") from exc


def agree(private_key: ec.EllipticCurvePrivateKey,
          peer_public: ec.EllipticCurvePublicKey) -> bytes:
    """
    ECDH shared secret: big-endian X coordinate with leading zeros removed.
    Raises InvalidPoint for mismatched curves or a degenerate result.
    """
    if not isinstance(private_key, ec.EllipticCurvePrivateKey):
        raise TypeError("private_key must be an EllipticCurvePrivateKey")
    if not isinstance(peer_public, ec.EllipticCurvePublicKey):
        raise TypeError("peer_public must be an EllipticCurvePublicKey")
    if private_key.curve.name != peer_public.curve.name:
        raise InvalidPoint(
            f"Curve mismatch: {private_key.curve.name} vs {peer_public.curve.name}"
        )
    try:
        x = private_key.exchange(ec.ECDH(), peer_public)
    except ValueError as exc:
        logger.debug("Key agreement rejected by backend")
        raise InvalidPoint("Key agreement produced no shared point.") from exc
    secret = x.lstrip(b"\x00")
    if not secret:
        raise InvalidPoint("Key agreement produced a degenerate shared point.")
    return secret


def derive(secret: bytes, level: SecurityLevel) -> DerivedKeys:
    """Hash the shared secret and split it into (encryption_key, mac_key)."""
    level = SecurityLevel(level)
    h = hashes.Hash(level.hash_algorithm())
    h.update(secret)
    digest = h.finalize()
    return DerivedKeys(digest[:level.key_size], digest[level.key_size:])

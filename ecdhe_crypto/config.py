"""
Protocol configuration for ecdhe_crypto.

Every size and algorithm choice the envelope format depends on lives here.
Nothing in this module is meant to be reassigned at runtime: the curve is
taken from the key passed to each call, and the security level is an
explicit argument.
"""

import enum

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from .exceptions import KeyGenerationError

# ============================================================================
# FRAMING
# ============================================================================

BLOCK_SIZE   = 16   # padding block, AES block
IV_SIZE      = 16   # outer IV carried in the envelope
NONCE_SIZE   = 12   # AES-GCM nonce drawn by the AEAD layer
GCM_TAG_SIZE = 16   # AES-GCM authentication tag
MAC_SIZE     = 20   # HMAC-SHA1 digest

# Ephemeral key length is written as a single byte.
MAX_EPHEMERAL_KEY_SIZE = 0xFF

# ============================================================================
# SECURITY LEVELS
# ============================================================================


class SecurityLevel(enum.Enum):
    """
    Key size selector. Hash width, derived-key split and AES key size all
    follow from this one value.

        STANDARD  SHA-256 -> 16-byte AES-128 key + 16-byte MAC key
        HIGH      SHA-384 -> 32-byte AES-256 key + 16-byte MAC key
    """

    STANDARD = 16
    HIGH     = 32

    @property
    def key_size(self) -> int:
        return self.value

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        if self is SecurityLevel.HIGH:
            return hashes.SHA384()
        return hashes.SHA256()

    @property
    def digest_size(self) -> int:
        return self.hash_algorithm().digest_size

    @property
    def mac_key_size(self) -> int:
        return self.digest_size - self.key_size


DEFAULT_LEVEL = SecurityLevel.HIGH

# ============================================================================
# CURVES
# ============================================================================

DEFAULT_CURVE_NAME = "secp256r1"

# Group order n for each supported curve.
SUPPORTED_CURVES = {
    "secp256r1": 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    "secp384r1": int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
        "C7634D81F4372DDF581A0DB248B0A77AECEC196ACCC52973", 16),
    "secp521r1": int(
        "01FF" + "FFFFFFFF" * 7 + "FFFFFFFA"
        "51868783BF2F966B7FCC0148F709A5D03BB5C9B8899C47AEBB6FB71E91386409", 16),
}

_CURVE_CLASSES = {
    "secp256r1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
}


def curve_for(name: str = DEFAULT_CURVE_NAME) -> ec.EllipticCurve:
    """Return a fresh curve instance for a supported curve name."""
    try:
        return _CURVE_CLASSES[name]()
    except KeyError:
        raise ValueError(
            f"Unsupported curve {name!r}. Supported: {sorted(SUPPORTED_CURVES)}"
        ) from None


def group_order(curve: ec.EllipticCurve) -> int:
    """Order n of the curve's base point."""
    try:
        return SUPPORTED_CURVES[curve.name]
    except KeyError:
        raise KeyGenerationError(f"Unsupported curve {curve.name!r}") from None


def coordinate_size(curve: ec.EllipticCurve) -> int:
    """Bytes per field element."""
    return (curve.key_size + 7) // 8


def uncompressed_point_size(curve: ec.EllipticCurve) -> int:
    return 1 + 2 * coordinate_size(curve)


# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Check the constants above agree with each other.

    Raises:
        AssertionError: If configuration is invalid
    """
    assert IV_SIZE == BLOCK_SIZE, "Outer IV must be one block"
    assert 0 < BLOCK_SIZE <= 0xFF, "Padding count must fit in one byte"
    for level in SecurityLevel:
        assert level.key_size in (16, 32), "AES key must be 128 or 256 bits"
        assert level.mac_key_size == 16, "MAC key must be 16 bytes"
        assert level.key_size + level.mac_key_size == level.digest_size
    for name, order in SUPPORTED_CURVES.items():
        curve = curve_for(name)
        assert order.bit_length() == curve.key_size, f"{name}: bad group order"
        assert uncompressed_point_size(curve) <= MAX_EPHEMERAL_KEY_SIZE
    assert DEFAULT_CURVE_NAME in SUPPORTED_CURVES
    return True


# Auto-validate on import
validate_config()

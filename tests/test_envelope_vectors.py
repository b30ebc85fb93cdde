"""
Reproducible envelopes under an injected random source.

The expected bytes are rebuilt here from independent primitives (hashlib,
hmac, AESGCM, ec.derive_private_key) and compared byte-for-byte with what
encrypt() produces.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import hashlib
import hmac

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ecdhe_crypto import config
from ecdhe_crypto.config                 import SecurityLevel
from ecdhe_crypto.exceptions             import PaddingError, RandomSourceError
from ecdhe_crypto.randomness             import RandomSource
from ecdhe_crypto.layers.layer3_envelope import encrypt, decrypt

RECIPIENT_D = 0xC9AFA9D845BA75166B5C215767B1D6934E50C3DB36E89B127B8A622B120F6721
EPHEMERAL_D = 0x519B423D715F8B581F4FA8EE59F4771A5B44C8130B4E3EACCA54A56DDA72B464
OUTER_IV    = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
GCM_NONCE   = bytes.fromhex("cafebabefacedbaddecaf888")
PLAINTEXT   = b"attack at dawn"


class ScriptedRandomSource(RandomSource):
    """Hands out pre-recorded chunks in order; each must match the request."""

    def __init__(self, chunks):
        self._chunks = list(chunks)

    def read(self, length):
        if not self._chunks:
            raise RandomSourceError("script exhausted")
        chunk = self._chunks.pop(0)
        assert len(chunk) == length, f"expected a {len(chunk)}-byte read, got {length}"
        return chunk

    @property
    def exhausted(self):
        return not self._chunks


def scalar_bytes(d, curve):
    # generate_ephemeral maps raw -> raw % (n - 1) + 1
    return (d - 1).to_bytes(curve.key_size // 8 + 8, "big")


def script_for(d, curve):
    return ScriptedRandomSource([scalar_bytes(d, curve), OUTER_IV, GCM_NONCE])


def seal_envelope(recipient_pub, eph_d, padded, level):
    curve   = recipient_pub.curve
    eph     = ec.derive_private_key(eph_d, curve)
    eph_pub = eph.public_key().public_bytes(serialization.Encoding.X962,
                                            serialization.PublicFormat.UncompressedPoint)
    secret  = eph.exchange(ec.ECDH(), recipient_pub).lstrip(b"\x00")
    digest  = hashlib.new("sha384" if level is SecurityLevel.HIGH else "sha256",
                          secret).digest()
    enc_key, mac_key = digest[:level.key_size], digest[level.key_size:]
    aead_ct = GCM_NONCE + AESGCM(enc_key).encrypt(GCM_NONCE, padded, OUTER_IV)
    tag     = hmac.new(mac_key, OUTER_IV + aead_ct, hashlib.sha1).digest()
    return bytes([len(eph_pub)]) + eph_pub + OUTER_IV + aead_ct + tag


def expected_envelope(recipient_pub, eph_d, plaintext, level):
    pad     = 16 - len(plaintext) % 16
    return seal_envelope(recipient_pub, eph_d, plaintext + bytes([pad]) * pad, level)


@pytest.fixture
def recipient():
    return ec.derive_private_key(RECIPIENT_D, ec.SECP256R1())


@pytest.mark.parametrize("level", [SecurityLevel.STANDARD, SecurityLevel.HIGH])
def test_fixed_randomness_exact_envelope(recipient, level):
    rng = script_for(EPHEMERAL_D, recipient.curve)
    env = encrypt(recipient.public_key(), PLAINTEXT, level, rng=rng)
    assert rng.exhausted
    assert env == expected_envelope(recipient.public_key(), EPHEMERAL_D, PLAINTEXT, level)
    assert decrypt(recipient, env, level) == PLAINTEXT


def test_fixed_randomness_is_reproducible(recipient):
    pub = recipient.public_key()
    e1  = encrypt(pub, PLAINTEXT, rng=script_for(EPHEMERAL_D, recipient.curve))
    e2  = encrypt(pub, PLAINTEXT, rng=script_for(EPHEMERAL_D, recipient.curve))
    assert e1 == e2


def test_fixed_randomness_field_positions(recipient):
    env = encrypt(recipient.public_key(), PLAINTEXT,
                  rng=script_for(EPHEMERAL_D, recipient.curve))
    eph_len = env[0]
    assert env[1 + eph_len:1 + eph_len + 16] == OUTER_IV
    assert env[1 + eph_len + 16:1 + eph_len + 28] == GCM_NONCE


# FIPS 186-4 base point orders, written out independently of the package.
CURVE_ORDERS = {
    "secp256r1": 0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    "secp384r1": 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF581A0DB248B0A77AECEC196ACCC52973,
    "secp521r1": 0x01FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFA51868783BF2F966B7FCC0148F709A5D03BB5C9B8899C47AEBB6FB71E91386409,
}


@pytest.mark.parametrize("curve_name", sorted(CURVE_ORDERS))
def test_scalar_reduction_wraps_into_range(curve_name):
    # All-ones input must still land on a valid scalar in [1, n-1].
    curve     = config.curve_for(curve_name)
    recipient = ec.derive_private_key(RECIPIENT_D, curve)
    n     = CURVE_ORDERS[curve_name]
    raw   = b"\xff" * (curve.key_size // 8 + 8)
    d     = int.from_bytes(raw, "big") % (n - 1) + 1
    rng   = ScriptedRandomSource([raw, OUTER_IV, GCM_NONCE])
    env   = encrypt(recipient.public_key(), PLAINTEXT, rng=rng)
    assert env == expected_envelope(recipient.public_key(), d, PLAINTEXT,
                                    SecurityLevel.HIGH)


@pytest.mark.parametrize("curve_name", sorted(CURVE_ORDERS))
def test_group_orders_match_curve_tables(curve_name):
    curve = config.curve_for(curve_name)
    assert config.group_order(curve) == CURVE_ORDERS[curve_name]
    assert CURVE_ORDERS[curve_name].bit_length() == curve.key_size


@pytest.mark.parametrize("body", [
    b"A" * 15 + b"\x00",
    b"A" * 15 + b"\x11",
    b"A" * 31 + b"\xff",
    b"",
    b"\x05",
])
def test_bad_padding_inside_valid_envelope(recipient, body):
    env = seal_envelope(recipient.public_key(), EPHEMERAL_D, body, SecurityLevel.HIGH)
    with pytest.raises(PaddingError):
        decrypt(recipient, env, SecurityLevel.HIGH)


def test_shared_secret_leading_zero_is_stripped(recipient):
    pub = recipient.public_key()
    for d in range(2, 20_000):
        x = ec.derive_private_key(d, recipient.curve).exchange(ec.ECDH(), pub)
        if x[0] == 0:
            break
    else:
        pytest.fail("no ephemeral scalar with a leading-zero shared X found")

    env = encrypt(pub, PLAINTEXT, SecurityLevel.HIGH, rng=script_for(d, recipient.curve))
    assert env == expected_envelope(pub, d, PLAINTEXT, SecurityLevel.HIGH)
    assert decrypt(recipient, env, SecurityLevel.HIGH) == PLAINTEXT


@pytest.mark.parametrize("curve_name", ["secp384r1", "secp521r1"])
def test_fixed_randomness_other_curves(curve_name):
    curve     = config.curve_for(curve_name)
    recipient = ec.derive_private_key(RECIPIENT_D, curve)
    env = encrypt(recipient.public_key(), PLAINTEXT, rng=script_for(EPHEMERAL_D, curve))
    assert env == expected_envelope(recipient.public_key(), EPHEMERAL_D, PLAINTEXT,
                                    SecurityLevel.HIGH)

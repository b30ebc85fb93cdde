"""
ecdhe_crypto — Hybrid EC public-key encryption
===============================================
Ephemeral ECDH + AES-GCM + HMAC-SHA1 envelopes for a recipient's EC key.

Layers:
    1  SYMMETRIC  — AES-GCM with prefixed nonce, HMAC-SHA1 tags
    2  AGREEMENT  — ephemeral ECDH, SHA-256/SHA-384 key split
    3  ENVELOPE   — padding, framing, verify-then-decrypt

Usage:
    recipient = generate_keypair()
    envelope  = encrypt(recipient.public_key(), b"payload", SecurityLevel.HIGH)
    plaintext = decrypt(recipient, envelope, SecurityLevel.HIGH)

License: Apache 2.0
"""

__version__ = "1.0.0"

from .config                     import SecurityLevel
from .exceptions                 import (EnvelopeError, KeyGenerationError,
                                         InvalidPoint, MalformedInput,
                                         AuthenticationError, PaddingError,
                                         EncodingError, RandomSourceError)
from .randomness                 import RandomSource, SystemRandomSource
from .layers.layer1_aead         import AEADCipher
from .layers.layer1_mac          import MessageAuthenticator
from .layers.layer2_agreement    import DerivedKeys, generate_keypair, agree, derive
from .layers.layer3_padding      import add_padding, remove_padding
from .layers.layer3_envelope     import (encrypt, decrypt, ECDHECipher,
                                         encrypt_aes256_gcm_hmac_sha1,
                                         decrypt_aes256_gcm_hmac_sha1,
                                         encrypt_aes128_gcm_hmac_sha1,
                                         decrypt_aes128_gcm_hmac_sha1)

__all__ = [
    "SecurityLevel",
    "EnvelopeError",
    "KeyGenerationError",
    "InvalidPoint",
    "MalformedInput",
    "AuthenticationError",
    "PaddingError",
    "EncodingError",
    "RandomSourceError",
    "RandomSource",
    "SystemRandomSource",
    "AEADCipher",
    "MessageAuthenticator",
    "DerivedKeys",
    "generate_keypair",
    "agree",
    "derive",
    "add_padding",
    "remove_padding",
    "encrypt",
    "decrypt",
    "ECDHECipher",
    "encrypt_aes256_gcm_hmac_sha1",
    "decrypt_aes256_gcm_hmac_sha1",
    "encrypt_aes128_gcm_hmac_sha1",
    "decrypt_aes128_gcm_hmac_sha1",
]

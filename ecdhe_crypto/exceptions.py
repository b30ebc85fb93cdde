"""
Exceptions raised by the envelope protocol.

Every failure is terminal for the call that raised it. Nothing is retried
internally and decrypt never returns partial plaintext.
"""


class EnvelopeError(Exception):
    """Base exception for ecdhe_crypto errors."""

    pass


class KeyGenerationError(EnvelopeError):
    """Ephemeral key creation or key agreement failed while encrypting."""

    pass


class InvalidPoint(EnvelopeError, ValueError):
    """Public key does not decode to a usable curve point."""

    pass


class MalformedInput(EnvelopeError, ValueError):
    """Envelope is structurally too short or its framing is inconsistent."""

    pass


class AuthenticationError(EnvelopeError):
    """Integrity check failed. Deliberately says nothing about which one."""

    def __init__(self, message: str = "Authentication failed."):
        super().__init__(message)


class PaddingError(EnvelopeError, ValueError):
    """Final padding byte is out of range."""

    pass


class EncodingError(EnvelopeError):
    """Public key could not be serialized into the envelope."""

    pass


class RandomSourceError(EnvelopeError):
    """Random source failed or returned fewer bytes than requested."""

    pass

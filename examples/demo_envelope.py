"""
ecdhe_crypto — Live Demo: ECDHE envelopes at both security levels
==================================================================
Run:  python examples/demo_envelope.py

Encrypts and decrypts a message for a freshly generated recipient on every
supported curve, printing envelope sizes and timings, then shows that a
tampered envelope is rejected.
"""

import sys, os, time, logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ecdhe_crypto import config
from ecdhe_crypto.config                 import SecurityLevel
from ecdhe_crypto.exceptions             import AuthenticationError
from ecdhe_crypto.layers.layer2_agreement import generate_keypair
from ecdhe_crypto.layers.layer3_envelope  import encrypt, decrypt, ECDHECipher

LINE = "═" * 70
MSG  = b"Ephemeral keys, one envelope, one recipient."

def header(name):
    print(f"\n{LINE}")
    print(f"  {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")


def main():
    logging.basicConfig(level=logging.INFO, format=' %(name)s: %(message)s')

    print(f"\n{LINE}")
    print("  ecdhe_crypto — ECDHE + AES-GCM + HMAC-SHA1 Demo")
    print(LINE)
    print(f"  Message: {MSG.decode()}\n")

    for curve_name in sorted(config.SUPPORTED_CURVES):
        recipient = generate_keypair(config.curve_for(curve_name))
        for level in SecurityLevel:
            header(f"{curve_name} — {level.name} (AES-{level.key_size * 8}-GCM)")
            t0  = time.perf_counter()
            env = encrypt(recipient.public_key(), MSG, level)
            pt  = decrypt(recipient, env, level)
            elapsed = time.perf_counter() - t0
            ok("Ephemeral key", f"{env[0]} bytes")
            ok("Envelope",      f"{len(env)} bytes")
            ok("Round-trip",    f"{elapsed*1000:.2f} ms")
            ok("Decrypted",     pt.decode())

    header("Tamper detection")
    cipher = ECDHECipher.generate()
    env    = bytearray(cipher.encrypt(MSG))
    env[-1] ^= 0x01
    try:
        cipher.decrypt(bytes(env))
        print("  ✗  tampered envelope accepted")
        return 1
    except AuthenticationError:
        ok("Tampered envelope rejected")

    print(f"\n{LINE}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

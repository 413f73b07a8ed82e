"""
primitives.py — Keyed-hash capabilities consumed by the OTP pipeline.

The pipeline only needs ``hmac_fn(key, message) -> 20 bytes`` (HMAC-SHA1,
RFC 2104). Two implementations are shipped:

- hmac_sha1: standard library hmac + hashlib (default)
- cryptography_hmac_sha1: the `cryptography` package (optional extra),
  handy where OpenSSL-backed primitives are mandated

Both raise PrimitiveUnavailable instead of returning a wrong digest.
"""

import hashlib
import hmac
from typing import Callable

from toyotp.errors import PrimitiveUnavailable

HmacFn = Callable[[bytes, bytes], bytes]

DIGEST_SIZE = 20    # SHA-1 output length


def hmac_sha1(key: bytes, message: bytes) -> bytes:
    """HMAC-SHA1 via the standard library."""
    try:
        return hmac.new(key, message, hashlib.sha1).digest()
    except ValueError as e:
        # OpenSSL in FIPS mode may refuse SHA-1
        raise PrimitiveUnavailable(f"HMAC-SHA1 is not available: {e}") from e


def cryptography_hmac_sha1(key: bytes, message: bytes) -> bytes:
    """
    HMAC-SHA1 via `cryptography`.

    Raises:
        PrimitiveUnavailable: if the package is not installed
    """
    try:
        from cryptography.hazmat.primitives import hashes
        from cryptography.hazmat.primitives import hmac as crypto_hmac
    except ImportError as e:
        raise PrimitiveUnavailable(
            "Python package 'cryptography' is not installed (pip install toyotp[cryptography])"
        ) from e

    h = crypto_hmac.HMAC(key, hashes.SHA1())
    h.update(message)
    return h.finalize()

"""
base32.py — RFC 4648 Base32 codec for OTP secrets.

Authenticator apps show and accept secrets as unpadded, upper-case Base32,
often typed by hand with spaces or in lower case. encode() therefore never
emits '=' and decode() is forgiving: it upper-cases the input and skips every
character that is not part of the alphabet (padding, whitespace, dashes).
Rejecting an empty result is left to the caller (see otp_core.decode_secret).
"""

import base64

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_VALUES = {ch: i for i, ch in enumerate(ALPHABET)}


def encode(data: bytes) -> str:
    """
    Encode bytes as Base32 without '=' padding.

    The last incomplete 5-bit group is right-padded with zero bits, exactly as
    base64.b32encode does; only the trailing '=' characters are dropped.

    Example: encode(b"1234567890") -> "GEZDGNBVGY3TQOJQ"
    """
    return base64.b32encode(bytes(data)).decode("ascii").rstrip("=")


def decode(text: str) -> bytes:
    """
    Decode Base32 text into bytes.

    - Case-insensitive.
    - Characters outside A-Z / 2-7 (including '=') are ignored.
    - The bit stream is cut to whole bytes; leftover bits (< 8) are the zero
      padding added by the encoder and are discarded.

    base64.b32decode is not used because it rejects unpadded input whose
    length is not a valid quantum (e.g. 3 characters) instead of truncating.
    """
    out = bytearray()
    buffer = 0
    bits = 0
    for ch in text.upper():
        value = _VALUES.get(ch)
        if value is None:
            continue
        buffer = (buffer << 5) | value
        bits += 5
        if bits >= 8:
            bits -= 8
            out.append((buffer >> bits) & 0xFF)
            buffer &= (1 << bits) - 1
    return bytes(out)


def to_hex(data: bytes) -> str:
    """Upper-case hex string, used by the step trace."""
    return bytes(data).hex().upper()


def base32_to_hex(text: str) -> str:
    """Hex view of a Base32 secret (whole bytes only)."""
    return to_hex(decode(text))

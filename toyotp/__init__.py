"""
toyotp package
==============

HOTP / TOTP one-time passwords (RFC 4226 & RFC 6238) with a step-by-step
trace of the algorithm for teaching/visualisation.

Core algorithm
--------------
- HOTP: code = Truncate(HMAC-SHA1(key=secret, msg=counter)) mod 10^digits
- TOTP: HOTP with counter = floor((timestamp - T0) / period), 30 s by default
- Dynamic truncation: 4 bytes at offset (last byte & 0x0F), top bit cleared

Quick example
-------------
>>> from toyotp import generate_secret, totp, verify, key_uri
>>> secret = generate_secret()
>>> code, remaining = totp(secret)
>>> verify(secret, code)
True
>>> key_uri(secret, "alice@example.com")  # render as QR
'otpauth://totp/ToyOTP:alice%40example.com?secret=...'
"""

from toyotp.base32 import decode as base32_decode, encode as base32_encode
from toyotp.config import (
    DEFAULT_CONFIG,
    DEFAULT_DIGITS,
    DEFAULT_ISSUER,
    DEFAULT_TIME_STEP,
    DEFAULT_WINDOW,
    SECRET_BYTES,
    OtpConfig,
)
from toyotp.errors import (
    InvalidConfiguration,
    InvalidCounter,
    InvalidLabel,
    InvalidSecret,
    InvalidTimestamp,
    OtpError,
    PrimitiveUnavailable,
)
from toyotp.otp_core import (
    OtpSteps,
    Truncation,
    decode_secret,
    derive_counter,
    digest,
    dynamic_truncate,
    format_otp,
    generate,
    generate_secret,
    hotp,
    hotp_key_uri,
    key_uri,
    seconds_remaining,
    totp,
    totp_steps,
    verify,
    verify_hotp,
)
from toyotp.primitives import cryptography_hmac_sha1, hmac_sha1

__version__ = "0.1.0"

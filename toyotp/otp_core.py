"""
otp_core.py — Core library for TOTP / HOTP (RFC 6238 / RFC 4226).

Goals:
- Pure functions only, usable directly by the CLI and the web API.
- No argparse, no file I/O, no global options: every call receives an
  OtpConfig.
- Each step of the algorithm is its own function so the visualizer can show
  the intermediate values (see totp_steps).

Pipeline:
    Base32 secret -> counter -> HMAC-SHA1 digest -> dynamic truncation -> OTP

Security notes:
- Secrets are generated from os.urandom (CSPRNG).
- verify() compares codes with hmac.compare_digest.
"""

from dataclasses import asdict, dataclass
from typing import NamedTuple, Optional, Tuple
from urllib.parse import quote, urlencode
import hmac
import logging
import math
import os
import struct
import time

from toyotp import base32
from toyotp.config import DEFAULT_CONFIG, DEFAULT_ISSUER, SECRET_BYTES, OtpConfig
from toyotp.errors import (
    InvalidConfiguration,
    InvalidCounter,
    InvalidLabel,
    InvalidSecret,
    InvalidTimestamp,
    PrimitiveUnavailable,
)
from toyotp.primitives import DIGEST_SIZE, HmacFn, hmac_sha1

logger = logging.getLogger(__name__)

MAX_COUNTER = 2 ** 64 - 1


class Truncation(NamedTuple):
    offset: int     # 0..15
    value: int      # 0..2^31-1


@dataclass(frozen=True)
class OtpSteps:
    """Intermediate values of one TOTP generation, for display."""

    secret: str
    secret_hex: str
    unix_timestamp: int
    t0: int
    seconds_remaining: int
    counter: int
    counter_hex: str        # 8-byte HMAC message
    hmac_output: str
    offset: int
    truncated_hash: str
    truncated_value: int
    otp: str

    def as_dict(self) -> dict:
        return asdict(self)


# --- Secrets ---------------------------------------------------------------
def decode_secret(secret_b32: str) -> bytes:
    """
    Decode a Base32 secret into key bytes.

    Invalid characters are skipped by the codec; what is left must still
    contain at least one whole byte.

    Raises:
        InvalidSecret: empty secret, or no valid Base32 characters at all
    """
    if not isinstance(secret_b32, str):
        raise InvalidSecret(f"secret must be a Base32 string, got {type(secret_b32).__name__}")
    key = base32.decode(secret_b32)
    if not key:
        raise InvalidSecret("secret is empty or contains no valid Base32 characters")
    return key


def generate_secret(byte_length: int = SECRET_BYTES) -> str:
    """
    Create a random secret and return it as unpadded Base32.

    - byte_length bytes are read from os.urandom (CSPRNG, thread-safe).
    - 20 bytes (160 bits) by default, the RFC 4226 recommendation.

    Raises:
        InvalidConfiguration: byte_length is not a positive integer
        PrimitiveUnavailable: the OS has no entropy source
    """
    if isinstance(byte_length, bool) or not isinstance(byte_length, int) or byte_length < 1:
        raise InvalidConfiguration(f"byte_length must be a positive integer, got {byte_length!r}")
    try:
        raw = os.urandom(byte_length)
    except NotImplementedError as e:
        raise PrimitiveUnavailable("no randomness source available") from e
    return base32.encode(raw)


# --- RFC helpers -----------------------------------------------------------
def _check_time(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidTimestamp(f"{name} must be a number of seconds, got {value!r}")
    if not math.isfinite(value):
        raise InvalidTimestamp(f"{name} must be finite, got {value!r}")


def derive_counter(timestamp: float, period: int, t0: int = 0) -> int:
    """
    TOTP moving factor: floor((timestamp - T0) / X).

    Example: derive_counter(59, 30) -> 1

    Raises:
        InvalidTimestamp: timestamp or t0 is not a finite number
    """
    _check_time("timestamp", timestamp)
    _check_time("t0", t0)
    return int((timestamp - t0) // period)


def seconds_remaining(timestamp: float, period: int, t0: int = 0) -> int:
    """
    Seconds until the next code; returns ``period`` (not 0) on a step boundary.
    """
    _check_time("timestamp", timestamp)
    _check_time("t0", t0)
    return period - ((int(timestamp) - t0) % period)


def int_to_bytes(counter: int) -> bytes:
    """
    Counter -> 8-byte big-endian message, as RFC 4226 requires.

    Example: int_to_bytes(1) -> b'\\x00\\x00\\x00\\x00\\x00\\x00\\x00\\x01'

    Raises:
        InvalidCounter: counter is negative or wider than 64 bits
    """
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise InvalidCounter(f"counter must be an integer, got {counter!r}")
    if not 0 <= counter <= MAX_COUNTER:
        raise InvalidCounter(f"counter out of range 0..2^64-1: {counter}")
    return struct.pack(">Q", counter)


def digest(secret_bytes: bytes, counter: int, hmac_fn: Optional[HmacFn] = hmac_sha1) -> bytes:
    """
    HMAC-SHA1(key=secret_bytes, msg=8-byte counter).

    Raises:
        PrimitiveUnavailable: hmac_fn is None, or it did not return 20 bytes
    """
    if hmac_fn is None:
        raise PrimitiveUnavailable("no HMAC-SHA1 primitive provided")
    msg = int_to_bytes(counter)
    mac = hmac_fn(secret_bytes, msg)
    if not isinstance(mac, (bytes, bytearray)) or len(mac) != DIGEST_SIZE:
        size = len(mac) if isinstance(mac, (bytes, bytearray)) else type(mac).__name__
        raise PrimitiveUnavailable(f"HMAC primitive returned {size}, expected {DIGEST_SIZE} bytes")
    return bytes(mac)


def dynamic_truncate(hmac_digest: bytes) -> Truncation:
    """
    Dynamic truncation, RFC 4226 section 5.3.

    - offset = low nibble of the last byte (digest[19] & 0x0F)
    - read 4 bytes from offset as a big-endian integer
    - clear the top bit so the result is a non-negative 31-bit value

    Raises:
        ValueError: digest is not 20 bytes long
    """
    if len(hmac_digest) != DIGEST_SIZE:
        raise ValueError(f"expected a {DIGEST_SIZE}-byte digest, got {len(hmac_digest)} bytes")
    offset = hmac_digest[19] & 0x0F
    value = int.from_bytes(hmac_digest[offset:offset + 4], "big") & 0x7FFFFFFF
    return Truncation(offset, value)


def format_otp(truncated_value: int, digits: int) -> str:
    """value mod 10^digits, zero-padded: format_otp(42, 6) -> '000042'."""
    return str(truncated_value % (10 ** digits)).zfill(digits)


# --- Generation ------------------------------------------------------------
def hotp(
    secret_b32: str,
    counter: int,
    config: OtpConfig = DEFAULT_CONFIG,
    hmac_fn: Optional[HmacFn] = hmac_sha1,
) -> str:
    """
    HOTP code, RFC 4226.

    Steps:
    1. Base32-decode secret -> key bytes
    2. HMAC-SHA1(key, 8-byte big-endian counter)
    3. Dynamic truncation -> 31-bit value
    4. value mod 10^digits, zero-padded

    Raises:
        InvalidSecret, InvalidCounter, PrimitiveUnavailable
    """
    key = decode_secret(secret_b32)
    mac = digest(key, counter, hmac_fn)
    trunc = dynamic_truncate(mac)
    code = format_otp(trunc.value, config.digits)
    logger.debug("HOTP: counter=%d offset=%d dbc=%d -> code=%s", counter, trunc.offset, trunc.value, code)
    return code


def totp(
    secret_b32: str,
    timestamp: Optional[float] = None,
    config: OtpConfig = DEFAULT_CONFIG,
    t0: int = 0,
    hmac_fn: Optional[HmacFn] = hmac_sha1,
) -> Tuple[str, int]:
    """
    TOTP code, RFC 6238: HOTP with counter = floor((timestamp - T0) / period).

    Arguments:
        secret_b32: Base32 secret
        timestamp: epoch seconds (None -> time.time())
        config: digits / period
        t0: start of the first step, 0 for Unix epoch

    Returns:
        (code, remaining_seconds)
    """
    if timestamp is None:
        timestamp = time.time()
    counter = derive_counter(timestamp, config.period, t0)
    code = hotp(secret_b32, counter, config, hmac_fn)
    remaining = seconds_remaining(timestamp, config.period, t0)
    logger.debug("TOTP: time=%d counter=%d remaining=%ds", int(timestamp), counter, remaining)
    return code, remaining


def generate(
    secret_b32: str,
    config: OtpConfig = DEFAULT_CONFIG,
    counter: Optional[int] = None,
    timestamp: Optional[float] = None,
    t0: int = 0,
    hmac_fn: Optional[HmacFn] = hmac_sha1,
) -> str:
    """OTP for ``counter`` (HOTP mode) or for ``timestamp``/now (TOTP mode)."""
    if counter is not None:
        return hotp(secret_b32, counter, config, hmac_fn)
    code, _ = totp(secret_b32, timestamp, config, t0, hmac_fn)
    return code


def totp_steps(
    secret_b32: str,
    timestamp: Optional[float] = None,
    config: OtpConfig = DEFAULT_CONFIG,
    t0: int = 0,
    hmac_fn: Optional[HmacFn] = hmac_sha1,
) -> OtpSteps:
    """
    Run the TOTP pipeline once and keep every intermediate value.

    All fields come from the real digest, so the offset and truncated value
    shown by the visualizer are the ones that produced the code.
    """
    if timestamp is None:
        timestamp = time.time()
    _check_time("timestamp", timestamp)
    now = int(timestamp)
    key = decode_secret(secret_b32)
    counter = derive_counter(now, config.period, t0)
    msg = int_to_bytes(counter)
    mac = digest(key, counter, hmac_fn)
    trunc = dynamic_truncate(mac)
    return OtpSteps(
        secret=secret_b32,
        secret_hex=base32.to_hex(key),
        unix_timestamp=now,
        t0=t0,
        seconds_remaining=seconds_remaining(now, config.period, t0),
        counter=counter,
        counter_hex=base32.to_hex(msg),
        hmac_output=base32.to_hex(mac),
        offset=trunc.offset,
        truncated_hash=base32.to_hex(mac[trunc.offset:trunc.offset + 4]),
        truncated_value=trunc.value,
        otp=format_otp(trunc.value, config.digits),
    )


# --- Provisioning URIs -----------------------------------------------------
def _label_and_params(secret_b32: str, account_label: str, issuer: str, config: OtpConfig):
    if not isinstance(account_label, str) or not account_label.strip():
        raise InvalidLabel("account label must not be empty")
    decode_secret(secret_b32)
    params = {"secret": base32.encode(base32.decode(secret_b32))}
    if issuer:
        label = f"{quote(issuer, safe='')}:{quote(account_label, safe='')}"
        params["issuer"] = issuer
    else:
        label = quote(account_label, safe="")
    params["digits"] = config.digits
    return label, params


def key_uri(
    secret_b32: str,
    account_label: str,
    issuer: str = DEFAULT_ISSUER,
    config: OtpConfig = DEFAULT_CONFIG,
) -> str:
    """
    otpauth:// URI for TOTP, ready to be rendered as a QR code.

    otpauth://totp/{issuer}:{account}?secret=...&issuer=...&digits=...&period=...

    Label and issuer are percent-encoded as URI components. An empty issuer
    drops the "issuer:" prefix and the issuer parameter.

    Raises:
        InvalidLabel: account_label is empty
        InvalidSecret: secret_b32 has no valid Base32 content
    """
    label, params = _label_and_params(secret_b32, account_label, issuer, config)
    params["period"] = config.period
    return f"otpauth://totp/{label}?{urlencode(params, quote_via=quote)}"


def hotp_key_uri(
    secret_b32: str,
    account_label: str,
    issuer: str = DEFAULT_ISSUER,
    config: OtpConfig = DEFAULT_CONFIG,
    counter: int = 0,
) -> str:
    """Same as key_uri() for HOTP: ...&digits=...&counter=N."""
    label, params = _label_and_params(secret_b32, account_label, issuer, config)
    params["counter"] = counter
    return f"otpauth://hotp/{label}?{urlencode(params, quote_via=quote)}"


# --- Verification ----------------------------------------------------------
def _normalize_candidate(candidate, digits: int) -> Optional[str]:
    if not isinstance(candidate, str):
        return None
    candidate = candidate.strip()
    if len(candidate) != digits or not (candidate.isascii() and candidate.isdigit()):
        return None
    return candidate


def verify(
    secret_b32: str,
    candidate: str,
    config: OtpConfig = DEFAULT_CONFIG,
    timestamp: Optional[float] = None,
    t0: int = 0,
    hmac_fn: Optional[HmacFn] = hmac_sha1,
) -> bool:
    """
    Check a user-entered TOTP code against counters C-window .. C+window.

    Tolerates clock skew of up to window * period seconds either way. The
    result does not say which step matched.

    Raises:
        InvalidSecret, PrimitiveUnavailable
    """
    key = decode_secret(secret_b32)
    code = _normalize_candidate(candidate, config.digits)
    if code is None:
        return False
    if timestamp is None:
        timestamp = time.time()

    counter = derive_counter(timestamp, config.period, t0)
    for offset in range(-config.window, config.window + 1):
        test_counter = counter + offset
        if not 0 <= test_counter <= MAX_COUNTER:
            continue
        expected = format_otp(dynamic_truncate(digest(key, test_counter, hmac_fn)).value, config.digits)
        if hmac.compare_digest(expected, code):
            return True
    logger.debug("TOTP verification failed around counter=%d (window=%d)", counter, config.window)
    return False


def verify_hotp(
    secret_b32: str,
    candidate: str,
    counter: int,
    config: OtpConfig = DEFAULT_CONFIG,
    look_ahead: int = 1,
    hmac_fn: Optional[HmacFn] = hmac_sha1,
) -> Tuple[bool, int]:
    """
    Check a HOTP code against counters counter .. counter+look_ahead.

    Returns:
        (True, matched_counter + 1) on success, (False, counter) otherwise.
        The second item is the counter the caller should store next.
    """
    if isinstance(look_ahead, bool) or not isinstance(look_ahead, int) or look_ahead < 0:
        raise InvalidConfiguration(f"look_ahead must be >= 0, got {look_ahead!r}")
    key = decode_secret(secret_b32)
    int_to_bytes(counter)  # range check, raises InvalidCounter
    code = _normalize_candidate(candidate, config.digits)
    if code is None:
        return False, counter

    for i in range(look_ahead + 1):
        test_counter = counter + i
        if test_counter > MAX_COUNTER:
            break
        expected = format_otp(dynamic_truncate(digest(key, test_counter, hmac_fn)).value, config.digits)
        if hmac.compare_digest(expected, code):
            return True, test_counter + 1
    return False, counter

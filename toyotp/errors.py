"""
errors.py — Error types raised by the OTP engine.

Every error is local to the call that raised it: nothing in the engine keeps
state, so there is never anything to roll back. Input errors also subclass
ValueError so callers that already catch ValueError (the old "Invalid Base32
secret" behaviour) keep working.
"""


class OtpError(Exception):
    """Base class for every error raised by toyotp."""


class InvalidSecret(OtpError, ValueError):
    """Secret is empty or holds no valid Base32 characters."""


class InvalidConfiguration(OtpError, ValueError):
    """Non-positive digits/period/length or a negative window."""


class InvalidLabel(OtpError, ValueError):
    """Empty account label passed to the URI builder."""


class InvalidCounter(OtpError, ValueError):
    """Counter does not fit in an unsigned 64-bit integer."""


class PrimitiveUnavailable(OtpError, RuntimeError):
    """HMAC-SHA1 or the entropy source cannot be used."""


class InvalidTimestamp(OtpError, ValueError):
    """Timestamp or T0 is not a finite number of seconds."""

"""
config.py — Explicit OTP configuration.

There is no library-wide options object: every generation/verification call
takes an OtpConfig. Instances are frozen, so sharing one between threads is
safe.
"""

from dataclasses import dataclass, replace

from toyotp.errors import InvalidConfiguration

# --- Config / constants ----------------------------------------------------
DEFAULT_DIGITS = 6          # RFC 4226 recommends 6
DEFAULT_TIME_STEP = 30      # TOTP step X (seconds)
DEFAULT_WINDOW = 1          # +/- steps accepted by verify()
SECRET_BYTES = 20           # 160-bit secret
DEFAULT_ISSUER = "ToyOTP"


def _check_int(name: str, value, minimum: int) -> None:
    # bool is an int subclass; True digits is almost certainly a bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise InvalidConfiguration(f"{name} must be >= {minimum}, got {value}")


@dataclass(frozen=True)
class OtpConfig:
    """
    Parameters shared by generation and verification.

    Attributes:
        digits: length of the OTP string (positive)
        period: TOTP time step in seconds (positive)
        window: steps checked on either side of "now" by verify() (>= 0)

    Raises:
        InvalidConfiguration: on construction with an out-of-range value
    """

    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_TIME_STEP
    window: int = DEFAULT_WINDOW

    def __post_init__(self):
        _check_int("digits", self.digits, 1)
        _check_int("period", self.period, 1)
        _check_int("window", self.window, 0)

    def with_overrides(self, **changes) -> "OtpConfig":
        """Copy with the non-None values of ``changes`` applied (validated again)."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)


DEFAULT_CONFIG = OtpConfig()

from urllib.parse import parse_qs, unquote, urlparse

import pytest

from toyotp import otp_core
from toyotp.config import OtpConfig
from toyotp.errors import InvalidLabel, InvalidSecret

SECRET = "JBSWY3DPEHPK3PXP"


def test_key_uri_format():
    uri = otp_core.key_uri(SECRET, "alice", "MyService")
    assert uri == "otpauth://totp/MyService:alice?secret=JBSWY3DPEHPK3PXP&issuer=MyService&digits=6&period=30"


def test_key_uri_default_issuer():
    assert otp_core.key_uri(SECRET, "alice").startswith("otpauth://totp/ToyOTP:alice?")


def test_key_uri_percent_encodes_label_and_issuer():
    uri = otp_core.key_uri(SECRET, "alice@example.com", "Acme Corp/Dev")
    assert uri == (
        "otpauth://totp/Acme%20Corp%2FDev:alice%40example.com"
        "?secret=JBSWY3DPEHPK3PXP&issuer=Acme%20Corp%2FDev&digits=6&period=30"
    )
    parsed = urlparse(uri)
    assert unquote(parsed.path) == "/Acme Corp/Dev:alice@example.com"
    assert parse_qs(parsed.query)["issuer"] == ["Acme Corp/Dev"]


def test_key_uri_uses_config():
    uri = otp_core.key_uri(SECRET, "alice", "MyService", OtpConfig(digits=8, period=60))
    assert uri.endswith("&digits=8&period=60")


def test_key_uri_canonical_secret():
    uri = otp_core.key_uri("jbsw y3dp ehpk 3pxp", "alice", "MyService")
    assert "secret=JBSWY3DPEHPK3PXP&" in uri


def test_key_uri_without_issuer():
    uri = otp_core.key_uri(SECRET, "alice", "")
    assert uri == "otpauth://totp/alice?secret=JBSWY3DPEHPK3PXP&digits=6&period=30"


@pytest.mark.parametrize("label", ["", "   ", None])
def test_key_uri_rejects_empty_label(label):
    with pytest.raises(InvalidLabel):
        otp_core.key_uri(SECRET, label, "MyService")


def test_key_uri_rejects_empty_secret():
    with pytest.raises(InvalidSecret):
        otp_core.key_uri("", "alice", "MyService")


def test_hotp_key_uri():
    uri = otp_core.hotp_key_uri(SECRET, "alice", "MyService", counter=5)
    assert uri == "otpauth://hotp/MyService:alice?secret=JBSWY3DPEHPK3PXP&issuer=MyService&digits=6&counter=5"

import pytest

from toyotp import base32, otp_core
from toyotp.errors import InvalidConfiguration, PrimitiveUnavailable


def test_default_secret_is_160_bits():
    secret = otp_core.generate_secret()
    assert len(secret) == 32
    assert len(base32.decode(secret)) == 20
    assert "=" not in secret
    assert set(secret) <= set(base32.ALPHABET)


@pytest.mark.parametrize("length", [1, 10, 16, 32, 64])
def test_custom_length(length):
    assert len(base32.decode(otp_core.generate_secret(length))) == length


def test_secrets_differ():
    assert otp_core.generate_secret() != otp_core.generate_secret()


@pytest.mark.parametrize("length", [0, -1, 2.5, "20", True])
def test_invalid_length(length):
    with pytest.raises(InvalidConfiguration):
        otp_core.generate_secret(length)


def test_generated_secret_is_usable():
    secret = otp_core.generate_secret()
    code, _ = otp_core.totp(secret, 1700000000)
    assert otp_core.verify(secret, code, timestamp=1700000000)


def test_entropy_source_missing(monkeypatch):
    def no_urandom(n):
        raise NotImplementedError

    monkeypatch.setattr(otp_core.os, "urandom", no_urandom)
    with pytest.raises(PrimitiveUnavailable):
        otp_core.generate_secret()

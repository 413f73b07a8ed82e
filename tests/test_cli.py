import pytest

from toyotp import base32, otp_core
from toyotp.otp_cli import SECRET_ENV, main
from tests.conftest import RFC_SECRET_B32


def test_secret_command(capsys):
    assert main(["secret", "--length", "10"]) == 0
    out = capsys.readouterr().out.strip()
    assert len(base32.decode(out)) == 10


def test_hotp_command(capsys):
    assert main(["hotp", "--secret", RFC_SECRET_B32, "--counter", "1"]) == 0
    assert "HOTP(6d, counter=1): 287082" in capsys.readouterr().out


def test_secret_from_environment(monkeypatch, capsys):
    monkeypatch.setenv(SECRET_ENV, RFC_SECRET_B32)
    assert main(["hotp", "--counter", "0", "--digits", "6"]) == 0
    assert "755224" in capsys.readouterr().out


def test_missing_secret(monkeypatch, capsys):
    monkeypatch.delenv(SECRET_ENV, raising=False)
    assert main(["hotp", "--counter", "0"]) == 1
    assert "[!] no secret given" in capsys.readouterr().err


def test_invalid_secret(capsys):
    assert main(["hotp", "--secret", "!!!!", "--counter", "0"]) == 1
    assert "[!]" in capsys.readouterr().err


def test_invalid_digits(capsys):
    assert main(["totp", "--secret", RFC_SECRET_B32, "--digits", "0"]) == 1
    assert "digits" in capsys.readouterr().err


def test_totp_command(capsys):
    assert main(["totp", "--secret", RFC_SECRET_B32, "--digits", "8"]) == 0
    assert "TOTP (8d): " in capsys.readouterr().out


def test_steps_command(capsys):
    assert main(["steps", "--secret", RFC_SECRET_B32, "--digits", "8", "--timestamp", "59"]) == 0
    out = capsys.readouterr().out
    assert "Counter              : 1  (0x0000000000000001)" in out
    assert "31-bit value         : 1094287082" in out
    assert "OTP                  : 94287082" in out


def test_uri_command(capsys):
    assert main(["uri", "--secret", "JBSWY3DPEHPK3PXP", "--account", "alice@example", "--issuer", "MyService"]) == 0
    out = capsys.readouterr().out
    assert "otpauth://totp/MyService:alice%40example?secret=JBSWY3DPEHPK3PXP" in out
    assert "otpauth://hotp/MyService:alice%40example?" in out


def test_verify_totp_command(capsys):
    code, _ = otp_core.totp(RFC_SECRET_B32)
    assert main(["verify", "totp", "--secret", RFC_SECRET_B32, "--code", code]) == 0
    assert "VALID" in capsys.readouterr().out


def test_verify_hotp_command(capsys):
    assert main(["verify", "hotp", "--secret", RFC_SECRET_B32, "--code", "359152", "--counter", "1"]) == 0
    assert "next counter = 3" in capsys.readouterr().out
    assert main(["verify", "hotp", "--secret", RFC_SECRET_B32, "--code", "000000", "--counter", "1"]) == 1
    assert "INVALID" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out


def test_missing_required_argument():
    with pytest.raises(SystemExit) as exc:
        main(["hotp", "--secret", RFC_SECRET_B32])
    assert exc.value.code == 2

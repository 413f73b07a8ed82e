#!/usr/bin/env python3
"""
otp_cli.py — command line front end for toyotp.otp_core

Subcommands:
- secret : generate a new Base32 secret
- totp   : show the current TOTP code (optionally refreshing with --watch)
- hotp   : HOTP code for a given counter
- steps  : every intermediate value of the current TOTP computation
- uri    : otpauth:// URIs for authenticator apps
- verify : check a TOTP / HOTP code

The secret is taken from --secret or the TOYOTP_SECRET environment variable;
nothing is stored on disk.

eg..:
    toyotp secret --length 20
    toyotp totp --secret GEZDGNBVGY3TQOJQ --digits 8 --period 60
    toyotp hotp --secret GEZDGNBVGY3TQOJQ --counter 1
    toyotp uri --secret GEZDGNBVGY3TQOJQ --account alice@example --issuer MyService
    toyotp verify totp --secret GEZDGNBVGY3TQOJQ --code 123456 --window 2
"""

import argparse
import logging
import os
import sys
import time

from toyotp import otp_core
from toyotp.config import DEFAULT_CONFIG, DEFAULT_ISSUER, SECRET_BYTES, OtpConfig
from toyotp.errors import OtpError

SECRET_ENV = "TOYOTP_SECRET"


# --- helpers ---------------------------------------------------------------
def _secret(args) -> str:
    secret = args.secret or os.environ.get(SECRET_ENV)
    if not secret:
        raise OtpError(f"no secret given: use --secret or set {SECRET_ENV}")
    return secret


def _config(args) -> OtpConfig:
    return DEFAULT_CONFIG.with_overrides(
        digits=getattr(args, "digits", None),
        period=getattr(args, "period", None),
        window=getattr(args, "window", None),
    )


# --- CLI command handlers --------------------------------------------------
def cmd_secret(args):
    print(otp_core.generate_secret(args.length))


def cmd_totp(args):
    secret = _secret(args)
    config = _config(args)
    if not args.watch:
        code, remaining = otp_core.totp(secret, config=config)
        print(f"TOTP ({config.digits}d): {code}  (valid ~{remaining:2d}s)")
        return

    print(f"Press Ctrl+C to quit. Generating {config.digits}-digit TOTP every {config.period}s...\n")
    last_code = None
    try:
        while True:
            code, remaining = otp_core.totp(secret, time.time(), config)
            if code != last_code:
                print(f"TOTP ({config.digits}d): {code}  (valid ~{remaining:2d}s)")
                last_code = code
            else:
                print(f".. {remaining:2d}s left", end="\r", flush=True)
            time.sleep(1)
    except KeyboardInterrupt:
        print("\nBye.")


def cmd_hotp(args):
    config = _config(args)
    code = otp_core.hotp(_secret(args), args.counter, config)
    print(f"HOTP({config.digits}d, counter={args.counter}): {code}")


def cmd_steps(args):
    steps = otp_core.totp_steps(_secret(args), args.timestamp, _config(args), args.t0)
    print(f"1. Secret (Base32)      : {steps.secret}")
    print(f"   Secret (hex)         : {steps.secret_hex}")
    print(f"2. Unix time            : {steps.unix_timestamp}  ({steps.seconds_remaining}s left)")
    print(f"3. Counter              : {steps.counter}  (0x{steps.counter_hex})")
    print(f"4. HMAC-SHA1            : {steps.hmac_output}")
    print(f"5. Offset               : {steps.offset}")
    print(f"   Bytes [{steps.offset}..{steps.offset + 3}]        : {steps.truncated_hash}")
    print(f"   31-bit value         : {steps.truncated_value}")
    print(f"6. OTP                  : {steps.otp}")


def cmd_uri(args):
    secret = _secret(args)
    config = _config(args)
    print("TOTP URI:")
    print(otp_core.key_uri(secret, args.account, args.issuer, config))
    print("\nHOTP URI:")
    print(otp_core.hotp_key_uri(secret, args.account, args.issuer, config))


def cmd_verify_totp(args):
    if otp_core.verify(_secret(args), args.code, _config(args)):
        print("[+] TOTP code is VALID")
        return 0
    print("[-] TOTP code is INVALID")
    return 1


def cmd_verify_hotp(args):
    ok, next_counter = otp_core.verify_hotp(
        _secret(args), args.code, args.counter, _config(args), look_ahead=args.look_ahead
    )
    if ok:
        print(f"[+] HOTP code is VALID (next counter = {next_counter})")
        return 0
    print("[-] HOTP code is INVALID")
    return 1


# --- Argparse builder ------------------------------------------------------
def _add_common(p: argparse.ArgumentParser, period: bool = True):
    p.add_argument("--secret", help=f"Base32 secret (default: ${SECRET_ENV})")
    p.add_argument("--digits", type=int, help="Number of OTP digits (default 6)")
    if period:
        p.add_argument("--period", type=int, help="TOTP time step in seconds (default 30)")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="toyotp", description="TOTP/HOTP (HMAC-SHA1) generator and verifier")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every step of the computation")
    sub = p.add_subparsers(dest="cmd")

    # secret
    ps = sub.add_parser("secret", help="Generate a random Base32 secret")
    ps.add_argument("--length", type=int, default=SECRET_BYTES, help="Secret length in bytes")
    ps.set_defaults(func=cmd_secret)

    # totp
    pt = sub.add_parser("totp", help="Show the current TOTP code")
    _add_common(pt)
    pt.add_argument("--watch", action="store_true", help="Refresh every second until Ctrl+C")
    pt.set_defaults(func=cmd_totp)

    # hotp
    ph = sub.add_parser("hotp", help="Generate HOTP code for a specific counter")
    _add_common(ph, period=False)
    ph.add_argument("--counter", type=int, required=True)
    ph.set_defaults(func=cmd_hotp)

    # steps
    pst = sub.add_parser("steps", help="Show each step of the TOTP algorithm")
    _add_common(pst)
    pst.add_argument("--timestamp", type=int, help="Unix time to use instead of now")
    pst.add_argument("--t0", type=int, default=0, help="Unix time of the first step (default 0)")
    pst.set_defaults(func=cmd_steps)

    # uri
    pu = sub.add_parser("uri", help="Print otpauth URIs for TOTP/HOTP")
    _add_common(pu)
    pu.add_argument("--account", required=True, help="Account label, e.g. alice@example.com")
    pu.add_argument("--issuer", default=DEFAULT_ISSUER)
    pu.set_defaults(func=cmd_uri)

    # verify
    pv = sub.add_parser("verify", help="Verify an OTP code (TOTP or HOTP)")
    sub_v = pv.add_subparsers(dest="verify_type", required=True)

    pvt = sub_v.add_parser("totp", help="Verify a TOTP code")
    _add_common(pvt)
    pvt.add_argument("--code", required=True, help="OTP code to verify")
    pvt.add_argument("--window", type=int, help="Allowed +/- step window (default 1)")
    pvt.set_defaults(func=cmd_verify_totp)

    pvh = sub_v.add_parser("hotp", help="Verify a HOTP code")
    _add_common(pvh, period=False)
    pvh.add_argument("--code", required=True, help="OTP code to verify")
    pvh.add_argument("--counter", type=int, required=True, help="Current HOTP counter")
    pvh.add_argument("--look-ahead", type=int, default=1, help="Allowed counter look-ahead")
    pvh.set_defaults(func=cmd_verify_hotp)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[+] %(message)s")

    try:
        return args.func(args) or 0
    except OtpError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

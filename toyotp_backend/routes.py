"""
OTP API ROUTES - FLASK BLUEPRINT

Endpoints used by the visualizer UI. Every endpoint is stateless: the secret
travels in the JSON body of each request and is never stored.

EXAMPLES:
curl -X POST http://localhost:5000/api/secret -H "Content-Type: application/json" -d "{}"
curl -X POST http://localhost:5000/api/totp -H "Content-Type: application/json" -d '{"secret": "JBSWY3DPEHPK3PXP"}'
curl -X POST http://localhost:5000/api/verify -H "Content-Type: application/json" -d '{"secret": "JBSWY3DPEHPK3PXP", "code": "123456"}'
"""

import base64
import io
import time

import qrcode
from flask import Blueprint, current_app, jsonify, request

from toyotp import otp_core
from toyotp.config import SECRET_BYTES, OtpConfig
from toyotp.errors import OtpError, PrimitiveUnavailable

otp_bp = Blueprint('otp', __name__, url_prefix='/api')


class MissingField(Exception):
    pass


@otp_bp.errorhandler(MissingField)
def handle_missing_field(e):
    return jsonify({"error": f"'{e}' is required in JSON body"}), 400


@otp_bp.errorhandler(PrimitiveUnavailable)
def handle_primitive_unavailable(e):
    current_app.logger.error("OTP primitive unavailable: %s", e)
    return jsonify({"error": str(e)}), 503


@otp_bp.errorhandler(OtpError)
def handle_otp_error(e):
    return jsonify({"error": str(e)}), 400


def _json() -> dict:
    return request.get_json(silent=True) or {}


def _require(data: dict, *fields):
    for field in fields:
        if field not in data:
            raise MissingField(field)
    return [data[field] for field in fields]


def _config(data: dict) -> OtpConfig:
    """Request values override the app defaults (OTP_DIGITS, OTP_PERIOD, OTP_WINDOW)."""
    cfg = current_app.config
    return OtpConfig(
        digits=data.get('digits', cfg['OTP_DIGITS']),
        period=data.get('period', cfg['OTP_PERIOD']),
        window=data.get('window', cfg['OTP_WINDOW']),
    )


@otp_bp.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})


@otp_bp.route('/secret', methods=['POST'])
def new_secret():
    """
    NEW RANDOM SECRET

    Body: {"length": 20}   (optional, bytes)
    Output: {"secret": "..."}
    """
    data = _json()
    secret = otp_core.generate_secret(data.get('length', SECRET_BYTES))
    current_app.logger.info("Generated secret %s...", secret[:4])
    return jsonify({"secret": secret})


@otp_bp.route('/totp', methods=['POST'])
def get_totp():
    """
    CURRENT TOTP CODE

    Body: {"secret": "...", "digits": 6, "period": 30, "timestamp": 1700000000}
    Output: {"code": "123456", "remaining": 17, "period": 30, "timestamp": ...}
    """
    data = _json()
    (secret,) = _require(data, 'secret')
    config = _config(data)
    timestamp = data.get('timestamp', int(time.time()))

    code, remaining = otp_core.totp(secret, timestamp, config)
    return jsonify({
        "code": code,
        "remaining": remaining,
        "period": config.period,
        "timestamp": timestamp,
    })


@otp_bp.route('/hotp', methods=['POST'])
def get_hotp():
    """
    HOTP CODE

    Body: {"secret": "...", "counter": 1, "digits": 6}
    """
    data = _json()
    secret, counter = _require(data, 'secret', 'counter')
    code = otp_core.hotp(secret, counter, _config(data))
    return jsonify({"code": code, "counter": counter})


@otp_bp.route('/steps', methods=['POST'])
def get_steps():
    """
    STEP-BY-STEP TOTP COMPUTATION (for the visualizer)

    Body: {"secret": "...", "timestamp": 1700000000, "t0": 0}
    Output: secret_hex, counter, counter_hex, hmac_output, offset, truncated_hash,
            truncated_value, otp, seconds_remaining ...
    """
    data = _json()
    (secret,) = _require(data, 'secret')
    steps = otp_core.totp_steps(secret, data.get('timestamp'), _config(data), data.get('t0', 0))
    return jsonify(steps.as_dict())


@otp_bp.route('/verify', methods=['POST'])
def verify_totp_route():
    """
    VERIFY A TOTP CODE

    Body: {"secret": "...", "code": "123456", "window": 1}
    Output: {"valid": true} or {"valid": false}
    """
    data = _json()
    secret, code = _require(data, 'secret', 'code')
    valid = otp_core.verify(secret, code, _config(data), data.get('timestamp'))
    return jsonify({"valid": valid})


@otp_bp.route('/verify_hotp', methods=['POST'])
def verify_hotp_route():
    """
    VERIFY A HOTP CODE

    Body: {"secret": "...", "code": "123456", "counter": 1, "look_ahead": 1}
    Output: {"valid": true, "new_counter": 2} or {"valid": false}
    """
    data = _json()
    secret, code, counter = _require(data, 'secret', 'code', 'counter')
    valid, new_counter = otp_core.verify_hotp(
        secret, code, counter, _config(data), look_ahead=data.get('look_ahead', 1)
    )
    if valid:
        return jsonify({"valid": valid, "new_counter": new_counter})
    return jsonify({"valid": valid})


@otp_bp.route('/otpauth_uri', methods=['POST'])
def get_otpauth_uri():
    """
    OTPAUTH URIs FOR AUTHENTICATOR APPS

    Body: {"secret": "...", "account": "alice@example.com", "issuer": "MyApp"}
    """
    data = _json()
    secret, account = _require(data, 'secret', 'account')
    issuer = data.get('issuer', current_app.config['OTP_ISSUER'])
    config = _config(data)
    return jsonify({
        "totp_uri": otp_core.key_uri(secret, account, issuer, config),
        "hotp_uri": otp_core.hotp_key_uri(secret, account, issuer, config),
    })


@otp_bp.route('/qr_code', methods=['POST'])
def get_qr_code():
    """
    QR CODE (PNG data URI) OF THE TOTP URI

    Body: {"secret": "...", "account": "alice@example.com", "issuer": "MyApp"}
    """
    data = _json()
    secret, account = _require(data, 'secret', 'account')
    issuer = data.get('issuer', current_app.config['OTP_ISSUER'])
    totp_uri = otp_core.key_uri(secret, account, issuer, _config(data))

    qr = qrcode.QRCode(version=1, box_size=10, border=5)
    qr.add_data(totp_uri)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    img_str = base64.b64encode(buffer.getvalue()).decode()

    return jsonify({
        "qr_code": f"data:image/png;base64,{img_str}",
        "uri": totp_uri,
    })

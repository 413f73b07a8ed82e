"""
FLASK APP ENTRY POINT - OTP VISUALIZER API
==========================================

Sets up the Flask app, enables CORS and registers the OTP blueprint.

Configuration (app.config, overridable with TOYOTP_* environment variables,
e.g. TOYOTP_OTP_ISSUER=MyApp, TOYOTP_OTP_DIGITS=8):
- OTP_ISSUER : issuer used in otpauth URIs when the request gives none
- OTP_DIGITS / OTP_PERIOD / OTP_WINDOW : defaults for every request

Run:
    flask --app toyotp_backend run
"""

from flask import Flask
from flask_cors import CORS

from toyotp.config import DEFAULT_DIGITS, DEFAULT_ISSUER, DEFAULT_TIME_STEP, DEFAULT_WINDOW


def create_app(test_config=None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(
        OTP_ISSUER=DEFAULT_ISSUER,
        OTP_DIGITS=DEFAULT_DIGITS,
        OTP_PERIOD=DEFAULT_TIME_STEP,
        OTP_WINDOW=DEFAULT_WINDOW,
    )
    app.config.from_prefixed_env("TOYOTP")
    if test_config is not None:
        app.config.update(test_config)

    # The visualizer UI is served from another origin during development
    CORS(app)

    from toyotp_backend.routes import otp_bp
    app.register_blueprint(otp_bp)
    return app


if __name__ == '__main__':
    create_app().run(debug=True, host='127.0.0.1', port=5000)

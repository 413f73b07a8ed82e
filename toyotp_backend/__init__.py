"""
Backend package for the OTP visualizer, using Flask.

Exposes toyotp's generation / verification functions as a stateless JSON API
for the browser UI. No secret is stored server-side.
"""

from .app import create_app

__all__ = ['create_app']

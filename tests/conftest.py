import pytest

from toyotp_backend import create_app

# RFC 4226 appendix D / RFC 6238 appendix B secret: ASCII "12345678901234567890"
RFC_SECRET = b"12345678901234567890"
RFC_SECRET_B32 = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture
def app():
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()

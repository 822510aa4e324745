"""Shared fixtures for verifier tests."""

import base64
import hashlib
import hmac

import pytest

SECRET = "mG5be6ZJU1qBGz24yPh/ESM3UdU="
CLIENT_ID = "87"
OTP = "cbdefghijklnrtuvcbdefghijklnrtuvcbdefghijkln"


def hmac_b64(message: str, secret: str = SECRET) -> str:
    """Reference HMAC-SHA1, independent of the package's signing code."""
    key = base64.b64decode(secret)
    digest = hmac.new(key, message.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


@pytest.fixture
def secret():
    return SECRET


@pytest.fixture
def client_id():
    return CLIENT_ID


@pytest.fixture
def otp():
    return OTP


@pytest.fixture
def sign_reference():
    """The reference HMAC function."""
    return hmac_b64


@pytest.fixture
def server_body():
    """Factory for validation server response bodies, signed with SECRET."""

    def make(nonce, otp=OTP, status="OK", secret=SECRET, h=None, **overrides):
        values = {
            "nonce": nonce,
            "otp": otp,
            "sessioncounter": "19",
            "sessionuse": "17",
            "sl": "100",
            "status": status,
            "t": "1700000000",
            "timestamp": "14693617",
        }
        values.update(overrides)
        values = {k: v for k, v in values.items() if v is not None}

        signed = "&".join(f"{k}={values[k]}" for k in sorted(values))
        values["h"] = h if h is not None else hmac_b64(signed, secret)

        # Servers send h first, CRLF line endings and a trailing blank line
        lines = [f"h={values.pop('h')}"] + [f"{k}={v}" for k, v in values.items()]
        return "\r\n".join(lines) + "\r\n\r\n"

    return make

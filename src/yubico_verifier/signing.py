"""
Request signing for the Yubico validation protocol 2.0.
"""

import base64
import binascii
import hashlib
import hmac
import secrets
from dataclasses import replace

from .exceptions import ConfigurationError
from .models import VerificationRequest, canonical_query

# 16 random bytes give a 32 character hex nonce (protocol allows 16-40)
NONCE_BYTES = 16


def decode_secret(secret: str) -> bytes:
    """Decode the base64 API secret into the HMAC key."""
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConfigurationError(f"API secret is not valid base64: {e}") from e


def sign(message: str, secret: str) -> str:
    """
    HMAC-SHA1 a message with the API secret.

    Args:
        message: Canonical ``k=v&k=v`` string
        secret: Base64 encoded API secret

    Returns:
        Base64 encoded digest
    """
    digest = hmac.new(decode_secret(secret), message.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def generate_nonce() -> str:
    return secrets.token_hex(NONCE_BYTES)


def build_request(
    otp: str,
    client_id: str,
    secret: str,
    sl: int | str | None = None,
    timeout: int | None = None,
) -> VerificationRequest:
    """
    Build and sign a verification request.

    The parameters (id, otp, nonce, timestamp and, when given, sl and
    timeout) are sorted by key and signed. The signature travels as a
    trailing ``h`` parameter that is not part of the signed string.

    Args:
        otp: OTP to verify
        client_id: Client id issued by Yubico
        secret: Base64 encoded API secret
        sl: Optional sync level
        timeout: Optional server-side sync timeout in seconds

    Returns:
        VerificationRequest carrying the nonce and the finished query string
    """
    unsigned = VerificationRequest(
        client_id=client_id,
        otp=otp,
        nonce=generate_nonce(),
        signature="",
        sl=sl,
        timeout=timeout,
    )
    signature = sign(canonical_query(unsigned.params), secret)

    return replace(unsigned, signature=signature)

"""
Yubico OTP Verifier for Python

Verify YubiKey one-time passwords against the Yubico validation servers
(protocol 2.0).
"""

from .models import ResponseStatus, ServerRecord, VerificationRequest
from .client import VerifierClient
from .config import DEFAULT_API_SERVERS, VerifierConfig
from .exceptions import (
    ConfigurationError,
    MalformedResponseError,
    ProtocolStatusError,
    TransportError,
    TrustViolationError,
    YubicoVerifierError,
)
from .modhex import Identity, decode_identity
from .response import parse_response, validate_response
from .signing import build_request

__version__ = "0.1.0"

__all__ = [
    "Identity",
    "ResponseStatus",
    "ServerRecord",
    "VerificationRequest",
    "VerifierClient",
    "VerifierConfig",
    "DEFAULT_API_SERVERS",
    "ConfigurationError",
    "MalformedResponseError",
    "ProtocolStatusError",
    "TransportError",
    "TrustViolationError",
    "YubicoVerifierError",
    "decode_identity",
    "parse_response",
    "validate_response",
    "build_request",
]

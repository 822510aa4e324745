"""
Exception types raised by the Yubico verifier.
"""


class YubicoVerifierError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(YubicoVerifierError, ValueError):
    """Missing or invalid client configuration."""


class TransportError(YubicoVerifierError):
    """
    No usable answer from the validation servers.

    Raised per server by the transport (connection error, timeout, non-200
    status) and absorbed by the race. Surfaces to the caller only when no
    server produced a parseable response at all.
    """

    def __init__(self, message: str, server: str | None = None):
        super().__init__(message)
        self.server = server


class ProtocolStatusError(YubicoVerifierError):
    """A server answered with a non-OK status."""

    def __init__(self, status: str | None, message: str):
        super().__init__(message)
        self.status = status


class TrustViolationError(YubicoVerifierError):
    """
    A response failed authentication (signature, nonce or OTP mismatch).

    Always fatal: the response may have been forged or tampered with in
    transit, so no other server's answer is trusted either.
    """


class MalformedResponseError(YubicoVerifierError, ValueError):
    """A response body or an OTP could not be decoded."""

"""
Verifier client for the Yubico OTP validation servers.
"""

from __future__ import annotations

import logging
from typing import Mapping

import httpx

from .config import DEFAULT_API_SERVERS, VerifierConfig
from .exceptions import TransportError
from .models import ServerRecord
from .race import race, race_sync
from .signing import build_request

logger = logging.getLogger(__name__)

VERIFY_PATH = "/wsapi/2.0/verify"

# InvalidURL (e.g. a bad port in a configured host) is not an HTTPError
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


def verify_url(server: str, query: str) -> str:
    """Full verification URL for a server hostname."""
    return f"https://{server}{VERIFY_PATH}?{query}"


def _check_response(server: str, response: httpx.Response) -> str:
    """Return the body of a 200 response, otherwise raise TransportError."""
    if response.status_code != 200:
        raise TransportError(
            f"Unexpected HTTP status {response.status_code}",
            server=server,
        )
    return response.text


class VerifierClient:
    """
    Client for the Yubico OTP validation protocol 2.0.

    Signs each verification request, sends it to every configured server at
    once and returns the first answer that proves authentic.

    Args:
        client_id: Client id obtained from Yubico
        secret: Base64 API secret obtained from Yubico
        sl: Sync level, 0-100 or "fast"/"secure". Default: server decides
        timeout: Server-side sync timeout in seconds. Default: server decides
        api_servers: Validation server hostnames. Default: Yubico's servers
        timeout_s: Local request timeout per server in seconds. Default: 5.0

    Example:
        >>> client = VerifierClient(client_id="12345", secret="c2VjcmV0")
        >>> record = await client.verify(otp)
        >>> print(f"Verified key {record.serial_number}")
    """

    def __init__(
        self,
        client_id: str,
        secret: str,
        sl: int | str | None = None,
        timeout: int | None = None,
        api_servers: tuple[str, ...] = DEFAULT_API_SERVERS,
        timeout_s: float = 5.0,
    ):
        self.config = VerifierConfig(
            client_id=client_id,
            secret=secret,
            sl=sl,
            timeout=timeout,
            api_servers=api_servers,
            timeout_s=timeout_s,
        )

    @classmethod
    def from_config(cls, config: VerifierConfig) -> VerifierClient:
        return cls(
            client_id=config.client_id,
            secret=config.secret,
            sl=config.sl,
            timeout=config.timeout,
            api_servers=config.api_servers,
            timeout_s=config.timeout_s,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> VerifierClient:
        """Create a client from YUBICO_* environment variables."""
        return cls.from_config(VerifierConfig.from_env(environ))

    async def verify(self, otp: str) -> ServerRecord:
        """
        Verify an OTP asynchronously.

        Args:
            otp: OTP emitted by the key

        Returns:
            Validated ServerRecord, e.g. for reading the serial number

        Raises:
            TrustViolationError: If a response failed authentication
            ProtocolStatusError: If the servers rejected the OTP
            TransportError: If no server could be reached
        """
        config = self.config
        request = build_request(
            otp, config.client_id, config.secret, sl=config.sl, timeout=config.timeout
        )
        logger.debug("Verifying OTP against %d server(s)", len(config.api_servers))

        async with httpx.AsyncClient(timeout=config.timeout_s) as client:

            async def fetch(server: str) -> str:
                try:
                    response = await client.get(verify_url(server, request.query))
                except TRANSPORT_ERRORS as e:
                    raise TransportError(str(e) or type(e).__name__, server=server) from e
                return _check_response(server, response)

            return await race(
                config.api_servers, fetch, request.nonce, config.secret, otp
            )

    def verify_sync(self, otp: str) -> ServerRecord:
        """
        Verify an OTP synchronously.

        Same behaviour as verify(), with one worker thread per server.

        Args:
            otp: OTP emitted by the key

        Returns:
            Validated ServerRecord

        Raises:
            TrustViolationError: If a response failed authentication
            ProtocolStatusError: If the servers rejected the OTP
            TransportError: If no server could be reached
        """
        config = self.config
        request = build_request(
            otp, config.client_id, config.secret, sl=config.sl, timeout=config.timeout
        )
        logger.debug("Verifying OTP against %d server(s)", len(config.api_servers))

        with httpx.Client(timeout=config.timeout_s) as client:

            def fetch(server: str) -> str:
                try:
                    response = client.get(verify_url(server, request.query))
                except TRANSPORT_ERRORS as e:
                    raise TransportError(str(e) or type(e).__name__, server=server) from e
                return _check_response(server, response)

            return race_sync(
                config.api_servers, fetch, request.nonce, config.secret, otp
            )

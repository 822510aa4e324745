"""
Client configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from .exceptions import ConfigurationError
from .signing import decode_secret

# Validation servers run by Yubico
DEFAULT_API_SERVERS = (
    "api.yubico.com",
    "api2.yubico.com",
    "api3.yubico.com",
    "api4.yubico.com",
    "api5.yubico.com",
)

SYNC_LEVEL_NAMES = frozenset({"fast", "secure"})


@dataclass(frozen=True)
class VerifierConfig:
    """
    Settings for talking to the validation servers.

    Attributes:
        client_id: Client id obtained from Yubico
        secret: Base64 API secret obtained from Yubico
        sl: Sync level, 0-100 percent or "fast"/"secure" to use the server
            configured value. None lets the server decide.
        timeout: Seconds the server may wait for sync responses. None lets
            the server decide.
        api_servers: Hostnames of the validation servers. Only change this
            when running your own validation servers.
        timeout_s: Local HTTP timeout per server in seconds
    """
    client_id: str
    secret: str
    sl: int | str | None = None
    timeout: int | None = None
    api_servers: tuple[str, ...] = DEFAULT_API_SERVERS
    timeout_s: float = 5.0

    def __post_init__(self) -> None:
        if not self.client_id:
            raise ConfigurationError("client_id is required")
        if not self.secret:
            raise ConfigurationError("secret is required")
        decode_secret(self.secret)

        if self.sl is not None:
            object.__setattr__(self, "sl", _check_sync_level(self.sl))
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

        servers = tuple(self.api_servers)
        if not servers:
            raise ConfigurationError("At least one API server is required")
        object.__setattr__(self, "api_servers", servers)

        if self.timeout_s <= 0:
            raise ConfigurationError(f"timeout_s must be positive, got {self.timeout_s}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> VerifierConfig:
        """
        Build a configuration from ``YUBICO_*`` environment variables.

        Reads YUBICO_CLIENT_ID, YUBICO_SECRET, YUBICO_SL, YUBICO_TIMEOUT
        and YUBICO_API_SERVERS (comma separated hostnames).

        Args:
            environ: Mapping to read instead of os.environ

        Raises:
            ConfigurationError: If the client id or secret is missing, or a
                value cannot be parsed
        """
        env = os.environ if environ is None else environ

        client_id = env.get("YUBICO_CLIENT_ID")
        if not client_id:
            raise ConfigurationError("YUBICO_CLIENT_ID must be set")

        secret = env.get("YUBICO_SECRET")
        if not secret:
            raise ConfigurationError("YUBICO_SECRET must be set")

        timeout: int | None = None
        raw_timeout = env.get("YUBICO_TIMEOUT")
        if raw_timeout:
            try:
                timeout = int(raw_timeout)
            except ValueError as e:
                raise ConfigurationError(
                    f"YUBICO_TIMEOUT must be an integer, got {raw_timeout!r}"
                ) from e

        api_servers = DEFAULT_API_SERVERS
        raw_servers = env.get("YUBICO_API_SERVERS")
        if raw_servers:
            api_servers = tuple(s.strip() for s in raw_servers.split(",") if s.strip())

        return cls(
            client_id=client_id,
            secret=secret,
            sl=env.get("YUBICO_SL") or None,
            timeout=timeout,
            api_servers=api_servers,
        )


def _check_sync_level(sl: int | str) -> int | str:
    """Normalize a sync level to an int percentage or a named level."""
    if isinstance(sl, str):
        if sl in SYNC_LEVEL_NAMES:
            return sl
        if not sl.isdigit():
            raise ConfigurationError(
                f"sl must be 0-100, 'fast' or 'secure', got {sl!r}"
            )
        sl = int(sl)

    if not 0 <= sl <= 100:
        raise ConfigurationError(f"sl must be between 0 and 100, got {sl}")
    return sl

"""
Data models for Yubico OTP verification.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import urlencode

from .modhex import Identity, decode_identity


class ResponseStatus(str, Enum):
    """Status tokens returned by the validation servers."""

    OK = "OK"
    BAD_OTP = "BAD_OTP"
    REPLAYED_OTP = "REPLAYED_OTP"
    BAD_SIGNATURE = "BAD_SIGNATURE"
    MISSING_PARAMETER = "MISSING_PARAMETER"
    NO_SUCH_CLIENT = "NO_SUCH_CLIENT"
    OPERATION_NOT_ALLOWED = "OPERATION_NOT_ALLOWED"
    BACKEND_ERROR = "BACKEND_ERROR"
    NOT_ENOUGH_ANSWERS = "NOT_ENOUGH_ANSWERS"
    REPLAYED_REQUEST = "REPLAYED_REQUEST"

    @classmethod
    def from_token(cls, token: str | None) -> ResponseStatus | None:
        """Map a wire token to a member, or None if it is not in the set."""
        try:
            return cls(token)
        except ValueError:
            return None


@dataclass(frozen=True)
class VerificationRequest:
    """
    A signed verification request, sent unchanged to every server.

    Attributes:
        client_id: Client id issued by Yubico
        otp: OTP being verified
        nonce: Random token the response must echo back
        signature: Base64 HMAC-SHA1 over the sorted parameters
        sl: Optional sync level (0-100, "fast" or "secure")
        timeout: Optional server-side sync timeout in seconds
    """
    client_id: str
    otp: str
    nonce: str
    signature: str
    sl: int | str | None = None
    timeout: int | None = None

    @property
    def params(self) -> dict[str, str]:
        """Signed parameters, without the signature itself."""
        params = {
            "id": self.client_id,
            "otp": self.otp,
            "nonce": self.nonce,
            "timestamp": "1",
        }
        if self.sl is not None:
            params["sl"] = str(self.sl)
        if self.timeout is not None:
            params["timeout"] = str(self.timeout)
        return params

    @property
    def query(self) -> str:
        """Query string: sorted parameters followed by ``h``."""
        return canonical_query(self.params) + "&" + urlencode({"h": self.signature})


def canonical_query(params: dict[str, str]) -> str:
    """Form-encode parameters sorted by key."""
    return urlencode(sorted(params.items()))


@dataclass(frozen=True)
class ServerRecord:
    """
    Response from a validation server.

    Fields hold the raw strings from the response body so that the
    signature can be recomputed over them. Any field may be None when the
    server left it out. Records returned by the client have been validated.

    Attributes:
        otp: OTP echoed back by the server
        nonce: Nonce echoed back by the server
        hash: Server signature (the ``h`` key)
        t: Server timestamp in UTC
        status: Status token
        timestamp: Key internal timestamp
        sessioncounter: Key internal usage counter
        sessionuse: Key internal session usage counter
        sl: Percentage of syncing reached by the server
    """
    otp: str | None = None
    nonce: str | None = None
    hash: str | None = None
    t: str | None = None
    status: str | None = None
    timestamp: str | None = None
    sessioncounter: str | None = None
    sessionuse: str | None = None
    sl: str | None = None

    @property
    def status_code(self) -> ResponseStatus | None:
        return ResponseStatus.from_token(self.status)

    @property
    def server_time(self) -> datetime | None:
        """
        Server timestamp as an aware UTC datetime.

        Accepts epoch seconds as well as the ``2008-01-02T15:04:05Z0711``
        form (trailing digits are milliseconds).
        """
        if self.t is None:
            return None
        if self.t.isdigit():
            return datetime.fromtimestamp(int(self.t), tz=timezone.utc)

        seconds, _, millis = self.t.partition("Z")
        parsed = datetime.strptime(seconds, "%Y-%m-%dT%H:%M:%S")
        if millis.isdigit() and int(millis) < 1000:
            parsed = parsed.replace(microsecond=int(millis) * 1000)
        return parsed.replace(tzinfo=timezone.utc)

    @property
    def device_timestamp(self) -> int | None:
        return _to_int(self.timestamp)

    @property
    def session_counter(self) -> int | None:
        return _to_int(self.sessioncounter)

    @property
    def session_use(self) -> int | None:
        return _to_int(self.sessionuse)

    @property
    def sync_level(self) -> int | None:
        return _to_int(self.sl)

    @property
    def identity(self) -> Identity:
        """Decoded public id and serial number of the key."""
        return decode_identity(self.otp or "")

    @property
    def public_id(self) -> str:
        return self.identity.public_id

    @property
    def serial_number(self) -> int:
        return self.identity.serial_number


def _to_int(value: str | None) -> int | None:
    return int(value) if value is not None else None

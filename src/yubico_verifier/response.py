"""
Response parsing and validation.
"""

import hmac
import logging
import re
from dataclasses import fields

from .exceptions import MalformedResponseError, ProtocolStatusError, TrustViolationError
from .models import ResponseStatus, ServerRecord
from .signing import sign

logger = logging.getLogger(__name__)

# Keys covered by the server signature
SIGNED_KEYS = (
    "nonce",
    "otp",
    "sessioncounter",
    "sessionuse",
    "sl",
    "status",
    "t",
    "timestamp",
)

# Fixed message for every non-OK status
STATUS_MESSAGES: dict[ResponseStatus, str] = {
    ResponseStatus.BAD_OTP: "The OTP is invalid format.",
    ResponseStatus.REPLAYED_OTP: "The OTP has already been seen by the service.",
    ResponseStatus.BAD_SIGNATURE: "The HMAC signature verification failed.",
    ResponseStatus.MISSING_PARAMETER: "The request lacks a parameter.",
    ResponseStatus.NO_SUCH_CLIENT: (
        "The client id does not exist. If you just registered for one, "
        "please give it 10 minutes to propagate."
    ),
    ResponseStatus.OPERATION_NOT_ALLOWED: "The client id is not allowed to verify OTPs.",
    ResponseStatus.BACKEND_ERROR: (
        "Unexpected error in the validation server. "
        "Please contact Yubico if you see this error."
    ),
    ResponseStatus.NOT_ENOUGH_ANSWERS: (
        "Server could not get requested number of syncs before timeout."
    ),
    ResponseStatus.REPLAYED_REQUEST: "Server has seen the OTP/Nonce combination before.",
}

# Wire key -> ServerRecord field
_RECORD_KEYS = {f.name: f.name for f in fields(ServerRecord)}
_RECORD_KEYS["h"] = _RECORD_KEYS.pop("hash")

_LINE_BREAK = re.compile(r"\r?\n")


def parse_response(body: str) -> ServerRecord:
    """
    Parse a validation server response body.

    The body is one ``key=value`` pair per line, terminated by a blank
    line. Lines are split at the first ``=`` only, since base64 values
    carry ``=`` padding.

    Args:
        body: Raw response body

    Returns:
        ServerRecord with the recognized keys; absent keys are None

    Raises:
        MalformedResponseError: If a non-blank line is not a key=value pair

    Examples:
        >>> parse_response("h=abc=\\r\\nstatus=OK\\r\\n\\r\\n").hash
        'abc='
    """
    values: dict[str, str] = {}
    for line in _LINE_BREAK.split(body):
        if not line.strip():
            continue

        key, sep, value = line.partition("=")
        if not sep or not key:
            raise MalformedResponseError(f"Malformed response line: {line!r}")

        # Empty values count as absent
        field_name = _RECORD_KEYS.get(key)
        if field_name is not None and value:
            values[field_name] = value

    return ServerRecord(**values)


def status_message(status: str | None) -> str:
    """Human readable message for a non-OK status token."""
    code = ResponseStatus.from_token(status)
    if code is None or code not in STATUS_MESSAGES:
        return f"Unknown status {status}"
    return STATUS_MESSAGES[code]


def response_signature(record: ServerRecord, secret: str) -> str:
    """Recompute the signature over the signed keys present in a record."""
    present = [
        (key, getattr(record, key))
        for key in sorted(SIGNED_KEYS)
        if getattr(record, key) is not None
    ]
    message = "&".join(f"{key}={value}" for key, value in present)
    return sign(message, secret)


def validate_response(
    record: ServerRecord,
    nonce: str,
    secret: str,
    otp: str,
) -> None:
    """
    Check that a response is a genuine, fresh answer to our request.

    Checks run in a fixed order: status, nonce, signature, OTP.

    Args:
        record: Parsed server response
        nonce: Nonce sent with the request
        secret: Base64 encoded API secret
        otp: OTP sent with the request

    Raises:
        ProtocolStatusError: If the status is not OK
        TrustViolationError: If the nonce, signature or OTP does not match
    """
    if record.status_code is not ResponseStatus.OK:
        raise ProtocolStatusError(record.status, status_message(record.status))

    if record.nonce != nonce:
        logger.error("Response nonce does not match the request nonce")
        raise TrustViolationError("Nonces do not match")

    expected = response_signature(record, secret)
    if record.hash is None or not hmac.compare_digest(expected.encode(), record.hash.encode()):
        logger.error("Response signature does not match")
        raise TrustViolationError("Hash provided from server and client hash do not match")

    if record.otp != otp:
        logger.error("Response OTP does not match the request OTP")
        raise TrustViolationError("OTPs do not match")

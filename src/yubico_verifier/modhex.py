"""
Modhex decoding of the OTP public identity.

See https://developers.yubico.com/yubico-c/Manuals/modhex.1.html
"""

from dataclasses import dataclass

from .exceptions import MalformedResponseError

MODHEX_ALPHABET = "cbdefghijklnrtuv"
HEX_ALPHABET = "0123456789abcdef"

_MODHEX_TO_HEX = str.maketrans(MODHEX_ALPHABET, HEX_ALPHABET)

# Length of the public id prefix in characters (6 bytes, 48 bits)
PUBLIC_ID_LENGTH = 12


@dataclass(frozen=True)
class Identity:
    """
    Identity of the key that produced an OTP.

    Attributes:
        public_id: First 12 (modhex) characters of the OTP
        serial_number: Public id decoded as a 48-bit unsigned integer
    """
    public_id: str
    serial_number: int


def modhex_to_hex(text: str) -> str:
    """
    Translate a modhex string to its hexadecimal form.

    Raises:
        MalformedResponseError: If a character is outside the modhex alphabet

    Examples:
        >>> modhex_to_hex("cbdefghijkln")
        '0123456789ab'
    """
    for position, char in enumerate(text):
        if char not in MODHEX_ALPHABET:
            raise MalformedResponseError(
                f"Invalid modhex character {char!r} at position {position}"
            )
    return text.translate(_MODHEX_TO_HEX)


def decode_identity(otp: str) -> Identity:
    """
    Decode the public id and serial number from an OTP.

    The first 12 characters of an OTP are the modhex encoded public id of
    the key. Read as hex they form a 48-bit big-endian serial number.

    Args:
        otp: OTP string as emitted by the key

    Returns:
        Identity with the public id and its serial number

    Raises:
        MalformedResponseError: If the OTP is too short or the public id
            contains a non-modhex character
    """
    public_id = otp[:PUBLIC_ID_LENGTH]
    if len(public_id) < PUBLIC_ID_LENGTH:
        raise MalformedResponseError(
            f"OTP too short for a public id: expected at least "
            f"{PUBLIC_ID_LENGTH} characters, got {len(public_id)}"
        )

    serial_number = int(modhex_to_hex(public_id), 16)
    return Identity(public_id=public_id, serial_number=serial_number)

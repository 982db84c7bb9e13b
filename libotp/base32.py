"""libotp.base32 -- RFC 4648 base32 codec used for OTP secrets"""

from __future__ import annotations

import base64
import binascii
import re

from libotp.exc import ExpectedTypeError, InvalidEncodingError

__all__ = [
    "encode",
    "decode",
]

#: body of A-Z / 2-7 chars (either case), optionally followed by padding
_b32_re = re.compile(r"[A-Za-z2-7]*(?P<pad>=*)")


def encode(data: bytes, pad: bool = True) -> str:
    """
    encode bytes as uppercase base32 string.

    :param pad:
        whether to pad output to a multiple of 8 chars with ``=``.
        OTP secrets are usually shared unpadded (``pad=False``).
    """
    # NOTE: using upper case, since base32 has less ambiguity
    #       in that case ('i & l' are visually more similar than 'I & L')
    result = base64.b32encode(data).decode("ascii")
    if not pad:
        result = result.rstrip("=")
    return result


def decode(text: str | bytes) -> bytes:
    """
    decode base32 string to bytes.

    Lower-case input is accepted, and unpadded input is padded internally.
    If padding is present, it must be complete.

    :raises ~libotp.exc.InvalidEncodingError:
        if the string contains chars outside of ``A-Z2-7``,
        has malformed padding, a length no base32 encoding can produce,
        or non-zero bits in the unused part of its final char.
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError:
            raise InvalidEncodingError("base32 string must be ascii") from None
    elif not isinstance(text, str):
        raise ExpectedTypeError(text, "str or bytes", "text")

    match = _b32_re.fullmatch(text)
    if match is None:
        raise InvalidEncodingError("base32 string contains invalid characters")
    if not match.group("pad"):
        text += "=" * (-len(text) % 8)

    try:
        result = base64.b32decode(text, casefold=True)
    except binascii.Error as err:
        raise InvalidEncodingError(f"malformed base32 string: {err}") from err

    # the final char may carry unused bits, which must be zero
    # so that re-encoding reproduces the input.
    if encode(result) != text.upper():
        raise InvalidEncodingError("non-zero padding bits")
    return result

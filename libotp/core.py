"""libotp.core -- lowlevel HOTP algorithm (:rfc:`4226` section 5.3)"""

from __future__ import annotations

import struct
from typing import TYPE_CHECKING

from libotp._utils.validation import MAX_COUNTER, validate_serial

if TYPE_CHECKING:
    from libotp._protocols import HMACProvider
    from libotp.algorithms import Algorithm

__all__ = [
    "dynamic_truncate",
    "generate_otp",
]

_pack_counter = struct.Struct(">Q").pack
_unpack_uint32 = struct.Struct(">I").unpack_from


def dynamic_truncate(digest: bytes) -> int:
    """
    derive 31-bit value from HMAC digest.

    the low nibble of the final byte selects an offset (0-15),
    4 bytes are read big-endian from there, and the sign bit is cleared.
    """
    # 0xF + 4 stays inside the digest for every supported algorithm (>= 20 bytes)
    if len(digest) < 20:
        raise ValueError(f"digest must be >= 20 bytes, got {len(digest)}")
    offset = digest[-1] & 0x0F
    return _unpack_uint32(digest, offset)[0] & 0x7FFFFFFF


def generate_otp(
    secret: bytes,
    counter: int,
    digits: int,
    algorithm: Algorithm,
    hmac: HMACProvider,
) -> str:
    """
    implementation of lowlevel HOTP generation algorithm,
    shared by both TOTP and HOTP classes.

    :arg secret: shared key as raw bytes.
    :arg counter: HOTP counter, as integer in ``[0, 2**64)``.
    :arg digits: number of digits in the token.
    :arg algorithm: HMAC digest to use.
    :arg hmac: object implementing :class:`~libotp._protocols.HMACProvider`.

    :returns: token as decimal string, left-padded with zeros to exactly ``digits`` chars.
    """
    validate_serial(counter, "counter")
    if counter > MAX_COUNTER:
        raise ValueError("counter must fit in 64 bits")
    digest = hmac.hmac(algorithm, secret, _pack_counter(counter))
    value = dynamic_truncate(digest) % (10**digits)
    return "%0*d" % (digits, value)

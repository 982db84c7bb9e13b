"""libotp.keys -- generation of new shared secrets"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from libotp import base32
from libotp._utils.validation import validate_serial
from libotp.algorithms import Algorithm, lookup_algorithm
from libotp.providers import system_random

if TYPE_CHECKING:
    from libotp._protocols import SecureRandom

log = logging.getLogger(__name__)

__all__ = [
    "recommended_key_size",
    "generate_key",
    "generate_secret",
]


def recommended_key_size(algorithm: Algorithm | str = Algorithm.SHA1) -> int:
    """number of key bytes recommended for algorithm: 20 (SHA1), 32 (SHA256), 64 (SHA512)"""
    return lookup_algorithm(algorithm).recommended_key_size


def generate_key(size: int, random: SecureRandom = system_random) -> bytes:
    """return *size* bytes drawn from secure random source"""
    validate_serial(size, "size", minval=1)
    key = random(size)
    if len(key) != size:
        raise RuntimeError(f"random source returned {len(key)} bytes, expected {size}")
    log.debug("generated new %d byte key", size)
    return key


def generate_secret(
    length: int | None = None,
    algorithm: Algorithm | str = Algorithm.SHA1,
    random: SecureRandom = system_random,
) -> str:
    """
    generate a new shared secret, encoded as (unpadded) base32.

    :param length:
        number of random bytes. defaults to :func:`recommended_key_size` for **algorithm**.

    :param random:
        secure random source, defaults to :func:`secrets.token_bytes`.

    Usage example::

        >>> from libotp.keys import generate_secret
        >>> generate_secret()  # doctest: +SKIP
        'GQ5SDBJ2CNUIFOUIMDLWEQYTAQDCMUPF'
    """
    if length is None:
        length = recommended_key_size(algorithm)
    return base32.encode(generate_key(length, random), pad=False)

"""libotp.providers -- default implementations of the HMAC, clock & random capabilities

The OTP core never computes hashes itself; it is handed an object implementing
:class:`~libotp._protocols.HMACProvider`. :class:`CryptographyHMACProvider` is the default,
backed by the `cryptography <https://cryptography.io>`_ package.
"""

from __future__ import annotations

import hashlib
import hmac as _hmac
import secrets
import time

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as _cg_hmac

from libotp.algorithms import Algorithm
from libotp.exc import UnsupportedAlgorithmError

__all__ = [
    "CryptographyHMACProvider",
    "HashlibHMACProvider",
    "default_hmac",
    "system_clock",
    "system_random",
]


class CryptographyHMACProvider:
    """HMAC provider implemented with :mod:`cryptography.hazmat.primitives.hmac`."""

    _hashes = {
        Algorithm.SHA1: hashes.SHA1,
        Algorithm.SHA256: hashes.SHA256,
        Algorithm.SHA512: hashes.SHA512,
    }

    def hmac(self, algorithm: Algorithm, key: bytes, message: bytes) -> bytes:
        try:
            hash_cls = self._hashes[algorithm]
        except KeyError:
            raise UnsupportedAlgorithmError(f"no HMAC implementation for {algorithm!r}") from None
        ctx = _cg_hmac.HMAC(key, hash_cls())
        ctx.update(message)
        return ctx.finalize()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class HashlibHMACProvider:
    """HMAC provider implemented with the stdlib :mod:`hmac` & :mod:`hashlib` modules."""

    _hashes = {
        Algorithm.SHA1: hashlib.sha1,
        Algorithm.SHA256: hashlib.sha256,
        Algorithm.SHA512: hashlib.sha512,
    }

    def hmac(self, algorithm: Algorithm, key: bytes, message: bytes) -> bytes:
        try:
            digestmod = self._hashes[algorithm]
        except KeyError:
            raise UnsupportedAlgorithmError(f"no HMAC implementation for {algorithm!r}") from None
        return _hmac.new(key, message, digestmod).digest()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


#: provider used when none is passed to a configuration
default_hmac = CryptographyHMACProvider()


def system_clock() -> float:
    """current system time, as unix epoch seconds"""
    return time.time()


def system_random(count: int) -> bytes:
    """return *count* bytes from the OS CSPRNG"""
    return secrets.token_bytes(count)

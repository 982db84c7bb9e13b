"""libotp.algorithms -- HMAC digest algorithms supported by HOTP & TOTP"""

from __future__ import annotations

import enum
import re

from libotp.exc import ExpectedTypeError, UnsupportedAlgorithmError

__all__ = [
    "Algorithm",
    "lookup_algorithm",
]


class Algorithm(str, enum.Enum):
    """HMAC digest used to compute tokens, per :rfc:`6238` section 1.2."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def digest_size(self) -> int:
        """size of the HMAC output in bytes"""
        return _digest_sizes[self]

    @property
    def recommended_key_size(self) -> int:
        """
        size of new keys in bytes; matches the digest size, per :rfc:`6238` section 5.1.
        advisory only, HMAC accepts keys of any length.
        """
        return _digest_sizes[self]

    @property
    def uri_name(self) -> str:
        """name used in ``otpauth://`` uris & migration records (e.g. ``"SHA1"``)"""
        return self.value.upper()

    def __str__(self) -> str:
        return self.value


_digest_sizes = {
    Algorithm.SHA1: 20,
    Algorithm.SHA256: 32,
    Algorithm.SHA512: 64,
}

#: known aliases, normalized by stripping "-" & "_" and lower-casing
_aliases = {
    "sha1": Algorithm.SHA1,
    "sha256": Algorithm.SHA256,
    "sha2256": Algorithm.SHA256,
    "sha512": Algorithm.SHA512,
    "sha2512": Algorithm.SHA512,
}

_strip_re = re.compile(r"[-_\s]")


def lookup_algorithm(value: Algorithm | str) -> Algorithm:
    """
    normalize digest name to :class:`Algorithm` member.

    accepts members, or names such as ``"sha1"``, ``"SHA-1"``, ``"sha2-256"``.

    :raises ~libotp.exc.UnsupportedAlgorithmError: if the name isn't recognized.
    """
    if isinstance(value, Algorithm):
        return value
    if not isinstance(value, str):
        raise ExpectedTypeError(value, "str or Algorithm", "algorithm")
    try:
        return _aliases[_strip_re.sub("", value).lower()]
    except KeyError:
        raise UnsupportedAlgorithmError(f"unsupported hash algorithm: {value!r}") from None

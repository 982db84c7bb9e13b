"""libotp.validation -- token normalization & matching

Every comparison of a candidate token against an expected one goes through
:func:`~libotp._utils.compare.consteq`. A mismatch is an expected outcome:
the ``verify_*`` functions return ``False``, and the ``match_*`` functions return ``None``.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import TYPE_CHECKING, Callable

from libotp._utils.compare import consteq
from libotp._utils.validation import (
    MAX_COUNTER,
    Number,
    validate_digits,
    validate_secret,
    validate_serial,
)
from libotp.algorithms import Algorithm, lookup_algorithm
from libotp.core import generate_otp
from libotp.providers import default_hmac

if TYPE_CHECKING:
    from libotp._protocols import HMACProvider
    from libotp.totp import TOTP, TimeLike

log = logging.getLogger(__name__)

__all__ = [
    "HotpMatch",
    "TotpMatch",
    "normalize_token",
    "find_counter",
    "verify_hotp",
    "match_totp",
    "verify_totp",
]

#: regex used to clean whitespace & separators from tokens
_clean_re = re.compile(r"\s|-")


@dataclasses.dataclass(frozen=True)
class HotpMatch:
    """
    Returned by :meth:`HOTP.match() <libotp.hotp.HOTP.match>` on a successful match.
    """

    #: HOTP counter value that matched token
    counter: int

    #: counter value the caller expected
    expected_counter: int

    @property
    def next_counter(self) -> int:
        """counter value the caller should expect next (store this)"""
        return self.counter + 1

    @property
    def skipped(self) -> int:
        """how many steps between expected and matched counter values, always >= 0"""
        return self.counter - self.expected_counter


@dataclasses.dataclass(frozen=True)
class TotpMatch:
    """
    Returned by :meth:`TOTP.match() <libotp.totp.TOTP.match>` on a successful match.
    """

    #: TOTP counter value which matched token
    counter: int

    #: timestamp verification was performed against
    time: Number

    #: TOTP period, needed to derive the attributes below
    period: float = 30

    @property
    def expected_counter(self) -> int:
        """counter value expected for :attr:`time`"""
        return int(self.time // self.period)

    @property
    def skipped(self) -> int:
        """
        how many steps between expected and matched counter values
        (may be positive, zero, or negative). useful for estimating client clock drift.
        """
        return self.counter - self.expected_counter

    @property
    def expire_time(self) -> float:
        """timestamp marking the end of the period the matched token belongs to"""
        return (self.counter + 1) * self.period


def normalize_token(token: str | bytes | int, digits: int) -> str:
    """
    normalize OTP token representation:
    strips whitespace & hyphens, converts integers to zero-padded string.

    content isn't validated here; a malformed token will simply never match.
    """
    if isinstance(token, int) and not isinstance(token, bool):
        return "%0*d" % (digits, token)
    if isinstance(token, bytes):
        token = token.decode("ascii", "replace")
    if not isinstance(token, str):
        raise TypeError(f"token must be str, bytes or int, not {type(token).__name__}")
    return _clean_re.sub("", token)


def find_counter(token: str, generate: Callable[[int], str], start: int, end: int) -> int | None:
    """
    helper for verify() implementations --
    returns first counter in ``[start, end]`` whose token matches.

    the range is clamped to ``[0, 2**64)``: counters outside it are neither wrapped nor an error,
    and are never iterated over.
    """
    if start < 0 or end > MAX_COUNTER:
        log.debug("clamping counter range [%d, %d] to [0, 2**64)", start, end)
    for counter in range(max(start, 0), min(end, MAX_COUNTER) + 1):
        if consteq(token, generate(counter)):
            return counter
    return None


def verify_hotp(
    token: str | int,
    secret: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm | str = Algorithm.SHA1,
    hmac: HMACProvider = default_hmac,
) -> bool:
    """
    check token against a single HOTP counter value.

    performs no counter-state tracking: callers managing a counter
    are responsible for advancing it & rejecting reused values.
    """
    secret = validate_secret(secret)
    digits = validate_digits(digits)
    algorithm = lookup_algorithm(algorithm)
    validate_serial(counter, "counter")
    if counter > MAX_COUNTER:
        return False
    token = normalize_token(token, digits)
    return consteq(token, generate_otp(secret, counter, digits, algorithm, hmac))


def match_totp(
    token: str | int,
    totp: TOTP,
    time: TimeLike = None,
    window: int = 1,
) -> TotpMatch | None:
    """
    search ``window`` time steps either side of ``time`` for a counter matching ``token``.

    :arg time:
        reference time (see :meth:`TOTP.normalize_time() <libotp.totp.TOTP.normalize_time>`),
        defaults to the configuration's clock.

    :arg window:
        number of steps checked on each side, ``2*window + 1`` checks in total.
        ``0`` only accepts the exact time step.

    :returns: :class:`TotpMatch` instance, or ``None`` if nothing matched.
    """
    validate_serial(window, "window")
    time = totp.normalize_time(time)
    center = totp.counter_at(time)
    token = normalize_token(token, totp.digits)
    counter = find_counter(token, totp.generate_for_counter, center - window, center + window)
    if counter is None:
        return None
    match = TotpMatch(counter, time, totp.period)
    log.debug("totp token matched counter %d (skipped %d)", counter, match.skipped)
    return match


def verify_totp(
    token: str | int,
    totp: TOTP,
    time: TimeLike = None,
    window: int = 1,
) -> bool:
    """
    check token against TOTP configuration, see :func:`match_totp` for arguments.
    """
    return match_totp(token, totp, time, window) is not None

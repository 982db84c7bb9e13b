"""libotp.totp -- TOTP / RFC 6238 time-based one-time passwords"""

from __future__ import annotations

import calendar
import dataclasses
import logging
import math
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

from libotp._utils.validation import Number, validate_period, validate_serial
from libotp.base import BaseOTP
from libotp.exc import ExpectedTypeError
from libotp.providers import system_clock
from libotp.validation import TotpMatch, match_totp

if TYPE_CHECKING:
    from typing_extensions import Self

    from libotp._protocols import Clock
    from libotp.uri import OTPAuthURI

log = logging.getLogger(__name__)

__all__ = [
    "TOTP",
    "TotpToken",
    "TotpMatch",
    "TimeLike",
    "counter_at",
    "time_remaining",
]

#: values accepted wherever a reference time is expected, ``None`` meaning "now"
TimeLike = Union[int, float, datetime, None]


def counter_at(time: Number, period: Number) -> int:
    """convert unix timestamp to HOTP counter: ``floor(time / period)``"""
    return int(time // period)


def time_remaining(time: Number, period: Number) -> Number:
    """seconds until the time step containing *time* ends, in ``(0, period]``"""
    return period - (time % period)


def _format_number(value: Number) -> str:
    """render period for uri, without a trailing ``.0`` for integral floats"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


@dataclasses.dataclass(frozen=True)
class TotpToken:
    """
    Returned by :meth:`TOTP.generate_sequence`, one per time step.
    """

    #: token as decimal-encoded ascii string
    token: str = dataclasses.field(repr=False)

    #: HOTP counter value used to generate token (derived from time)
    counter: int

    #: timestamp marking end of period when token is valid
    expire_time: Number

    #: seconds from the reference time until token expires
    remaining: Number


@dataclasses.dataclass(frozen=True, eq=False)
class TOTP(BaseOTP):
    """Helper for generating and verifying TOTP codes.

    Given a secret key and set of configuration options, this object
    offers methods for token generation, token validation, and provisioning.
    Accepts the :class:`~libotp.base.BaseOTP` constructor options, as well as:

    :param period:
        The time-step period to use, in seconds. Defaults to ``30``.
        Must be positive.

    :param clock:
        Keyword only. Callable returning the current unix time,
        defaults to :func:`time.time`. This is the only place "now" is read from,
        which makes it the hook for testing (or compensating for a skewed host clock).

    Usage example::

        >>> from libotp.totp import TOTP
        >>> t = TOTP(b"12345678901234567890", digits=8)
        >>> t.generate(59)
        '94287082'
        >>> t.verify('94287082', time=61)
        True
    """

    #: otpauth type this class implements
    type = "totp"

    #: default window (in time steps, either side) used by :meth:`match`
    DEFAULT_WINDOW = 1

    period: Number = 30
    clock: Clock = dataclasses.field(default=system_clock, repr=False, kw_only=True)

    def __post_init__(self) -> None:
        super().__post_init__()
        validate_period(self.period)

    # =========================================================================
    # time & counter helpers
    # =========================================================================
    def now(self) -> float:
        """current unix timestamp, as reported by :attr:`clock`"""
        return self.clock()

    def normalize_time(self, time: TimeLike) -> Number:
        """
        Normalize time value to unix epoch seconds.

        :arg time:
            Can be ``None``, :class:`!datetime`,
            or unix epoch timestamp as :class:`!float` or :class:`!int`.
            If ``None``, uses :meth:`now`.
            Naive datetimes are treated as UTC.

        :returns:
            unix epoch timestamp in seconds. fractional seconds are kept
            for ints, floats and the clock; datetimes are truncated to whole seconds.

        :raises ValueError: for times before the unix epoch (or not finite).
        """
        if isinstance(time, bool):
            raise ExpectedTypeError(time, "int, float, or datetime", "time")
        if time is None:
            time = self.now()
        elif isinstance(time, datetime):
            # NOTE: utctimetuple() assumes naive datetimes are in UTC,
            #       and we explicitly *don't* want microseconds.
            time = calendar.timegm(time.utctimetuple())
        elif not isinstance(time, (int, float)):
            raise ExpectedTypeError(time, "int, float, or datetime", "time")
        if isinstance(time, float) and not math.isfinite(time):
            raise ValueError("time must be finite")
        if time < 0:
            raise ValueError("time must be >= 0")
        return time

    def counter_at(self, time: TimeLike = None) -> int:
        """
        convert timestamp to HOTP counter using :attr:`period`.
        input is passed through :meth:`normalize_time`.
        """
        return counter_at(self.normalize_time(time), self.period)

    def time_remaining(self, time: TimeLike = None) -> Number:
        """seconds before the token for *time* expires, in ``(0, period]``"""
        return time_remaining(self.normalize_time(time), self.period)

    # =========================================================================
    # token generation
    # =========================================================================
    def generate(self, time: TimeLike = None) -> str:
        """
        Generate token for specified time (uses :meth:`now` if not specified).

        :arg time:
            Can be ``None``, a :class:`!datetime`,
            or class:`!float` / :class:`!int` unix epoch timestamp.

        :returns:
            string containing decimal-formatted token

        Usage example::

            >>> from libotp.totp import TOTP
            >>> t = TOTP(b"12345678901234567890", digits=8)
            >>> t.generate(1234567890)
            '89005924'
        """
        return self.generate_for_counter(self.counter_at(time))

    def generate_sequence(self, count: int = 2, time: TimeLike = None) -> list[TotpToken]:
        """
        Generate the token for *time* followed by the tokens of the next ``count - 1`` time steps,
        e.g. for displaying the upcoming code alongside the current one.

        :returns:
            list of :class:`TotpToken` instances, in ascending counter order.
        """
        validate_serial(count, "count", minval=1)
        time = self.normalize_time(time)
        start = counter_at(time, self.period)
        tokens = []
        for counter in range(start, start + count):
            expire_time = (counter + 1) * self.period
            tokens.append(
                TotpToken(
                    token=self.generate_for_counter(counter),
                    counter=counter,
                    expire_time=expire_time,
                    remaining=expire_time - time,
                )
            )
        return tokens

    # =========================================================================
    # token verification
    # =========================================================================
    def match(
        self,
        token: str | int,
        time: TimeLike = None,
        window: int = DEFAULT_WINDOW,
    ) -> TotpMatch | None:
        """
        Match TOTP token against specified timestamp.
        Searches within a window before & after the provided time,
        in order to account for transmission delay and small amounts of skew in the client's clock.

        :arg token:
            Token to validate.
            may be integer or string (whitespace and hyphens are ignored).

        :param time:
            Unix epoch timestamp, can be any of :class:`!float`, :class:`!int`, or :class:`!datetime`.
            if ``None`` (the default), uses :meth:`now`.

        :param window:
           How many time steps before and after *time* to search. Defaults to 1.
           A value of 0 only accepts the token for the current time step.

        :returns:
            :class:`~libotp.validation.TotpMatch` instance on a successful match,
            ``None`` if no token matched.

        .. note::
            This method performs no replay tracking: storing the
            :attr:`~libotp.validation.TotpMatch.counter` of the last accepted token,
            and rejecting tokens at or below it, is left to the caller.
        """
        return match_totp(token, self, time, window)

    def verify(self, token: str | int, time: TimeLike = None, window: int = DEFAULT_WINDOW) -> bool:
        """
        check token against specified timestamp, see :meth:`match` for arguments.

        :returns: ``True`` if token matched, ``False`` otherwise.
        """
        return self.match(token, time, window) is not None

    # =========================================================================
    # uri rendering & parsing
    # =========================================================================
    def _uri_params(self) -> list[tuple[str, str]]:
        params = super()._uri_params()
        params.append(("period", _format_number(self.period)))
        return params

    @classmethod
    def _from_parsed_uri(cls, parsed: OTPAuthURI, **kwds: Any) -> Self:
        if parsed.counter is not None:
            log.debug("ignoring 'counter' parameter in totp uri")
        if parsed.period is not None:
            kwds["period"] = parsed.period
        return super()._from_parsed_uri(parsed, **kwds)

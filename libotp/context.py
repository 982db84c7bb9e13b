from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from libotp._utils.validation import validate_digits, validate_period
from libotp.algorithms import lookup_algorithm
from libotp.hotp import HOTP
from libotp.migration import export_migration, import_migration
from libotp.totp import TOTP
from libotp.uri import parse_uri

if TYPE_CHECKING:
    from libotp._protocols import Clock, HMACProvider, SecureRandom
    from libotp._utils.validation import Number
    from libotp.algorithms import Algorithm
    from libotp.base import BaseOTP
    from libotp.migration import MigrationParameters

__all__ = [
    "OTPContext",
]

OTPType = Literal["hotp", "totp"]

_type_map: dict[str, type[BaseOTP]] = {
    "hotp": HOTP,
    "totp": TOTP,
}


class OTPContext:
    """
    Application-wide OTP defaults and capabilities.

    Every option left as ``None`` falls back to the library default.
    Options are validated here, so a bad configuration fails at startup
    rather than when the first user enrolls.

    Usage example::

        >>> from libotp.context import OTPContext
        >>> context = OTPContext(digits=8)
        >>> totp = context.new()
        >>> totp.digits
        8
    """

    def __init__(
        self,
        digits: int | None = None,
        algorithm: Algorithm | str | None = None,
        period: Number | None = None,
        hmac: HMACProvider | None = None,
        clock: Clock | None = None,
        random: SecureRandom | None = None,
    ) -> None:
        self._digits = digits
        self._algorithm = algorithm
        self._period = period
        self._hmac = hmac
        self._clock = clock
        self._random = random

        self._validate_init()

    def _validate_init(self) -> None:
        if self._digits is not None:
            validate_digits(self._digits)
        if self._algorithm is not None:
            self._algorithm = lookup_algorithm(self._algorithm)
        if self._period is not None:
            validate_period(self._period)
        if self._hmac is not None and not callable(getattr(self._hmac, "hmac", None)):
            raise TypeError("hmac must provide an hmac(algorithm, key, message) method")
        if self._clock is not None and not callable(self._clock):
            raise TypeError("clock must be callable")
        if self._random is not None and not callable(self._random):
            raise TypeError("random must be callable")

    def _lookup_type(self, otp_type: str) -> type[BaseOTP]:
        try:
            return _type_map[otp_type]
        except KeyError:
            raise ValueError(f"unknown otp type: {otp_type!r}") from None

    def _options(self, cls: type[BaseOTP], kwds: dict[str, Any]) -> dict[str, Any]:
        """merge context defaults beneath caller's constructor keywords"""
        options: dict[str, Any] = {}
        if self._digits is not None:
            options["digits"] = self._digits
        if self._algorithm is not None:
            options["algorithm"] = self._algorithm
        if self._hmac is not None:
            options["hmac"] = self._hmac
        if cls is TOTP:
            if self._period is not None:
                options["period"] = self._period
            if self._clock is not None:
                options["clock"] = self._clock
        options.update(kwds)
        return options

    def new(self, type: OTPType = "totp", **kwds: Any) -> BaseOTP:
        """create configuration with a newly generated key, see :meth:`BaseOTP.new() <libotp.base.BaseOTP.new>`"""
        cls = self._lookup_type(type)
        if self._random is not None:
            kwds.setdefault("random", self._random)
        return cls.new(**self._options(cls, kwds))

    def from_base32(self, secret: str | bytes, type: OTPType = "totp", **kwds: Any) -> BaseOTP:
        """create configuration from existing base32-encoded secret"""
        cls = self._lookup_type(type)
        return cls.from_base32(secret, **self._options(cls, kwds))

    def from_uri(self, uri: str) -> BaseOTP:
        """
        create HOTP or TOTP configuration from ``otpauth://`` uri.
        values present in the uri override the context defaults.

        .. note::
            the initial ``counter`` of a hotp uri isn't kept by the returned
            configuration; read it with :func:`~libotp.uri.parse_uri`.
        """
        parsed = parse_uri(uri)
        cls = self._lookup_type(parsed.type)
        return cls._from_parsed_uri(parsed, **self._options(cls, {}))

    def from_migration(self, params: MigrationParameters) -> TOTP:
        """create TOTP configuration from migration parameters, using this context's capabilities"""
        return import_migration(params, hmac=self._hmac, clock=self._clock)

    def export_migration(self, totp: TOTP, issuer: str, account_name: str) -> MigrationParameters:
        return export_migration(totp, issuer, account_name)

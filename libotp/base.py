"""libotp.base -- configuration & behavior shared by HOTP and TOTP"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any
from warnings import warn

from typing_extensions import Self

from libotp import base32
from libotp._utils.validation import validate_digits, validate_secret
from libotp.algorithms import Algorithm, lookup_algorithm
from libotp.core import generate_otp
from libotp.exc import LibotpSecurityWarning, MalformedURIError
from libotp.keys import generate_key
from libotp.providers import default_hmac, system_random
from libotp.uri import parse_uri, render_uri

if TYPE_CHECKING:
    from libotp._protocols import HMACProvider, SecureRandom
    from libotp.uri import OTPAuthURI

log = logging.getLogger(__name__)

__all__ = [
    "BaseOTP",
    "MIN_KEY_SIZE",
]

#: minimum number of bytes to allow in key.
#: new keys below this size are rejected; existing ones only trigger a warning.
MIN_KEY_SIZE = 10


@dataclasses.dataclass(frozen=True, eq=False)
class BaseOTP:
    """
    Base class for generating and verifying OTP codes.

    .. note::

        **This class shouldn't be used directly.**
        It's here to provide & document common functionality
        shared by the :class:`~libotp.hotp.HOTP` and :class:`~libotp.totp.TOTP` classes.

    Instances are immutable, and hold no state besides their configuration,
    so they may be shared freely between threads.

    :arg bytes secret:
        The secret key, as raw bytes. Must not be empty.
        See :meth:`from_base32` for base32-encoded keys, and :meth:`new` to generate one.

    :param int digits:
        The number of digits in the generated / accepted tokens. Defaults to ``6``.
        Must be in range [6 .. 8].

    :param algorithm:
        HMAC digest, as :class:`~libotp.algorithms.Algorithm` member or name.
        Defaults to ``SHA1``; ``SHA256`` and ``SHA512`` are also accepted, per :rfc:`6238`.

    :param hmac:
        Keyword only. Object implementing :class:`~libotp._protocols.HMACProvider`,
        defaults to :data:`libotp.providers.default_hmac`.

    .. warning::

        Overriding the default values for ``digits`` or ``algorithm`` may
        cause problems with some OTP client programs (such as Google Authenticator),
        which may have these defaults hardcoded.

    The secret is excluded from ``repr()``, and instances compare by identity,
    so the key is never compared in variable time.
    """

    #: otpauth uri type that subclass implements ('totp' or 'hotp')
    type = None

    secret: bytes = dataclasses.field(repr=False)
    digits: int = 6
    algorithm: Algorithm = Algorithm.SHA1
    hmac: HMACProvider = dataclasses.field(default=default_hmac, repr=False, kw_only=True)

    def __post_init__(self) -> None:
        if type(self) is BaseOTP:
            raise RuntimeError(
                "BaseOTP() shouldn't be invoked directly -- use TOTP() or HOTP() instead"
            )
        object.__setattr__(self, "secret", validate_secret(self.secret))
        object.__setattr__(self, "algorithm", lookup_algorithm(self.algorithm))
        validate_digits(self.digits)
        if len(self.secret) < MIN_KEY_SIZE:
            warn(
                f"for security purposes, secret key should be >= {MIN_KEY_SIZE} bytes",
                LibotpSecurityWarning,
                stacklevel=3,
            )

    # =========================================================================
    # alternate constructors
    # =========================================================================
    @classmethod
    def from_base32(cls, secret: str | bytes, **kwds: Any) -> Self:
        """
        create instance from base32-encoded secret (padding optional, case-insensitive).

        :raises ~libotp.exc.InvalidEncodingError: if the secret isn't valid base32.
        """
        return cls(base32.decode(secret), **kwds)

    @classmethod
    def new(
        cls,
        size: int | None = None,
        random: SecureRandom = system_random,
        **kwds: Any,
    ) -> Self:
        """
        create instance with a newly generated secret key.

        :param size:
            number of key bytes. defaults to the recommended size
            for the selected algorithm (e.g. 20 for SHA1, per :rfc:`6238` section 5.1).

        :param random:
            secure random source, defaults to :func:`secrets.token_bytes`.

        :param \\*\\*kwds:
            all remaining keywords passed to the constructor.
        """
        if size is None:
            size = lookup_algorithm(kwds.get("algorithm", cls.algorithm)).recommended_key_size
        if size < MIN_KEY_SIZE:
            raise ValueError(f"for security purposes, secret key must be >= {MIN_KEY_SIZE} bytes")
        log.debug("creating new %s instance", cls.type)
        return cls(generate_key(size, random), **kwds)

    # =========================================================================
    # key helpers
    # =========================================================================
    @property
    def base32_secret(self) -> str:
        """secret key encoded as (unpadded) base32 string"""
        return base32.encode(self.secret, pad=False)

    # =========================================================================
    # token helpers
    # =========================================================================
    def generate_for_counter(self, counter: int) -> str:
        """
        lowlevel HOTP generation for an explicit counter value,
        shared by both TOTP and HOTP classes.

        :arg counter: HOTP counter, as integer in ``[0, 2**64)``.
        :returns: token as decimal string of exactly :attr:`digits` chars.
        """
        return generate_otp(self.secret, counter, self.digits, self.algorithm, self.hmac)

    # =========================================================================
    # uri rendering & parsing
    # =========================================================================
    def to_uri(self, label: str, issuer: str | None = None) -> str:
        """
        serialize key and configuration into an ``otpauth://`` provisioning uri,
        per Google Authenticator's KeyUriFormat.

        :param label:
            Label to associate with this token, displayed to the user by most OTP client
            applications; typically something like ``"jsmith@webservice.example.org"``.
            May not contain ``:``.

        :param issuer:
            String identifying the token issuer (e.g. the domain or canonical name of your service).
            Optional but strongly recommended. May not contain ``:``.

        These uris are frequently converted to a QRCode for transferring
        to a client application, which is left to external libraries.
        """
        return render_uri(self.type, label, self._uri_params(), issuer=issuer)

    def _uri_params(self) -> list[tuple[str, str]]:
        """return list of (key, param) entries for uri, issuer excluded"""
        return [
            ("secret", self.base32_secret),
            ("algorithm", self.algorithm.uri_name),
            ("digits", str(self.digits)),
        ]

    @classmethod
    def from_uri(cls, uri: str, **kwds: Any) -> Self:
        """
        create instance from an ``otpauth://`` uri (such as returned by :meth:`to_uri`).

        :param \\*\\*kwds:
            extra constructor keywords, e.g. ``hmac``.

        :raises ~libotp.exc.MalformedURIError:
            if the uri cannot be parsed, or describes a different OTP type.
        """
        parsed = parse_uri(uri)
        if parsed.type != cls.type:
            raise MalformedURIError(f"{cls.__name__}: expected {cls.type!r} uri, got {parsed.type!r}")
        return cls._from_parsed_uri(parsed, **kwds)

    @classmethod
    def _from_parsed_uri(cls, parsed: OTPAuthURI, **kwds: Any) -> Self:
        """convert uri params into constructor args, common to TOTP & HOTP"""
        if parsed.digits is not None:
            kwds["digits"] = parsed.digits
        if parsed.algorithm is not None:
            kwds["algorithm"] = parsed.algorithm
        return cls.from_base32(parsed.secret, **kwds)

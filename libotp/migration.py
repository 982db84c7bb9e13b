"""libotp.migration -- moving TOTP configurations between authenticator apps

:class:`MigrationParameters` is a plain record of everything an authenticator
needs to reproduce a TOTP configuration, plus display metadata.
Choosing a wire encoding for it (json, protobuf, qrcode...) is left to the caller,
:meth:`MigrationParameters.to_dict` gives a json-friendly starting point.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from libotp.algorithms import Algorithm
from libotp.totp import TOTP

if TYPE_CHECKING:
    from collections.abc import Mapping

    from typing_extensions import Self

    from libotp._protocols import Clock, HMACProvider
    from libotp._utils.validation import Number

log = logging.getLogger(__name__)

__all__ = [
    "MigrationParameters",
    "export_migration",
    "import_migration",
]

_required_keys = ("secret", "issuer", "account_name")
_optional_keys = ("algorithm", "digits", "period")


@dataclasses.dataclass(frozen=True)
class MigrationParameters:
    """
    Serialization-friendly projection of a :class:`~libotp.totp.TOTP` configuration.

    Values are not validated here; :func:`import_migration` checks them all
    before constructing a configuration.
    """

    #: secret key, as unpadded base32
    secret: str = dataclasses.field(repr=False)
    issuer: str
    account_name: str
    algorithm: Algorithm | str = Algorithm.SHA1
    digits: int = 6
    period: Number = 30

    def to_dict(self) -> dict[str, Any]:
        """return fields as dict of json-friendly values (algorithm as its uri name, e.g. ``"SHA1"``)"""
        algorithm = self.algorithm
        if isinstance(algorithm, Algorithm):
            algorithm = algorithm.uri_name
        return {
            "secret": self.secret,
            "issuer": self.issuer,
            "account_name": self.account_name,
            "algorithm": algorithm,
            "digits": self.digits,
            "period": self.period,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """
        inverse of :meth:`to_dict`.

        :raises ValueError: if a required key is missing, or an unknown key is present.
        """
        missing = [key for key in _required_keys if key not in data]
        if missing:
            raise ValueError(f"missing migration parameters: {missing!r}")
        extra = set(data) - set(_required_keys) - set(_optional_keys)
        if extra:
            raise ValueError(f"unexpected migration parameters: {sorted(extra)!r}")
        return cls(**data)


def export_migration(totp: TOTP, issuer: str, account_name: str) -> MigrationParameters:
    """project TOTP configuration & display metadata into :class:`MigrationParameters`"""
    return MigrationParameters(
        secret=totp.base32_secret,
        issuer=issuer,
        account_name=account_name,
        algorithm=totp.algorithm,
        digits=totp.digits,
        period=totp.period,
    )


def import_migration(
    params: MigrationParameters,
    hmac: HMACProvider | None = None,
    clock: Clock | None = None,
) -> TOTP:
    """
    construct :class:`~libotp.totp.TOTP` configuration from migration parameters.

    :param hmac: HMAC provider for the new configuration, defaults to the library default.
    :param clock: clock for the new configuration, defaults to :func:`time.time`.

    :raises ~libotp.exc.OTPConfigError:
        (or one of its subclasses) if the secret isn't valid base32,
        or the algorithm, digits, or period are invalid.
    """
    kwds: dict[str, Any] = {}
    if hmac is not None:
        kwds["hmac"] = hmac
    if clock is not None:
        kwds["clock"] = clock
    totp = TOTP.from_base32(
        params.secret,
        digits=params.digits,
        algorithm=params.algorithm,
        period=params.period,
        **kwds,
    )
    log.debug("imported totp configuration (%s, %d digits)", totp.algorithm, totp.digits)
    return totp

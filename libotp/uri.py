"""libotp.uri -- rendering & parsing of ``otpauth://`` provisioning uris

Format follows Google Authenticator's KeyUriFormat::

    otpauth://totp/<label>?secret=<B32>&issuer=<issuer>&algorithm=SHA1&digits=6&period=30
    otpauth://hotp/<label>?secret=<B32>&issuer=<issuer>&algorithm=SHA1&digits=6&counter=0

The secret is always rendered as unpadded base32.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING
from urllib.parse import parse_qsl, quote, unquote, urlparse
from warnings import warn

from libotp.exc import LibotpRuntimeWarning, MalformedURIError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from libotp.base import BaseOTP

log = logging.getLogger(__name__)

__all__ = [
    "OTPAuthURI",
    "provisioning_uri",
    "render_uri",
    "parse_uri",
]

#: otpauth types this module knows how to render & parse
OTP_TYPES = ("hotp", "totp")

_known_params = frozenset(["secret", "issuer", "algorithm", "digits", "period", "counter"])


@dataclasses.dataclass(frozen=True)
class OTPAuthURI:
    """Parsed contents of an ``otpauth://`` uri, as returned by :func:`parse_uri`."""

    type: str
    label: str
    secret: str = dataclasses.field(repr=False)
    issuer: str | None = None
    algorithm: str | None = None
    digits: int | None = None
    period: int | float | None = None
    counter: int | None = None


def _check_label(label: str) -> None:
    """check that label doesn't contain chars forbidden by KeyUriFormat"""
    if ":" in label:
        raise ValueError("label may not contain ':'")


def _check_issuer(issuer: str) -> None:
    """check that issuer doesn't contain chars forbidden by KeyUriFormat"""
    if ":" in issuer:
        raise ValueError("issuer may not contain ':'")


def render_uri(
    type: str,
    label: str,
    params: Iterable[tuple[str, str]],
    issuer: str | None = None,
) -> str:
    """
    render ``otpauth://`` uri.

    :arg params:
        sequence of ``(key, value)`` pairs, ``secret`` first.
        ``issuer`` is inserted right after it.

    :raises ValueError: if label is empty, or label / issuer contain ``:``.
    """
    if type not in OTP_TYPES:
        raise ValueError(f"unknown otp type: {type!r}")
    if not label:
        raise ValueError("a label must be specified")
    _check_label(label)
    params = list(params)
    if issuer:
        _check_issuer(issuer)
        params.insert(1, ("issuer", issuer))

    # NOTE: reference examples seem to indicate the '@' in a label
    #       shouldn't be escaped.
    label = quote(label, safe="@")
    # NOTE: not using urlencode() because it encodes ' ' as '+',
    #       but client parsers expect '%20'.
    argstr = "&".join(f"{key}={quote(value, safe='')}" for key, value in params)
    return f"otpauth://{type}/{label}?{argstr}"


def provisioning_uri(otp: BaseOTP, label: str, issuer: str | None = None) -> str:
    """
    render provisioning uri for a :class:`~libotp.hotp.HOTP` or :class:`~libotp.totp.TOTP` instance.
    see :meth:`BaseOTP.to_uri() <libotp.base.BaseOTP.to_uri>`.
    """
    return otp.to_uri(label, issuer)


def _uri_error(reason: str) -> MalformedURIError:
    return MalformedURIError(f"Invalid otpauth uri: {reason}")


def _parse_int(source: str, param: str) -> int:
    try:
        return int(source)
    except ValueError:
        raise _uri_error(f"malformed {param!r} parameter") from None


def _parse_number(source: str, param: str) -> int | float:
    if "." not in source:
        return _parse_int(source, param)
    try:
        return float(source)
    except ValueError:
        raise _uri_error(f"malformed {param!r} parameter") from None


def parse_uri(uri: str) -> OTPAuthURI:
    """
    parse ``otpauth://`` uri into its components.

    values are only parsed, not validated; that's done by the constructor
    the result is handed to.

    :raises ~libotp.exc.MalformedURIError:
        if the uri cannot be parsed or contains conflicting values.
    """
    if not isinstance(uri, str):
        raise TypeError(f"uri must be str, not {type(uri).__name__}")
    result = urlparse(uri.strip())
    if result.scheme != "otpauth":
        raise _uri_error("wrong uri scheme")
    if result.netloc not in OTP_TYPES:
        raise _uri_error("unknown OTP type")

    # decode label from uri path
    label = result.path
    if label.startswith("/") and len(label) > 1:
        label = unquote(label[1:])
    else:
        raise _uri_error("missing label")

    # extract old-style issuer prefix
    if ":" in label:
        try:
            issuer, label = label.split(":")
        except ValueError:  # too many ":"
            raise _uri_error("malformed label") from None
        issuer = issuer.strip() or None
    else:
        issuer = None
    label = label.strip()
    if not label:
        raise _uri_error("missing label")

    # parse query params
    params: dict[str, str] = {}
    for key, value in parse_qsl(result.query):
        if key in params:
            raise _uri_error(f"duplicate parameter ({key!r})")
        params[key] = value

    # synchronize issuer prefix w/ issuer param
    if issuer:
        if "issuer" not in params:
            params["issuer"] = issuer
        elif params["issuer"] != issuer:
            raise _uri_error("conflicting issuer identifiers")

    secret = params.get("secret")
    if not secret:
        raise _uri_error("missing 'secret' parameter")

    extra = set(params) - _known_params
    if extra:
        # malicious uri, or a newer revision of KeyUriFormat?
        # in either case, we issue warning and ignore extra params.
        warn(
            f"unexpected parameters encountered in otp uri: {sorted(extra)!r}",
            LibotpRuntimeWarning,
            stacklevel=2,
        )

    counter = params.get("counter")
    if result.netloc == "hotp" and counter is None:
        raise _uri_error("missing 'counter' parameter")

    digits = params.get("digits")
    period = params.get("period")
    parsed = OTPAuthURI(
        type=result.netloc,
        label=label,
        secret=secret,
        issuer=params.get("issuer") or None,
        algorithm=params.get("algorithm") or None,
        digits=_parse_int(digits, "digits") if digits else None,
        period=_parse_number(period, "period") if period else None,
        counter=_parse_int(counter, "counter") if counter is not None else None,
    )
    log.debug("parsed otpauth %s uri", parsed.type)
    return parsed

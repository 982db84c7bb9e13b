"""libotp.hotp -- HOTP / RFC 4226 counter-based one-time passwords"""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

from libotp._utils.validation import MAX_COUNTER, validate_serial
from libotp.base import BaseOTP
from libotp.uri import render_uri
from libotp.validation import HotpMatch, find_counter, normalize_token

if TYPE_CHECKING:
    from typing_extensions import Self

    from libotp.uri import OTPAuthURI

log = logging.getLogger(__name__)

__all__ = [
    "HOTP",
    "HotpMatch",
]


@dataclasses.dataclass(frozen=True, eq=False)
class HOTP(BaseOTP):
    """Helper for generating and verifying HOTP codes.

    Given a secret key and set of configuration options, this object
    offers methods for token generation, token validation, and provisioning.
    Accepts the :class:`~libotp.base.BaseOTP` constructor options.

    Unlike its TOTP sibling, this class holds no counter: the counter is supplied
    on every call, and persisting / advancing it is left to the application.

    Usage example::

        >>> from libotp.hotp import HOTP
        >>> h = HOTP(b"12345678901234567890")
        >>> h.generate(1)
        '287082'
        >>> h.verify('287082', 1)
        True
    """

    #: otpauth type this class implements
    type = "hotp"

    def generate(self, counter: int) -> str:
        """
        generate HOTP token for specified counter value.

        :arg int counter:
           counter value to use, in ``[0, 2**64)``.

        :returns:
           string containing decimal-formatted token
        """
        return self.generate_for_counter(counter)

    def match(self, token: str | int, counter: int, window: int = 0) -> HotpMatch | None:
        """
        validate token against specified counter, returning details of the match.

        :arg token:
            token to validate.
            may be integer or string (whitespace and hyphens are ignored).

        :param int counter:
            next counter value client is expected to use.

        :param window:
           How many additional steps past ``counter`` to search when looking for a match,
           for resynchronizing clients which generated tokens that were never used.
           Defaults to 0, which only checks ``counter`` itself.

           .. note::
              This is a forward-looking window only, as searching backwards
              would allow token-reuse, defeating the whole purpose of HOTP.

        :returns:
             :class:`~libotp.validation.HotpMatch` instance on a successful match,
             whose :attr:`~libotp.validation.HotpMatch.next_counter` should be stored
             by the caller; ``None`` if the token did not match.
        """
        validate_serial(counter, "counter")
        validate_serial(window, "window")
        token = normalize_token(token, self.digits)
        matched = find_counter(token, self.generate_for_counter, counter, counter + window)
        if matched is None:
            return None
        log.debug("hotp token matched counter %d (skipped %d)", matched, matched - counter)
        return HotpMatch(matched, counter)

    def verify(self, token: str | int, counter: int, window: int = 0) -> bool:
        """
        check token against specified counter, see :meth:`match` for arguments.

        :returns: ``True`` if token matched, ``False`` otherwise.
        """
        return self.match(token, counter, window) is not None

    # =========================================================================
    # uri rendering & parsing
    # =========================================================================
    def to_uri(self, label: str, issuer: str | None = None, counter: int = 0) -> str:
        """
        see :meth:`BaseOTP.to_uri() <libotp.base.BaseOTP.to_uri>`.

        :param counter:
            initial counter value the client should use. defaults to ``0``.
        """
        validate_serial(counter, "counter")
        if counter > MAX_COUNTER:
            raise ValueError("counter must fit in 64 bits")
        params = self._uri_params()
        params.append(("counter", str(counter)))
        return render_uri(self.type, label, params, issuer=issuer)

    @classmethod
    def _from_parsed_uri(cls, parsed: OTPAuthURI, **kwds: Any) -> Self:
        """
        the uri's ``counter`` isn't part of the configuration, and is not kept here:
        callers which need the initial counter should read it from
        :func:`libotp.uri.parse_uri` (``parse_uri(uri).counter``).
        """
        log.debug("hotp uri initial counter is %d, not stored in configuration", parsed.counter)
        return super()._from_parsed_uri(parsed, **kwds)

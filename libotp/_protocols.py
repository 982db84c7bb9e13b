from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Protocol

if TYPE_CHECKING:
    from libotp.algorithms import Algorithm


class HMACProvider(Protocol):
    """Keyed-hash capability consumed by the OTP core.

    Implementations must be safe to call from several threads at once.
    """

    def hmac(self, algorithm: Algorithm, key: bytes, message: bytes) -> bytes: ...


#: returns the current time as seconds since the unix epoch
Clock = Callable[[], float]

#: returns the requested number of bytes from a cryptographically secure source
SecureRandom = Callable[[int], bytes]

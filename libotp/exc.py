"""libotp.exc -- exceptions & warnings raised by libotp"""

from __future__ import annotations

from typing import Any

__all__ = [
    # configuration errors
    "OTPConfigError",
    "EmptySecretError",
    "InvalidDigitCountError",
    "InvalidTimeStepError",
    "InvalidEncodingError",
    "UnsupportedAlgorithmError",
    # other errors
    "MalformedURIError",
    "ExpectedTypeError",
    # warnings
    "LibotpWarning",
    "LibotpSecurityWarning",
    "LibotpRuntimeWarning",
]


# =============================================================================
# warnings
# =============================================================================
class LibotpWarning(UserWarning):
    """base class for libotp's user warnings.

    This class is the base for all warnings issued by libotp,
    so that they can be filtered as a group.
    """


class LibotpSecurityWarning(LibotpWarning):
    """Special warning issued when libotp encounters something
    that might affect security, such as an undersized secret key.
    """


class LibotpRuntimeWarning(LibotpWarning):
    """Warning issued when something unexpected happens during runtime,
    such as an ``otpauth://`` uri carrying parameters libotp doesn't know about.
    """


# =============================================================================
# configuration errors
# =============================================================================
class OTPConfigError(ValueError):
    """Base class for errors raised while building an OTP configuration.

    Subclasses set a default message, so they can be raised without arguments.
    """

    _default_message: str | None = None

    def __init__(self, msg: str | None = None, *args: Any) -> None:
        if msg is None:
            msg = self._default_message
        super().__init__(msg, *args)


class EmptySecretError(OTPConfigError):
    """raised when the secret key has zero length"""

    _default_message = "secret key must not be empty"


class InvalidDigitCountError(OTPConfigError):
    """raised when the number of digits is outside of the supported range"""

    _default_message = "digits must be in range(6, 9)"


class InvalidTimeStepError(OTPConfigError):
    """raised when the TOTP period is not a positive number of seconds"""

    _default_message = "period must be > 0"


class InvalidEncodingError(OTPConfigError):
    """raised when a base32 string contains invalid characters or malformed padding"""

    _default_message = "invalid base32 string"


class UnsupportedAlgorithmError(OTPConfigError):
    """raised when a digest name doesn't map to a supported HMAC algorithm"""

    _default_message = "unsupported hash algorithm"


# =============================================================================
# other errors
# =============================================================================
class MalformedURIError(ValueError):
    """raised when an ``otpauth://`` uri can't be parsed, or contains errors"""


class ExpectedTypeError(TypeError):
    """error raised if a parameter has the wrong type"""

    def __init__(self, value: Any, expected: str, param: str) -> None:
        name = type(value).__name__
        super().__init__(f"{param} must be {expected}, not {name}")

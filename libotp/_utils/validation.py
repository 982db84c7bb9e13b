from __future__ import annotations

from typing import Union

from libotp.exc import (
    EmptySecretError,
    ExpectedTypeError,
    InvalidDigitCountError,
    InvalidTimeStepError,
)

#: smallest & largest number of digits accepted in a token.
#: this is a compatibility policy (common authenticator apps), not an RFC limit.
MIN_DIGITS = 6
MAX_DIGITS = 8

#: largest value an HOTP counter may take
MAX_COUNTER = (1 << 64) - 1

Number = Union[int, float]


def validate_secret(secret: bytes) -> bytes:
    if isinstance(secret, bytearray):
        secret = bytes(secret)
    if not isinstance(secret, bytes):
        raise ExpectedTypeError(secret, "bytes", "secret")
    if not secret:
        raise EmptySecretError()
    return secret


def validate_digits(digits: int) -> int:
    if not isinstance(digits, int) or isinstance(digits, bool):
        raise ExpectedTypeError(digits, "int", "digits")
    if digits < MIN_DIGITS or digits > MAX_DIGITS:
        msg = f"digits must be between {MIN_DIGITS} - {MAX_DIGITS}"
        raise InvalidDigitCountError(msg)
    return digits


def validate_period(period: Number) -> Number:
    if not isinstance(period, (int, float)) or isinstance(period, bool):
        raise ExpectedTypeError(period, "int or float", "period")
    if not period > 0:
        raise InvalidTimeStepError()
    return period


def validate_serial(value: int, param: str, minval: int = 0) -> int:
    """check that serial value (e.g. 'counter') is an integer within range"""
    if not isinstance(value, int) or isinstance(value, bool):
        raise ExpectedTypeError(value, "int", param)
    if value < minval:
        raise ValueError(f"{param} must be >= {minval}")
    return value

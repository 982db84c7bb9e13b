import pytest

from libotp.hotp import HOTP
from libotp.totp import TOTP
from tests.vectors import RFC4226_SECRET


@pytest.fixture
def hotp() -> HOTP:
    return HOTP(RFC4226_SECRET)


@pytest.fixture
def totp() -> TOTP:
    return TOTP(RFC4226_SECRET)

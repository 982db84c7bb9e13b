import pytest

from libotp.algorithms import Algorithm
from libotp.exc import (
    EmptySecretError,
    InvalidDigitCountError,
    InvalidEncodingError,
    InvalidTimeStepError,
    UnsupportedAlgorithmError,
)
from libotp.migration import MigrationParameters, export_migration, import_migration
from libotp.providers import HashlibHMACProvider
from libotp.totp import TOTP
from tests.vectors import KEY_B32, KEY_RAW, RFC6238_SECRETS


@pytest.fixture
def params() -> MigrationParameters:
    return MigrationParameters(
        secret=KEY_B32,
        issuer="TestApp",
        account_name="user@test.com",
    )


def test_export() -> None:
    otp = TOTP(KEY_RAW, digits=8, algorithm="sha256", period=60)
    params = export_migration(otp, "TestApp", "user@test.com")
    assert params == MigrationParameters(
        secret=KEY_B32,
        issuer="TestApp",
        account_name="user@test.com",
        algorithm=Algorithm.SHA256,
        digits=8,
        period=60,
    )


def test_export_secret_unpadded() -> None:
    params = export_migration(TOTP(b"\x01" * 16), "TestApp", "user@test.com")
    assert "=" not in params.secret


@pytest.mark.parametrize("algorithm", list(Algorithm))
def test_round_trip(algorithm: Algorithm) -> None:
    otp = TOTP(RFC6238_SECRETS[algorithm], digits=8, algorithm=algorithm, period=45)
    imported = import_migration(export_migration(otp, "TestApp", "user@test.com"))
    assert imported.secret == otp.secret
    assert imported.algorithm is otp.algorithm
    assert imported.digits == otp.digits
    assert imported.period == otp.period
    assert imported.generate(1234567890) == otp.generate(1234567890)


def test_import_defaults(params: MigrationParameters) -> None:
    otp = import_migration(params)
    assert otp.secret == KEY_RAW
    assert otp.algorithm is Algorithm.SHA1
    assert otp.digits == 6
    assert otp.period == 30


def test_import_capabilities(params: MigrationParameters) -> None:
    provider = HashlibHMACProvider()
    otp = import_migration(params, hmac=provider, clock=lambda: 59)
    assert otp.hmac is provider
    assert otp.now() == 59


def test_import_algorithm_name() -> None:
    params = MigrationParameters(KEY_B32, "TestApp", "user@test.com", algorithm="SHA512")
    assert import_migration(params).algorithm is Algorithm.SHA512


@pytest.mark.parametrize(
    ("changes", "error"),
    [
        ({"secret": "not base32!"}, InvalidEncodingError),
        ({"secret": ""}, EmptySecretError),
        ({"algorithm": "md5"}, UnsupportedAlgorithmError),
        ({"digits": 4}, InvalidDigitCountError),
        ({"digits": 10}, InvalidDigitCountError),
        ({"period": 0}, InvalidTimeStepError),
        ({"period": -30}, InvalidTimeStepError),
    ],
)
def test_import_revalidates(params: MigrationParameters, changes: dict, error: type[Exception]) -> None:
    data = {**params.to_dict(), **changes}
    with pytest.raises(error):
        import_migration(MigrationParameters.from_dict(data))


def test_repr_hides_secret(params: MigrationParameters) -> None:
    assert KEY_B32 not in repr(params)
    assert "TestApp" in repr(params)


def test_to_dict() -> None:
    params = MigrationParameters(KEY_B32, "TestApp", "user@test.com", Algorithm.SHA256, 8, 60)
    assert params.to_dict() == {
        "secret": KEY_B32,
        "issuer": "TestApp",
        "account_name": "user@test.com",
        "algorithm": "SHA256",
        "digits": 8,
        "period": 60,
    }


def test_from_dict(params: MigrationParameters) -> None:
    assert MigrationParameters.from_dict(params.to_dict()) == MigrationParameters(
        KEY_B32, "TestApp", "user@test.com", "SHA1"
    )


def test_from_dict_optional_keys() -> None:
    params = MigrationParameters.from_dict(
        {"secret": KEY_B32, "issuer": "TestApp", "account_name": "user@test.com"}
    )
    assert params.algorithm is Algorithm.SHA1
    assert params.digits == 6
    assert params.period == 30


def test_from_dict_missing_key(params: MigrationParameters) -> None:
    data = params.to_dict()
    del data["issuer"]
    with pytest.raises(ValueError, match="issuer"):
        MigrationParameters.from_dict(data)


def test_from_dict_unknown_key(params: MigrationParameters) -> None:
    data = {**params.to_dict(), "type": "totp"}
    with pytest.raises(ValueError, match="type"):
        MigrationParameters.from_dict(data)

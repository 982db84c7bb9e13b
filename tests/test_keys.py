import pytest

from libotp import base32
from libotp.algorithms import Algorithm
from libotp.keys import generate_key, generate_secret, recommended_key_size
from tests.vectors import KEY_B32, KEY_RAW


def fixed_random(count: int) -> bytes:
    return KEY_RAW[:count]


@pytest.mark.parametrize(
    ("algorithm", "size"),
    [
        (Algorithm.SHA1, 20),
        ("sha256", 32),
        ("SHA512", 64),
    ],
)
def test_recommended_key_size(algorithm: Algorithm, size: int) -> None:
    assert recommended_key_size(algorithm) == size


def test_recommended_key_size_default() -> None:
    assert recommended_key_size() == 20


@pytest.mark.parametrize("size", [1, 10, 20, 64])
def test_generate_key(size: int) -> None:
    assert len(generate_key(size)) == size


def test_generate_key_uses_random() -> None:
    assert generate_key(10, fixed_random) == KEY_RAW


@pytest.mark.parametrize("size", [0, -1])
def test_generate_key_bad_size(size: int) -> None:
    with pytest.raises(ValueError):
        generate_key(size)


def test_generate_key_size_type() -> None:
    with pytest.raises(TypeError):
        generate_key("10")  # type: ignore[arg-type]


def test_generate_key_short_random() -> None:
    with pytest.raises(RuntimeError):
        generate_key(20, fixed_random)


def test_generate_secret_fixed() -> None:
    assert generate_secret(10, random=fixed_random) == KEY_B32


@pytest.mark.parametrize(
    ("algorithm", "length"),
    [
        (Algorithm.SHA1, 32),
        (Algorithm.SHA256, 52),
        (Algorithm.SHA512, 103),
    ],
)
def test_generate_secret_default_length(algorithm: Algorithm, length: int) -> None:
    secret = generate_secret(algorithm=algorithm)
    assert len(secret) == length
    assert "=" not in secret
    assert len(base32.decode(secret)) == algorithm.recommended_key_size


def test_generate_secret_unique() -> None:
    assert generate_secret() != generate_secret()


@pytest.mark.parametrize("length", [0, -5])
def test_generate_secret_bad_length(length: int) -> None:
    with pytest.raises(ValueError):
        generate_secret(length)

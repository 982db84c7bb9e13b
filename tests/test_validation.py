import pytest

from libotp._utils.compare import consteq
from libotp.algorithms import Algorithm
from libotp.exc import EmptySecretError, InvalidDigitCountError
from libotp.providers import HashlibHMACProvider
from libotp.totp import TOTP
from libotp.validation import (
    HotpMatch,
    TotpMatch,
    find_counter,
    match_totp,
    normalize_token,
    verify_hotp,
    verify_totp,
)
from tests.vectors import RFC4226_SECRET, RFC4226_TOKENS, RFC6238_SECRETS


class CountingStr(str):
    """str which records how many positions were read"""

    reads = 0

    def __getitem__(self, index):  # type: ignore[override]
        type(self).reads += 1
        return str.__getitem__(self, index)


# =============================================================================
# consteq
# =============================================================================
@pytest.mark.parametrize(
    ("left", "right", "expected"),
    [
        ("", "", True),
        ("123456", "123456", True),
        ("123456", "123457", False),
        ("123456", "023456", False),
        ("123456", "12345", False),
        (b"\x00\xff", b"\x00\xff", True),
        (b"\x00\xff", b"\x00\xfe", False),
        (b"abc", b"abcd", False),
    ],
)
def test_consteq(left: str, right: str, expected: bool) -> None:
    assert consteq(left, right) is expected


@pytest.mark.parametrize(("left", "right"), [("abc", b"abc"), (b"abc", "abc"), ("1", 1)])
def test_consteq_type_mixing(left: object, right: object) -> None:
    with pytest.raises(TypeError):
        consteq(left, right)  # type: ignore[arg-type]


@pytest.mark.parametrize("other", ["023456", "123450", "999999"])
def test_consteq_reads_every_position(other: str) -> None:
    CountingStr.reads = 0
    assert not consteq(CountingStr("123456"), other)
    assert CountingStr.reads == 6


def test_consteq_length_mismatch_is_immediate() -> None:
    CountingStr.reads = 0
    assert not consteq(CountingStr("123456"), "1234567")
    assert CountingStr.reads == 0


# =============================================================================
# normalize_token
# =============================================================================
@pytest.mark.parametrize(
    ("token", "digits", "expected"),
    [
        ("123456", 6, "123456"),
        ("123 456", 6, "123456"),
        (" 123-456\n", 6, "123456"),
        (b"123456", 6, "123456"),
        (123456, 6, "123456"),
        (1234, 6, "001234"),
        (7081804, 8, "07081804"),
        # malformed content passes through, and simply won't match
        ("12a456", 6, "12a456"),
        ("", 6, ""),
    ],
)
def test_normalize_token(token: object, digits: int, expected: str) -> None:
    assert normalize_token(token, digits) == expected  # type: ignore[arg-type]


@pytest.mark.parametrize("token", [None, 1.5, ["123456"]])
def test_normalize_token_type_error(token: object) -> None:
    with pytest.raises(TypeError):
        normalize_token(token, 6)  # type: ignore[arg-type]


# =============================================================================
# find_counter
# =============================================================================
def test_find_counter_ascending() -> None:
    seen = []

    def generate(counter: int) -> str:
        seen.append(counter)
        return "match" if counter >= 3 else "nope"

    assert find_counter("match", generate, 1, 5) == 3
    assert seen == [1, 2, 3]


def test_find_counter_skips_out_of_range() -> None:
    seen = []

    def generate(counter: int) -> str:
        seen.append(counter)
        return "nope"

    assert find_counter("match", generate, -2, 1) is None
    assert seen == [0, 1]

    seen.clear()
    assert find_counter("match", generate, 2**64 - 2, 2**64 + 1) is None
    assert seen == [2**64 - 2, 2**64 - 1]


@pytest.mark.parametrize(
    ("start", "end", "expected"),
    [
        (-(10**9), 1, [0, 1]),
        (2**64 - 2, 2**64 + 10**9, [2**64 - 2, 2**64 - 1]),
        (-(10**9), -1, []),
        (2**64 + 10**9, 2**64 + 2 * 10**9, []),
    ],
)
def test_find_counter_clamps_wide_range(start: int, end: int, expected: list[int]) -> None:
    seen = []

    def generate(counter: int) -> str:
        seen.append(counter)
        return "nope"

    assert find_counter("match", generate, start, end) is None
    assert seen == expected


# =============================================================================
# verify_hotp
# =============================================================================
@pytest.mark.parametrize(("counter", "token"), list(enumerate(RFC4226_TOKENS)))
def test_verify_hotp(counter: int, token: str) -> None:
    assert verify_hotp(token, RFC4226_SECRET, counter)
    assert not verify_hotp(token, RFC4226_SECRET, counter + 1)


def test_verify_hotp_options() -> None:
    secret = RFC6238_SECRETS[Algorithm.SHA256]
    counter = 59 // 30
    assert verify_hotp("46119246", secret, counter, digits=8, algorithm="sha256")
    assert verify_hotp("46119246", secret, counter, digits=8, algorithm=Algorithm.SHA256, hmac=HashlibHMACProvider())
    assert not verify_hotp("46119246", secret, counter, digits=8)


def test_verify_hotp_normalizes() -> None:
    assert verify_hotp("755 224", RFC4226_SECRET, 0)
    assert verify_hotp(755224, RFC4226_SECRET, 0)


@pytest.mark.parametrize("token", ["", "75522", "7552244", "abcdef", "755225"])
def test_verify_hotp_mismatch(token: str) -> None:
    assert not verify_hotp(token, RFC4226_SECRET, 0)


def test_verify_hotp_counter_too_large() -> None:
    assert not verify_hotp("755224", RFC4226_SECRET, 2**64)


def test_verify_hotp_negative_counter() -> None:
    with pytest.raises(ValueError):
        verify_hotp("755224", RFC4226_SECRET, -1)


def test_verify_hotp_bad_config() -> None:
    with pytest.raises(EmptySecretError):
        verify_hotp("755224", b"", 0)
    with pytest.raises(InvalidDigitCountError):
        verify_hotp("755224", RFC4226_SECRET, 0, digits=10)


# =============================================================================
# match_totp / verify_totp
# =============================================================================
def test_match_totp(totp: TOTP) -> None:
    # time 160 -> counter 5
    match = match_totp(RFC4226_TOKENS[5], totp, 160)
    assert match == TotpMatch(counter=5, time=160, period=30)
    assert match.expected_counter == 5
    assert match.skipped == 0
    assert match.expire_time == 180


@pytest.mark.parametrize(("time", "skipped"), [(130, 1), (190, -1)])
def test_match_totp_skew(totp: TOTP, time: int, skipped: int) -> None:
    match = match_totp(RFC4226_TOKENS[5], totp, time)
    assert match is not None
    assert match.counter == 5
    assert match.skipped == skipped


@pytest.mark.parametrize(
    ("time", "window", "token_counter"),
    [
        (160, 0, 4),
        (160, 0, 6),
        (190, 0, 5),
        (220, 1, 5),
        (150, 2, 2),
        (120, 3, 0),
    ],
)
def test_match_totp_outside_window(totp: TOTP, time: int, window: int, token_counter: int) -> None:
    assert match_totp(RFC4226_TOKENS[token_counter], totp, time, window) is None
    assert not verify_totp(RFC4226_TOKENS[token_counter], totp, time, window)


@pytest.mark.parametrize("window", [0, 1, 2, 3])
def test_match_totp_inside_window(totp: TOTP, window: int) -> None:
    # counter 5, with the client `window` steps behind
    time = 160 + 30 * window
    assert verify_totp(RFC4226_TOKENS[5], totp, time, window)


def test_match_totp_near_epoch(totp: TOTP) -> None:
    # window reaches below counter 0, which is skipped rather than wrapped
    match = match_totp(RFC4226_TOKENS[0], totp, 10, window=1)
    assert match is not None
    assert match.counter == 0
    assert match_totp(RFC4226_TOKENS[1], totp, 10, window=1).skipped == 1
    assert match_totp("000000", totp, 0, window=3) is None


@pytest.mark.parametrize("window", [-1, 1.5, "1"])
def test_match_totp_bad_window(totp: TOTP, window: object) -> None:
    with pytest.raises((TypeError, ValueError)):
        match_totp(RFC4226_TOKENS[0], totp, 10, window)  # type: ignore[arg-type]


def test_hotp_match_record() -> None:
    match = HotpMatch(counter=7, expected_counter=5)
    assert match.next_counter == 8
    assert match.skipped == 2

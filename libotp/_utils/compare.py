from __future__ import annotations

from typing import AnyStr


def consteq(left: AnyStr, right: AnyStr) -> bool:
    """Check two strings/bytes for equality.

    Runs in time proportional to the length of the inputs,
    independent of the position of the first mismatch:
    every position is visited, and the xor of each pair is or'ed into an accumulator.
    Inputs of different length fail immediately, length isn't considered secret.

    :raises TypeError: if the arguments aren't both :class:`!str` or both :class:`!bytes`.
    """
    if isinstance(left, str) and isinstance(right, str):
        value = ord
    elif isinstance(left, bytes) and isinstance(right, bytes):
        value = int
    else:
        raise TypeError("inputs must be both str or both bytes")

    size = len(left)
    if size != len(right):
        return False

    result = 0
    for idx in range(size):
        result |= value(left[idx]) ^ value(right[idx])
    return result == 0

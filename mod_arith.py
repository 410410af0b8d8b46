"""Modular arithmetic on unsigned 64-bit operands.

``mod_mul`` and ``mod_pow`` are built from additions and multiplications
that each stay below ``2 * m``, so every intermediate is bounded by the
modulus rather than by the product of the operands.  The public functions
validate their arguments; the underscored versions assume the caller has
already done so and are what the primality test runs in its inner loops.
"""

from __future__ import annotations

import operator

U64_MAX = (1 << 64) - 1


def check_u64(value, name: str = "value") -> int:
    """Return ``value`` as an ``int`` after checking it fits in 64 unsigned bits."""
    value = operator.index(value)
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} must be in [0, 2**64 - 1], got {value}")
    return value


def _check_args(a, b, m) -> tuple[int, int, int]:
    a = check_u64(a, "a")
    b = check_u64(b, "b")
    m = check_u64(m, "m")
    if m == 0:
        raise ValueError("modulus must be nonzero")
    return a, b, m


# ─────────────────────────────────────────────────────────────────────────────
# Unchecked primitives
# ─────────────────────────────────────────────────────────────────────────────

def _add(a: int, b: int, m: int) -> int:
    # Python ints widen, so a + b never wraps
    return (a + b) % m


def _sub(a: int, b: int, m: int) -> int:
    return (a - b) % m


def _mul(a: int, b: int, m: int) -> int:
    r = 0
    a %= m
    while b > 0:
        if b & 1:
            r = _add(r, a, m)
        b >>= 1
        a = _add(a, a, m)
    return r


def _pow(a: int, b: int, m: int) -> int:
    r = 1 % m
    a %= m
    while b > 0:
        if b & 1:
            r = _mul(r, a, m)
        b >>= 1
        a = _mul(a, a, m)
    return r


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def mod_add(a: int, b: int, m: int) -> int:
    """Return ``(a + b) mod m``."""
    return _add(*_check_args(a, b, m))


def mod_sub(a: int, b: int, m: int) -> int:
    """Return ``(a - b) mod m``; ``a`` may be smaller than ``b``."""
    return _sub(*_check_args(a, b, m))


def mod_mul(a: int, b: int, m: int) -> int:
    """Return ``(a * b) mod m`` using binary double-and-add.

    ``a`` is reduced first, then doubled once per bit of ``b``; whenever the
    low bit of ``b`` is set the current ``a`` is folded into the result.
    """
    return _mul(*_check_args(a, b, m))


def mod_pow(a: int, b: int, m: int) -> int:
    """Return ``a**b mod m`` using square-and-multiply on top of ``mod_mul``.

    ``b == 0`` gives ``1`` for any ``m > 1``.  For ``m == 1`` every residue is
    ``0``, including the empty product.
    """
    return _pow(*_check_args(a, b, m))

import random

import numpy as np
import pytest

from mod_arith import U64_MAX, check_u64, mod_add, mod_mul, mod_pow, mod_sub

BIG_PRIME = 18446744073709551557  # largest prime below 2**64
MODULI = [1, 2, 3, 97, 1 << 32, (1 << 63) + 1, BIG_PRIME, U64_MAX]


def _operands(m, count=20, seed=0):
    rng = random.Random(seed ^ m)
    edge = [0, 1, m - 1, m // 2]
    return [x for x in edge if 0 <= x < m] + [rng.randrange(m) for _ in range(count)]


@pytest.mark.parametrize("m", MODULI)
def test_add_sub_mul_match_widened_arithmetic(m):
    xs = _operands(m)
    for a in xs:
        for b in xs[:8]:
            assert mod_add(a, b, m) == (a + b) % m
            assert mod_sub(a, b, m) == (a - b) % m
            assert mod_mul(a, b, m) == (a * b) % m


@pytest.mark.parametrize("m", MODULI)
def test_commutativity(m):
    xs = _operands(m, count=10)
    for a in xs:
        for b in xs:
            assert mod_add(a, b, m) == mod_add(b, a, m)
            assert mod_mul(a, b, m) == mod_mul(b, a, m)


@pytest.mark.parametrize("m", [m for m in MODULI if m > 1])
def test_identities(m):
    for a in _operands(m):
        assert mod_add(a, 0, m) == a
        assert mod_mul(a, 1, m) == a % m
        assert mod_pow(a, 0, m) == 1
        assert mod_sub(mod_add(a, 7 % m, m), 7 % m, m) == a


@pytest.mark.parametrize("m", MODULI)
def test_sub_undoes_add(m):
    xs = _operands(m, count=10, seed=1)
    for a in xs:
        for b in xs:
            assert mod_sub(mod_add(a, b, m), b, m) == a


def test_sub_wraps_when_a_below_b():
    assert mod_sub(3, 5, 7) == 5
    assert mod_sub(0, BIG_PRIME - 1, BIG_PRIME) == 1


def test_add_near_the_top_of_the_range():
    assert mod_add(U64_MAX - 1, U64_MAX - 1, U64_MAX) == U64_MAX - 2
    assert mod_add(BIG_PRIME - 1, BIG_PRIME - 1, BIG_PRIME) == BIG_PRIME - 2


def test_mul_reduces_unreduced_first_operand():
    assert mod_mul(U64_MAX, U64_MAX, 1000) == (U64_MAX * U64_MAX) % 1000
    assert mod_mul(10, 3, 7) == 2


def test_results_stay_in_range():
    rng = random.Random(42)
    for _ in range(200):
        m = rng.randrange(1, U64_MAX + 1)
        a, b = rng.randrange(U64_MAX + 1), rng.randrange(U64_MAX + 1)
        assert 0 <= mod_sub(a, b, m) < m
        assert 0 <= mod_mul(a, b, m) < m
        assert 0 <= mod_pow(a, b & 0xFFFF, m) < m


def test_modulus_one_collapses_to_zero():
    assert mod_add(0, 0, 1) == 0
    assert mod_mul(5, 9, 1) == 0
    assert mod_pow(5, 0, 1) == 0


@pytest.mark.parametrize("m", [2, 97, 1 << 40, BIG_PRIME])
def test_pow_matches_repeated_multiplication(m):
    for a in _operands(m, count=5, seed=2):
        acc = 1 % m
        for b in range(12):
            assert mod_pow(a, b, m) == acc
            acc = mod_mul(acc, a, m)


def test_pow_matches_builtin_for_large_exponents():
    rng = random.Random(7)
    for _ in range(50):
        m = rng.randrange(2, U64_MAX + 1)
        a, b = rng.randrange(U64_MAX + 1), rng.randrange(U64_MAX + 1)
        assert mod_pow(a, b, m) == pow(a, b, m)


def test_fermat_little_theorem_on_large_prime():
    for a in (2, 3, 12345678901234567):
        assert mod_pow(a, BIG_PRIME - 1, BIG_PRIME) == 1


def test_zero_modulus_is_rejected():
    for op in (mod_add, mod_sub, mod_mul, mod_pow):
        with pytest.raises(ValueError, match="nonzero"):
            op(1, 1, 0)


@pytest.mark.parametrize("bad", [-1, U64_MAX + 1])
def test_out_of_range_operands_are_rejected(bad):
    with pytest.raises(ValueError):
        mod_mul(bad, 1, 7)
    with pytest.raises(ValueError):
        mod_pow(2, bad, 7)
    with pytest.raises(ValueError):
        mod_add(1, 1, bad)


def test_check_u64_coerces_numpy_and_rejects_floats():
    assert check_u64(np.uint64(U64_MAX)) == U64_MAX
    assert type(check_u64(np.int32(5))) is int
    with pytest.raises(TypeError):
        check_u64(2.0)

"""Deterministic Miller–Rabin primality test for 64-bit unsigned integers.

For ``n < 2**64`` it is enough to test the bases 2, 3, 5, 7, 11, 13, 17, 19,
23, 29, 31 and 37 (the same twelve bases cover every
``n < 3,317,044,064,679,887,385,961,981``), so the verdict is exact rather
than probabilistic.
"""

from __future__ import annotations

import operator
import sys
from multiprocessing import Pool
from typing import Iterable, Iterator

import numpy as np
from tqdm import tqdm

from mod_arith import U64_MAX, _mul, _pow, check_u64

WITNESS_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)

# Batches smaller than this are cheaper to test in-process than to ship to a pool
SEQUENTIAL_CUTOFF = 64


# ─────────────────────────────────────────────────────────────────────────────
# Single candidate
# ─────────────────────────────────────────────────────────────────────────────

def decompose_pow2(n: int) -> tuple[int, int]:
    """Split ``n > 0`` into ``(r, d)`` with ``n == d * 2**r`` and ``d`` odd."""
    if n <= 0:
        raise ValueError("n must be positive")
    r = 0
    while not (n & 1):
        n >>= 1
        r += 1
    return r, n


def passes_base(n: int, a: int, d: int, r: int) -> bool:
    """Run one Miller–Rabin round; ``False`` means ``a`` witnesses that ``n`` is composite."""
    x = _pow(a, d, n)
    if x == 1 or x == n - 1:
        return True
    for _ in range(r - 1):
        x = _mul(x, x, n)
        if x == n - 1:
            return True
    return False


def is_prime(n: int) -> bool:
    """Return ``True`` iff ``n`` is prime; exact for every ``n`` in ``[0, 2**64 - 1]``."""
    n = check_u64(n, "n")
    if n < 2:
        return False
    if n == 2 or n == 3:
        return True
    if not (n & 1):
        return False

    r, d = decompose_pow2(n - 1)
    for a in WITNESS_BASES:
        # bases are increasing, so every later one is out of range as well
        if a > n - 2:
            break
        if not passes_base(n, a, d, r):
            return False
    return True


# ─────────────────────────────────────────────────────────────────────────────
# Batches
# ─────────────────────────────────────────────────────────────────────────────

def _is_prime_sequential(values: list[int]) -> list[bool]:
    return [is_prime(v) for v in values]


def is_prime_many(values: Iterable[int] | np.ndarray, processes: int | None = None) -> np.ndarray:
    """Test every value and return a boolean array in input order.

    ``values`` may be any iterable of integers, including a numpy integer
    array of any shape; the result has the same shape as such an array.
    All values are range-checked before any test runs.  With ``processes``
    greater than one, large batches are spread over a
    ``multiprocessing.Pool``.
    """
    shape = None
    if isinstance(values, np.ndarray):
        shape = values.shape
        values = values.ravel().tolist()
    candidates = [check_u64(v, "value") for v in values]

    if processes is None or processes <= 1 or len(candidates) < SEQUENTIAL_CUTOFF:
        results = _is_prime_sequential(candidates)
    else:
        chunk_size = max(1, len(candidates) // (processes * 4) + 1)
        try:
            with Pool(processes=processes) as pool:
                results = pool.map(is_prime, candidates, chunksize=chunk_size)
        except OSError as e:
            print(f"INFO: Could not start worker pool ({e}); testing sequentially.", file=sys.stderr)
            results = _is_prime_sequential(candidates)

    verdicts = np.array(results, dtype=bool)
    return verdicts if shape is None else verdicts.reshape(shape)


def _scan(start: int, stop: int, progress: bool) -> Iterator[int]:
    with tqdm(total=stop - start, desc="Scanning", unit="n",
              leave=False, disable=not progress) as bar:
        for n in range(start, stop):
            if is_prime(n):
                yield n
            bar.update(1)


def prime_scan(start: int, stop: int, progress: bool = False) -> Iterator[int]:
    """Return an iterator over every prime ``p`` with ``start <= p < stop``.

    The bounds are checked eagerly; ``stop`` may be ``2**64`` so the largest
    64-bit values can be scanned.
    """
    start = check_u64(start, "start")
    stop = operator.index(stop)
    if stop < 0 or stop > U64_MAX + 1:
        raise ValueError(f"stop must be in [0, 2**64], got {stop}")
    if stop <= start:
        return iter(())
    return _scan(start, stop, progress)

#!/usr/bin/env python3
"""mr64: test or scan 64-bit integers with deterministic Miller–Rabin.

    mr64 18446744073709551557 561 1e+18
    mr64 1e+18 --range 1000 --progress
    mr64 97 7919 --check
"""

from __future__ import annotations

import argparse
import sys

from sympy import isprime, primerange

from miller_rabin import is_prime_many, prime_scan
from mod_arith import U64_MAX, check_u64


# ─────────────────────────────────────────────────────────────────────────────
# Argument parsing
# ─────────────────────────────────────────────────────────────────────────────
def parse_sci(s: str) -> int:
    """Parse ``'1e+18'``, ``'2.5e3'`` or a plain integer into an exact ``int``.

    Signs are only accepted in front of the coefficient and the exponent.
    Exponents that put the value far beyond 64 bits are rejected before any
    power of ten is built.
    """
    s = s.strip().lower()
    if 'e' in s:
        coeff, expo = s.split('e', 1)
        exp = int(expo)
        if '.' in coeff:
            a, b = coeff.split('.', 1)
            coeff = int(a + b)
            exp -= len(b)
        else:
            coeff = int(coeff)
        if coeff == 0:
            return 0
        if exp > 20:
            raise ValueError(f"{s!r} is out of the 64-bit range")
        if exp >= 0:
            return coeff * 10**exp
        if -exp > len(str(abs(coeff))) or coeff % 10**-exp:
            raise ValueError(f"{s!r} is not an integer")
        return coeff // 10**-exp
    return int(s)


def u64_arg(s: str) -> int:
    try:
        return check_u64(parse_sci(s), "number")
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mr64",
        description="Deterministic Miller–Rabin primality test for 0 ≤ n < 2**64"
    )
    parser.add_argument(
        'numbers',
        nargs='+',
        type=u64_arg,
        metavar='NUMBER',
        help="Integer or sci-notation value, e.g. 97 or 1e+18"
    )
    parser.add_argument(
        '--range',
        type=int,
        help="Scan K consecutive values from each NUMBER and print the primes"
    )
    parser.add_argument(
        '--processes',
        type=int,
        default=1,
        help="Worker processes for batch testing (default 1)"
    )
    parser.add_argument(
        '--check',
        action='store_true',
        help="Cross-check every verdict against sympy"
    )
    parser.add_argument(
        '--progress',
        action='store_true',
        help="Show a progress bar while scanning"
    )
    return parser


# ─────────────────────────────────────────────────────────────────────────────
# Modes
# ─────────────────────────────────────────────────────────────────────────────
def run_tests(numbers: list[int], processes: int, check: bool) -> int:
    verdicts = is_prime_many(numbers, processes=processes)
    status = 0
    for n, verdict in zip(numbers, verdicts):
        print(f"{n}: {'✔️ prime' if verdict else '❌ composite'}")
        if check and bool(verdict) != isprime(n):
            print(f"ERROR: {n} disagrees with sympy.isprime", file=sys.stderr)
            status = 1
    return status


def run_scans(starts: list[int], width: int, check: bool, progress: bool) -> int:
    status = 0
    for start in starts:
        stop = min(start + width, U64_MAX + 1)
        found = []
        for p in prime_scan(start, stop, progress=progress):
            print(p)
            found.append(p)
        print(f"INFO: {len(found)} primes in [{start}, {stop})")

        if check:
            expected = list(primerange(start, stop))
            if found != expected:
                missed = sorted(set(expected) - set(found))
                extra = sorted(set(found) - set(expected))
                print(f"ERROR: scan of [{start}, {stop}) disagrees with sympy: "
                      f"missed={missed} extra={extra}", file=sys.stderr)
                status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.processes < 1:
        parser.error("--processes must be at least 1")
    if args.range is not None and args.range < 1:
        parser.error("--range must be at least 1")

    if args.range is None:
        return run_tests(args.numbers, args.processes, args.check)
    return run_scans(args.numbers, args.range, args.check, args.progress)


if __name__ == '__main__':
    sys.exit(main())

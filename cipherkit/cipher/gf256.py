"""GF(2^8) arithmetic with a caller-chosen modulus.

Field elements are bytes read as polynomials of degree < 8 over GF(2). A
modulus is also a byte: the x^8 term is implicit, so 0x1B stands for
x^8 + x^4 + x^3 + x + 1 (the AES polynomial).

Every operation that takes a modulus checks that it is irreducible first and
raises ReducibleModulusError otherwise.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from functools import lru_cache
from typing import List, Tuple

from ..errors import InvalidInputError, ReducibleModulusError

AES_MODULUS = 0x1B


# ============================================================================
# POLYNOMIALS OVER GF(2)
# ============================================================================

def poly_degree(p: int) -> int:
    """Degree of a GF(2) polynomial; -1 for the zero polynomial."""
    return p.bit_length() - 1


def poly_mul(a: int, b: int) -> int:
    """Carry-less product of two GF(2) polynomials (no reduction)."""
    res = 0
    while b:
        if b & 1:
            res ^= a
        a <<= 1
        b >>= 1
    return res


def poly_divmod(dividend: int, divisor: int) -> Tuple[int, int]:
    """Polynomial long division over GF(2): returns (quotient, remainder)."""
    if divisor == 0:
        raise ZeroDivisionError("polynomial division by zero")
    quotient = 0
    remainder = dividend
    d_deg = poly_degree(divisor)
    while remainder and poly_degree(remainder) >= d_deg:
        shift = poly_degree(remainder) - d_deg
        quotient ^= 1 << shift
        remainder ^= divisor << shift
    return quotient, remainder


# ============================================================================
# IRREDUCIBILITY
# ============================================================================

def _check_byte(value: int, what: str) -> int:
    if not 0 <= value <= 0xFF:
        raise InvalidInputError(f"{what} must be in 0..255, got {value}")
    return value


@lru_cache(maxsize=256)
def is_irreducible(polynomial: int) -> bool:
    """True if x^8 + `polynomial` has no divisor of degree 1..7."""
    _check_byte(polynomial, "polynomial")
    poly = polynomial | 0x100
    for divisor in range(2, 256):
        if poly_divmod(poly, divisor)[1] == 0:
            return False
    return True


def require_irreducible(modulus: int) -> int:
    _check_byte(modulus, "modulus")
    if not is_irreducible(modulus):
        raise ReducibleModulusError(modulus)
    return modulus


@lru_cache(maxsize=1)
def _irreducible_table() -> Tuple[int, ...]:
    return tuple(p for p in range(256) if is_irreducible(p))


def irreducible_polynomials() -> List[int]:
    """All 30 irreducible degree-8 moduli, in ascending byte order."""
    return list(_irreducible_table())


# ============================================================================
# FIELD OPERATIONS
# ============================================================================

def add(a: int, b: int) -> int:
    return (a ^ b) & 0xFF


def multiply(a: int, b: int, modulus: int) -> int:
    """GF(2^8) multiplication reduced by `modulus` (shift-and-add)."""
    require_irreducible(modulus)
    a &= 0xFF
    b &= 0xFF
    res = 0
    for _ in range(8):
        if b & 1:
            res ^= a
        hi = a & 0x80
        a = (a << 1) & 0xFF
        if hi:
            a ^= modulus
        b >>= 1
    return res


def inverse(element: int, modulus: int) -> int:
    """Multiplicative inverse via the extended Euclidean algorithm."""
    require_irreducible(modulus)
    _check_byte(element, "element")
    if element == 0:
        raise InvalidInputError("Zero has no multiplicative inverse")

    a, b = modulus | 0x100, element
    u, v = 0, 1
    while b:
        q, r = poly_divmod(a, b)
        a, b = b, r
        u, v = v, u ^ poly_mul(q, v)
    return u & 0xFF


def power(element: int, exponent: int, modulus: int) -> int:
    """element ** exponent in the field (square-and-multiply)."""
    require_irreducible(modulus)
    if exponent < 0:
        raise InvalidInputError("exponent must be non-negative")
    result = 1
    base = element & 0xFF
    while exponent:
        if exponent & 1:
            result = multiply(result, base, modulus)
        base = multiply(base, base, modulus)
        exponent >>= 1
    return result


def factorize(value: int) -> List[int]:
    """Trial-divide the integer `value` by the irreducible moduli.

    The moduli are used as plain integers here, so this is integer trial
    division against a fixed list, not a factorization in GF(2)[x]. Any
    cofactor left above 1 is appended as the last entry.
    """
    if value < 1:
        raise InvalidInputError("factorize expects a positive integer")
    factors: List[int] = []
    for factor in _irreducible_table():
        while value % factor == 0:
            factors.append(factor)
            value //= factor
    if value > 1:
        factors.append(value)
    return factors


def multiplication_table(coefficient: int, modulus: int) -> bytes:
    """Lookup table x -> coefficient * x for all bytes x."""
    require_irreducible(modulus)
    return bytes(multiply(coefficient, x, modulus) for x in range(256))

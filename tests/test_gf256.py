import random

import pytest

from cipherkit.cipher import gf256
from cipherkit.errors import InvalidInputError, ReducibleModulusError


def test_thirty_irreducible_moduli():
    moduli = gf256.irreducible_polynomials()
    assert len(moduli) == 30
    assert len(set(moduli)) == 30
    assert moduli == sorted(moduli)
    assert 0x1B in moduli
    assert 0x1D in moduli
    assert 0x00 not in moduli


@pytest.mark.parametrize("modulus", gf256.irreducible_polynomials())
def test_field_axioms(modulus):
    rng = random.Random(modulus)
    for _ in range(20):
        a, b, c = (rng.randrange(256) for _ in range(3))
        assert gf256.multiply(a, b, modulus) == gf256.multiply(b, a, modulus)
        left = gf256.multiply(a, gf256.add(b, c), modulus)
        right = gf256.add(gf256.multiply(a, b, modulus), gf256.multiply(a, c, modulus))
        assert left == right


@pytest.mark.parametrize("modulus", gf256.irreducible_polynomials())
def test_every_nonzero_element_has_inverse(modulus):
    for e in range(1, 256):
        assert gf256.multiply(e, gf256.inverse(e, modulus), modulus) == 1


def test_aes_field_known_values():
    assert gf256.multiply(0x57, 0x83, 0x1B) == 0xC1
    assert gf256.multiply(0x57, 0x13, 0x1B) == 0xFE
    assert gf256.inverse(0x53, 0x1B) == 0xCA
    assert gf256.power(0x02, 8, 0x1B) == 0x1B
    assert gf256.power(0x53, 0, 0x1B) == 1


def test_reducible_modulus_raises():
    with pytest.raises(ReducibleModulusError) as exc:
        gf256.multiply(2, 3, 0x00)
    assert exc.value.modulus == 0x00
    with pytest.raises(ReducibleModulusError):
        gf256.inverse(5, 0x1A)


def test_inverse_of_zero_and_negative_power():
    with pytest.raises(InvalidInputError):
        gf256.inverse(0, 0x1B)
    with pytest.raises(InvalidInputError):
        gf256.power(3, -1, 0x1B)


def test_factorize_integer_semantics():
    assert gf256.factorize(27 * 29) == [27, 29]
    assert gf256.factorize(27 * 27 * 5) == [27, 27, 5]
    assert gf256.factorize(1) == []
    assert gf256.factorize(7) == [7]
    with pytest.raises(InvalidInputError):
        gf256.factorize(0)


def test_multiplication_table_matches_multiply():
    table = gf256.multiplication_table(3, 0x1B)
    assert len(table) == 256
    assert all(table[x] == gf256.multiply(3, x, 0x1B) for x in range(256))

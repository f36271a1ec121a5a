import itertools
import random

import pytest

from cipherkit.cipher import RijndaelCipher
from cipherkit.cipher import gf256
from cipherkit.cipher.rijndael import build_sboxes
from cipherkit.errors import CipherStateError, InvalidInputError, ReducibleModulusError

SIZES = (128, 192, 256)


def _rand(rng, n):
    return bytes(rng.randrange(256) for _ in range(n))


def test_aes128_zero_vector():
    cipher = RijndaelCipher(128, 128, 0x1B, key=bytes(16))
    ct = cipher.encrypt(bytes(16))
    assert ct.hex().upper() == "66E94BD4EF8A2C3B884CFA59CA342B2E"
    assert cipher.decrypt(ct) == bytes(16)


def test_aes128_fips197_example():
    key = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
    pt = bytes.fromhex("00112233445566778899aabbccddeeff")
    assert RijndaelCipher(key=key).encrypt(pt).hex() == "69c4e0d86a7b0430d8cdb78070b4c55a"


@pytest.mark.parametrize("key_bits", SIZES)
def test_aes_matches_reference_implementation(key_bits):
    AES = pytest.importorskip("Cryptodome.Cipher.AES")
    rng = random.Random(key_bits)
    for _ in range(5):
        key = _rand(rng, key_bits // 8)
        pt = _rand(rng, 16)
        expected = AES.new(key, AES.MODE_ECB).encrypt(pt)
        assert RijndaelCipher(128, key_bits, key=key).encrypt(pt) == expected


@pytest.mark.parametrize("block_bits,key_bits", list(itertools.product(SIZES, SIZES)))
def test_all_size_combinations_roundtrip(block_bits, key_bits):
    cipher = RijndaelCipher(block_bits, key_bits)
    assert cipher.rounds == max(block_bits, key_bits) // 32 + 6
    rng = random.Random(block_bits * 1000 + key_bits)
    for _ in range(3):
        cipher.set_key(_rand(rng, key_bits // 8))
        pt = _rand(rng, block_bits // 8)
        ct = cipher.encrypt(pt)
        assert len(ct) == block_bits // 8
        assert cipher.decrypt(ct) == pt
    assert len(cipher.round_keys()) == cipher.rounds + 1


@pytest.mark.parametrize("modulus", [0x1D, 0x2B, 0xF5])
def test_alternative_moduli_roundtrip(modulus):
    rng = random.Random(modulus)
    key = _rand(rng, 16)
    pt = _rand(rng, 16)
    cipher = RijndaelCipher(128, 128, modulus, key=key)
    ct = cipher.encrypt(pt)
    assert cipher.decrypt(ct) == pt
    assert ct != RijndaelCipher(128, 128, 0x1B, key=key).encrypt(pt)


@pytest.mark.parametrize("modulus", gf256.irreducible_polynomials())
def test_sboxes_are_inverse_bijections(modulus):
    sbox, inv = build_sboxes(modulus)
    assert sorted(sbox) == list(range(256))
    assert all(inv[sbox[x]] == x for x in range(256))


def test_aes_sbox_known_entries():
    sbox, _ = build_sboxes(0x1B)
    assert sbox[0x00] == 0x63
    assert sbox[0x53] == 0xED
    assert sbox[0xFF] == 0x16


def test_rijndael_errors():
    with pytest.raises(InvalidInputError):
        RijndaelCipher(64, 128)
    with pytest.raises(InvalidInputError):
        RijndaelCipher(128, 160)
    with pytest.raises(ReducibleModulusError):
        RijndaelCipher(128, 128, 0x00)
    with pytest.raises(InvalidInputError):
        RijndaelCipher(key=bytes(24))
    with pytest.raises(CipherStateError):
        RijndaelCipher().encrypt(bytes(16))
    with pytest.raises(InvalidInputError):
        RijndaelCipher(key=bytes(16)).decrypt(bytes(15))

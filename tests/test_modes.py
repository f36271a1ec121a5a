import itertools

import pytest

from cipherkit.cipher import DEAL, DES, RijndaelCipher
from cipherkit.errors import CipherStateError, InvalidInputError, UnsupportedConfigurationError
from cipherkit.evaluation.roundtrip import mode_roundtrip_lengths
from cipherkit.modes import CipherMode, CipherModeEngine, PaddingMode, pad, unpad
from cipherkit.utils.randomness import RandomSource

AES_KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
IV = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


def _plaintext(length, seed=0):
    data = bytes((i * 37 + seed) & 0xFF for i in range(length))
    if data and data[-1] == 0:
        data = data[:-1] + b"\x01"
    return data


# ---------------------------------------------------------------------------
# Padding
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("padding", [PaddingMode.PKCS7, PaddingMode.ANSIX923, PaddingMode.ISO10126])
@pytest.mark.parametrize("length", [0, 1, 7, 8, 9, 16])
def test_length_encoding_paddings_always_pad(padding, length):
    data = _plaintext(length)
    padded = pad(data, 8, padding, filler=RandomSource.seeded(1).filler_bytes)
    assert len(padded) % 8 == 0
    assert 1 <= len(padded) - length <= 8
    assert padded[-1] == len(padded) - length
    assert unpad(padded, 8, padding) == data


def test_padding_bytes():
    assert pad(b"abc", 8, PaddingMode.PKCS7) == b"abc" + b"\x05" * 5
    assert pad(b"abc", 8, PaddingMode.ANSIX923) == b"abc" + bytes(4) + b"\x05"
    assert pad(b"abcdefgh", 8, PaddingMode.PKCS7) == b"abcdefgh" + b"\x08" * 8
    assert pad(b"abc", 8, PaddingMode.ZEROS) == b"abc" + bytes(5)
    assert pad(b"abcdefgh", 8, PaddingMode.ZEROS) == b"abcdefgh"


def test_zeros_padding_strips_trailing_zeros():
    assert unpad(b"abc" + bytes(5), 8, PaddingMode.ZEROS) == b"abc"
    # real trailing zeros are indistinguishable from padding
    assert unpad(b"ab\x00" + bytes(5), 8, PaddingMode.ZEROS) == b"ab"
    assert unpad(bytes(8), 8, PaddingMode.ZEROS) == b"\x00"


@pytest.mark.parametrize("data,padding", [
    (b"abcdefg\x09", PaddingMode.PKCS7),
    (b"abcdef\x03\x02", PaddingMode.PKCS7),
    (b"abcdefg\x00", PaddingMode.PKCS7),
    (b"abcde\x01\x00\x03", PaddingMode.ANSIX923),
])
def test_invalid_padding_returns_data_unchanged(data, padding):
    assert unpad(data, 8, padding) == data


def test_padding_parse_and_errors():
    assert PaddingMode.parse("pkcs7") is PaddingMode.PKCS7
    assert PaddingMode.parse("ANSI_X923") is PaddingMode.ANSIX923
    assert PaddingMode.parse("iso-10126") is PaddingMode.ISO10126
    assert PaddingMode.parse("zeros") is PaddingMode.ZEROS
    with pytest.raises(UnsupportedConfigurationError):
        PaddingMode.parse("OAEP")
    with pytest.raises(InvalidInputError):
        pad(b"a", 8, PaddingMode.ISO10126)
    with pytest.raises(InvalidInputError):
        pad(b"a", 0, PaddingMode.PKCS7)


# ---------------------------------------------------------------------------
# Engine roundtrips
# ---------------------------------------------------------------------------

CIPHERS = {
    "DES": lambda: DES(bytes.fromhex("133457799BBCDFF1")),
    "DEAL": lambda: DEAL(bytes(range(16))),
    "AES": lambda: RijndaelCipher(key=AES_KEY),
}


@pytest.mark.parametrize("cipher_name", list(CIPHERS))
@pytest.mark.parametrize("mode,padding", list(itertools.product(CipherMode, PaddingMode)))
def test_mode_padding_roundtrip(cipher_name, mode, padding):
    cipher = CIPHERS[cipher_name]()
    engine = CipherModeEngine(cipher, mode, padding, rng=RandomSource.seeded(7))
    bs = cipher.block_size
    for length in mode_roundtrip_lengths(bs):
        pt = _plaintext(length, seed=length)
        ct = engine.encrypt(pt)
        if mode.is_stream:
            assert len(ct) == length
        else:
            assert len(ct) % bs == 0
        assert engine.decrypt(ct) == pt


@pytest.mark.parametrize("mode", list(CipherMode))
@pytest.mark.parametrize("padding", list(PaddingMode))
def test_framed_roundtrip_keeps_trailing_zeros(mode, padding):
    engine = CipherModeEngine(DES(bytes(8)), mode, padding, rng=RandomSource.seeded(3))
    for pt in (b"", b"\x00", b"data\x00\x00", bytes(8), bytes(17)):
        blob = engine.encrypt_framed(pt)
        assert blob[:4] == len(pt).to_bytes(4, "little")
        assert engine.decrypt_framed(blob) == pt


def test_framed_errors():
    engine = CipherModeEngine(DES(bytes(8)), "CBC", "PKCS7", iv=bytes(8))
    with pytest.raises(InvalidInputError):
        engine.decrypt_framed(b"\x01\x00")
    blob = engine.encrypt_framed(b"abc")
    tampered = (1000).to_bytes(4, "little") + blob[4:]
    with pytest.raises(InvalidInputError):
        engine.decrypt_framed(tampered)


# ---------------------------------------------------------------------------
# Engine behaviour
# ---------------------------------------------------------------------------

def test_ecb_identical_blocks_identical_ciphertext():
    engine = CipherModeEngine(RijndaelCipher(key=AES_KEY), "ECB", "PKCS7")
    ct = engine.encrypt(b"A" * 32)
    assert ct[:16] == ct[16:32]
    assert engine.iv == b""


def test_cbc_hides_repeated_blocks():
    engine = CipherModeEngine(RijndaelCipher(key=AES_KEY), "CBC", "PKCS7", iv=IV)
    ct = engine.encrypt(b"A" * 32)
    assert ct[:16] != ct[16:32]


def test_pcbc_corruption_propagates():
    engine = CipherModeEngine(DES(bytes(8)), "PCBC", "PKCS7", iv=bytes(8))
    pt = _plaintext(32)
    ct = bytearray(engine.encrypt(pt))
    ct[0] ^= 0xFF
    out = engine._decrypt_raw(bytes(ct))
    assert all(out[i:i + 8] != pt[i:i + 8] for i in range(0, 32, 8))


def test_ctr_counter_wraps_around():
    cipher = DES(bytes(8))
    iv = b"\xFF" * 8
    engine = CipherModeEngine(cipher, "CTR", iv=iv)
    ct = engine.encrypt(bytes(16))
    assert ct[:8] == cipher.encrypt(iv)
    assert ct[8:] == cipher.encrypt(bytes(8))


def test_stream_modes_truncate_keystream():
    cipher = RijndaelCipher(key=AES_KEY)
    for mode in ("CFB", "OFB", "CTR"):
        engine = CipherModeEngine(cipher, mode, "PKCS7", iv=IV)
        full = engine.encrypt(bytes(32))
        assert engine.encrypt(bytes(21)) == full[:21]


def test_same_engine_same_iv_is_deterministic():
    engine = CipherModeEngine(DES(bytes(8)), "CBC", "PKCS7", rng=RandomSource.seeded(11))
    assert len(engine.iv) == 8
    assert engine.encrypt(b"hello") == engine.encrypt(b"hello")


@pytest.mark.parametrize("mode,segment", [("CBC", None), ("CFB", 128), ("OFB", None), ("CTR", None)])
def test_aes_modes_match_reference_implementation(mode, segment):
    AES = pytest.importorskip("Cryptodome.Cipher.AES")
    pt = _plaintext(48)
    engine = CipherModeEngine(RijndaelCipher(key=AES_KEY), mode, "PKCS7", iv=IV)
    if mode == "CBC":
        ref = AES.new(AES_KEY, AES.MODE_CBC, iv=IV).encrypt(pad(pt, 16, PaddingMode.PKCS7))
    elif mode == "CFB":
        ref = AES.new(AES_KEY, AES.MODE_CFB, iv=IV, segment_size=segment).encrypt(pt)
    elif mode == "OFB":
        ref = AES.new(AES_KEY, AES.MODE_OFB, iv=IV).encrypt(pt)
    else:
        ref = AES.new(AES_KEY, AES.MODE_CTR, nonce=b"", initial_value=IV).encrypt(pt)
    assert engine.encrypt(pt) == ref


def test_engine_configuration_errors():
    cipher = DES(bytes(8))
    with pytest.raises(UnsupportedConfigurationError):
        CipherModeEngine(cipher, "XTS")
    with pytest.raises(UnsupportedConfigurationError):
        CipherModeEngine(cipher, "CBC", "OAEP")
    with pytest.raises(InvalidInputError):
        CipherModeEngine(cipher, "CBC", iv=bytes(16))
    with pytest.raises(InvalidInputError):
        CipherModeEngine(cipher, "CBC", block_size=16)
    engine = CipherModeEngine(cipher, "CBC", iv=bytes(8))
    with pytest.raises(InvalidInputError):
        engine.decrypt(bytes(12))


def test_unkeyed_cipher_surfaces_state_error():
    engine = CipherModeEngine(DES(), "ECB")
    with pytest.raises(CipherStateError):
        engine.encrypt(b"abc")


def test_seeded_source_keys_are_reproducible():
    a, b = RandomSource.seeded(9), RandomSource.seeded(9)
    assert a.key(16) == b.key(16)
    assert len(RandomSource().key(24)) == 24

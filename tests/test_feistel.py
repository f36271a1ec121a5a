from typing import List

import pytest

from cipherkit.cipher import FeistelNetwork, KeyExpansion, RoundFunction
from cipherkit.errors import CipherStateError, InvalidInputError


class CountingExpansion(KeyExpansion):
    def __init__(self, count: int = 4):
        self.count = count

    def generate(self, master_key: bytes) -> List[bytes]:
        return [bytes((b + i) & 0xFF for b in master_key) for i in range(self.count)]


class AddRoundFunction(RoundFunction):
    # deliberately non-invertible: Feistel must not need F^-1
    def transform(self, block: bytes, round_key: bytes) -> bytes:
        return bytes(((b * 3) ^ k) & 0xF0 for b, k in zip(block, round_key))


def _net(rounds=4, block_size=8):
    return FeistelNetwork(CountingExpansion(rounds), AddRoundFunction(), rounds=rounds, block_size=block_size)


@pytest.mark.parametrize("rounds", [1, 2, 3, 16])
def test_feistel_roundtrip(rounds):
    net = _net(rounds)
    net.set_key(b"\x10\x20\x30\x40")
    for pt in (bytes(8), bytes(range(8)), b"\xFF" * 8):
        assert net.decrypt(net.encrypt(pt)) == pt


def test_single_round_structure():
    net = _net(1)
    net.set_key(b"\x01\x02\x03\x04")
    pt = bytes(range(8))
    ct = net.encrypt(pt)
    assert ct[:4] == pt[4:]


def test_feistel_errors():
    with pytest.raises(InvalidInputError):
        FeistelNetwork(CountingExpansion(), AddRoundFunction(), rounds=4, block_size=7)
    with pytest.raises(InvalidInputError):
        FeistelNetwork(CountingExpansion(), AddRoundFunction(), rounds=0)

    net = _net()
    with pytest.raises(CipherStateError):
        net.encrypt(bytes(8))

    net.set_key(b"\x00" * 4)
    with pytest.raises(InvalidInputError):
        net.encrypt(bytes(7))

    short = FeistelNetwork(CountingExpansion(2), AddRoundFunction(), rounds=4)
    with pytest.raises(InvalidInputError):
        short.set_key(b"\x00" * 4)

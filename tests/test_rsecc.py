import random

import pytest

from qrencoder.rsecc import rs_encode


def _gf_tables():
    exp = [0] * 512
    log = [0] * 256
    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= 0x11D
    for i in range(255, 512):
        exp[i] = exp[i - 255]
    return exp, log


_EXP, _LOG = _gf_tables()


def _mul(a, b):
    if a == 0 or b == 0:
        return 0
    return _EXP[_LOG[a] + _LOG[b]]


def _evaluate(codeword, point):
    result = 0
    for c in codeword:
        result = _mul(result, point) ^ c
    return result


def test_worked_example_hello_world_1m():
    data = bytes([32, 91, 11, 120, 209, 114, 220, 77, 67, 64, 236, 17, 236, 17, 236, 17])
    assert rs_encode(data, 10) == bytes([196, 35, 39, 119, 235, 215, 231, 226, 93, 23])


@pytest.mark.parametrize("ecc_length", [2, 7, 10, 17, 22, 30])
def test_codeword_has_zero_syndromes(ecc_length):
    rng = random.Random(ecc_length)
    data = bytes(rng.randrange(256) for _ in range(40))
    codeword = data + rs_encode(data, ecc_length)
    for i in range(ecc_length):
        assert _evaluate(codeword, _EXP[i]) == 0


@pytest.mark.parametrize("ecc_length", [2, 13, 30])
def test_output_length(ecc_length):
    assert len(rs_encode(b"\x01\x02\x03", ecc_length)) == ecc_length


def test_zero_data_gives_zero_ecc():
    assert rs_encode(bytes(20), 15) == bytes(15)


def test_linearity():
    rng = random.Random(7)
    a = bytes(rng.randrange(256) for _ in range(30))
    b = bytes(rng.randrange(256) for _ in range(30))
    xored = bytes(x ^ y for x, y in zip(a, b))
    ea, eb = rs_encode(a, 18), rs_encode(b, 18)
    assert rs_encode(xored, 18) == bytes(x ^ y for x, y in zip(ea, eb))


def test_repeatable():
    data = b"structured data"
    assert rs_encode(data, 26) == rs_encode(bytearray(data), 26)


@pytest.mark.parametrize("ecc_length", [31, 1, 0])
def test_unsupported_length_raises(ecc_length):
    with pytest.raises(ValueError):
        rs_encode(b"abc", ecc_length)
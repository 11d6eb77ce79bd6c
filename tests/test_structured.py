import pytest

from qrencoder.entry import MAX_STRUCTURED_SYMBOLS
from qrencoder.qrinput import DataTooLargeError, QRInput
from qrencoder.qrspec import ECLevel, Mode, data_length
from qrencoder.structured import StructuredInput, split_to_structured


def _payload(qrinput, mode=None):
    return b"".join(
        e.data for e in qrinput.entries
        if e.mode != Mode.STRUCTURE and (mode is None or e.mode == mode)
    )


def _xor(data):
    value = 0
    for b in data:
        value ^= b
    return value


def _byte_input(size, version=1, level=ECLevel.L):
    qrinput = QRInput(version, level)
    qrinput.append(Mode.BYTE, bytes((i * 7 + 3) % 256 for i in range(size)))
    return qrinput


def test_split_preserves_data():
    qrinput = _byte_input(100)
    original = _payload(qrinput)
    parts = split_to_structured(qrinput)
    assert len(parts) > 1
    assert b"".join(_payload(p) for p in parts) == original


def test_headers_carry_size_number_and_parity():
    qrinput = _byte_input(100)
    parity = _xor(_payload(qrinput))
    parts = split_to_structured(qrinput)
    total = len(parts)
    for number, part in enumerate(parts, start=1):
        head = part.entries[0]
        assert head.mode == Mode.STRUCTURE
        assert head.data == bytes((total, number, parity))
    assert parts.parity == parity


def test_parts_fit_in_requested_version():
    for level in ECLevel:
        qrinput = _byte_input(120, version=2, level=level)
        for part in split_to_structured(qrinput):
            stream = part.get_byte_stream()
            assert part.version == 2
            assert len(stream) == data_length(2, level)


def test_numeric_split_keeps_digits():
    qrinput = QRInput(1, ECLevel.M)
    digits = b"0123456789" * 20
    qrinput.append(Mode.NUM, digits)
    parts = split_to_structured(qrinput)
    assert b"".join(_payload(p, Mode.NUM) for p in parts) == digits
    for part in parts:
        part.get_bit_stream()
        assert part.version == 1


def test_small_input_gives_single_symbol_without_header():
    qrinput = _byte_input(5)
    parts = split_to_structured(qrinput)
    assert len(parts) == 1
    only = next(iter(parts))
    assert all(e.mode != Mode.STRUCTURE for e in only.entries)
    assert _payload(only) == _payload(qrinput)


def test_original_input_untouched():
    qrinput = _byte_input(100)
    before = list(qrinput.entries)
    split_to_structured(qrinput)
    assert qrinput.entries == before


def test_too_many_symbols_raises():
    with pytest.raises(DataTooLargeError):
        split_to_structured(_byte_input(1000))


def test_automatic_version_rejected():
    with pytest.raises(ValueError):
        split_to_structured(_byte_input(10, version=0))


def test_append_input_returns_size():
    s = StructuredInput()
    assert s.append_input(QRInput(1)) == 1
    assert s.append_input(QRInput(1)) == 2
    assert len(s) == 2


def test_iteration_keeps_order():
    s = StructuredInput()
    inputs = [QRInput(v) for v in (1, 2, 3)]
    for qrinput in inputs:
        s.append_input(qrinput)
    assert [q.version for q in s] == [1, 2, 3]


def test_calc_parity_is_xor_of_all_data():
    a, b = QRInput(1), QRInput(1)
    a.append(Mode.BYTE, b"abc")
    b.append(Mode.NUM, b"42")
    s = StructuredInput()
    s.append_input(a)
    s.append_input(b)
    assert s.calc_parity() == _xor(b"abc42")
    assert s.parity == _xor(b"abc42")


def test_insert_headers_single_input_is_noop():
    a = QRInput(1)
    a.append(Mode.BYTE, b"xyz")
    s = StructuredInput()
    s.append_input(a)
    s.insert_headers()
    assert [e.mode for e in a.entries] == [Mode.BYTE]
    assert s.parity is None


def test_insert_headers_uses_given_parity():
    a, b = QRInput(1), QRInput(1)
    a.append(Mode.BYTE, b"one")
    b.append(Mode.BYTE, b"two")
    s = StructuredInput()
    s.append_input(a)
    s.append_input(b)
    s.parity = 0x5A
    s.insert_headers()
    assert a.entries[0].data == bytes((2, 1, 0x5A))
    assert b.entries[0].data == bytes((2, 2, 0x5A))


def test_insert_headers_rejects_oversized_set():
    s = StructuredInput()
    for _ in range(MAX_STRUCTURED_SYMBOLS + 1):
        qrinput = QRInput(1)
        qrinput.append(Mode.BYTE, b"a")
        s.append_input(qrinput)
    with pytest.raises(ValueError):
        s.insert_headers()
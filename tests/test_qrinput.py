import pytest

from qrencoder.entry import Mode
from qrencoder.qrinput import DataTooLargeError, QRInput
from qrencoder.qrspec import ECLevel, data_length


def bits(text):
    return [int(c) for c in text if c != " "]


def test_numeric_worked_example():
    qi = QRInput(1, ECLevel.M)
    qi.append(Mode.NUM, b"01234567")
    expected = bits("0001 0000001000 0000001100 0101011001 1000011")
    assert qi.merge_bit_stream() == expected


def test_alphanumeric_worked_example():
    qi = QRInput(1, ECLevel.H)
    qi.append(Mode.AN, b"AC-42")
    expected = bits("0010 000000101 00111001110 11100111001 000010")
    assert qi.merge_bit_stream() == expected


def test_byte_stream_padding():
    qi = QRInput(1, ECLevel.M)
    qi.append(Mode.NUM, b"01234567")
    result = qi.get_byte_stream()
    assert result == b"\x10\x20\x0c\x56\x61\x80" + b"\xec\x11" * 5


def test_byte_stream_length_matches_capacity():
    qi = QRInput(0, ECLevel.Q)
    qi.append(Mode.BYTE, b"hello world")
    stream = qi.get_byte_stream()
    assert len(stream) == data_length(qi.version, qi.level)
    assert len(qi.get_bit_stream()) == len(stream) * 8


def test_version_grows_automatically():
    qi = QRInput(0, ECLevel.L)
    qi.append(Mode.BYTE, b"x" * 500)
    stream = qi.get_byte_stream()
    assert qi.version > 1
    assert len(stream) == data_length(qi.version, ECLevel.L)


def test_estimate_matches_encoded_size():
    qi = QRInput(1, ECLevel.L)
    qi.append(Mode.NUM, b"01234567")
    assert qi.estimate_bit_stream_size(1) == len(qi.merge_bit_stream())


def test_estimate_version_small():
    qi = QRInput()
    qi.append(Mode.AN, b"AC-42")
    assert qi.estimate_version() == 1


def test_too_large():
    qi = QRInput(0, ECLevel.H)
    qi.append(Mode.BYTE, b"\x00" * 3000)
    with pytest.raises(DataTooLargeError):
        qi.get_byte_stream()


def test_invalid_data_rejected():
    qi = QRInput()
    with pytest.raises(ValueError):
        qi.append(Mode.NUM, b"12a")
    with pytest.raises(ValueError):
        qi.append(Mode.BYTE, b"")
    assert qi.entries == []


@pytest.mark.parametrize("version", [-1, 41])
def test_invalid_version(version):
    qi = QRInput()
    with pytest.raises(ValueError):
        qi.set_version(version)
    with pytest.raises(ValueError):
        QRInput(version, ECLevel.L)


def test_invalid_level():
    qi = QRInput()
    with pytest.raises(ValueError):
        qi.set_level(4)
    with pytest.raises(ValueError):
        qi.set_version_and_level(1, 7)
    assert qi.level == ECLevel.L


def test_set_version_and_level():
    qi = QRInput()
    qi.set_version_and_level(5, ECLevel.H)
    assert (qi.version, qi.level) == (5, ECLevel.H)


def test_eci_header_limits():
    qi = QRInput()
    with pytest.raises(ValueError):
        qi.append_eci_header(1000000)
    qi.append_eci_header(999999)
    assert qi.entries[0].mode == Mode.ECI
    assert qi.entries[0].data == (999999).to_bytes(4, "little")


def test_structured_header_validation():
    qi = QRInput()
    with pytest.raises(ValueError):
        qi.insert_structured_append_header(17, 1, 0)
    with pytest.raises(ValueError):
        qi.insert_structured_append_header(3, 0, 0)
    with pytest.raises(ValueError):
        qi.insert_structured_append_header(3, 4, 0)
    qi.append(Mode.BYTE, b"a")
    qi.insert_structured_append_header(3, 2, 0x55)
    assert qi.entries[0].mode == Mode.STRUCTURE
    assert qi.entries[0].data == bytes((3, 2, 0x55))


def test_structured_header_encoding():
    qi = QRInput(1, ECLevel.L)
    qi.append(Mode.BYTE, b"a")
    qi.insert_structured_append_header(3, 2, 0x55)
    stream = qi.merge_bit_stream()
    assert stream[:20] == bits("0011 0001 0010 01010101")


def test_parity_cancels_and_ignores_structure():
    qi = QRInput()
    qi.append(Mode.BYTE, b"abc")
    qi.append(Mode.BYTE, b"abc")
    qi.insert_structured_append_header(2, 1, 0x7F)
    assert qi.parity() == 0
    qi.append(Mode.BYTE, b"Z")
    assert qi.parity() == ord("Z")


def test_copy_is_independent():
    qi = QRInput(3, ECLevel.Q)
    qi.append(Mode.NUM, b"123")
    dup = qi.copy()
    dup.append(Mode.NUM, b"456")
    assert len(qi.entries) == 1
    assert len(dup.entries) == 2
    assert (dup.version, dup.level) == (3, ECLevel.Q)
    assert dup.entries[0] == qi.entries[0]


def test_fnc1_first_header():
    qi = QRInput(1, ECLevel.L)
    qi.append(Mode.NUM, b"1")
    qi.set_fnc1_first()
    stream = qi.merge_bit_stream()
    assert stream[:4] == bits("0101")
    assert stream[4:8] == bits("0001")
    assert len(qi.entries) == 1


def test_fnc1_second_after_eci():
    qi = QRInput(1, ECLevel.L)
    qi.append_eci_header(3)
    qi.append(Mode.BYTE, b"a")
    qi.set_fnc1_second(0x41)
    stream = qi.merge_bit_stream()
    assert stream[:12] == bits("0111 00000011")
    assert stream[12:24] == bits("1001 01000001")


def test_fnc1_second_invalid_appid():
    qi = QRInput()
    with pytest.raises(ValueError):
        qi.set_fnc1_second(256)
    assert qi.fnc1 == 0
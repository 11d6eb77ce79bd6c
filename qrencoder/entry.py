"""Data chunks of a QR Code input and their conversion to bit sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .qrspec import (
    MODEID_8,
    MODEID_AN,
    MODEID_ECI,
    MODEID_FNC1FIRST,
    MODEID_FNC1SECOND,
    MODEID_KANJI,
    MODEID_NUM,
    MODEID_STRUCTURE,
    Mode,
    length_indicator,
    maximum_words,
)

MODE_INDICATOR_SIZE = 4
"""Length of a standard mode indicator in bits."""

STRUCTURE_HEADER_SIZE = 20
"""Length of a structured-append header segment in bits."""

MAX_STRUCTURED_SYMBOLS = 16
"""Maximum number of symbols in a structured-append set."""

# Alphanumeric conversion table (JIS X0510:2004, pp.19), indexed by ASCII code.
_AN_TABLE = (
    -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1,
    -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1,
    36, -1, -1, -1, 37, 38, -1, -1, -1, -1, 39, 40, -1, 41, 42, 43,
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 44, -1, -1, -1, -1, -1,
    -1, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21, 22, 23, 24,
    25, 26, 27, 28, 29, 30, 31, 32, 33, 34, 35, -1, -1, -1, -1, -1,
    -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1,
    -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1, -1,
)


def an_value(char: Union[int, str]) -> int:
    """Alphanumeric code of a character (byte or one-character string), or -1."""
    code = ord(char) if isinstance(char, str) else int(char)
    if code < 0 or code & ~0x7F:
        return -1
    return _AN_TABLE[code]


def is_splittable_mode(mode: int) -> bool:
    """Whether data of this mode may be split into several segments."""
    return Mode.NUM <= mode <= Mode.KANJI


def _kanji_ok(data: bytes) -> bool:
    if len(data) % 2:
        return False
    for i in range(0, len(data), 2):
        val = (data[i] << 8) | data[i + 1]
        if val < 0x8140 or 0x9FFC < val < 0xE040 or val > 0xEBBF:
            return False
    return True


def check_data(mode: int, data: bytes) -> bool:
    """Whether ``data`` is valid input for ``mode``."""
    try:
        mode = Mode(mode)
    except ValueError:
        return False
    if mode == Mode.NUL:
        return False
    if not data:
        return mode == Mode.FNC1FIRST
    if mode == Mode.NUM:
        return all(0x30 <= b <= 0x39 for b in data)
    if mode == Mode.AN:
        return all(an_value(b) >= 0 for b in data)
    if mode == Mode.KANJI:
        return _kanji_ok(data)
    if mode == Mode.FNC1SECOND:
        return len(data) == 1
    return True


@dataclass(frozen=True)
class Entry:
    """One chunk of input data in a single encoding mode."""

    mode: Mode
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", Mode(self.mode))
        object.__setattr__(self, "data", bytes(self.data))
        if not check_data(self.mode, self.data):
            raise ValueError(f"invalid data for mode {self.mode.name}")

    def split(self, size: int) -> tuple[Entry, Entry]:
        """Return two entries holding the first ``size`` bytes and the rest."""
        return Entry(self.mode, self.data[:size]), Entry(self.mode, self.data[size:])


def estimate_bits_num(size: int) -> int:
    """Bits needed for ``size`` numeric characters, without header."""
    words, rest = divmod(size, 3)
    return words * 10 + {1: 4, 2: 7}.get(rest, 0)


def estimate_bits_an(size: int) -> int:
    """Bits needed for ``size`` alphanumeric characters, without header."""
    return (size // 2) * 11 + (6 if size & 1 else 0)


def estimate_bits_8(size: int) -> int:
    """Bits needed for ``size`` bytes of 8-bit data, without header."""
    return size * 8


def estimate_bits_kanji(size: int) -> int:
    """Bits needed for ``size`` bytes of Shift-JIS kanji, without header."""
    return (size // 2) * 13


def _eci_number(data: bytes) -> int:
    return int.from_bytes(data[:4], "little")


def _estimate_bits_eci(data: bytes) -> int:
    ecinum = _eci_number(data)
    if ecinum < 128:
        return MODE_INDICATOR_SIZE + 8
    if ecinum < 16384:
        return MODE_INDICATOR_SIZE + 16
    return MODE_INDICATOR_SIZE + 24


def estimate_entry_bits(entry: Entry, version: int) -> int:
    """Estimated length in bits of the encoded entry, headers included."""
    if version == 0:
        version = 1
    size = len(entry.data)
    mode = entry.mode
    if mode == Mode.NUM:
        bits = estimate_bits_num(size)
    elif mode == Mode.AN:
        bits = estimate_bits_an(size)
    elif mode == Mode.BYTE:
        bits = estimate_bits_8(size)
    elif mode == Mode.KANJI:
        bits = estimate_bits_kanji(size)
    elif mode == Mode.STRUCTURE:
        return STRUCTURE_HEADER_SIZE
    elif mode == Mode.ECI:
        bits = _estimate_bits_eci(entry.data)
    elif mode == Mode.FNC1FIRST:
        return MODE_INDICATOR_SIZE
    elif mode == Mode.FNC1SECOND:
        return MODE_INDICATOR_SIZE + 8
    else:
        return 0

    indicator = length_indicator(mode, version)
    limit = 1 << indicator
    count = size // 2 if mode == Mode.KANJI else size
    segments = (count + limit - 1) // limit
    return bits + segments * (MODE_INDICATOR_SIZE + indicator)


def _append_num(bits: list[int], width: int, value: int) -> None:
    bits.extend((value >> i) & 1 for i in range(width - 1, -1, -1))


def _append_bytes(bits: list[int], data: bytes) -> None:
    for byte in data:
        _append_num(bits, 8, byte)


def _header(bits: list[int], modeid: int, mode: Mode, version: int, count: int) -> None:
    _append_num(bits, 4, modeid)
    _append_num(bits, length_indicator(mode, version), count)


def _encode_num(data: bytes, version: int, bits: list[int]) -> None:
    _header(bits, MODEID_NUM, Mode.NUM, version, len(data))
    digits = [b - 0x30 for b in data]
    full = len(digits) - len(digits) % 3
    for i in range(0, full, 3):
        a, b, c = digits[i:i + 3]
        _append_num(bits, 10, a * 100 + b * 10 + c)
    rest = digits[full:]
    if len(rest) == 1:
        _append_num(bits, 4, rest[0])
    elif len(rest) == 2:
        _append_num(bits, 7, rest[0] * 10 + rest[1])


def _encode_an(data: bytes, version: int, bits: list[int]) -> None:
    _header(bits, MODEID_AN, Mode.AN, version, len(data))
    values = [an_value(b) for b in data]
    full = len(values) - len(values) % 2
    for i in range(0, full, 2):
        _append_num(bits, 11, values[i] * 45 + values[i + 1])
    if len(values) % 2:
        _append_num(bits, 6, values[-1])


def _encode_8(data: bytes, version: int, bits: list[int]) -> None:
    _header(bits, MODEID_8, Mode.BYTE, version, len(data))
    _append_bytes(bits, data)


def _encode_kanji(data: bytes, version: int, bits: list[int]) -> None:
    _header(bits, MODEID_KANJI, Mode.KANJI, version, len(data) // 2)
    for i in range(0, len(data), 2):
        val = (data[i] << 8) | data[i + 1]
        val -= 0x8140 if val <= 0x9FFC else 0xC140
        val = (val & 0xFF) + (val >> 8) * 0xC0
        _append_num(bits, 13, val)


def _encode_structure(data: bytes, bits: list[int]) -> None:
    _append_num(bits, 4, MODEID_STRUCTURE)
    _append_num(bits, 4, data[1] - 1)
    _append_num(bits, 4, data[0] - 1)
    _append_num(bits, 8, data[2])


def _encode_eci(data: bytes, bits: list[int]) -> None:
    ecinum = _eci_number(data)
    if ecinum < 128:
        words, code = 1, ecinum
    elif ecinum < 16384:
        words, code = 2, 0x8000 + ecinum
    else:
        words, code = 3, 0xC0000 + ecinum
    _append_num(bits, 4, MODEID_ECI)
    _append_num(bits, words * 8, code)


def encode_entry(entry: Entry, version: int) -> list[int]:
    """Encode the entry as a list of bits, splitting oversized chunks."""
    words = maximum_words(entry.mode, version)
    if words and len(entry.data) > words:
        first, second = entry.split(words)
        return encode_entry(first, version) + encode_entry(second, version)

    bits: list[int] = []
    mode, data = entry.mode, entry.data
    if mode == Mode.NUM:
        _encode_num(data, version, bits)
    elif mode == Mode.AN:
        _encode_an(data, version, bits)
    elif mode == Mode.BYTE:
        _encode_8(data, version, bits)
    elif mode == Mode.KANJI:
        _encode_kanji(data, version, bits)
    elif mode == Mode.STRUCTURE:
        _encode_structure(data, bits)
    elif mode == Mode.ECI:
        _encode_eci(data, bits)
    elif mode == Mode.FNC1FIRST:
        _append_num(bits, 4, MODEID_FNC1FIRST)
    elif mode == Mode.FNC1SECOND:
        _append_num(bits, 4, MODEID_FNC1SECOND)
        _append_bytes(bits, data[:1])
    return bits


def length_of_code(mode: int, version: int, bits: int) -> int:
    """Number of data bytes of ``mode`` that fit into ``bits`` bits, headers included."""
    payload = bits - 4 - length_indicator(mode, version)
    if payload < 0:
        return 0
    if mode == Mode.NUM:
        chunks, rest = divmod(payload, 10)
        size = chunks * 3 + (2 if rest >= 7 else 1 if rest >= 4 else 0)
    elif mode == Mode.AN:
        chunks, rest = divmod(payload, 11)
        size = chunks * 2 + (1 if rest >= 6 else 0)
    elif mode in (Mode.BYTE, Mode.STRUCTURE):
        size = payload // 8
    elif mode == Mode.KANJI:
        size = (payload // 13) * 2
    else:
        size = 0
    maxsize = maximum_words(mode, version)
    if 0 < maxsize < size:
        size = maxsize
    return size


def bits_to_bytes(bits: list[int]) -> bytes:
    """Pack bits MSB first into bytes, padding the last byte with zeros."""
    out = bytearray()
    for start in range(0, len(bits), 8):
        chunk = bits[start:start + 8]
        value = 0
        for bit in chunk:
            value = (value << 1) | (bit & 1)
        out.append(value << (8 - len(chunk)))
    return bytes(out)
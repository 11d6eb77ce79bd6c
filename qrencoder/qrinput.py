"""Input data of a QR Code symbol and its conversion to a padded bit stream."""

from __future__ import annotations

from typing import Optional, Union

from .entry import (
    MAX_STRUCTURED_SYMBOLS,
    Entry,
    bits_to_bytes,
    encode_entry,
    estimate_entry_bits,
)
from .qrspec import VERSION_MAX, ECLevel, Mode, data_length, minimum_version

_PAD_CODEWORDS = (0xEC, 0x11)


class DataTooLargeError(ValueError):
    """The input does not fit into the largest allowed symbol."""


def _append_num(bits: list[int], width: int, value: int) -> None:
    bits.extend((value >> i) & 1 for i in range(width - 1, -1, -1))


def _check_version(version: int) -> int:
    if not 0 <= version <= VERSION_MAX:
        raise ValueError(f"invalid version: {version}")
    return version


def _check_level(level: Union[int, ECLevel]) -> ECLevel:
    try:
        return ECLevel(level)
    except ValueError:
        raise ValueError(f"invalid error correction level: {level}") from None


class QRInput:
    """Ordered list of data chunks together with the symbol version and level.

    A version of 0 lets the encoder choose the smallest version that fits.
    """

    def __init__(self, version: int = 0, level: Union[int, ECLevel] = ECLevel.L) -> None:
        self.version = _check_version(version)
        self.level = _check_level(level)
        self.entries: list[Entry] = []
        self.fnc1 = 0
        self.appid = 0

    def __repr__(self) -> str:
        return (f"QRInput(version={self.version}, level={self.level.name}, "
                f"entries={len(self.entries)})")

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def set_version(self, version: int) -> None:
        """Set the symbol version (0 selects automatically)."""
        self.version = _check_version(version)

    def set_level(self, level: Union[int, ECLevel]) -> None:
        """Set the error correction level."""
        self.level = _check_level(level)

    def set_version_and_level(self, version: int, level: Union[int, ECLevel]) -> None:
        """Set version and error correction level together."""
        version = _check_version(version)
        self.level = _check_level(level)
        self.version = version

    def set_fnc1_first(self) -> None:
        """Mark the data as FNC1 in first position (GS1)."""
        self.fnc1 = 1

    def set_fnc1_second(self, appid: int) -> None:
        """Mark the data as FNC1 in second position with an application id."""
        if not 0 <= appid <= 0xFF:
            raise ValueError(f"invalid application id: {appid}")
        self.fnc1 = 2
        self.appid = appid

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def append(self, mode: Union[int, Mode], data: Union[bytes, bytearray, str]) -> None:
        """Append a chunk of data in the given mode; raise ValueError if invalid."""
        if isinstance(data, str):
            data = data.encode("latin-1")
        self.entries.append(Entry(Mode(mode), bytes(data)))

    def append_eci_header(self, ecinum: int) -> None:
        """Append an ECI header selecting the given designator."""
        if not 0 <= ecinum <= 999999:
            raise ValueError(f"invalid ECI designator: {ecinum}")
        self.entries.append(Entry(Mode.ECI, ecinum.to_bytes(4, "little")))

    def insert_structured_append_header(self, size: int, number: int, parity: int) -> None:
        """Put a structured-append header in front of the data."""
        if size > MAX_STRUCTURED_SYMBOLS:
            raise ValueError(f"too many structured symbols: {size}")
        if number <= 0 or number > size:
            raise ValueError(f"invalid symbol number {number} of {size}")
        self.entries.insert(0, Entry(Mode.STRUCTURE, bytes((size, number, parity & 0xFF))))

    def copy(self) -> QRInput:
        """Return a new input with the same version, level and chunks."""
        duplicate = QRInput(self.version, self.level)
        duplicate.entries = list(self.entries)
        return duplicate

    def parity(self) -> int:
        """XOR of all data bytes, structured-append headers excluded."""
        value = 0
        for entry in self.entries:
            if entry.mode != Mode.STRUCTURE:
                for byte in entry.data:
                    value ^= byte
        return value

    # ------------------------------------------------------------------
    # Estimation
    # ------------------------------------------------------------------

    @staticmethod
    def _estimate_size(entries: list[Entry], version: int) -> int:
        return sum(estimate_entry_bits(entry, version) for entry in entries)

    def _estimate_version(self, entries: list[Entry]) -> int:
        version = 0
        while True:
            prev = version
            bits = self._estimate_size(entries, prev)
            version = minimum_version((bits + 7) // 8, self.level)
            if prev == 0 and version > 1:
                version -= 1
            if version <= prev:
                return version

    def estimate_bit_stream_size(self, version: int) -> int:
        """Estimated length in bits of the encoded data at ``version``."""
        return self._estimate_size(self.entries, version)

    def estimate_version(self) -> int:
        """Estimated smallest version able to hold the data."""
        return self._estimate_version(self.entries)

    # ------------------------------------------------------------------
    # Bit stream
    # ------------------------------------------------------------------

    def _entries_with_fnc1(self) -> list[Entry]:
        entries = list(self.entries)
        if self.fnc1 == 1:
            header: Optional[Entry] = Entry(Mode.FNC1FIRST, b"")
        elif self.fnc1 == 2:
            header = Entry(Mode.FNC1SECOND, bytes((self.appid,)))
        else:
            return entries
        if entries and entries[0].mode in (Mode.STRUCTURE, Mode.ECI):
            entries.insert(1, header)
        else:
            entries.insert(0, header)
        return entries

    def _create_bits(self, entries: list[Entry]) -> list[int]:
        bits: list[int] = []
        for entry in entries:
            bits.extend(encode_entry(entry, self.version))
        return bits

    def merge_bit_stream(self) -> list[int]:
        """Encode all chunks into one bit list, raising the version as needed."""
        entries = self._entries_with_fnc1()
        version = self._estimate_version(entries)
        if version > self.version:
            self.version = version
        while True:
            bits = self._create_bits(entries)
            version = minimum_version((len(bits) + 7) // 8, self.level)
            if version > self.version:
                self.version = version
            else:
                return bits

    def _append_padding(self, bits: list[int]) -> None:
        maxwords = data_length(self.version, self.level)
        maxbits = maxwords * 8
        size = len(bits)
        if maxbits < size:
            raise DataTooLargeError("input data is too large")
        if maxbits == size:
            return
        if maxbits - size <= 4:
            _append_num(bits, maxbits - size, 0)
            return
        words = (size + 4 + 7) // 8
        _append_num(bits, words * 8 - size, 0)
        for i in range(maxwords - words):
            _append_num(bits, 8, _PAD_CODEWORDS[i & 1])

    def get_bit_stream(self) -> list[int]:
        """Encoded data followed by terminator and padding codewords."""
        bits = self.merge_bit_stream()
        self._append_padding(bits)
        return bits

    def get_byte_stream(self) -> bytes:
        """Padded data codewords of the symbol."""
        return bits_to_bytes(self.get_bit_stream())
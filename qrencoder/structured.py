"""Structured-append sets of QR Code inputs."""

from __future__ import annotations

from typing import Iterator, Optional

from .entry import (
    MAX_STRUCTURED_SYMBOLS,
    STRUCTURE_HEADER_SIZE,
    Entry,
    encode_entry,
    estimate_entry_bits,
    length_of_code,
)
from .qrinput import DataTooLargeError, QRInput
from .qrspec import data_length


class StructuredInput:
    """An ordered set of inputs to be encoded as structured-append symbols."""

    def __init__(self) -> None:
        self.inputs: list[QRInput] = []
        self.parity: Optional[int] = None

    def __repr__(self) -> str:
        return f"StructuredInput(size={len(self.inputs)}, parity={self.parity})"

    def append_input(self, qrinput: QRInput) -> int:
        """Add an input to the set and return the new number of inputs."""
        self.inputs.append(qrinput)
        return len(self.inputs)

    def calc_parity(self) -> int:
        """Compute, store and return the parity over all inputs."""
        value = 0
        for qrinput in self.inputs:
            value ^= qrinput.parity()
        self.parity = value
        return value

    def insert_headers(self) -> None:
        """Put a structured-append header in front of every input of the set."""
        if len(self.inputs) == 1:
            return
        if self.parity is None:
            self.calc_parity()
        total = len(self.inputs)
        for number, qrinput in enumerate(self.inputs, start=1):
            qrinput.insert_structured_append_header(total, number, self.parity)

    def __len__(self) -> int:
        return len(self.inputs)

    def __iter__(self) -> Iterator[QRInput]:
        return iter(self.inputs)


def split_to_structured(qrinput: QRInput) -> StructuredInput:
    """Split an input into a structured-append set at the input's fixed version.

    The original input is left unchanged.
    """
    source = qrinput.copy()
    result = StructuredInput()
    result.parity = source.parity()

    version, level = source.version, source.level
    maxbits = data_length(version, level) * 8 - STRUCTURE_HEADER_SIZE
    if maxbits <= 0:
        raise ValueError("version too small to split the input")

    def new_part() -> QRInput:
        return QRInput(version, level)

    pending: list[Entry] = list(source.entries)
    current = new_part()
    bits = 0
    while pending:
        entry = pending[0]
        nextbits = estimate_entry_bits(entry, version)
        if bits + nextbits <= maxbits:
            bits += len(encode_entry(entry, version))
            current.entries.append(pending.pop(0))
            continue

        size = length_of_code(entry.mode, version, maxbits - bits)
        if size > 0:
            first, second = entry.split(size)
            current.entries.append(first)
            pending[0] = second
        elif not current.entries:
            raise ValueError("a chunk does not fit into one symbol")
        result.append_input(current)
        current = new_part()
        bits = 0

    result.append_input(current)
    if len(result) > MAX_STRUCTURED_SYMBOLS:
        raise DataTooLargeError("input data needs too many structured symbols")
    result.insert_headers()
    return result
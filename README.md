# qrencoder

A pure Python library for the data side of QR Code encoding. It turns input
data into the codeword stream a QR Code symbol carries and provides the
tables and building blocks for laying that stream out in a symbol.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

Tests need pytest:

```
pip install .[test]
pytest
```

## Modules

- `qrencoder.qrspec` – tables for versions 1–40: `data_length`, `ecc_length`,
  `minimum_version`, `width`, `remainder`, `length_indicator`,
  `maximum_words`, `ecc_spec` (returning an `EccSpec`), `version_pattern`,
  `format_info` and `new_frame`; the enums `ECLevel` (L, M, Q, H) and `Mode`
  (NUM, AN, BYTE, KANJI, STRUCTURE, ECI, FNC1FIRST, FNC1SECOND).
- `qrencoder.entry` – the `Entry` data chunk, validation (`check_data`,
  `an_value`), bit-length estimates and `encode_entry`, which turns one chunk
  into a list of bits; `bits_to_bytes` packs bits MSB first.
- `qrencoder.qrinput` – `QRInput`, an ordered list of chunks with version and
  level, and `DataTooLargeError`.
- `qrencoder.rsecc` – `rs_encode`, Reed-Solomon check bytes over GF(256).
- `qrencoder.structured` – `StructuredInput` and `split_to_structured` for
  structured-append sets.

## Building a data codeword stream

```python
from qrencoder.qrinput import QRInput
from qrencoder.qrspec import ECLevel, Mode

qr = QRInput(0, ECLevel.M)        # version 0: choose the smallest that fits
qr.append(Mode.NUM, b"01234567")
qr.append(Mode.AN, b"HELLO WORLD")

codewords = qr.get_byte_stream()  # data codewords padded to the capacity
print(qr.version)                 # the version chosen for the data
```

`append` raises `ValueError` when the data does not belong to the mode (for
example a letter in numeric mode, or an odd number of bytes in Kanji mode).
Other chunks can be added with `append_eci_header(ecinum)`,
`set_fnc1_first()` and `set_fnc1_second(appid)`.

While encoding, the version is raised as far as the data requires.
`DataTooLargeError` is raised only when the data does not fit even into the
largest version at the chosen level.

`estimate_version()` reports the version the data would need,
`estimate_bit_stream_size(version)` the estimated length in bits,
`merge_bit_stream()` the encoded bits without padding, and
`get_bit_stream()` the padded stream as bits before packing into bytes.

## Error correction

```python
from qrencoder.qrspec import ECLevel, ecc_spec
from qrencoder.rsecc import rs_encode

spec = ecc_spec(5, ECLevel.Q)
print(spec.block_count(), spec.data_length(), spec.ecc_length())  # 4 62 72

block = bytes(range(spec.data_codes1))       # 15 data codewords of one block
ecc = rs_encode(block, spec.ecc_codes)       # 18 check bytes
```

`rs_encode` accepts ECC lengths from 2 to 30 and raises `ValueError` for
others.

## Frames and tables

```python
from qrencoder import qrspec
from qrencoder.qrspec import ECLevel

frame = qrspec.new_frame(7)                  # width * width cells, row-major
print(qrspec.width(7))                       # 45
print(hex(qrspec.version_pattern(7)))        # 0x7c94
print(hex(qrspec.format_info(0, ECLevel.L))) # 0x77c4
```

Each cell of a frame carries the module colour in its lowest bit; the bit
0x80 marks cells that belong to function patterns (finders, separators,
timing, alignment, format and version areas) and are not available for data.

## Structured append

```python
from qrencoder.qrinput import QRInput
from qrencoder.qrspec import ECLevel, Mode
from qrencoder.structured import split_to_structured

qr = QRInput(1, ECLevel.L)
qr.append(Mode.AN, b"A LONGER MESSAGE THAT DOES NOT FIT INTO ONE SMALL SYMBOL")

symbols = split_to_structured(qr)
print(len(symbols), symbols.parity)
for part in symbols:
    data = part.get_byte_stream()
```

`split_to_structured` splits at the input's own version, which must be set
(version 0 raises `ValueError`); the input passed in is left unchanged. When
the set has more than one part, each part receives a structured-append header
with its position, the total count and the parity over the whole input. More
than 16 parts raise `DataTooLargeError`.

## What this package does not do

It stops at the data codewords, their error correction and the empty frame.
It does not interleave blocks, place bits into the frame, choose or apply a
mask, or write format information into a symbol, so it does not produce a
finished QR Code matrix. It renders no images, has no command-line tool, and
does not handle Micro QR Code symbols.
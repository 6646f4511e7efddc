"""Reading and writing uncompressed grey-scale TIFF files.

Only single-strip, 4 or 8 bit images are handled, which is what
:func:`create_allocate_tiff_file` produces.
"""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import BinaryIO

Image = list[list[int]]

STRIP_OFFSET = 296
"""Byte offset of the image data in files made by this module."""

_X_RESOLUTION_OFFSET = 230
_Y_RESOLUTION_OFFSET = 238
_SOFTWARE_OFFSET = 246
_SOFTWARE_FIELD_SIZE = 50
_SOFTWARE = b"cipskit Image Processing System"

_TAG_IMAGE_WIDTH = 256
_TAG_IMAGE_LENGTH = 257
_TAG_BITS_PER_SAMPLE = 258
_TAG_STRIP_OFFSETS = 273
_WANTED_TAGS = {
    _TAG_IMAGE_WIDTH: "image_width",
    _TAG_IMAGE_LENGTH: "image_length",
    _TAG_BITS_PER_SAMPLE: "bits_per_pixel",
    _TAG_STRIP_OFFSETS: "strip_offset",
}

_TYPE_ASCII = 2
_TYPE_SHORT = 3
_TYPE_LONG = 4
_TYPE_RATIONAL = 5


@dataclass
class TiffHeader:
    """The parts of a TIFF header needed to read and write image data."""

    image_length: int
    image_width: int
    bits_per_pixel: int = 8
    lsb: bool = True
    strip_offset: int = STRIP_OFFSET


def _order(lsb: bool) -> str:
    return "<" if lsb else ">"


def extract_long(buffer, lsb, start):
    """Return the signed 32-bit integer at ``start`` in ``buffer``."""
    return struct.unpack_from(_order(lsb) + "i", buffer, start)[0]


def extract_ulong(buffer, lsb, start):
    """Return the unsigned 32-bit integer at ``start`` in ``buffer``."""
    return struct.unpack_from(_order(lsb) + "I", buffer, start)[0]


def extract_short(buffer, lsb, start):
    """Return the signed 16-bit integer at ``start`` in ``buffer``."""
    return struct.unpack_from(_order(lsb) + "h", buffer, start)[0]


def extract_ushort(buffer, lsb, start):
    """Return the unsigned 16-bit integer at ``start`` in ``buffer``."""
    return struct.unpack_from(_order(lsb) + "H", buffer, start)[0]


def insert_short(buffer, start, number):
    """Store ``number`` as two little-endian bytes, truncating to 16 bits."""
    struct.pack_into("<H", buffer, start, number & 0xFFFF)


def insert_ushort(buffer, start, number):
    """Store ``number`` as two little-endian bytes, truncating to 16 bits."""
    struct.pack_into("<H", buffer, start, number & 0xFFFF)


def insert_long(buffer, start, number):
    """Store ``number`` as four little-endian bytes, truncating to 32 bits."""
    struct.pack_into("<I", buffer, start, number & 0xFFFFFFFF)


def insert_ulong(buffer, start, number):
    """Store ``number`` as four little-endian bytes, truncating to 32 bits."""
    struct.pack_into("<I", buffer, start, number & 0xFFFFFFFF)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise ValueError("unexpected end of TIFF file")
    return data


def read_tiff_header(path):
    """Read width, length, bit depth, strip offset and byte order of a TIFF."""
    with open(path, "rb") as stream:
        head = _read_exact(stream, 8)
        lsb = head[0] == 0x49
        offset = extract_ulong(head, lsb, 4)
        fields: dict[str, int] = {}
        visited: set[int] = set()

        while offset:
            if offset in visited:
                raise ValueError("TIFF image file directories form a loop")
            visited.add(offset)
            stream.seek(offset)
            count = extract_ushort(_read_exact(stream, 2), lsb, 0)
            for _ in range(count):
                entry = _read_exact(stream, 12)
                name = _WANTED_TAGS.get(extract_ushort(entry, lsb, 0))
                if name is None:
                    continue
                if extract_ushort(entry, lsb, 2) == _TYPE_SHORT:
                    fields[name] = extract_ushort(entry, lsb, 8)
                else:
                    fields[name] = extract_ulong(entry, lsb, 8)
            offset = extract_ulong(_read_exact(stream, 4), lsb, 0)

    missing = sorted(set(_WANTED_TAGS.values()) - fields.keys())
    if missing:
        raise ValueError(f"TIFF header lacks {', '.join(missing)}")
    return TiffHeader(lsb=lsb, **fields)


def _bytes_per_line(header: TiffHeader) -> int:
    if header.bits_per_pixel not in (4, 8):
        raise ValueError(
            f"unsupported bits per pixel: {header.bits_per_pixel}"
        )
    return header.image_width // (8 // header.bits_per_pixel)


def _decode_line(data: bytes, header: TiffHeader) -> list[int]:
    if header.bits_per_pixel == 8:
        values = list(data)
    else:
        values = [nibble for byte in data for nibble in (byte >> 4, byte & 0x0F)]
    values.extend([0] * (header.image_width - len(values)))
    return values


def _encode_line(row, header: TiffHeader, size: int) -> bytes:
    if header.bits_per_pixel == 8:
        return bytes(value & 0xFF for value in row[:size])
    pixels = row[: size * 2]
    return bytes(
        ((first & 0x0F) << 4) | (second & 0x0F)
        for first, second in zip(pixels[0::2], pixels[1::2])
    )


def read_tiff_image(path):
    """Return the pixels of a TIFF file as a list of rows."""
    header = read_tiff_header(path)
    size = _bytes_per_line(header)
    with open(path, "rb") as stream:
        stream.seek(header.strip_offset)
        return [
            _decode_line(stream.read(size), header)
            for _ in range(header.image_length)
        ]


def write_tiff_image(path, image):
    """Write ``image`` into the data area of an existing TIFF file."""
    header = read_tiff_header(path)
    size = _bytes_per_line(header)
    if len(image) < header.image_length:
        raise ValueError(
            f"image has {len(image)} rows, file needs {header.image_length}"
        )
    rows = image[: header.image_length]
    if any(len(row) < header.image_width for row in rows):
        raise ValueError(f"image rows must hold {header.image_width} pixels")
    with open(path, "r+b") as stream:
        stream.seek(header.strip_offset)
        for row in rows:
            stream.write(_encode_line(row, header, size))


def _ifd_entry(tag: int, field_type: int, count: int, value: int) -> bytes:
    mask = 0xFFFF if field_type == _TYPE_SHORT else 0xFFFFFFFF
    return struct.pack("<HHII", tag, field_type, count, value & mask)


def create_allocate_tiff_file(path, header):
    """Create a blank little-endian TIFF file shaped like ``header``."""
    width = header.image_width
    length = header.image_length
    bits = header.bits_per_pixel
    entries = [
        (254, _TYPE_SHORT, 1, 0),
        (255, _TYPE_SHORT, 1, 1),
        (_TAG_IMAGE_WIDTH, _TYPE_SHORT, 1, width),
        (_TAG_IMAGE_LENGTH, _TYPE_SHORT, 1, length),
        (_TAG_BITS_PER_SAMPLE, _TYPE_SHORT, 1, bits),
        (259, _TYPE_SHORT, 1, 1),
        (262, _TYPE_SHORT, 1, 1),
        (_TAG_STRIP_OFFSETS, _TYPE_SHORT, 1, STRIP_OFFSET),
        (277, _TYPE_SHORT, 1, 1),
        (278, _TYPE_LONG, 1, 0xFFFFFFFF),
        (279, _TYPE_LONG, 1, length * width),
        (280, _TYPE_SHORT, 1, 0),
        (281, _TYPE_SHORT, 1, 255 if bits == 8 else 15),
        (282, _TYPE_RATIONAL, 1, _X_RESOLUTION_OFFSET),
        (283, _TYPE_RATIONAL, 1, _Y_RESOLUTION_OFFSET),
        (284, _TYPE_SHORT, 1, 1),
        (296, _TYPE_SHORT, 1, 2),
        (305, _TYPE_ASCII, _SOFTWARE_FIELD_SIZE, _SOFTWARE_OFFSET),
    ]
    prefix = b"".join(
        [
            b"II\x2a\x00\x08\x00\x00\x00",
            struct.pack("<H", len(entries)),
            *(_ifd_entry(*entry) for entry in entries),
            struct.pack("<I", 0),
            struct.pack("<II", 300, 1),
            struct.pack("<II", 300, 1),
            _SOFTWARE.ljust(_SOFTWARE_FIELD_SIZE, b"\x00"),
        ]
    )
    line = bytes(width // 2 if bits == 4 else width)
    with open(path, "wb") as stream:
        stream.write(prefix)
        for _ in range(length):
            stream.write(line)


def create_tiff_file_if_needed(in_path, out_path):
    """Create ``out_path`` patterned on ``in_path`` unless it exists.

    Returns True when a file was created.
    """
    if os.path.exists(out_path):
        return False
    create_allocate_tiff_file(out_path, read_tiff_header(in_path))
    return True
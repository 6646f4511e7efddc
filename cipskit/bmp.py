"""Reading and writing 8-bit grey-scale Windows BMP files."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, replace

Image = list[list[int]]

BMP_SIGNATURE = 0x4D42
"""The file type word, ``BM`` read little-endian."""

FILE_HEADER_SIZE = 14
BITMAP_HEADER_SIZE = 40
COLOR_TABLE_OFFSET = FILE_HEADER_SIZE + BITMAP_HEADER_SIZE
GRAY_LEVELS = 256

_FILE_HEADER = struct.Struct("<HIhhI")
_BITMAP_HEADER = struct.Struct("<IiiHHIIIIII")


@dataclass
class BmpFileHeader:
    """The 14-byte header at the start of every BMP file."""

    filetype: int = BMP_SIGNATURE
    filesize: int = 0
    reserved1: int = 0
    reserved2: int = 0
    bitmapoffset: int = 0


@dataclass
class BitmapHeader:
    """The 40-byte bitmap information header that follows the file header.

    A positive height means the rows are stored bottom-up, a negative
    height means they are stored top-down.
    """

    width: int
    height: int
    size: int = BITMAP_HEADER_SIZE
    planes: int = 1
    bitsperpixel: int = 8
    compression: int = 0
    sizeofbitmap: int = 0
    horzres: int = 300
    vertres: int = 300
    colorsused: int = GRAY_LEVELS
    colorsimp: int = GRAY_LEVELS


@dataclass(frozen=True)
class ColorEntry:
    """One entry of a BMP colour table."""

    blue: int
    green: int
    red: int


def calculate_pad(width):
    """Return the bytes of padding that end each row of ``width`` pixels."""
    remainder = width % 4
    return 0 if remainder == 0 else 4 - remainder


def flip_image_array(image):
    """Return ``image`` flipped about its horizontal mid-line."""
    return [list(row) for row in reversed(image)]


def _read_at(path, offset: int, size: int, what: str) -> bytes:
    with open(path, "rb") as stream:
        stream.seek(offset)
        data = stream.read(size)
    if len(data) != size:
        raise ValueError(f"BMP file is too short to hold its {what}")
    return data


def read_bmp_file_header(path):
    """Read the 14-byte file header of a BMP file."""
    data = _read_at(path, 0, FILE_HEADER_SIZE, "file header")
    filetype, filesize, reserved1, reserved2, offset = _FILE_HEADER.unpack(data)
    return BmpFileHeader(filetype, filesize, reserved1, reserved2, offset)


def read_bm_header(path):
    """Read the 40-byte bitmap header of a BMP file."""
    data = _read_at(path, FILE_HEADER_SIZE, BITMAP_HEADER_SIZE, "bitmap header")
    (
        size,
        width,
        height,
        planes,
        bitsperpixel,
        compression,
        sizeofbitmap,
        horzres,
        vertres,
        colorsused,
        colorsimp,
    ) = _BITMAP_HEADER.unpack(data)
    return BitmapHeader(
        width=width,
        height=height,
        size=size,
        planes=planes,
        bitsperpixel=bitsperpixel,
        compression=compression,
        sizeofbitmap=sizeofbitmap,
        horzres=horzres,
        vertres=vertres,
        colorsused=colorsused,
        colorsimp=colorsimp,
    )


def read_color_table(path, size):
    """Read ``size`` entries of the colour table of a BMP file."""
    data = _read_at(path, COLOR_TABLE_OFFSET, size * 4, "colour table")
    return [
        ColorEntry(blue, green, red)
        for blue, green, red, _ in struct.iter_unpack("4B", data)
    ]


def read_bmp_image(path):
    """Return the pixels of an 8-bit BMP file as rows, top row first.

    Each pixel is the blue component of its colour table entry.
    """
    file_header = read_bmp_file_header(path)
    bmheader = read_bm_header(path)
    if bmheader.bitsperpixel != 8:
        raise ValueError("cannot read image when bits per pixel is not 8")

    table = read_color_table(path, bmheader.colorsused or GRAY_LEVELS)
    width = bmheader.width
    height = abs(bmheader.height)
    stride = width + calculate_pad(width)

    with open(path, "rb") as stream:
        stream.seek(file_header.bitmapoffset)
        data = stream.read(stride * height)
    needed = stride * (height - 1) + width if height else 0
    if len(data) < needed:
        raise ValueError("BMP file is too short to hold its pixel data")

    def lookup(index: int) -> int:
        try:
            return table[index].blue
        except IndexError:
            raise ValueError(
                f"pixel value {index} lies outside the colour table"
            ) from None

    rows = [
        [lookup(byte) for byte in data[start : start + width]]
        for start in range(0, stride * height, stride)
    ]
    if bmheader.height >= 0:
        rows = flip_image_array(rows)
    return rows


def create_allocate_bmp_file(path, bmheader):
    """Create a blank 8-bit BMP file with the width and height of ``bmheader``.

    Returns the file header and bitmap header that were written.
    """
    pad = calculate_pad(bmheader.width)
    bitmap = replace(
        bmheader,
        size=BITMAP_HEADER_SIZE,
        planes=1,
        bitsperpixel=8,
        compression=0,
        sizeofbitmap=abs(bmheader.height) * (bmheader.width + pad),
        horzres=300,
        vertres=300,
        colorsused=GRAY_LEVELS,
        colorsimp=GRAY_LEVELS,
    )
    offset = FILE_HEADER_SIZE + bitmap.size + bitmap.colorsused * 4
    file_header = BmpFileHeader(
        filetype=BMP_SIGNATURE,
        filesize=offset + bitmap.sizeofbitmap,
        reserved1=0,
        reserved2=0,
        bitmapoffset=offset,
    )

    with open(path, "wb") as stream:
        stream.write(
            _FILE_HEADER.pack(
                file_header.filetype,
                file_header.filesize,
                file_header.reserved1,
                file_header.reserved2,
                file_header.bitmapoffset,
            )
        )
        stream.write(
            _BITMAP_HEADER.pack(
                bitmap.size,
                bitmap.width,
                bitmap.height,
                bitmap.planes,
                bitmap.bitsperpixel,
                bitmap.compression,
                bitmap.sizeofbitmap,
                bitmap.horzres,
                bitmap.vertres,
                bitmap.colorsused,
                bitmap.colorsimp,
            )
        )
        stream.write(bytes(GRAY_LEVELS * 4))
        stream.write(bytes(bitmap.sizeofbitmap))
    return file_header, bitmap


def write_bmp_image(path, image):
    """Write ``image`` and a grey-scale colour table into an existing BMP."""
    file_header = read_bmp_file_header(path)
    bmheader = read_bm_header(path)
    if bmheader.bitsperpixel != 8:
        raise ValueError("cannot write image when bits per pixel is not 8")

    width = bmheader.width
    height = abs(bmheader.height)
    if len(image) < height:
        raise ValueError(f"image has {len(image)} rows, file needs {height}")
    rows = image[:height]
    if any(len(row) < width for row in rows):
        raise ValueError(f"image rows must hold {width} pixels")
    if bmheader.height > 0:
        rows = rows[::-1]

    color_table = b"".join(
        bytes((level & 0xFF, level & 0xFF, level & 0xFF, 0))
        for level in range(bmheader.colorsused)
    )
    padding = bytes(calculate_pad(width))

    with open(path, "r+b") as stream:
        stream.seek(COLOR_TABLE_OFFSET)
        stream.write(color_table)
        stream.seek(file_header.bitmapoffset)
        for row in rows:
            stream.write(bytes(value & 0xFF for value in row[:width]))
            stream.write(padding)


def create_bmp_file_if_needed(in_path, out_path):
    """Create ``out_path`` patterned on ``in_path`` unless it exists.

    Returns True when a file was created.
    """
    if os.path.exists(out_path):
        return False
    create_allocate_bmp_file(out_path, read_bm_header(in_path))
    return True
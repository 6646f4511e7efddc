"""Format-independent access to TIFF and BMP image files.

The format of a file is decided by its name (``.tif`` or ``.bmp``) and
confirmed by the signature at the start of its contents.
"""

from __future__ import annotations

import os
from dataclasses import replace

from cipskit.bmp import (
    BMP_SIGNATURE,
    create_allocate_bmp_file,
    create_bmp_file_if_needed,
    read_bm_header,
    read_bmp_file_header,
    read_bmp_image,
    write_bmp_image,
)
from cipskit.tiff import (
    create_allocate_tiff_file,
    create_tiff_file_if_needed,
    read_tiff_header,
    read_tiff_image,
    write_tiff_image,
)

Image = list[list[int]]

_TIFF_SIGNATURES = (b"II\x2a\x00", b"MM\x00\x2a")


class ImageFormatError(ValueError):
    """Raised when a file is neither a TIFF nor a BMP image."""

    def __init__(self, path, action: str = "use") -> None:
        super().__init__(f"could not {action} file {os.fspath(path)}")
        self.path = path


def allocate_image_array(length, width, fill=0):
    """Return ``length`` rows of ``width`` pixels, all set to ``fill``."""
    return [[fill] * width for _ in range(length)]


def does_not_exist(path):
    """Return True when no readable file is found at ``path``."""
    try:
        with open(path, "rb"):
            return False
    except OSError:
        return True


def is_a_bmp(path):
    """Return True when ``path`` names a ``.bmp`` file with a BMP signature."""
    if ".bmp" not in os.fspath(path):
        return False
    try:
        return read_bmp_file_header(path).filetype == BMP_SIGNATURE
    except (OSError, ValueError):
        return False


def is_a_tiff(path):
    """Return True when ``path`` names a ``.tif`` file with a TIFF signature."""
    if ".tif" not in os.fspath(path):
        return False
    try:
        with open(path, "rb") as stream:
            head = stream.read(4)
    except OSError:
        return False
    return head in _TIFF_SIGNATURES


def get_image_size(path):
    """Return ``(rows, cols)`` of a TIFF or BMP image."""
    if is_a_tiff(path):
        header = read_tiff_header(path)
        return header.image_length, header.image_width
    if is_a_bmp(path):
        header = read_bm_header(path)
        return abs(header.height), header.width
    raise ImageFormatError(path, "find the size of")


def get_bitsperpixel(path):
    """Return the bits per pixel of a TIFF or BMP image."""
    if is_a_tiff(path):
        return read_tiff_header(path).bits_per_pixel
    if is_a_bmp(path):
        return read_bm_header(path).bitsperpixel
    raise ImageFormatError(path, "find the bits per pixel of")


def get_lsb(path):
    """Return True when the image stores its numbers least significant byte first.

    BMP files always do; TIFF files say so in their header. Anything else
    gives False.
    """
    if is_a_bmp(path):
        return True
    if is_a_tiff(path):
        return bool(read_tiff_header(path).lsb)
    return False


def read_image_array(path):
    """Return the pixels of a TIFF or BMP image as a list of rows."""
    if is_a_tiff(path):
        return read_tiff_image(path)
    if is_a_bmp(path):
        return read_bmp_image(path)
    raise ImageFormatError(path, "read")


def write_image_array(path, image):
    """Write ``image`` into an existing TIFF or BMP file."""
    if is_a_tiff(path):
        write_tiff_image(path, image)
    elif is_a_bmp(path):
        write_bmp_image(path, image)
    else:
        raise ImageFormatError(path, "write")


def create_image_file(in_path, out_path):
    """Create a blank image at ``out_path`` shaped like ``in_path``."""
    if is_a_tiff(in_path):
        create_allocate_tiff_file(out_path, read_tiff_header(in_path))
    elif is_a_bmp(in_path):
        create_allocate_bmp_file(out_path, read_bm_header(in_path))
    else:
        raise ImageFormatError(in_path, "pattern an image on")


def create_resized_image_file(in_path, out_path, length, width):
    """Create a blank image like ``in_path`` but ``length`` by ``width``."""
    if is_a_tiff(in_path):
        header = replace(
            read_tiff_header(in_path), image_length=length, image_width=width
        )
        create_allocate_tiff_file(out_path, header)
    elif is_a_bmp(in_path):
        header = replace(read_bm_header(in_path), height=length, width=width)
        create_allocate_bmp_file(out_path, header)
    else:
        raise ImageFormatError(in_path, "pattern an image on")


def create_file_if_needed(in_path, out_path):
    """Create ``out_path`` patterned on ``in_path`` unless it already exists.

    Returns True when a file was created.
    """
    if is_a_tiff(in_path):
        return create_tiff_file_if_needed(in_path, out_path)
    if is_a_bmp(in_path):
        return create_bmp_file_if_needed(in_path, out_path)
    raise ImageFormatError(in_path, "pattern an image on")


def are_not_same_size(path1, path2):
    """Return True when the two images differ in rows or columns."""
    return get_image_size(path1) != get_image_size(path2)
"""A simple isometric view of an image treated as a height map.

The rows of the image are slanted sideways by an angle and every pixel is
drawn as a vertical line whose height follows its value.
"""

from __future__ import annotations

import argparse
import math
import struct
import sys
from typing import Optional, Sequence

from cipskit.imageio import (
    create_resized_image_file,
    does_not_exist,
    get_image_size,
    read_image_array,
    write_image_array,
)

FILL = 200
FILL2 = 150
MORE_ROWS = 100
DEGREES_PER_RADIAN = 57.29577952


def _f32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _height_scale(image) -> float:
    highest = max((value for row in image for value in row), default=0)
    highest = max(highest, 0)
    scale = _f32(highest / MORE_ROWS) if highest > MORE_ROWS else float(highest)
    return max(scale, 1.0)


def lineup(image, start_row, end_row, column):
    """Draw a vertical line in ``column`` from ``start_row`` up to ``end_row``.

    The rows strictly above ``end_row`` down to ``start_row`` are set to
    ``FILL2``; ``end_row`` itself is left alone.
    """
    for row in range(start_row, end_row, -1):
        image[row][column] = FILL2


def isometric(image, theta, space, value):
    """Return an isometric drawing of ``image``.

    ``theta`` is the slant in whole degrees, plus or minus, and should stay
    clear of 90. Only every ``space``-th row is drawn. When ``value`` is 0
    the top of each line is a black dot, otherwise it takes the pixel value.
    The result has 200 more rows than ``image`` and is wider by the slant.
    """
    if space <= 0:
        raise ValueError("space must be a positive number of rows")
    length1 = len(image)
    width1 = len(image[0]) if length1 else 0
    if length1 == 0 or width1 == 0:
        raise ValueError("image must not be empty")
    if any(len(row) < width1 for row in image):
        raise ValueError("image rows must all have the same length")

    tantheta = math.tan(theta / DEGREES_PER_RADIAN)
    bigxshift = abs(int(tantheta * length1))
    length2 = length1 + 2 * MORE_ROWS
    width2 = width1 + bigxshift
    out = [[FILL] * width2 for _ in range(length2)]
    scale = _height_scale(image)

    for i, row in enumerate(image):
        if i % space != 0:
            continue
        ii = i + MORE_ROWS
        xshift = int(tantheta * i)
        offset = xshift if theta > 0 else bigxshift + xshift
        for j, pixel in enumerate(row[:width1]):
            jj = j + offset
            out[ii][jj] = pixel
            height = int(_f32(pixel / scale))
            lineup(out, ii, ii - height, jj)
            out[ii - height][jj] = 0 if value == 0 else pixel
    return out


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="iso",
        description="Draw an isometric view of an image with slanted rows.",
    )
    parser.add_argument("in_file")
    parser.add_argument("out_file")
    parser.add_argument(
        "theta", type=int,
        help="slant in integer degrees plus or minus (stay away from 90)",
    )
    parser.add_argument(
        "space", type=int, help="spacing of the rows drawn on the output"
    )
    parser.add_argument(
        "value", type=int,
        help="0 puts black dots on top, 1 uses the image values",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Draw the isometric view of the input image into the output file."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if does_not_exist(args.in_file):
        print(f"ERROR input file {args.in_file} does not exist", file=sys.stderr)
        return 1

    image = read_image_array(args.in_file)
    out = isometric(image, args.theta, args.space, args.value)
    length1, _ = get_image_size(args.in_file)
    create_resized_image_file(
        args.in_file, args.out_file, len(out), len(out[0])
    )
    write_image_array(args.out_file, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""An isometric view of an image treated as a height map.

The image plane is turned so that its rows run down at one angle and its
columns run up at another, and every pixel is drawn as a vertical line
whose height follows its value.
"""

from __future__ import annotations

import argparse
import math
import sys
from typing import Optional, Sequence

from cipskit.imageio import (
    create_resized_image_file,
    does_not_exist,
    read_image_array,
    write_image_array,
)
from cipskit.iso import (
    DEGREES_PER_RADIAN,
    FILL,
    MORE_ROWS,
    _f32,
    _height_scale,
    lineup,
)


def _check_inside(out, row: int, col: int) -> None:
    if not (0 <= row < len(out) and 0 <= col < len(out[0])):
        raise ValueError(
            f"the angles place pixel ({row}, {col}) outside the output image"
        )


def isometric3d(image, alpha, beta, space, value):
    """Return an isometric drawing of ``image``.

    ``alpha`` is the angle in whole degrees that the rows run down from the
    horizontal and ``beta`` the angle the columns run up. Only every
    ``space``-th row is drawn. When ``value`` is 0 the top of each line is a
    black dot, otherwise it takes the pixel value.
    """
    if space <= 0:
        raise ValueError("space must be a positive number of rows")
    length1 = len(image)
    width1 = len(image[0]) if length1 else 0
    if length1 == 0 or width1 == 0:
        raise ValueError("image must not be empty")
    if any(len(row) < width1 for row in image):
        raise ValueError("image rows must all have the same length")

    sina = math.sin(alpha / DEGREES_PER_RADIAN)
    cosa = math.cos(alpha / DEGREES_PER_RADIAN)
    sinb = math.sin(beta / DEGREES_PER_RADIAN)
    cosb = math.cos(beta / DEGREES_PER_RADIAN)

    length2 = int(width1 * sinb + length1 * sina + 2 * MORE_ROWS)
    width2 = int(width1 * cosb + length1 * cosa)
    if length2 <= 0 or width2 <= 0:
        raise ValueError("the angles give an output image with no pixels")
    row0 = int(MORE_ROWS // 2 + MORE_ROWS + width1 * sinb)
    col0 = 0

    out = [[FILL] * width2 for _ in range(length2)]
    scale = _height_scale(image)

    for i, row in enumerate(image):
        if i % space != 0:
            continue
        for j, pixel in enumerate(row[:width1]):
            ii = int(row0 + i * sina - j * sinb)
            jj = int(col0 + i * cosa + j * cosb)
            height = int(_f32(pixel / scale))
            _check_inside(out, ii, jj)
            _check_inside(out, ii - height, jj)
            out[ii][jj] = pixel
            lineup(out, ii, ii - height, jj)
            out[ii - height][jj] = 0 if value == 0 else pixel
    return out


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="iso2",
        description="Draw an isometric view of an image as a 3D surface.",
    )
    parser.add_argument("in_file")
    parser.add_argument("out_file")
    parser.add_argument(
        "alpha", type=int, help="angle down from horizontal in degrees"
    )
    parser.add_argument(
        "beta", type=int, help="angle up from horizontal in degrees"
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
    out = isometric3d(image, args.alpha, args.beta, args.space, args.value)
    create_resized_image_file(
        args.in_file, args.out_file, len(out), len(out[0])
    )
    write_image_array(args.out_file, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
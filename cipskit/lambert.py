"""Shading of an image treated as a height map, using the Lambert model.

Each pixel value is taken as a surface height. The surface normal of every
interior pixel is found from its neighbours below and to the right, and the
pixel is lit by an ambient term, a diffuse term and a specular term for a
light arriving along a given vector and a viewer looking straight down.
"""

from __future__ import annotations

import argparse
import math
import sys
from typing import Optional, Sequence, TextIO

from cipskit.imageio import (
    create_image_file,
    does_not_exist,
    read_image_array,
    write_image_array,
)

SOURCE = 100
AMBIENT = 200
NINETY_DEGREES = math.pi / 2
MAX_GRAY = 255
LOG_EVERY = 50
LOG_FILE_NAME = "logfile"

_VIEWER = (0.0, 0.0, -1.0)
_LOG_HEADER = (
    "\nAMBIENT SOURCE   i   j   vr specterm nl    diffterm  T1  T4"
)
_LOG_LINE = (
    "\n%d      %d     %d  %d %4.2f %5.2f    %4.2f %5.2f  %5.2f  %5.2f"
)


def magnitude_of(v):
    """Return the length of the three-component vector ``v``."""
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def dot_product(v1, v2):
    """Return the dot product of two three-component vectors."""
    return v1[0] * v2[0] + v1[1] * v2[1] + v1[2] * v2[2]


def cross_product(v1, v2):
    """Return the cross product ``v1 x v2`` as a tuple."""
    return (
        v1[1] * v2[2] - v2[1] * v1[2],
        v1[2] * v2[0] - v2[2] * v1[0],
        v1[0] * v2[1] - v2[0] * v1[1],
    )


def angle_between(v1, v2):
    """Return the angle in radians between two vectors.

    A cosine at or below -1 is taken as -0.999, so vectors pointing in
    opposite directions give an angle a little short of pi.
    """
    denominator = magnitude_of(v1) * magnitude_of(v2)
    if denominator == 0:
        raise ValueError("cannot find the angle of a zero-length vector")
    cosine = dot_product(v1, v2) / denominator
    if cosine <= -1.0:
        cosine = -0.999
    if cosine > 1.0:
        cosine = 1.0
    return math.acos(cosine)


def _power(base: float, exponent: float) -> float:
    if base == 0.0:
        if exponent > 0:
            return 0.0
        return 1.0 if exponent == 0 else math.inf
    return base**exponent


def _to_gray(value: float) -> int:
    if math.isnan(value):
        return 0
    return int(min(max(value, 0.0), float(MAX_GRAY)))


def lambert(image, k_diffuse, k_specular, eta, light, log=None):
    """Return a shaded copy of ``image``.

    ``k_diffuse`` and ``k_specular`` are the surface reflectivities between
    0 and 1, ``eta`` is the shininess and ``light`` the direction vector of
    the light. When ``log`` is a text stream, a line of intermediate values
    is written for every pixel of every fiftieth row.
    """
    rows = len(image)
    cols = len(image[0]) if rows else 0
    if rows < 3 or cols < 3:
        raise ValueError("image must have at least 3 rows and 3 columns")
    if any(len(row) < cols for row in image):
        raise ValueError("image rows must all have the same length")
    light = tuple(float(component) for component in light)
    if len(light) != 3:
        raise ValueError("light must be a vector of three components")
    if magnitude_of(light) == 0:
        raise ValueError("light vector must not be zero")

    out = [[0] * cols for _ in range(rows)]
    light_to_viewer = math.pi - angle_between(light, _VIEWER)

    for i in range(1, rows - 1):
        here_row, below_row = image[i], image[i + 1]
        for j in range(1, cols - 1):
            here = here_row[j]
            down = (0.0, 1.0, float(here - below_row[j]))
            right = (1.0, 0.0, float(here - here_row[j + 1]))
            normal = cross_product(down, right)

            theta1 = math.pi - angle_between(light, normal)
            theta2 = angle_between(normal, _VIEWER)
            if light_to_viewer >= theta1:
                theta4 = theta1 - theta2
            else:
                theta4 = theta1 + theta2

            vr = _power(max(math.cos(theta4), 0.0), eta)
            specular = k_specular * vr if vr else 0.0
            nl = math.cos(theta1)
            diffuse = k_diffuse * nl

            if theta1 >= NINETY_DEGREES:
                diffuse = 0.0
                specular = 0.0

            if log is not None and i % LOG_EVERY == 0:
                log.write(_LOG_HEADER)
                log.write(
                    _LOG_LINE
                    % (AMBIENT, SOURCE, i, j, vr, specular, nl,
                       diffuse, theta1, theta4)
                )

            out[i][j] = _to_gray(
                k_diffuse * AMBIENT + SOURCE * (specular + diffuse)
            )

    for row in out:
        row[0] = row[1]
        row[cols - 1] = row[cols - 2]
    out[0] = list(out[1])
    out[rows - 1] = list(out[rows - 2])
    return out


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mainl",
        description="Shade an image as a surface lit by a distant light.",
    )
    parser.add_argument("in_file")
    parser.add_argument("out_file")
    parser.add_argument("k_diffuse", type=float)
    parser.add_argument("k_specular", type=float)
    parser.add_argument("eta", type=float)
    parser.add_argument("light_x", type=float)
    parser.add_argument("light_y", type=float)
    parser.add_argument("light_z", type=float)
    return parser.parse_args(argv)


def main(argv=None):
    """Shade the input image and write the result to the output file."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    if does_not_exist(args.in_file):
        print(f"ERROR input file {args.in_file} does not exist", file=sys.stderr)
        return 1

    create_image_file(args.in_file, args.out_file)
    image = read_image_array(args.in_file)
    light = (args.light_x, args.light_y, args.light_z)

    log: TextIO
    with open(LOG_FILE_NAME, "w") as log:
        out = lambert(image, args.k_diffuse, args.k_specular, args.eta,
                      light, log)

    write_image_array(args.out_file, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
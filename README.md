# cipskit

A small toolkit for gray-scale images stored as uncompressed TIFF or 8-bit
BMP files, plus a few programs built on it:

- **Lambertian shading** (`cipskit.lambert`): treats pixel values as surface
  heights and renders them lit by a distant light, with ambient, diffuse and
  specular terms.
- **Isometric views** (`cipskit.iso`, `cipskit.iso2`): draws an image as a
  relief, either with rows slanted by one angle or with the image plane
  turned by two angles.
- **Knowledge-file formatter** (`cipskit.knowledge`, `cipskit.report`): turns
  a plain-text notes file made of `<START>` … `<END>` records into
  paginated, word-wrapped text with page headers and footers.

It has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

### Lambertian shading

```
cipskit-lambert in-file out-file k_diffuse k_specular eta light-x light-y light-z
```

`k_diffuse` and `k_specular` are reflectivities between 0 and 1; `eta` is
the shininess (large values approach a mirror). The light vector must not be
zero and the image must be at least 3 by 3. The output file is created with
the same format and size as the input. A file named `logfile` is written in
the current directory with intermediate values for every fiftieth row.

### Isometric view with one angle

```
cipskit-iso in-file out-file theta space value
```

- `theta`: slant in whole degrees, positive or negative (stay away from 90)
- `space`: draw every `space`-th row of the input
- `value`: `0` marks the top of each line with black, anything else with
  the pixel's own value

The output has 200 more rows than the input and is wider by the slant.

### Isometric view with two angles

```
cipskit-iso2 in-file out-file alpha beta space value
```

`alpha` is the angle in degrees that rows run down from the horizontal and
`beta` the angle that columns run up; `space` and `value` work as above.
Angles that would place a pixel outside the output image raise
`ValueError`.

All three image commands return 1 and print an error when the input file
does not exist.

### Knowledge-file formatter

```
cipskit-kf in-file out-file [-d] [-p] [-l N] [-n N] [-ds] [-t title words ...]
```

- `-d`: put the date in the page header
- `-p`: put the page number in the page header
- `-l N`: `N` lines per page (66 by default)
- `-n N`: start numbering pages at `N`
- `-ds`: double-space the output
- `-t ...`: every argument after it becomes the header title

With fewer than two arguments the command prints its usage and returns 1;
it returns 2 when a file cannot be opened.

The input is a text file of records. Each record starts with a line
beginning `<START>` and ends with a line beginning `<END>`; lines outside
records are skipped. Inside a record, a line starting with `<` (a tag such
as `<T>` or `<A>`) or with one or more periods starts a new entry; every
other line continues the entry above it, and lines before the first entry
are dropped. Tags are removed up to and including the first `>`, periods are
removed, and each period at the start of an entry indents its text by two
spaces. Entries are filled into lines of at most 70 characters, and three
blank lines follow each record.

## Library use

Images are lists of rows of integers.

```python
from cipskit.imageio import (
    create_image_file,
    get_image_size,
    read_image_array,
    write_image_array,
)

rows, cols = get_image_size("input.bmp")
image = read_image_array("input.bmp")

# Invert the image and write it to a new file shaped like the input.
inverted = [[255 - pixel for pixel in row] for row in image]
create_image_file("input.bmp", "output.bmp")
write_image_array("output.bmp", inverted)
```

`cipskit.imageio` decides the format from the file name (it must contain
`.tif` or `.bmp`) and confirms it from the signature at the start of the
file; files that are neither raise `ImageFormatError`. It also offers
`get_bitsperpixel`, `get_lsb`, `is_a_tiff`, `is_a_bmp`, `does_not_exist`,
`create_resized_image_file`, `create_file_if_needed`, `are_not_same_size`
and `allocate_image_array`.

Lower-level access is in `cipskit.tiff` (`TiffHeader`, `read_tiff_header`,
`read_tiff_image`, `write_tiff_image`, `create_allocate_tiff_file`, and the
`extract_*` / `insert_*` byte helpers) and `cipskit.bmp` (`BmpFileHeader`,
`BitmapHeader`, `ColorEntry`, `read_bmp_file_header`, `read_bm_header`,
`read_color_table`, `read_bmp_image`, `write_bmp_image`,
`create_allocate_bmp_file`, `calculate_pad`, `flip_image_array`).

The shading and drawing functions can be called directly:
`cipskit.lambert.lambert`, `cipskit.iso.isometric` and
`cipskit.iso2.isometric3d` each take an image and return a new one. The
vector helpers `dot_product`, `cross_product`, `magnitude_of` and
`angle_between` are in `cipskit.lambert`. `cipskit.report.ReportWriter`
writes paragraphs and records onto pages of any text stream.

## Limits

- BMP images must be 8 bits per pixel and uncompressed; pixels are read as
  the blue component of their colour-table entry.
- TIFF images must be 4 or 8 bits per pixel with their data in a single
  strip; new TIFF files are written little-endian and uncompressed.
- Output files are always written as gray scale.
- There are no edge detectors or spatial filters (smoothing, median, high
  or low pixel); the package covers file I/O, shading, isometric drawing
  and the text formatter only.
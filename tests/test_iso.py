import pytest

from cipskit.bmp import BitmapHeader, create_allocate_bmp_file, write_bmp_image
from cipskit.imageio import get_image_size, read_image_array
from cipskit.iso import FILL, FILL2, MORE_ROWS, isometric, lineup, main


def test_lineup_marks_rows_above_end_only():
    image = [[0] * 3 for _ in range(5)]
    lineup(image, 4, 1, 2)
    assert [row[2] for row in image] == [0, 0, FILL2, FILL2, FILL2]
    assert all(row[0] == 0 and row[1] == 0 for row in image)


def test_lineup_with_equal_rows_does_nothing():
    image = [[7, 7]]
    lineup(image, 0, 0, 1)
    assert image == [[7, 7]]


def test_flat_image_keeps_width_and_adds_rows():
    out = isometric([[0, 0, 0], [0, 0, 0]], 0, 1, 1)
    assert len(out) == 2 + 2 * MORE_ROWS
    assert all(len(row) == 3 for row in out)
    assert out[MORE_ROWS] == [0, 0, 0]
    assert out[MORE_ROWS + 1] == [0, 0, 0]
    untouched = [row for i, row in enumerate(out) if i not in (100, 101)]
    assert all(value == FILL for row in untouched for value in row)


def test_black_dot_on_top_of_line():
    out = isometric([[50]], 0, 1, 0)
    assert out[MORE_ROWS][0] == FILL2
    assert out[MORE_ROWS - 1][0] == 0


def test_image_value_on_top_of_line():
    out = isometric([[50]], 0, 1, 1)
    assert out[MORE_ROWS - 1][0] == 50


def test_space_skips_rows():
    image = [[0] * 3 for _ in range(4)]
    out = isometric(image, 0, 2, 1)
    assert out[MORE_ROWS] == [0, 0, 0]
    assert out[MORE_ROWS + 2] == [0, 0, 0]
    assert out[MORE_ROWS + 1] == [FILL] * 3
    assert out[MORE_ROWS + 3] == [FILL] * 3


def test_positive_and_negative_slant_have_same_shape():
    image = [[0] * 3 for _ in range(4)]
    right = isometric(image, 60, 1, 1)
    left = isometric(image, -60, 1, 1)
    assert len(right) == len(left)
    assert len(right[0]) == len(left[0])
    assert len(right[0]) > 3


def test_slant_direction_of_first_row():
    image = [[0] * 3 for _ in range(4)]
    right = isometric(image, 60, 1, 1)
    left = isometric(image, -60, 1, 1)
    assert right[MORE_ROWS][:3] == [0, 0, 0]
    assert left[MORE_ROWS][-3:] == [0, 0, 0]
    assert left[MORE_ROWS][0] == FILL


def test_zero_space_is_rejected():
    with pytest.raises(ValueError):
        isometric([[1]], 0, 0, 1)


def test_empty_image_is_rejected():
    with pytest.raises(ValueError):
        isometric([], 0, 1, 1)


def _make_bmp(path, image):
    create_allocate_bmp_file(
        path, BitmapHeader(width=len(image[0]), height=len(image))
    )
    write_bmp_image(path, image)


def test_main_writes_isometric_view(tmp_path):
    in_path = tmp_path / "in.bmp"
    out_path = tmp_path / "out.bmp"
    image = [[10, 20, 30, 40], [5, 15, 25, 35]]
    _make_bmp(in_path, image)

    assert main([str(in_path), str(out_path), "30", "1", "1"]) == 0

    expected = isometric(read_image_array(in_path), 30, 1, 1)
    assert get_image_size(out_path) == (len(expected), len(expected[0]))
    assert read_image_array(out_path) == expected


def test_main_missing_input(tmp_path):
    missing = tmp_path / "absent.bmp"
    out_path = tmp_path / "out.bmp"
    assert main([str(missing), str(out_path), "0", "1", "1"]) == 1
    assert not out_path.exists()
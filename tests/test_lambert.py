import io
import math

import pytest

from cipskit.bmp import BitmapHeader, create_allocate_bmp_file
from cipskit.imageio import read_image_array, write_image_array
from cipskit.lambert import (
    AMBIENT,
    MAX_GRAY,
    angle_between,
    cross_product,
    dot_product,
    lambert,
    magnitude_of,
    main,
)


def _flat(rows, cols, value=10):
    return [[value] * cols for _ in range(rows)]


def _ramp(rows, cols):
    return [[(r * 7 + c * 3) % 60 for c in range(cols)] for r in range(rows)]


def test_dot_product_matches_magnitude_squared():
    v = (1.0, 2.0, 3.0)
    assert dot_product(v, v) == pytest.approx(magnitude_of(v) ** 2)


def test_dot_product_is_symmetric():
    a, b = (1.0, 2.0, 3.0), (4.0, 5.0, 6.0)
    assert dot_product(a, b) == dot_product(b, a)


def test_cross_product_is_perpendicular_to_both():
    a, b = (0.0, 1.0, -2.0), (1.0, 0.0, 9.0)
    c = cross_product(a, b)
    assert dot_product(c, a) == pytest.approx(0.0)
    assert dot_product(c, b) == pytest.approx(0.0)


def test_cross_product_is_antisymmetric():
    a, b = (0.0, 1.0, -2.0), (1.0, 0.0, 9.0)
    assert cross_product(a, b) == tuple(-x for x in cross_product(b, a))


def test_angle_between_same_vector_is_zero():
    assert angle_between((0.0, 1.0, 0.0), (0.0, 1.0, 0.0)) == pytest.approx(0.0)


def test_angle_between_perpendicular_vectors():
    assert angle_between((0.0, 1.0, 0.0), (1.0, 0.0, 0.0)) == pytest.approx(
        math.pi / 2
    )


def test_angle_between_opposite_vectors_is_clamped():
    angle = angle_between((0.0, 0.0, 1.0), (0.0, 0.0, -1.0))
    assert angle == pytest.approx(math.acos(-0.999))
    assert angle < math.pi


def test_angle_between_zero_vector_raises():
    with pytest.raises(ValueError):
        angle_between((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))


def test_lambert_keeps_shape_and_range():
    image = _ramp(12, 9)
    out = lambert(image, 0.5, 0.5, 2.0, (1.0, 1.0, 1.0))
    assert len(out) == 12
    assert all(len(row) == 9 for row in out)
    assert all(0 <= value <= MAX_GRAY for row in out for value in row)


def test_lambert_flat_image_is_uniform():
    out = lambert(_flat(6, 7), 0.4, 0.3, 1.0, (0.0, 0.0, 1.0))
    values = {value for row in out for value in row}
    assert len(values) == 1


def test_lambert_edges_copy_neighbours():
    out = lambert(_ramp(8, 8), 0.5, 0.2, 1.0, (0.3, 0.2, 1.0))
    assert out[0] == out[1]
    assert out[-1] == out[-2]
    for row in out:
        assert row[0] == row[1]
        assert row[-1] == row[-2]


def test_lambert_light_in_shadow_gives_only_ambient():
    out = lambert(_flat(5, 5), 0.5, 1.0, 1.0, (0.0, 0.0, -1.0))
    assert all(value == int(0.5 * AMBIENT) for row in out for value in row)


def test_lambert_clamps_to_max_gray():
    out = lambert(_flat(5, 5), 2.0, 0.0, 1.0, (0.0, 0.0, -1.0))
    assert all(value == MAX_GRAY for row in out for value in row)


def test_lambert_specular_only_is_bounded_by_source():
    out = lambert(_flat(5, 5), 0.0, 1.0, 1.0, (0.0, 0.0, 1.0))
    assert all(0 < value <= 100 for row in out for value in row)


def test_lambert_does_not_change_input():
    image = _ramp(6, 6)
    copy = [list(row) for row in image]
    lambert(image, 0.5, 0.5, 1.0, (1.0, 0.0, 1.0))
    assert image == copy


def test_lambert_too_small_image_raises():
    with pytest.raises(ValueError):
        lambert(_flat(2, 5), 0.5, 0.5, 1.0, (0.0, 0.0, 1.0))


def test_lambert_zero_light_raises():
    with pytest.raises(ValueError):
        lambert(_flat(5, 5), 0.5, 0.5, 1.0, (0.0, 0.0, 0.0))


def test_lambert_writes_log_every_fiftieth_row():
    log = io.StringIO()
    lambert(_flat(53, 5), 0.5, 0.5, 1.0, (0.0, 0.0, 1.0), log)
    text = log.getvalue()
    assert text.count("AMBIENT SOURCE") == 3
    assert "\n200      100     50  1 " in text


def test_lambert_no_log_for_short_image():
    log = io.StringIO()
    lambert(_flat(10, 5), 0.5, 0.5, 1.0, (0.0, 0.0, 1.0), log)
    assert log.getvalue() == ""


def test_main_shades_bmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    in_path = tmp_path / "in.bmp"
    out_path = tmp_path / "out.bmp"
    create_allocate_bmp_file(in_path, BitmapHeader(width=6, height=5))
    image = _ramp(5, 6)
    write_image_array(in_path, image)

    status = main([str(in_path), str(out_path), "0.5", "0.4", "2",
                   "1", "1", "1"])

    assert status == 0
    assert read_image_array(out_path) == lambert(
        image, 0.5, 0.4, 2.0, (1.0, 1.0, 1.0)
    )
    assert (tmp_path / "logfile").exists()


def test_main_missing_input_fails(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    status = main([str(tmp_path / "none.bmp"), str(tmp_path / "out.bmp"),
                   "0.5", "0.5", "1", "0", "0", "1"])
    assert status == 1
    assert not (tmp_path / "out.bmp").exists()


def test_main_wrong_argument_count_exits():
    with pytest.raises(SystemExit):
        main(["in.bmp", "out.bmp", "0.5"])
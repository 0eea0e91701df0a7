from dataclasses import replace

import pytest

from mlxir.mlx90641_calc import (
    bad_pixel_correction,
    calculate_to,
    get_image,
    get_ta,
    get_vdd,
    subpage_number,
)
from mlxir.mlx90641_params import NO_BROKEN_PIXEL, Params


def make_params(**changes):
    base = Params(
        k_vdd=-3200,
        vdd25=-12000,
        kv_ptat=0.0,
        kt_ptat=40.0,
        v_ptat25=32768,
        alpha_ptat=8.0,
        gain_ee=5000,
        resolution_ee=2,
        alpha=[20000] * 192,
        alpha_scale=11,
    )
    return replace(base, **changes)


def make_frame(pixels=None, subpage=0):
    frame = [0] * 242
    if pixels is not None:
        frame[:192] = [value & 0xFFFF for value in pixels]
    frame[192] = 0
    frame[224] = 1000
    frame[234] = (-12000) & 0xFFFF
    frame[240] = 2 << 10
    frame[202] = 5000
    frame[200] = 0
    frame[241] = subpage
    return frame


def test_subpage_number():
    assert subpage_number(make_frame(subpage=1)) == 1
    assert subpage_number(make_frame(subpage=0)) == 0


def test_vdd_nominal():
    assert get_vdd(make_frame(), make_params()) == pytest.approx(3.3)


def test_vdd_resolution_correction():
    frame = make_frame()
    frame[234] = (-24000) & 0xFFFF
    frame[240] = 3 << 10
    assert get_vdd(frame, make_params()) == pytest.approx(3.3)


def test_ta_reference():
    assert get_ta(make_frame(), make_params()) == pytest.approx(25)


def test_frame_length_checked():
    with pytest.raises(ValueError):
        get_vdd([0] * 10, make_params())


def test_invalid_subpage_rejected():
    with pytest.raises(ValueError):
        calculate_to(make_frame(subpage=2), make_params(), 1.0, 25.0)


@pytest.mark.parametrize("emissivity,tr", [(1.0, 25.0), (0.9, 25.0), (1.0, 40.0)])
def test_zero_signal_gives_ambient(emissivity, tr):
    params = make_params()
    frame = make_frame()
    ta = get_ta(frame, params)
    result = calculate_to(frame, params, emissivity, tr)
    assert len(result) == 192
    assert result == pytest.approx([ta] * 192, abs=1e-6)


def test_subpage_selects_offsets():
    params = make_params(offset=([0] * 192, [100] * 192))
    result = calculate_to(make_frame([100] * 192, subpage=1), params, 1.0, 25.0)
    ta = get_ta(make_frame(), params)
    assert result == pytest.approx([ta] * 192, abs=1e-6)


def test_temperature_rises_with_signal():
    params = make_params()
    ta = get_ta(make_frame(), params)
    low = calculate_to(make_frame([10] * 192), params, 1.0, 25.0)
    high = calculate_to(make_frame([20] * 192), params, 1.0, 25.0)
    assert all(ta < a < b for a, b in zip(low, high))


def test_image_zero_signal():
    assert get_image(make_frame(), make_params()) == [0.0] * 192


def test_image_is_linear():
    params = make_params()
    single = get_image(make_frame([7] * 192), params)
    double = get_image(make_frame([14] * 192), params)
    assert double == pytest.approx([2 * value for value in single])


def gradient():
    return [float(i) for i in range(192)]


def test_bad_pixel_middle_column_restores_gradient():
    values = gradient()
    values[21] = 500.0
    corrected = bad_pixel_correction(21, values)
    assert corrected[21] == pytest.approx(21.0)
    assert values[21] == 500.0


@pytest.mark.parametrize("pixel,expected", [(16, 17.0), (17, 17.0), (31, 30.0), (30, 30.0)])
def test_bad_pixel_edges(pixel, expected):
    values = gradient()
    values[pixel] = -1.0
    assert bad_pixel_correction(pixel, values)[pixel] == pytest.approx(expected)


def test_no_broken_pixel_leaves_values():
    values = gradient()
    assert bad_pixel_correction(NO_BROKEN_PIXEL, values) == values
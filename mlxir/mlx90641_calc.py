"""Temperature and image calculations for MLX90641 frames."""

from __future__ import annotations

import math
from collections.abc import Sequence

from .mlx90641_params import PIXELS, SCALE_ALPHA, Params

FRAME_WORDS = 242
COLUMNS = 16
KELVIN = 273.15
NOMINAL_VDD = 3.3
REFERENCE_TA = 25


def _int16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _fdiv(a: float, b: float) -> float:
    if b:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _root4(value: float) -> float:
    if value < 0:
        return math.nan
    return math.sqrt(math.sqrt(value))


def _fourth(value: float) -> float:
    square = value * value
    return square * square


def _check_frame(frame: Sequence[int]) -> None:
    if len(frame) != FRAME_WORDS:
        raise ValueError(f"frame must hold {FRAME_WORDS} words, got {len(frame)}")


def _subpage(frame: Sequence[int]) -> int:
    subpage = frame[241]
    if subpage not in (0, 1):
        raise ValueError(f"subpage must be 0 or 1, got {subpage!r}")
    return subpage


def subpage_number(frame: Sequence[int]) -> int:
    """Return the subpage a frame was read from."""
    return frame[241]


def get_vdd(frame: Sequence[int], params: Params) -> float:
    """Supply voltage in volts at the time of the frame."""
    _check_frame(frame)
    raw = _int16(frame[234])
    resolution_ram = (frame[240] & 0x0C00) >> 10
    correction = 2.0**params.resolution_ee / 2.0**resolution_ram
    return _fdiv(correction * raw - params.vdd25, params.k_vdd) + NOMINAL_VDD


def get_ta(frame: Sequence[int], params: Params) -> float:
    """Sensor ambient temperature in degrees Celsius."""
    vdd = get_vdd(frame, params)
    ptat = _int16(frame[224])
    ptat_art = _int16(frame[192])
    ptat_art = _fdiv(ptat, ptat * params.alpha_ptat + ptat_art) * 2.0**18
    ta = _fdiv(ptat_art, 1 + params.kv_ptat * (vdd - NOMINAL_VDD)) - params.v_ptat25
    return _fdiv(ta, params.kt_ptat) + REFERENCE_TA


def _alpha_corrections(ks_to: Sequence[float], ct: Sequence[int]) -> list[float]:
    corrections = [0.0] * 8
    corrections[1] = _fdiv(1, 1 + ks_to[1] * 20)
    corrections[0] = _fdiv(corrections[1], 1 + ks_to[0] * 20)
    corrections[2] = 1.0
    corrections[3] = 1 + ks_to[2] * ct[3]
    for band in range(4, 8):
        corrections[band] = corrections[band - 1] * (
            1 + ks_to[band - 1] * (ct[band] - ct[band - 1])
        )
    return corrections


def _compensated_ir(frame: Sequence[int], params: Params) -> tuple[list[float], float, float]:
    """Offset, drift and gradient compensated IR data with Ta and Vdd."""
    _check_frame(frame)
    subpage = _subpage(frame)
    vdd = get_vdd(frame, params)
    ta = get_ta(frame, params)
    kta_scale = 2.0**params.kta_scale
    kv_scale = 2.0**params.kv_scale
    dta = ta - REFERENCE_TA
    dvdd = vdd - NOMINAL_VDD

    gain = _fdiv(params.gain_ee, _int16(frame[202]))
    ir_cp = _int16(frame[200]) * gain
    ir_cp -= params.cp_offset * (1 + params.cp_kta * dta) * (1 + params.cp_kv * dvdd)

    ir_data = []
    for raw, offset, kta, kv in zip(
        frame[:PIXELS], params.offset[subpage], params.kta, params.kv
    ):
        ir = _int16(raw) * gain
        ir -= offset * (1 + kta / kta_scale * dta) * (1 + kv / kv_scale * dvdd)
        ir_data.append(ir - params.tgc * ir_cp)
    return ir_data, ta, vdd


def calculate_to(
    frame: Sequence[int], params: Params, emissivity: float, tr: float
) -> list[float]:
    """Object temperature of every pixel, in degrees Celsius.

    ``tr`` is the reflected (room) temperature used for emissivity compensation.
    """
    ir_data, ta, _ = _compensated_ir(frame, params)
    ta4 = _fourth(ta + KELVIN)
    tr4 = _fourth(tr + KELVIN)
    ta_tr = tr4 - _fdiv(tr4 - ta4, emissivity)
    alpha_scale = 2.0**params.alpha_scale
    ks_to = params.ks_to
    ct = params.ct
    corrections = _alpha_corrections(ks_to, ct)
    sensitivity_drift = 1 + params.ks_ta * (ta - REFERENCE_TA)

    result = []
    for ir, alpha in zip(ir_data, params.alpha):
        ir = _fdiv(ir, emissivity)
        compensated = _fdiv(SCALE_ALPHA * alpha_scale, alpha) * sensitivity_drift
        sx = _root4(compensated * compensated * compensated * (ir + compensated * ta_tr))
        sx *= ks_to[2]
        to = _root4(_fdiv(ir, compensated * (1 - ks_to[2] * KELVIN) + sx) + ta_tr) - KELVIN
        band = next((index for index, corner in enumerate(ct[1:]) if to < corner), 7)
        denominator = compensated * corrections[band] * (1 + ks_to[band] * (to - ct[band]))
        result.append(_root4(_fdiv(ir, denominator) + ta_tr) - KELVIN)
    return result


def get_image(frame: Sequence[int], params: Params) -> list[float]:
    """Uncalibrated image values proportional to the IR signal of each pixel."""
    ir_data, _, _ = _compensated_ir(frame, params)
    cp_term = params.tgc * params.cp_alpha
    return [ir * (alpha - cp_term) for ir, alpha in zip(ir_data, params.alpha)]


def bad_pixel_correction(pixel: int, to: Sequence[float]) -> list[float]:
    """Return a copy of ``to`` with ``pixel`` replaced from its row neighbours.

    Pixel numbers outside the array (such as the "no broken pixel" marker)
    leave the values unchanged.
    """
    corrected = list(to)
    if not 0 <= pixel < PIXELS:
        return corrected
    column = pixel % COLUMNS
    if column == 0:
        corrected[pixel] = to[pixel + 1]
    elif column in (1, COLUMNS - 2):
        corrected[pixel] = (to[pixel - 1] + to[pixel + 1]) / 2.0
    elif column == COLUMNS - 1:
        corrected[pixel] = to[pixel - 1]
    else:
        right = to[pixel + 1] - to[pixel + 2]
        left = to[pixel - 1] - to[pixel - 2]
        if abs(right) > abs(left):
            corrected[pixel] = to[pixel - 1] + left
        else:
            corrected[pixel] = to[pixel + 1] + right
    return corrected
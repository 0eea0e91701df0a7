"""Calibration parameters of the MLX90641, extracted from a decoded EEPROM image."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from itertools import islice

from .mlx90641_eeprom import EEPROM_WORDS, EepromError, check_eeprom_valid

SCALE_ALPHA = 0.000001
"""Fixed scale applied to the pixel sensitivities."""

PIXELS = 192
NO_BROKEN_PIXEL = 0xFFFF
ALPHA_ROW_PIXELS = 32
FIXED_CORNER_TEMPERATURES = (-40, -20, 0, 80, 120)


@dataclass
class Params:
    """Calibration data of one MLX90641 sensor."""

    k_vdd: int = 0
    vdd25: int = 0
    kv_ptat: float = 0.0
    kt_ptat: float = 0.0
    v_ptat25: int = 0
    alpha_ptat: float = 0.0
    gain_ee: int = 0
    tgc: float = 0.0
    cp_kv: float = 0.0
    cp_kta: float = 0.0
    resolution_ee: int = 0
    calibration_mode_ee: int = 0
    ks_ta: float = 0.0
    ks_to: list[float] = field(default_factory=lambda: [0.0] * 8)
    ct: list[int] = field(default_factory=lambda: [0] * 8)
    alpha: list[int] = field(default_factory=lambda: [0] * PIXELS)
    alpha_scale: int = 0
    offset: tuple[list[int], list[int]] = field(
        default_factory=lambda: ([0] * PIXELS, [0] * PIXELS)
    )
    kta: list[int] = field(default_factory=lambda: [0] * PIXELS)
    kta_scale: int = 0
    kv: list[int] = field(default_factory=lambda: [0] * PIXELS)
    kv_scale: int = 0
    cp_alpha: float = 0.0
    cp_offset: int = 0
    emissivity_ee: float = 0.0
    broken_pixel: int = NO_BROKEN_PIXEL


def _wrap_above(value: int, limit: int, span: int) -> int:
    return value - span if value > limit else value


def _s11(value: int) -> int:
    return _wrap_above(value, 1023, 2048)


def _int16(value: int) -> int:
    return ((value + 0x8000) & 0xFFFF) - 0x8000


def _to_int8(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return ((int(value) + 0x80) & 0xFF) - 0x80


def _to_uint16(value: float) -> int:
    if math.isnan(value):
        return 0
    return int(min(max(value, 0.0), 65535.0))


def _fdiv(a: float, b: float) -> float:
    if b:
        return a / b
    if a == 0 or math.isnan(a):
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _normalise_scale(peak: float, limit: float, what: str) -> int:
    """Number of doublings that bring ``peak`` to at least ``limit``."""
    if peak <= 0:
        raise ValueError(f"{what} coefficients cannot be normalised: largest value is {peak!r}")
    scale = 0
    while peak < limit:
        peak *= 2
        scale += 1
    return scale


def _extract_ks_to(ee: Sequence[int]) -> tuple[list[float], list[int]]:
    ct = [*FIXED_CORNER_TEMPERATURES, _int16(ee[58]), _int16(ee[60]), _int16(ee[62])]
    scale = 1 << ee[52]
    ks_to = [_s11(ee[address]) / scale for address in (53, 54, 55, 56, 57, 59, 61, 63)]
    return ks_to, ct


def _extract_alpha(ee: Sequence[int], tgc: float, cp_alpha: float) -> tuple[list[int], int]:
    row_scales: list[int] = []
    for word in ee[25:28]:
        row_scales += [(word >> 5) + 20, (word & 0x1F) + 20]
    norms = [
        row_max / 2.0**scale / 2047.0 for row_max, scale in zip(ee[28:34], row_scales)
    ]
    temps = [
        _fdiv(SCALE_ALPHA, word * norms[pixel // ALPHA_ROW_PIXELS] - tgc * cp_alpha)
        for pixel, word in enumerate(ee[256:256 + PIXELS])
    ]
    scale = _normalise_scale(max(temps), 32768, "alpha")
    factor = 2.0**scale
    return [_to_uint16(t * factor + 0.5) for t in temps], scale & 0xFF


def _extract_offsets(ee: Sequence[int]) -> tuple[list[int], list[int]]:
    scale = 1 << (ee[16] >> 5)
    reference = _int16(32 * ee[17] + ee[18])

    def subpage(first: int) -> list[int]:
        return [_int16(_s11(word) * scale + reference) for word in ee[first:first + PIXELS]]

    return subpage(64), subpage(640)


def _extract_pixel_coefficients(
    ee: Sequence[int], avg_address: int, scale_address: int, decode: Callable[[int], int], what: str
) -> tuple[list[int], int]:
    average = _s11(ee[avg_address])
    scale1 = ee[scale_address] >> 5
    scale2 = ee[scale_address] & 0x1F
    temps = [
        (decode(word) * 2.0**scale2 + average) / 2.0**scale1 for word in ee[448:448 + PIXELS]
    ]
    scale = _normalise_scale(max(abs(t) for t in temps), 64, what)
    factor = 2.0**scale
    coefficients = []
    for t in temps:
        scaled = t * factor
        coefficients.append(_to_int8(scaled - 0.5 if scaled < 0 else scaled + 0.5))
    return coefficients, scale & 0xFF


def _extract_cp(ee: Sequence[int]) -> tuple[float, int, float, float]:
    alpha_scale = ee[46] & 0xFF
    offset_cp = _int16(32 * ee[47] + ee[48])
    alpha_cp = _s11(ee[45]) / 2.0**alpha_scale
    cp_kta = _wrap_above(ee[49] & 0x3F, 31, 64) / 2.0 ** ((ee[49] >> 6) & 0xFF)
    cp_kv = _wrap_above(ee[50] & 0x3F, 31, 64) / 2.0 ** ((ee[50] >> 6) & 0xFF)
    return alpha_cp, offset_cp, cp_kta, cp_kv


def _broken_pixels(ee: Sequence[int]) -> list[int]:
    candidates = (
        pixel
        for pixel in range(PIXELS)
        if all(ee[pixel + base] == 0 for base in (64, 256, 448, 640))
    )
    return list(islice(candidates, 2))


def extract_parameters(ee_data: Sequence[int]) -> Params:
    """Build :class:`Params` from a Hamming-decoded EEPROM image.

    Raises :class:`EepromError` (code -7) when the image is not from an
    MLX90641 and (code -3) when more than one broken pixel is found; in the
    latter case the extracted parameters are kept on the exception as
    ``params``.
    """
    if len(ee_data) != EEPROM_WORDS:
        raise ValueError(f"EEPROM image must hold {EEPROM_WORDS} words, got {len(ee_data)}")
    ee = list(ee_data)
    check_eeprom_valid(ee)

    tgc = _wrap_above(ee[51] & 0x01FF, 255, 512) / 64.0
    ks_to, ct = _extract_ks_to(ee)
    cp_alpha, cp_offset, cp_kta, cp_kv = _extract_cp(ee)
    alpha, alpha_scale = _extract_alpha(ee, tgc, cp_alpha)
    offset = _extract_offsets(ee)
    kta, kta_scale = _extract_pixel_coefficients(
        ee, 21, 22, lambda word: _wrap_above(word >> 5, 31, 64), "kta"
    )
    kv, kv_scale = _extract_pixel_coefficients(
        ee, 23, 24, lambda word: _wrap_above(word & 0x001F, 15, 32), "kv"
    )
    broken = _broken_pixels(ee)

    params = Params(
        k_vdd=_int16(32 * _s11(ee[39])),
        vdd25=_int16(32 * _s11(ee[38])),
        kv_ptat=_s11(ee[43]) / 4096,
        kt_ptat=_s11(ee[42]) / 8,
        v_ptat25=(32 * ee[40] + ee[41]) & 0xFFFF,
        alpha_ptat=ee[44] / 128.0,
        gain_ee=_int16(32 * ee[36] + ee[37]),
        tgc=tgc,
        cp_kv=cp_kv,
        cp_kta=cp_kta,
        resolution_ee=(ee[51] & 0x0600) >> 9,
        ks_ta=_s11(ee[34]) / 32768.0,
        ks_to=ks_to,
        ct=ct,
        alpha=alpha,
        alpha_scale=alpha_scale,
        offset=offset,
        kta=kta,
        kta_scale=kta_scale,
        kv=kv,
        kv_scale=kv_scale,
        cp_alpha=cp_alpha,
        cp_offset=cp_offset,
        emissivity_ee=_s11(ee[35]) / 512,
        broken_pixel=broken[-1] if broken else NO_BROKEN_PIXEL,
    )
    if len(broken) > 1:
        error = EepromError(
            "more than one broken pixel", code=-3, words=ee, addresses=broken
        )
        error.params = params
        raise error
    return params
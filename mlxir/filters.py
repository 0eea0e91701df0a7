"""Noise filters applied to a thermal image after temperature calculation."""

from __future__ import annotations

from collections.abc import Sequence

ROWS = 24
COLUMNS = 32
PIXELS = ROWS * COLUMNS

IIR_DEPTH = 8
"""Default averaging depth of the IIR filter."""

IIR_THRESHOLD = 2.5
"""Default step, in degrees, above which the IIR filter follows quickly."""

IIR_FAST_FRACTION = 0.9
"""Share of a large step that the IIR filter takes at once."""

DEINTERLACE_THRESHOLD = 0.7
"""A pixel is replaced when it differs from its neighbourhood median by more."""

VALID_LOW = -100
VALID_HIGH = 1000


def median(values: Sequence[float]) -> float:
    """Median of ``values``; the mean of the two middle ones for even lengths."""
    if not values:
        raise ValueError("median of an empty sequence")
    ordered = sorted(values)
    n = len(ordered)
    if n % 2 == 0:
        return (ordered[(n - 1) // 2] + ordered[n // 2]) / 2.0
    return ordered[n // 2]


def seed_iir(values: Sequence[float], fallback: float) -> list[float]:
    """Initial IIR state: each plausible value itself, ``fallback`` otherwise."""
    return [value if VALID_LOW < value < VALID_HIGH else fallback for value in values]


def iir_filter(
    values: Sequence[float],
    state: Sequence[float],
    depth: int = IIR_DEPTH,
    threshold: float = IIR_THRESHOLD,
) -> list[float]:
    """Return the IIR state updated with a new set of ``values``.

    Large changes are followed for most of their size at once, small ones are
    averaged over ``depth`` frames. Values outside the plausible range leave
    the state of their pixel untouched.
    """
    if len(values) != len(state):
        raise ValueError(f"got {len(values)} values for a state of {len(state)}")
    if depth < 1:
        raise ValueError(f"depth must be at least 1, got {depth!r}")
    updated = []
    for value, previous in zip(values, state):
        if not VALID_LOW <= value <= VALID_HIGH:
            updated.append(previous)
        elif abs(value - previous) >= threshold:
            updated.append(previous + (value - previous) * IIR_FAST_FRACTION)
        else:
            updated.append((value + previous * (depth - 1)) / depth)
    return updated


def _neighbourhood(values: Sequence[float], row: int, col: int) -> list[float]:
    here = values[row * COLUMNS + col]
    around = [
        values[r * COLUMNS + c]
        for r, c in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1))
        if 0 <= r < ROWS and 0 <= c < COLUMNS
    ]
    # Interior pixels weigh themselves twice so that the median set stays even.
    return around + ([here, here] if len(around) == 4 else [here])


def deinterlace_filter(values: Sequence[float], subpage: int) -> list[float]:
    """Smooth the pixels of one chess-pattern subpage against their neighbours.

    Subpage 1 covers the pixels whose row and column have the same parity;
    any other subpage number covers the rest. A covered pixel is replaced by
    the median of itself and its direct neighbours when it lies more than
    :data:`DEINTERLACE_THRESHOLD` away from it.
    """
    if len(values) != PIXELS:
        raise ValueError(f"image must hold {PIXELS} values, got {len(values)}")
    result = list(values)
    same_parity = subpage == 1
    for row in range(ROWS):
        first = row % 2 if same_parity else 1 - row % 2
        for col in range(first, COLUMNS, 2):
            index = row * COLUMNS + col
            candidate = median(_neighbourhood(result, row, col))
            if abs(candidate - result[index]) > DEINTERLACE_THRESHOLD:
                result[index] = candidate
    return result
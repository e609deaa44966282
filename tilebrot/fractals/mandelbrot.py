import math
from typing import Tuple

import numpy as np
from numba import njit

ESCAPE_RADIUS_SQ = 4.0
MANTISSA_BITS = 53


@njit(cache=True, nogil=True)
def escape_count(cr, ci, max_iter):
    """
    Iterate z <- z*z + c from z = 0 and return the 1-based step at which
    |z|^2 >= 4 first holds, or 0 if it never escapes within max_iter.
    """
    zr = 0.0
    zi = 0.0
    for n in range(1, max_iter + 1):
        # (a+bi)^2 = ((a+b)(a-b), 2ab)
        zr, zi = (zr + zi) * (zr - zi) + cr, 2.0 * zr * zi + ci
        if zr * zr + zi * zi >= ESCAPE_RADIUS_SQ:
            return n
    return 0


@njit(cache=True, nogil=True)
def escape_at(origin_x, origin_y, col, row, zoom, unit, max_iter):
    cr = (origin_x + col * unit) / zoom
    ci = -(origin_y + row * unit) / zoom
    return escape_count(cr, ci, max_iter)


@njit(cache=True, nogil=True)
def escape_grid(origin_x, origin_y, width, height, zoom, unit, max_iter):
    out = np.zeros((height, width), dtype=np.int32)
    for row in range(height):
        for col in range(width):
            out[row, col] = escape_at(origin_x, origin_y, col, row, zoom, unit, max_iter)
    return out


def kernel_origin(grid_x: int, grid_y: int, zoom: int) -> Tuple[float, float, float, float]:
    """
    Float kernel arguments (origin_x, origin_y, zoom, unit) for an integer
    grid origin.

    Grid coordinates and zoom are unbounded Python ints. While zoom fits a
    double's mantissa they convert exactly and unit is 1.0, so a pixel's
    plane value is the same whichever origin it is computed from. Past that
    all of them are scaled down by one power of two, unit being the scaled
    pixel step: the ratio survives and the kernels stay typed as float64.
    """
    shift = max(0, int(zoom).bit_length() - MANTISSA_BITS)
    if not shift:
        return float(grid_x), float(grid_y), float(zoom), 1.0
    scale = 1 << shift
    return grid_x / scale, grid_y / scale, zoom / scale, math.ldexp(1.0, -shift)


def iterations(point: complex, max_iter: int) -> int:
    """Escape iteration count of a single plane point (0 = never escaped)."""
    return int(escape_count(float(point.real), float(point.imag), int(max_iter)))

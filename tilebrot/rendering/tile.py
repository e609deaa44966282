from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Iterator, List, Optional, Tuple

import numpy as np

from tilebrot.coloring.base import ColoringStrategy
from tilebrot.fractals.mandelbrot import escape_at, escape_grid, kernel_origin
from tilebrot.utils.coords import align_down

RGB = Tuple[int, int, int]
Pixel = Tuple[int, int, RGB]


class TileResult:
    """
    Computed contents of a tile.

    Either uniform (one escape count and one color for every pixel) or
    dense (a size x size array of escape counts plus its RGB image).
    Arrays are frozen read-only so results can be shared between renders.
    """

    __slots__ = ("grid_x", "grid_y", "size", "value", "iterations",
                 "_color", "_rgb", "evaluations")

    def __init__(self, grid_x: int, grid_y: int, size: int, *,
                 value: Optional[int] = None,
                 color: Optional[RGB] = None,
                 iterations: Optional[np.ndarray] = None,
                 rgb: Optional[np.ndarray] = None,
                 evaluations: int = 0) -> None:
        if (iterations is None) == (value is None):
            raise ValueError("TileResult needs exactly one of value or iterations")
        self.grid_x = grid_x
        self.grid_y = grid_y
        self.size = size
        self.value = value
        self._color = color
        self.iterations = iterations
        self._rgb = rgb
        self.evaluations = evaluations
        for arr in (iterations, rgb):
            if arr is not None:
                arr.flags.writeable = False

    @classmethod
    def uniform(cls, grid_x: int, grid_y: int, size: int, value: int,
                color: RGB, evaluations: int = 0) -> "TileResult":
        return cls(grid_x, grid_y, size, value=value, color=color,
                   evaluations=evaluations)

    @classmethod
    def dense(cls, grid_x: int, grid_y: int, size: int, iterations: np.ndarray,
              rgb: np.ndarray, evaluations: int = 0) -> "TileResult":
        return cls(grid_x, grid_y, size, iterations=iterations, rgb=rgb,
                   evaluations=evaluations)

    @property
    def is_uniform(self) -> bool:
        return self.iterations is None

    def __len__(self) -> int:
        return self.size * self.size

    def escape_counts(self) -> np.ndarray:
        if self.is_uniform:
            return np.full((self.size, self.size), self.value, dtype=np.int32)
        return self.iterations

    def to_rgb(self) -> np.ndarray:
        """(size, size, 3) uint8 view of the tile's colors."""
        if self.is_uniform:
            return np.broadcast_to(np.array(self._color, dtype=np.uint8),
                                   (self.size, self.size, 3))
        return self._rgb

    def pixel(self, index: int) -> Pixel:
        if not 0 <= index < len(self):
            raise IndexError(f"pixel index {index} out of range for size {self.size}")
        row, col = divmod(index, self.size)
        if self.is_uniform:
            color = self._color
        else:
            r, g, b = self._rgb[row, col]
            color = (int(r), int(g), int(b))
        return self.grid_x + col, self.grid_y + row, color

    def pixels(self) -> Iterator[Pixel]:
        """Row-major (abs_x, abs_y, color) triples; each call starts over."""
        for index in range(len(self)):
            yield self.pixel(index)


@dataclass(frozen=True)
class Tile:
    """
    Square, grid-aligned region of the fractal grid.
    All five fields form the identity and the cache key.
    """
    grid_x: int
    grid_y: int
    zoom: int
    size: int
    max_iter: int

    # ---- Coverage -------------------------------------------------------

    @staticmethod
    def covering(top_x: int, top_y: int, width: int, height: int,
                 size: int, zoom: int, max_iter: int) -> List["Tile"]:
        """
        Grid-aligned tiles covering [top_x, top_x + width) x [top_y, top_y + height)
        with one extra tile on the leading edges, row-major.
        """
        start_x = align_down(top_x, size) - size
        start_y = align_down(top_y, size) - size
        return [Tile(x, y, zoom, size, max_iter)
                for y in range(start_y, top_y + height, size)
                for x in range(start_x, top_x + width, size)]

    # ---- Computation ----------------------------------------------------

    @cached_property
    def _origin(self) -> Tuple[float, float, float, float]:
        return kernel_origin(self.grid_x, self.grid_y, self.zoom)

    def _escape(self, col: int, row: int) -> int:
        x, y, zoom, unit = self._origin
        return escape_at(x, y, col, row, zoom, unit, self.max_iter)

    def scan_border(self, reference: int, stride: int = 2) -> Tuple[bool, int]:
        """
        Sample the four edges every `stride` pixels, top/bottom then
        left/right, and stop at the first value that differs from
        reference. Returns (all_equal, samples_taken).
        """
        last = self.size - 1
        samples = 0
        for a in range(0, self.size, stride):
            for col, row in ((a, 0), (a, last), (0, a), (last, a)):
                samples += 1
                if self._escape(col, row) != reference:
                    return False, samples
        return True, samples

    def resolve(self, coloring: ColoringStrategy, *, border_stride: int = 2,
                uniform_check: bool = True) -> TileResult:
        evaluations = 0
        if uniform_check:
            prev = self._escape(0, 0)
            uniform, samples = self.scan_border(prev, border_stride)
            evaluations += 1 + samples
            if uniform:
                return TileResult.uniform(self.grid_x, self.grid_y, self.size, prev,
                                          coloring.color(prev), evaluations)

        x, y, zoom, unit = self._origin
        counts = escape_grid(x, y, self.size, self.size, zoom, unit, self.max_iter)
        evaluations += self.size * self.size
        return TileResult.dense(self.grid_x, self.grid_y, self.size, counts,
                                coloring.colorize(counts), evaluations)

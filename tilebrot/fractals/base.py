from dataclasses import dataclass, replace
from typing import Optional, Tuple

from tilebrot.utils.coords import (image_to_fractal_coords,
                                   fractal_to_image_coords)


ZOOM_FLOOR = 16
ZOOM_STEP = 1.33
# Keeps zoom and the grid coordinates within the float range
ZOOM_CEILING = 2 ** 1000


def _div_round(a: int, b: int) -> int:
    """a / b rounded to the nearest int (halves up), exact for any size; b > 0."""
    return (2 * a + b) // (2 * b)


def _div_trunc(a: int, b: int) -> int:
    """a / b truncated toward zero; b > 0."""
    q = abs(a) // b
    return q if a >= 0 else -q


@dataclass
class Viewport:
    """
    Visible window onto the fractal plane.

    center_x / center_y live on the integer grid shared with the tiles:
    their plane value is coordinate / zoom. Width and height are the size
    of the resulting image in pixels, max_iter the escape bound used for
    every point of a frame.
    """
    width: int
    height: int
    center_x: int = 0
    center_y: int = 0
    zoom: int = ZOOM_FLOOR
    max_iter: int = 256
    zoom_floor: int = ZOOM_FLOOR
    zoom_ceiling: int = ZOOM_CEILING
    zoom_step: float = ZOOM_STEP

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport size must be positive, got {self.width}x{self.height}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        if self.zoom_floor < 1:
            raise ValueError(f"zoom_floor must be >= 1, got {self.zoom_floor}")
        if self.zoom < self.zoom_floor:
            raise ValueError(f"zoom {self.zoom} is below the floor {self.zoom_floor}")
        if self.zoom > self.zoom_ceiling:
            raise ValueError(f"zoom {self.zoom} is above the ceiling {self.zoom_ceiling}")
        if self.zoom_step <= 1:
            raise ValueError(f"zoom_step must be > 1, got {self.zoom_step}")

    # ---- Coordinates ----------------------------------------------------

    @property
    def top_left(self) -> Tuple[int, int]:
        """Grid coordinate of pixel (0, 0)."""
        return self.center_x - self.width // 2, self.center_y - self.height // 2

    def pixel_to_plane(self, px: int, py: int) -> complex:
        return image_to_fractal_coords(px, py, self.center_x, self.center_y,
                                       self.zoom, self.width, self.height)

    def plane_to_pixel(self, point: complex) -> Tuple[int, int]:
        return fractal_to_image_coords(point, self.center_x, self.center_y,
                                       self.zoom, self.width, self.height)

    # ---- Mutators -------------------------------------------------------

    def pan(self, dx: int, dy: int) -> None:
        self.center_x += int(dx)
        self.center_y += int(dy)

    def _scaled_zoom(self, wheel_delta: int) -> int:
        try:
            scaled = round(self.zoom * self.zoom_step ** wheel_delta)
        except OverflowError:
            # step ** delta or the product left the float range
            scaled = self.zoom_ceiling
        return min(self.zoom_ceiling, max(self.zoom_floor, scaled))

    def zoom_at(self, wheel_delta: int, cursor_px: int, cursor_py: int) -> None:
        """
        Rescale by zoom_step ** wheel_delta around the cursor so that the
        plane point under the cursor stays where it is. The result is
        clamped to [zoom_floor, zoom_ceiling].
        """
        old = self.zoom
        new = self._scaled_zoom(wheel_delta)
        x_offset = _div_trunc((cursor_px - self.width // 2) * (new - old), old)
        y_offset = _div_trunc((cursor_py - self.height // 2) * (new - old), old)
        self.center_x = _div_round(self.center_x * new, old) + x_offset
        self.center_y = _div_round(self.center_y * new, old) + y_offset
        self.zoom = new

    def resize(self, width: int, height: int, *, keep_scale: bool = True) -> None:
        """
        Replace the pixel size. With keep_scale=False the zoom follows the
        height so the same vertical extent of the plane stays visible.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport size must be positive, got {width}x{height}")
        if not keep_scale:
            new = _div_round(self.zoom * int(height), self.height)
            new = min(self.zoom_ceiling, max(self.zoom_floor, new))
            self.center_x = _div_round(self.center_x * new, self.zoom)
            self.center_y = _div_round(self.center_y * new, self.zoom)
            self.zoom = new
        self.width = int(width)
        self.height = int(height)

    def adjust_max_iter(self, delta: int) -> None:
        self.max_iter = max(1, self.max_iter + int(delta))

    def copy(self, **changes) -> "Viewport":
        return replace(self, **changes)


@dataclass(frozen=True)
class RenderSettings:
    """
    Engine configuration.
    Tile_size is the edge length of a tile in grid units (= pixels).
    Max_workers sizes the thread pool (None lets concurrent.futures decide).
    Border_stride is the step of the uniformity scan along each tile edge,
    uniform_check=False disables the scan and always evaluates densely.
    """
    tile_size: int = 32
    max_workers: Optional[int] = None
    border_stride: int = 2
    uniform_check: bool = True

    def __post_init__(self):
        if self.tile_size < 1:
            raise ValueError(f"tile_size must be >= 1, got {self.tile_size}")
        if self.border_stride < 1:
            raise ValueError(f"border_stride must be >= 1, got {self.border_stride}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

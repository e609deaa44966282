from dataclasses import dataclass

import numpy as np

from tilebrot.coloring.base import ColoringStrategy


@dataclass(frozen=True)
class HueCycleColoring(ColoringStrategy):
    """
    Cycles the escape count around the hue circle:
        hue = ((scale * n**exponent) mod period + offset) / period * 2pi
    and reads the three channels off phase-shifted sine/cosine waves.
    Points that never escaped (n == 0) are black.
    """
    scale: float = 3.0
    exponent: float = 1.0
    period: int = 161
    offset: int = 30

    def colorize(self, iter_buf: np.ndarray) -> np.ndarray:
        n = np.asarray(iter_buf)
        rgb = np.zeros(n.shape + (3,), dtype=np.uint8)
        escaped = n != 0
        if not np.any(escaped):
            return rgb

        k = self.scale * np.power(n[escaped].astype(np.float64), self.exponent)
        hue = (np.mod(k, self.period) + self.offset) / self.period * 2.0 * np.pi
        channels = np.stack((np.sin(hue), np.cos(hue), np.cos(hue + np.pi / 2.0)), axis=-1)
        rgb[escaped] = ((channels * 0.5 + 0.5) * 255.0).astype(np.uint8)
        return rgb

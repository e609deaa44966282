from abc import ABC, abstractmethod
from typing import Tuple

import numpy as np


class ColoringStrategy(ABC):
    """Maps escape counts to RGB. Implementations must be pure."""

    @abstractmethod
    def colorize(self, iter_buf: np.ndarray) -> np.ndarray:
        """(...,) integer escape counts -> (..., 3) uint8 RGB."""
        ...

    def color(self, iterations: int) -> Tuple[int, int, int]:
        rgb = self.colorize(np.array([iterations], dtype=np.int64))[0]
        return int(rgb[0]), int(rgb[1]), int(rgb[2])

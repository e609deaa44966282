from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class RenderStats:
    tiles: int = 0
    cache_hits: int = 0
    computed: int = 0
    uniform: int = 0
    evaluations: int = 0     # escape-count evaluations performed this render
    elapsed_ms: float = 0.0


@dataclass(frozen=True)
class FrameEvent:
    data: np.ndarray    # (H, W, 3) uint8 framebuffer
    width: int
    height: int
    seq: int            # render sequence number
    stats: RenderStats


@dataclass(frozen=True)
class LogEvent:
    message: str
    level: Optional[str]

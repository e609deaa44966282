from enum import Enum, auto


class EngineMode(Enum):
    FULL_FRAME = auto()
    TILED = auto()

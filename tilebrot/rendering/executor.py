from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class RenderExecutor:
    """
    Execution facade over a thread pool.

    Work items are independent and read-only; the numba kernels release the
    GIL so the threads compute in parallel. The pool is created lazily and
    kept alive between renders until close().
    """

    def __init__(self, max_workers: Optional[int] = None) -> None:
        self.max_workers = max_workers
        self._pool: Optional[ThreadPoolExecutor] = None

    # ---- Lifecycle ------------------------------------------------------

    def _ensure_pool(self) -> ThreadPoolExecutor:
        if self._pool is None:
            self._pool = ThreadPoolExecutor(max_workers=self.max_workers,
                                            thread_name_prefix="tilebrot")
        return self._pool

    def close(self) -> None:
        if self._pool is not None:
            self._pool.shutdown(wait=True)
            self._pool = None

    def __enter__(self) -> "RenderExecutor":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ---- Data-parallel map ---------------------------------------------

    def map(self, fn: Callable[[T], R], items: Iterable[T]) -> List[R]:
        """Apply fn to every item in parallel; results keep input order."""
        items = list(items)
        if not items:
            return []
        t0 = time.perf_counter()
        results = list(self._ensure_pool().map(fn, items))
        logger.debug("Mapped %d items in %.2f ms", len(items),
                     (time.perf_counter() - t0) * 1000.0)
        return results

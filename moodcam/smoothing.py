"""
Sliding-window averaging of classifier outputs.
"""
from __future__ import annotations
from collections import deque
from typing import Deque, Optional
import numpy as np


class PredictionWindow:
    """Fixed-size FIFO of recent probability vectors, averaged per label."""
    def __init__(self, size: int = 10):
        if int(size) < 1:
            raise ValueError("window size must be >= 1")
        self.size = int(size)
        self._items: Deque[np.ndarray] = deque(maxlen=self.size)
        self._width: Optional[int] = None

    def push(self, probs) -> None:
        vec = np.asarray(probs, dtype=np.float64).reshape(-1)
        if self._width is not None and vec.shape[0] != self._width:
            raise ValueError(f"expected {self._width} scores, got {vec.shape[0]}")
        self._width = vec.shape[0]
        # deque(maxlen) evicts the oldest entry
        self._items.append(vec)

    def mean(self) -> Optional[np.ndarray]:
        if not self._items:
            return None
        return np.mean(np.stack(self._items), axis=0)

    def top(self) -> tuple[Optional[int], float]:
        avg = self.mean()
        if avg is None:
            return None, 0.0
        # np.argmax returns the first maximum
        idx = int(np.argmax(avg))
        return idx, float(avg[idx])

    def score_of(self, index: int) -> float:
        avg = self.mean()
        if avg is None:
            return 0.0
        return float(avg[index])

    def clear(self) -> None:
        self._items.clear()
        self._width = None

    def __len__(self) -> int:
        return len(self._items)

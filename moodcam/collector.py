"""
Manual sample collection: tag live embeddings with the active label.
"""
from __future__ import annotations
from typing import List, Optional
import logging
import numpy as np

from moodcam.models import LABELS, Sample, label_index

logger = logging.getLogger(__name__)


class SampleCollector:
    """In-memory training set filled while a collection mode is active."""
    def __init__(self):
        self.active: Optional[int] = None
        self.samples: List[Sample] = []

    def start(self, label: int | str) -> int:
        self.active = label_index(label)
        logger.debug(f"[collector] collecting label={LABELS[self.active]}")
        return self.active

    def stop(self) -> None:
        if self.active is not None:
            logger.debug(f"[collector] stop; total samples={len(self.samples)}")
        self.active = None

    @property
    def collecting(self) -> bool:
        return self.active is not None

    def add(self, embedding) -> Sample:
        """Append one (embedding, active label) pair. No dedup, no cap."""
        if self.active is None:
            raise RuntimeError("Not in collection mode")
        vec = np.asarray(embedding, dtype=np.float32).reshape(-1)
        sample = Sample(embedding=vec.tolist(), label=self.active)
        self.samples.append(sample)
        logger.debug(f"[collector] collected {len(self.samples)} ({LABELS[self.active]})")
        return sample

    def counts(self) -> dict[str, int]:
        out = {name: 0 for name in LABELS}
        for s in self.samples:
            out[LABELS[s.label]] += 1
        return out

    def clear(self) -> None:
        self.samples = []

    def __len__(self) -> int:
        return len(self.samples)

"""
Pydantic data models for samples, snapshots and API IO.
"""
from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Literal

LABELS: tuple[str, ...] = ("happy", "sad", "stressed")
STRESS_INDEX = LABELS.index("stressed")


def label_index(label: int | str) -> int:
    """Resolve a label name or index to an index into LABELS."""
    if isinstance(label, str):
        name = label.strip().lower()
        if name.isdigit():
            label = int(name)
        elif name in LABELS:
            return LABELS.index(name)
        else:
            raise ValueError(f"Unknown label: {label!r}")
    idx = int(label)
    if not 0 <= idx < len(LABELS):
        raise ValueError(f"Label index out of range: {idx}")
    return idx


class Sample(BaseModel):
    model_config = ConfigDict(frozen=True)

    embedding: List[float]
    label: int

    @field_validator("label")
    @classmethod
    def _known_label(cls, v: int) -> int:
        return label_index(v)

    @field_validator("embedding")
    @classmethod
    def _non_empty(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("embedding must not be empty")
        return v

class CollectStatus(BaseModel):
    label: str
    count: int

class MoodSnapshot(BaseModel):
    ts: float
    mood: str
    confidence: float
    stress: float
    probabilities: List[float] = Field(default_factory=list)
    window_fill: int = 0

class TickResult(BaseModel):
    mode: Literal["collect", "predict", "idle"]
    collect: Optional[CollectStatus] = None
    snapshot: Optional[MoodSnapshot] = None

class SessionStatus(BaseModel):
    collecting: Optional[str] = None
    sample_counts: dict[str, int] = Field(default_factory=dict)
    has_classifier: bool = False
    window_fill: int = 0
    last_snapshot: Optional[MoodSnapshot] = None

class TrainResult(BaseModel):
    samples: int
    epochs_run: int
    final_loss: Optional[float] = None
    final_accuracy: Optional[float] = None

class VideoMoodReport(BaseModel):
    timeline: List[MoodSnapshot] = Field(default_factory=list)
    summary: dict[str, float] = Field(default_factory=dict)

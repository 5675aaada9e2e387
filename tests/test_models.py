
import pytest
from pydantic import ValidationError
from moodcam.models import LABELS, STRESS_INDEX, Sample, MoodSnapshot, TickResult, CollectStatus, label_index

def test_label_set():
    assert LABELS == ("happy", "sad", "stressed")
    assert LABELS[STRESS_INDEX] == "stressed"

def test_label_index():
    assert label_index("Sad") == 1
    assert label_index("2") == 2
    assert label_index(0) == 0
    with pytest.raises(ValueError):
        label_index("angry")
    with pytest.raises(ValueError):
        label_index(3)

def test_sample_is_immutable():
    s = Sample(embedding=[0.1, 0.2], label=2)
    with pytest.raises(ValidationError):
        s.label = 0

def test_sample_validation():
    with pytest.raises(ValidationError):
        Sample(embedding=[0.1], label=5)
    with pytest.raises(ValidationError):
        Sample(embedding=[], label=0)

def test_models():
    snap = MoodSnapshot(ts=0.0, mood="happy", confidence=0.7, stress=0.1, probabilities=[0.7, 0.2, 0.1], window_fill=1)
    tr = TickResult(mode="predict", snapshot=snap)
    assert tr.model_dump()["snapshot"]["mood"] == "happy"
    tc = TickResult(mode="collect", collect=CollectStatus(label="sad", count=4))
    assert tc.snapshot is None and tc.collect.count == 4

import types
import numpy as np
import pytest

import moodcam.embedding as embedding
from moodcam.config import Settings
from moodcam.models import Sample

EMBED = 8


class FakeBackbone:
    """Stands in for MobileNetV2: embedding derived from the frame's mean colour."""
    def __init__(self, width=EMBED):
        self.width = width
        self.calls = 0

    def __call__(self, batch, training=False):
        self.calls += 1
        level = float(np.mean(batch))
        return np.full((1, self.width), level, dtype=np.float32) + np.arange(self.width, dtype=np.float32) * 0.01


class FakeClassifier:
    """Keras-like callable returning a scripted sequence of probability vectors."""
    def __init__(self, outputs, width=EMBED):
        self.inputs = [types.SimpleNamespace(shape=(None, width))]
        self.outputs = [np.asarray(o, dtype=np.float32) for o in outputs]
        self.calls = 0

    def __call__(self, x, training=False):
        out = self.outputs[min(self.calls, len(self.outputs) - 1)]
        self.calls += 1
        return out.reshape(1, -1)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        EMBED_SIZE=EMBED,
        SMOOTHING_WINDOW=3,
        TICK_INTERVAL=0.3,
        EPOCHS=3,
        BATCH_SIZE=4,
        EARLY_STOP_PATIENCE=2,
        MODEL_PATH=str(tmp_path / "models" / "mood-stress-model.keras"),
        THEME_PATH=str(tmp_path / "theme.json"),
    )

@pytest.fixture
def fake_backbone(monkeypatch):
    bb = FakeBackbone()
    monkeypatch.setattr(embedding, "_backbone", bb)
    return bb

@pytest.fixture
def frame():
    return np.full((48, 64, 3), 128, dtype=np.uint8)

@pytest.fixture
def clustered_samples():
    """Three well-separated clusters, one per label."""
    rng = np.random.default_rng(0)
    out = []
    for label in range(3):
        center = np.zeros(EMBED, dtype=np.float32)
        center[label * 2:(label * 2) + 2] = 3.0
        for _ in range(10):
            vec = center + rng.normal(0, 0.05, EMBED).astype(np.float32)
            out.append(Sample(embedding=vec.tolist(), label=label))
    return out

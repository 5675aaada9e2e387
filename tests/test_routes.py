
import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient
from api.main import app
import api.routes as routes
from moodcam.live import MoodSession
from conftest import FakeClassifier


@pytest.fixture
def client(monkeypatch, settings, fake_backbone):
    monkeypatch.setattr(routes, "settings", settings)
    monkeypatch.setattr(routes, "session", MoodSession(settings))
    return TestClient(app)

def _jpeg(value=120):
    ok, buf = cv2.imencode(".jpg", np.full((32, 32, 3), value, dtype=np.uint8))
    assert ok
    return buf.tobytes()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}

def test_frame_idle_without_model(client):
    r = client.post("/frame", files={"file": ("f.jpg", _jpeg(), "image/jpeg")})
    assert r.status_code == 200
    assert r.json()["mode"] == "idle"

def test_collect_flow(client):
    r = client.post("/collect/stressed")
    assert r.status_code == 200 and r.json()["collecting"] == "stressed"
    for _ in range(3):
        r = client.post("/frame", files={"file": ("f.jpg", _jpeg(), "image/jpeg")})
    body = r.json()
    assert body["mode"] == "collect" and body["collect"]["count"] == 3
    r = client.post("/collect/stop")
    assert r.json() == {"collecting": None, "samples": 3}
    status = client.get("/status").json()
    assert status["sample_counts"]["stressed"] == 3 and status["collecting"] is None

def test_collect_unknown_label(client):
    r = client.post("/collect/bored")
    assert r.status_code == 400

def test_frame_bad_image(client):
    r = client.post("/frame", files={"file": ("f.jpg", b"not an image", "image/jpeg")})
    assert r.status_code == 400

def test_frame_predicts_with_classifier(client):
    routes.session.classifier = FakeClassifier([[0.2, 0.1, 0.7]])
    r = client.post("/frame", files={"file": ("f.jpg", _jpeg(), "image/jpeg")})
    snap = r.json()["snapshot"]
    assert r.json()["mode"] == "predict"
    assert snap["mood"] == "stressed"
    assert snap["stress"] == pytest.approx(0.7)

def test_train_without_samples(client):
    r = client.post("/train")
    assert r.status_code == 400
    assert r.json()["detail"] == "No samples collected"

def test_download_requires_model(client):
    r = client.get("/model/download")
    assert r.status_code == 400
    assert r.json()["detail"] == "Train model first"

def test_train_and_download(client, settings):
    client.post("/collect/happy")
    client.post("/frame", files={"file": ("a.jpg", _jpeg(40), "image/jpeg")})
    client.post("/collect/sad")
    client.post("/frame", files={"file": ("b.jpg", _jpeg(220), "image/jpeg")})
    r = client.post("/train")
    assert r.status_code == 200 and r.json()["samples"] == 2
    r = client.get("/model/download")
    assert r.status_code == 200
    assert "mood-stress-model.keras" in r.headers["content-disposition"]
    assert len(r.content) > 0

def test_analyze_video(client, monkeypatch):
    def fake_analyze(path, settings, classifier=None):
        return {"timeline": [{"ts": 0.0, "mood": "happy", "confidence": 0.9, "stress": 0.05,
                              "probabilities": [0.9, 0.05, 0.05], "window_fill": 1}],
                "summary": {"ticks": 1.0}}
    monkeypatch.setattr(routes, "analyze_video_moods", fake_analyze)
    r = client.post("/analyze/video", files={"file": ("v.mp4", b"fake", "video/mp4")})
    assert r.status_code == 200
    assert r.json()["timeline"][0]["mood"] == "happy"

def test_analyze_video_without_model(client):
    r = client.post("/analyze/video", files={"file": ("v.mp4", b"fake", "video/mp4")})
    assert r.status_code == 404

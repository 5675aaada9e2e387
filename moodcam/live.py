# moodcam/live.py
"""
Live (real-time) mood/stress detection.

MoodSession ties the pipeline together for one camera feed:
- collection mode: each tick tags the current embedding with the active label
- prediction mode: each tick runs the classifier and smooths over the last
  SMOOTHING_WINDOW outputs
- training replaces the classifier only when it succeeds

This module also provides the OpenCV overlay window (run_live_overlay) that
polls the camera on a fixed TICK_INTERVAL and draws mood, stress and
collection progress.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import cv2
import numpy as np

from moodcam.config import Settings
from moodcam.classifier import (
    NoSamplesError,
    load_classifier,
    predict_proba,
    save_classifier,
    train_classifier,
)
from moodcam.collector import SampleCollector
from moodcam.embedding import capture_embedding
from moodcam.models import (
    LABELS,
    STRESS_INDEX,
    CollectStatus,
    MoodSnapshot,
    SessionStatus,
    TickResult,
    TrainResult,
)
from moodcam.smoothing import PredictionWindow
from moodcam.theme import load_theme, save_theme, toggle_theme
from moodcam.visual import draw_mood_overlay

logger = logging.getLogger(__name__)

NO_MODEL_MESSAGE = "No saved model found! Please train and save a model first."
TRAINED_MESSAGE = "Training finished. Start moving/expressing in front of camera to see live prediction."
NO_SAMPLES_MESSAGE = "No samples collected"
NO_CLASSIFIER_MESSAGE = "Train model first"
MESSAGE_SECONDS = 3.0
WINDOW_TITLE = "Mood Detector (q to quit)"


class TickTimer:
    """Fixed-period polling; a paused timer never fires."""
    def __init__(self, interval: float = 0.3):
        self.interval = max(0.0, float(interval))
        self.paused = False
        self._next = 0.0

    def due(self, now: float) -> bool:
        if self.paused:
            return False
        if now >= self._next:
            self._next = now + self.interval
            return True
        return False

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False
        self._next = 0.0


# -----------------------------------------------------------------------------
# MoodSession: collector + classifier + smoothing window
# -----------------------------------------------------------------------------
class MoodSession:
    """Embedding capture -> classifier -> smoothing for a single feed."""
    def __init__(self, settings: Settings, classifier=None):
        self.s = settings
        self.collector = SampleCollector()
        self.classifier = classifier
        self.window = PredictionWindow(settings.SMOOTHING_WINDOW)
        self.last_snapshot: Optional[MoodSnapshot] = None

    # ---- model lifecycle ----
    def load(self, path: Optional[str] = None) -> bool:
        """Load the saved classifier; False (and a warning) if unavailable."""
        path = path or self.s.MODEL_PATH
        try:
            self.classifier = load_classifier(path, expected_dim=self.s.EMBED_SIZE)
        except (FileNotFoundError, ValueError, OSError) as e:
            logger.warning(f"[live] no saved model: {e}")
            return False
        self.window.clear()
        return True

    def train(self, seed: Optional[int] = None) -> TrainResult:
        """Fit on the collected samples; the previous classifier survives a failure."""
        model, result = train_classifier(self.collector.samples, self.s, seed=seed)
        self.classifier = model
        self.window.clear()
        self.last_snapshot = None
        return result

    def save(self, path: Optional[str] = None) -> str:
        if self.classifier is None:
            raise RuntimeError(NO_CLASSIFIER_MESSAGE)
        return save_classifier(self.classifier, path or self.s.MODEL_PATH)

    # ---- per-tick work ----
    def predict(self, embedding) -> MoodSnapshot:
        if self.classifier is None:
            raise RuntimeError(NO_CLASSIFIER_MESSAGE)
        probs = predict_proba(self.classifier, embedding)
        self.window.push(probs)
        avg = self.window.mean()
        idx, conf = self.window.top()
        snap = MoodSnapshot(
            ts=time.time(),
            mood=LABELS[idx],
            confidence=conf,
            stress=self.window.score_of(STRESS_INDEX),
            probabilities=[float(p) for p in avg],
            window_fill=len(self.window),
        )
        self.last_snapshot = snap
        return snap

    def tick(self, frame: np.ndarray) -> TickResult:
        if self.collector.collecting:
            sample = self.collector.add(capture_embedding(frame, self.s))
            status = CollectStatus(label=LABELS[sample.label], count=len(self.collector))
            return TickResult(mode="collect", collect=status)
        if self.classifier is not None:
            snap = self.predict(capture_embedding(frame, self.s))
            logger.debug(f"[live] mood={snap.mood} conf={snap.confidence:.2f} stress={snap.stress:.2f}")
            return TickResult(mode="predict", snapshot=snap)
        return TickResult(mode="idle")

    def status(self) -> SessionStatus:
        active = self.collector.active
        return SessionStatus(
            collecting=LABELS[active] if active is not None else None,
            sample_counts=self.collector.counts(),
            has_classifier=self.classifier is not None,
            window_fill=len(self.window),
            last_snapshot=self.last_snapshot,
        )


# -----------------------------------------------------------------------------
# Live camera overlay (OpenCV window, key/mouse wiring)
# -----------------------------------------------------------------------------
class LiveOverlay:
    """
    Keys:
      1/2/3  collect happy / sad / stressed
      0      stop collecting (mouse button release does the same)
      t      train on collected samples
      s      save the classifier to MODEL_PATH
      p      pause / resume the tick timer
      m      toggle dark/light theme (persisted)
      q      quit
    """
    def __init__(self, settings: Settings, session: Optional[MoodSession] = None):
        self.s = settings
        self.session = session or MoodSession(settings)
        self.timer = TickTimer(settings.TICK_INTERVAL)
        self.theme = load_theme(settings.THEME_PATH)
        self.message: Optional[str] = None
        self.message_until: Optional[float] = None
        # tick failure shown until the timer is resumed
        self.error: Optional[str] = None
        self.last_result: Optional[TickResult] = None

    def show_message(self, text: str, sticky: bool = False) -> None:
        self.message = text
        self.message_until = None if sticky else time.monotonic() + MESSAGE_SECONDS

    def current_message(self) -> Optional[str]:
        if self.error:
            return self.error
        if self.message and self.message_until is not None and time.monotonic() > self.message_until:
            self.message = None
            self.message_until = None
        return self.message

    def on_mouse(self, event, x, y, flags, param) -> None:
        if event in (cv2.EVENT_LBUTTONUP, cv2.EVENT_RBUTTONUP):
            self.session.collector.stop()

    def on_key(self, key: int) -> bool:
        """Apply a key press; returns False when the loop should exit."""
        if key == ord("q"):
            return False
        if key in (ord("1"), ord("2"), ord("3")):
            self.session.collector.start(key - ord("1"))
        elif key == ord("0"):
            self.session.collector.stop()
        elif key == ord("t"):
            self.session.collector.stop()
            try:
                self.session.train()
                self.show_message(TRAINED_MESSAGE)
            except NoSamplesError:
                self.show_message(NO_SAMPLES_MESSAGE)
            except Exception as e:
                logger.exception("[live] training failed")
                self.show_message(f"Training failed: {e}")
        elif key == ord("s"):
            try:
                path = self.session.save()
                self.show_message(f"Saved {path}")
            except RuntimeError as e:
                self.show_message(str(e))
            except Exception as e:
                logger.exception("[live] save failed")
                self.show_message(f"Save failed: {e}")
        elif key == ord("p"):
            if self.timer.paused:
                self.error = None
                self.timer.resume()
            else:
                self.timer.pause()
        elif key == ord("m"):
            self.theme = toggle_theme(self.theme)
            try:
                save_theme(self.s.THEME_PATH, self.theme)
            except OSError:
                logger.exception("[live] failed to persist theme")
        return True

    def step(self, frame: np.ndarray, now: Optional[float] = None) -> np.ndarray:
        """Run a tick if due and return the annotated frame."""
        now = time.monotonic() if now is None else now
        if self.timer.due(now):
            try:
                self.last_result = self.session.tick(frame)
            except Exception as e:
                # terminal for the live flow: stop ticking until resumed
                logger.exception("[live] tick failed")
                self.timer.pause()
                self.error = f"Error: {e}"
                self.last_result = None

        if self.session.classifier is None and not self.session.collector.collecting and not self.message:
            self.show_message(NO_MODEL_MESSAGE, sticky=True)
        elif self.session.classifier is not None and self.message == NO_MODEL_MESSAGE:
            self.message = None

        res = self.last_result
        snapshot = res.snapshot if res is not None and res.mode == "predict" else None
        status = res.collect if res is not None and res.mode == "collect" and self.session.collector.collecting else None
        if status is not None:
            message = None
        else:
            message = self.current_message()
        return draw_mood_overlay(frame, snapshot, status, message, self.theme)


def run_live_overlay(settings: Settings, camera_index: Optional[int] = None) -> None:
    """
    Open webcam and run the collect/train/predict loop in an OpenCV window.

    A missing saved model leaves an on-screen notice and no live prediction
    until a classifier is trained. Press 'q' to quit.
    """
    cam_idx = settings.CAMERA_INDEX if camera_index is None else camera_index
    cap = cv2.VideoCapture(cam_idx)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open camera index {cam_idx}")
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, settings.FRAME_WIDTH)
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, settings.FRAME_HEIGHT)

    overlay = LiveOverlay(settings)
    if overlay.session.load():
        logger.info("[live] ready for live predictions")
    else:
        overlay.show_message(NO_MODEL_MESSAGE, sticky=True)

    cv2.namedWindow(WINDOW_TITLE)
    cv2.setMouseCallback(WINDOW_TITLE, overlay.on_mouse)

    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break
            annotated = overlay.step(frame)
            cv2.imshow(WINDOW_TITLE, annotated)
            key = cv2.waitKey(1) & 0xFF
            if key != 0xFF and not overlay.on_key(key):
                break
    finally:
        cap.release()
        cv2.destroyAllWindows()

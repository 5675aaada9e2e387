# moodcam/pipeline.py
from __future__ import annotations
from typing import Dict
import logging
import os

import cv2

from moodcam.config import Settings
from moodcam.classifier import load_classifier
from moodcam.embedding import capture_embedding
from moodcam.live import MoodSession
from moodcam.models import LABELS, VideoMoodReport

logger = logging.getLogger(__name__)

def analyze_video_moods(video_path: str, settings: Settings, classifier=None) -> Dict:
    """
    Replay a recorded video through the live pipeline, one tick every
    TICK_INTERVAL seconds of video time.

    Returns:
      {"timeline": [snapshot, ...], "summary": {...}}
      Snapshot timestamps are seconds from the start of the video.
    """
    if not os.path.exists(video_path):
        raise FileNotFoundError(f"Video not found: {video_path}")

    if classifier is None:
        classifier = load_classifier(settings.MODEL_PATH, expected_dim=settings.EMBED_SIZE)

    logger.debug(f"[pipeline] open video: {video_path}")
    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open video: {video_path}")

    fps = cap.get(cv2.CAP_PROP_FPS) or 25.0
    interval_frames = max(1, int(round(fps * float(settings.TICK_INTERVAL))))
    logger.debug(f"[pipeline] fps={fps} interval_frames={interval_frames}")

    session = MoodSession(settings, classifier=classifier)
    timeline = []
    frame_index = 0
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break
            if frame_index % interval_frames == 0:
                snap = session.predict(capture_embedding(frame, settings))
                timeline.append(snap.model_copy(update={"ts": round(frame_index / fps, 2)}))
            frame_index += 1
    finally:
        cap.release()

    summary: Dict[str, float] = {"ticks": float(len(timeline))}
    if timeline:
        for name in LABELS:
            summary[f"{name}_share"] = round(sum(1 for s in timeline if s.mood == name) / len(timeline), 3)
        summary["mean_stress"] = round(sum(s.stress for s in timeline) / len(timeline), 3)
        summary["peak_stress"] = round(max(s.stress for s in timeline), 3)

    logger.debug(f"[pipeline] finished; ticks={len(timeline)}")
    return VideoMoodReport(timeline=timeline, summary=summary).model_dump()


"""Overlay drawing helpers.

- mood_text / stress_text: status strings shown for a MoodSnapshot
- draw_text_box: translucent box with one line of text near the bottom-left
- draw_mood_overlay: mood + stress lines and the status/alert box on a frame
"""
from __future__ import annotations
import cv2
import numpy as np
from typing import Optional

from moodcam.models import CollectStatus, MoodSnapshot
from moodcam.theme import palette, DEFAULT_THEME

BOX_W, BOX_H = 200, 36

def mood_text(snapshot: MoodSnapshot) -> str:
    return f"Mood: {snapshot.mood} ({snapshot.confidence * 100:.0f}%)"

def stress_text(snapshot: MoodSnapshot) -> str:
    return f"Stress: {snapshot.stress * 100:.0f}%"

def draw_text_box(frame: np.ndarray, text: str, theme: str = DEFAULT_THEME) -> np.ndarray:
    """Blend a translucent box 40px above the bottom edge and write text into it.

    The box grows to fit long messages.
    """
    out = frame.copy()
    h, w = out.shape[:2]
    pal = palette(theme)

    (tw, _), _ = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
    box_w = min(w, max(BOX_W, tw + 16))
    y0 = max(0, h - 40)
    y1 = min(h, y0 + BOX_H)

    layer = out.copy()
    cv2.rectangle(layer, (0, y0), (box_w, y1), pal["box"], -1)
    alpha = pal["box_alpha"]
    out = cv2.addWeighted(layer, alpha, out, 1.0 - alpha, 0)
    cv2.putText(out, text, (8, max(0, h - 14)), cv2.FONT_HERSHEY_SIMPLEX, 0.5, pal["text"], 1, cv2.LINE_AA)
    return out

def draw_mood_overlay(frame: np.ndarray,
                      snapshot: Optional[MoodSnapshot] = None,
                      status: Optional[CollectStatus] = None,
                      message: Optional[str] = None,
                      theme: str = DEFAULT_THEME) -> np.ndarray:
    """Render the current mood/stress, collection progress or an alert message.

    Args:
        frame: BGR image
        snapshot: latest smoothed prediction, if any
        status: collection progress while a collection mode is active
        message: alert text (takes the bottom box over status)
        theme: palette name

    Returns:
        Annotated copy of the frame
    """
    out = frame.copy()
    pal = palette(theme)

    if snapshot is not None:
        color = pal["moods"].get(snapshot.mood, pal["text"])
        cv2.putText(out, mood_text(snapshot), (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.8, color, 2, cv2.LINE_AA)
        cv2.putText(out, stress_text(snapshot), (10, 60), cv2.FONT_HERSHEY_SIMPLEX, 0.7,
                    pal["moods"]["stressed"], 2, cv2.LINE_AA)

    if message:
        out = draw_text_box(out, message, theme)
    elif status is not None:
        out = draw_text_box(out, f"Collected {status.count} ({status.label})", theme)
    return out

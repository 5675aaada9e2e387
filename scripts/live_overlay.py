
"""Run the live mood/stress overlay.

Usage:
    uvicorn api.main:app --reload  # (separate, for the browser API)
    python scripts/live_overlay.py  # (to see camera overlay window)

Hold a label with 1/2/3, stop with 0 or a mouse click, train with 't',
save with 's'. Press 'q' to quit the window.
"""
import logging
from moodcam.config import Settings
from moodcam.live import run_live_overlay

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    s = Settings()
    run_live_overlay(s)

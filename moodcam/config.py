"""
Configuration for the mood/stress detector.
"""
from pydantic import BaseModel
import os

class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    DEVICE: str = (os.getenv("DEVICE", "cpu") or "cpu")

    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    FRAME_WIDTH: int = int(os.getenv("FRAME_WIDTH", "640"))
    FRAME_HEIGHT: int = int(os.getenv("FRAME_HEIGHT", "480"))
    TICK_INTERVAL: float = float(os.getenv("TICK_INTERVAL", "0.3"))
    SMOOTHING_WINDOW: int = int(os.getenv("SMOOTHING_WINDOW", "10"))

    # must match the saved classifier's input width
    EMBED_SIZE: int = int(os.getenv("EMBED_SIZE", "1280"))
    BACKBONE_INPUT: int = int(os.getenv("BACKBONE_INPUT", "224"))
    MODEL_PATH: str = os.getenv("MODEL_PATH", "models/mood-stress-model.keras")
    THEME_PATH: str = os.getenv("THEME_PATH", ".moodcam-theme.json")

    EPOCHS: int = int(os.getenv("EPOCHS", "50"))
    BATCH_SIZE: int = int(os.getenv("BATCH_SIZE", "32"))
    LEARNING_RATE: float = float(os.getenv("LEARNING_RATE", "0.0001"))
    L2: float = float(os.getenv("L2", "0.01"))
    VAL_SPLIT: float = float(os.getenv("VAL_SPLIT", "0.2"))
    EARLY_STOP_PATIENCE: int = int(os.getenv("EARLY_STOP_PATIENCE", "10"))

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize DEVICE: strip comments/extra words, lower-case, validate
        dev = (self.DEVICE or "cpu").strip().split()[0].lower()
        if dev not in ("cpu", "cuda"):
            dev = "cpu"
        object.__setattr__(self, "DEVICE", dev)

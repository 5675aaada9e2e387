"""
MobileNetV2 feature extractor (lazy-loaded).
"""
from __future__ import annotations
import logging
import cv2
import numpy as np
from moodcam.config import Settings

logger = logging.getLogger(__name__)

_backbone = None

def load_backbone(settings: Settings):
    """
    Build the pretrained backbone once and cache it.

    The classification head is dropped and the last feature map is
    global-average pooled, so each frame becomes a single 1280-float vector.
    """
    global _backbone
    if _backbone is None:
        try:
            # Lazy import so tests and the API can start without TF initialised
            from tensorflow.keras.applications import MobileNetV2
            size = int(settings.BACKBONE_INPUT)
            _backbone = MobileNetV2(
                weights="imagenet",
                include_top=False,
                pooling="avg",
                input_shape=(size, size, 3),
            )
        except Exception as e:
            logger.exception("[embedding] backbone load failed")
            raise RuntimeError("Feature backbone unavailable. Ensure tensorflow is installed.") from e
        logger.debug(f"[embedding] MobileNetV2 loaded input={size}x{size}")
    return _backbone

def preprocess_frame(frame: np.ndarray, size: int = 224) -> np.ndarray:
    """
    BGR uint8 frame -> (1, size, size, 3) float32 batch scaled to [-1, 1].
    """
    if frame is None or getattr(frame, "size", 0) == 0:
        raise ValueError("Empty frame")
    if frame.ndim == 2:
        rgb = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
    else:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
    from tensorflow.keras.applications.mobilenet_v2 import preprocess_input
    resized = cv2.resize(rgb, (size, size), interpolation=cv2.INTER_AREA)
    arr = np.asarray(preprocess_input(resized.astype(np.float32)), dtype=np.float32)
    return np.expand_dims(arr, axis=0)

def capture_embedding(frame: np.ndarray, settings: Settings) -> np.ndarray:
    """
    Extract the average-pooled backbone activation for a single video frame.

    Returns a 1-D float32 vector of length settings.EMBED_SIZE.
    """
    backbone = load_backbone(settings)
    batch = preprocess_frame(frame, int(settings.BACKBONE_INPUT))
    out = backbone(batch, training=False)
    emb = np.asarray(out, dtype=np.float32).reshape(-1)
    if emb.shape[0] != settings.EMBED_SIZE:
        raise ValueError(
            f"Backbone produced {emb.shape[0]} features, expected EMBED_SIZE={settings.EMBED_SIZE}"
        )
    return emb

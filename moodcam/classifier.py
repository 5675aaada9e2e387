"""
Small feed-forward classifier on top of backbone embeddings (Keras).
"""
from __future__ import annotations
from typing import List, Optional, Sequence, Tuple
import logging
import os
import numpy as np
import tensorflow as tf
from tensorflow.keras import regularizers

from moodcam.config import Settings
from moodcam.models import LABELS, Sample, TrainResult

logger = logging.getLogger(__name__)


class NoSamplesError(ValueError):
    """Raised when training is requested with an empty sample set."""


def _device(settings: Settings) -> str:
    return "/GPU:0" if settings.DEVICE == "cuda" else "/CPU:0"

def input_width(model) -> int:
    return int(model.inputs[0].shape[-1])

def build_classifier(input_dim: int, num_labels: int, settings: Settings):
    """
    Two hidden layers with dropout and L2 weight decay, softmax over labels.
    """
    reg = settings.L2
    model = tf.keras.Sequential([
        tf.keras.Input(shape=(int(input_dim),), name="embedding"),
        tf.keras.layers.Dense(512, activation="relu", kernel_regularizer=regularizers.l2(reg)),
        tf.keras.layers.Dropout(0.4),
        tf.keras.layers.Dense(256, activation="relu", kernel_regularizer=regularizers.l2(reg)),
        tf.keras.layers.Dropout(0.3),
        tf.keras.layers.Dense(int(num_labels), activation="softmax"),
    ], name="mood_stress_classifier")
    model.compile(
        optimizer=tf.keras.optimizers.Adam(learning_rate=settings.LEARNING_RATE),
        loss="categorical_crossentropy",
        metrics=["accuracy"],
    )
    return model

def samples_to_arrays(samples: Sequence[Sample], embed_size: int) -> Tuple[np.ndarray, np.ndarray]:
    bad = [i for i, s in enumerate(samples) if len(s.embedding) != embed_size]
    if bad:
        raise ValueError(
            f"{len(bad)} sample(s) have embedding length != EMBED_SIZE={embed_size} (first at index {bad[0]})"
        )
    xs = np.asarray([s.embedding for s in samples], dtype=np.float32)
    ys = tf.keras.utils.to_categorical([s.label for s in samples], num_classes=len(LABELS))
    return xs, ys

def train_classifier(
    samples: List[Sample],
    settings: Settings,
    seed: Optional[int] = None,
):
    """
    Shuffle, hold out a validation split and fit a fresh classifier.

    Returns:
      (model, TrainResult)

    Raises:
      NoSamplesError: empty sample set; nothing is built.
      ValueError: an embedding does not match EMBED_SIZE.
    """
    if not samples:
        raise NoSamplesError("No samples collected")

    xs, ys = samples_to_arrays(samples, settings.EMBED_SIZE)
    if seed is not None:
        tf.keras.utils.set_random_seed(seed)
    order = np.random.default_rng(seed).permutation(len(xs))
    xs, ys = xs[order], ys[order]

    n = len(xs)
    val_len = int(n * settings.VAL_SPLIT)
    if 0 < val_len < n:
        x_train, y_train = xs[:-val_len], ys[:-val_len]
        validation = (xs[-val_len:], ys[-val_len:])
        monitor = "val_loss"
    else:
        # too few samples for a held-out split
        x_train, y_train = xs, ys
        validation = None
        monitor = "loss"
    logger.debug(f"[classifier] train n={n} val={0 if validation is None else val_len} monitor={monitor}")

    early = tf.keras.callbacks.EarlyStopping(monitor=monitor, patience=settings.EARLY_STOP_PATIENCE)
    with tf.device(_device(settings)):
        model = build_classifier(settings.EMBED_SIZE, len(LABELS), settings)
        history = model.fit(
            x_train, y_train,
            epochs=settings.EPOCHS,
            batch_size=settings.BATCH_SIZE,
            validation_data=validation,
            callbacks=[early],
            shuffle=True,
            verbose=0,
        )

    hist = history.history
    losses = hist.get("loss") or []
    accs = hist.get("accuracy") or []
    result = TrainResult(
        samples=n,
        epochs_run=len(losses),
        final_loss=float(losses[-1]) if losses else None,
        final_accuracy=float(accs[-1]) if accs else None,
    )
    logger.info(f"[classifier] training finished epochs={result.epochs_run} loss={result.final_loss}")
    return model, result

def predict_proba(model, embedding) -> np.ndarray:
    """
    Run the classifier on one embedding; dropout is inactive at inference.
    """
    vec = np.asarray(embedding, dtype=np.float32).reshape(1, -1)
    width = input_width(model)
    if vec.shape[1] != width:
        raise ValueError(f"Embedding length {vec.shape[1]} does not match classifier input {width}")
    out = model(vec, training=False)
    return np.asarray(out, dtype=np.float32).reshape(-1)

def save_classifier(model, path: str) -> str:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    model.save(path)
    logger.info(f"[classifier] saved -> {path}")
    return path

def load_classifier(path: str, expected_dim: Optional[int] = None):
    """
    Load a saved classifier and check its input width.

    Raises:
      FileNotFoundError: no model at path.
      ValueError: input width differs from expected_dim.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Saved model not found: {path}")
    model = tf.keras.models.load_model(path)
    width = input_width(model)
    logger.info(f"[classifier] loaded {path} input_shape={tuple(model.inputs[0].shape)}")
    if expected_dim is not None and width != int(expected_dim):
        raise ValueError(f"Saved model expects {width} features, EMBED_SIZE is {expected_dim}")
    return model

"""
REST endpoints for a browser front-end: frame ticks, collection, training,
model download and offline video analysis.
"""
import os
import shutil
import tempfile
import logging

import cv2
import numpy as np
from fastapi import APIRouter, UploadFile, File, HTTPException
from fastapi.responses import FileResponse, JSONResponse
from starlette.background import BackgroundTask

from moodcam.config import Settings
from moodcam.classifier import NoSamplesError
from moodcam.live import MoodSession, NO_CLASSIFIER_MESSAGE
from moodcam.pipeline import analyze_video_moods

router = APIRouter()
settings = Settings()
session = MoodSession(settings)
logger = logging.getLogger(__name__)


def _decode_image(data: bytes) -> np.ndarray:
    frame = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
    if frame is None:
        raise HTTPException(status_code=400, detail="Could not decode image")
    return frame


@router.get("/status")
async def status():
    return session.status().model_dump()

@router.post("/collect/stop")
async def collect_stop():
    session.collector.stop()
    return {"collecting": None, "samples": len(session.collector)}

@router.post("/collect/{label}")
async def collect_start(label: str):
    """
    Enter collection mode for a label name (happy/sad/stressed) or index.
    Every subsequent /frame is stored as a training sample until /collect/stop.
    """
    try:
        idx = session.collector.start(label)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"collecting": session.status().collecting, "label_index": idx}

@router.post("/frame")
async def frame(file: UploadFile = File(...)):
    """
    Run one tick on an uploaded video frame (JPEG/PNG).

    Returns:
        JSONResponse: {"mode": "collect"|"predict"|"idle", ...}
    """
    img = _decode_image(await file.read())
    try:
        result = session.tick(img)
    except ValueError as e:
        logger.exception("[api] tick rejected")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[api] tick failed")
        raise HTTPException(status_code=500, detail=str(e))
    return JSONResponse(result.model_dump())

@router.post("/train")
async def train():
    session.collector.stop()
    try:
        result = session.train()
    except NoSamplesError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[api] training failed")
        raise HTTPException(status_code=500, detail=str(e))
    return result.model_dump()

@router.get("/model/download")
async def model_download():
    """
    Serialize the current classifier and send it as a file download.
    """
    if session.classifier is None:
        raise HTTPException(status_code=400, detail=NO_CLASSIFIER_MESSAGE)
    tmp_dir = tempfile.mkdtemp(prefix="moodcam-")
    path = os.path.join(tmp_dir, os.path.basename(settings.MODEL_PATH))
    try:
        session.save(path)
    except Exception as e:
        logger.exception("[api] model serialization failed")
        shutil.rmtree(tmp_dir, ignore_errors=True)
        raise HTTPException(status_code=500, detail=str(e))
    return FileResponse(
        path,
        filename=os.path.basename(path),
        media_type="application/octet-stream",
        background=BackgroundTask(shutil.rmtree, tmp_dir, ignore_errors=True),
    )

@router.post("/analyze/video")
async def analyze_video(file: UploadFile = File(...)):
    """
    Replay an uploaded video through the classifier and smoother.

    Returns:
        JSONResponse: {"timeline": [...], "summary": {...}}
    """
    logger.debug(f"[api] /analyze/video filename={file.filename}")
    try:
        suffix = os.path.splitext(file.filename or "")[1] or ".mp4"
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
            shutil.copyfileobj(file.file, tmp)
            tmp_path = tmp.name
    except Exception as e:
        logger.exception("[api] upload save failed")
        raise HTTPException(status_code=400, detail=f"Upload failed: {e}")

    try:
        payload = analyze_video_moods(tmp_path, settings, classifier=session.classifier)
        return JSONResponse(payload)
    except FileNotFoundError as e:
        logger.exception("[api] analyze_video_moods file not found")
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("[api] analyze_video_moods failed")
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        try:
            os.unlink(tmp_path)
        except OSError:
            logger.warning(f"[api] failed to cleanup tmp file: {tmp_path}")

# gesture/camera.py
from typing import List, Optional, Tuple

import cv2
import numpy as np

from config import CAM_INDEX_CANDIDATES, CAP_BACKENDS, CAM_W, CAM_H, FRAME_WIDTH, JPEG_QUALITY


def camera_order(after: Optional[int] = None, candidates: List[int] = CAM_INDEX_CANDIDATES) -> List[int]:
    """
    Candidate indices in the order to try them. With `after`, start at the
    entry following it and wrap around, so `after` itself comes last.
    """
    order = list(candidates)
    if after in order:
        i = order.index(after) + 1
        order = order[i:] + order[:i]
    return order


def try_open_camera(after: Optional[int] = None) -> Tuple[Optional[cv2.VideoCapture], str, Optional[int]]:
    """
    Walk the index/backend candidates and return the first capture that opens,
    a short description for the HUD and the index that opened.
    """
    for idx in camera_order(after):
        for name, backend in CAP_BACKENDS:
            cap = cv2.VideoCapture(idx) if backend is None else cv2.VideoCapture(idx, backend)

            if cap is not None and cap.isOpened():
                cap.set(cv2.CAP_PROP_FRAME_WIDTH, CAM_W)
                cap.set(cv2.CAP_PROP_FRAME_HEIGHT, CAM_H)
                return cap, f"CAM idx={idx}, backend={name}", idx

            if cap is not None:
                cap.release()

    return None, "CAMERA_OPEN_FAILED", None


def encode_frame(frame: np.ndarray, width: int = FRAME_WIDTH, quality: int = JPEG_QUALITY) -> Optional[bytes]:
    """Downscale a BGR frame to `width` pixels and JPEG-encode it. None if the frame is empty."""
    if frame is None or frame.size == 0:
        return None

    h, w = frame.shape[:2]
    if w > width:
        frame = cv2.resize(frame, (width, int(h * width / w)), interpolation=cv2.INTER_AREA)

    ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not ok:
        return None
    return buf.tobytes()

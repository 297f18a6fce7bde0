# gesture/utils.py
from dataclasses import dataclass
from typing import Optional

import numpy as np

WRIST = 0
MIDDLE_FINGER_MCP = 9


@dataclass
class HandsLostBuffer:
    buffer_sec: float
    _lost_since: float = 0.0   # 0: hands currently seen

    def update(self, hand_present: bool, now: float) -> bool:
        """Effective presence: a short tracking gap still counts as hands visible."""
        if hand_present:
            self._lost_since = 0.0
            return True

        if self._lost_since == 0.0:
            self._lost_since = now
        # whole milliseconds, so the window closes exactly at buffer_sec
        return round((now - self._lost_since) * 1000) < round(self.buffer_sec * 1000)

    def reset(self):
        self._lost_since = 0.0


class VelocityTracker:
    """Smoothed keypoint speed, in hand sizes per frame times `scale`."""

    def __init__(self, scale: float, smoothing: float):
        self.scale = scale
        self.smoothing = smoothing
        self.velocity = 0.0
        self._prev: Optional[np.ndarray] = None

    def update(self, pts: Optional[np.ndarray]) -> float:
        if pts is None:
            # tracking lost: next detection starts a fresh baseline
            self._prev = None
            self.velocity = 0.0
            return self.velocity

        if self._prev is None or self._prev.shape != pts.shape:
            self._prev = pts
            return self.velocity

        raw = float(np.mean(np.linalg.norm(pts - self._prev, axis=1)))
        raw = raw / estimate_hand_size(pts) * self.scale
        self.velocity = self.smoothing * raw + (1.0 - self.smoothing) * self.velocity
        self._prev = pts
        return self.velocity


def lm_xy(lm, w, h):
    return np.array([lm.x * w, lm.y * h], dtype=np.float32)

def hand_points(landmarks, w, h) -> np.ndarray:
    return np.stack([lm_xy(lm, w, h) for lm in landmarks])

def dist(a, b) -> float:
    return float(np.linalg.norm(a - b))

def estimate_hand_size(pts) -> float:
    # pts may hold several hands stacked (21 rows each); the first hand sets the scale
    return max(1e-6, dist(pts[WRIST], pts[MIDDLE_FINGER_MCP]))

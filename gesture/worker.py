# gesture/worker.py
import time
import threading
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np

from config import MIRROR, SHOW_CAMERA, MAX_NUM_HANDS, VELOCITY_SCALE, VELOCITY_SMOOTHING
from gesture.types import SensorSample
from gesture.camera import try_open_camera, encode_frame
from gesture.utils import VelocityTracker, hand_points

WINDOW_NAME = "Camera (press Q to close this window)"


class SensorWorker(threading.Thread):
    """
    Camera + MediaPipe Hands in the background. The capture loop reads the
    latest reading through poll() and grabs stills through capture_frame().
    """

    def __init__(self):
        super().__init__(daemon=True)
        self._stop_event = threading.Event()
        self._switch_event = threading.Event()
        self.lock = threading.Lock()

        self.tracker = VelocityTracker(VELOCITY_SCALE, VELOCITY_SMOOTHING)
        self.show_camera = SHOW_CAMERA

        # no reading yet: no hands, no motion
        self._sample = SensorSample()
        self._frame: Optional[np.ndarray] = None
        self.label = "INIT"
        self.cam_info = ""

    def stop(self):
        self._stop_event.set()

    def switch_camera(self):
        """Ask the loop to move to the next camera candidate."""
        self._switch_event.set()

    def poll(self) -> SensorSample:
        with self.lock:
            return SensorSample(self._sample.hand_present, self._sample.velocity, self._sample.timestamp)

    def capture_frame(self) -> Optional[bytes]:
        with self.lock:
            frame = self._frame
        if frame is None:
            return None
        return encode_frame(frame)

    def _publish(self, hand_present: bool, velocity: float, label: str, frame=None):
        with self.lock:
            self._sample = SensorSample(hand_present, max(0.0, velocity), time.time())
            self.label = label
            if frame is not None:
                self._frame = frame

    def run(self):
        try:
            cap, cam_info, cam_idx = try_open_camera()
            with self.lock:
                self.cam_info = cam_info

            if cap is None:
                self._publish(False, 0.0, "CAMERA_OPEN_FAILED")
                print("[SensorWorker] CAMERA_OPEN_FAILED. Close apps using camera or try other index.")
                return

            print("[SensorWorker] Opened:", cam_info)

            mp_hands = mp.solutions.hands
            hands = mp_hands.Hands(
                static_image_mode=False,
                max_num_hands=MAX_NUM_HANDS,
                model_complexity=1,
                min_detection_confidence=0.5,
                min_tracking_confidence=0.5,
            )
            drawer = mp.solutions.drawing_utils

            while not self._stop_event.is_set():
                if self._switch_event.is_set():
                    self._switch_event.clear()
                    cap.release()
                    cap, cam_info, cam_idx = try_open_camera(after=cam_idx)
                    with self.lock:
                        self.cam_info = cam_info
                        self._frame = None
                    self.tracker.update(None)
                    if cap is None:
                        self._publish(False, 0.0, "CAMERA_OPEN_FAILED")
                        print("[SensorWorker] Camera switch failed, no candidate opened")
                        hands.close()
                        return
                    print("[SensorWorker] Switched to:", cam_info)

                ok, frame = cap.read()
                if not ok:
                    self.tracker.update(None)
                    self._publish(False, 0.0, "CAMERA_READ_FAILED")
                    time.sleep(0.01)
                    continue

                if MIRROR:
                    frame = cv2.flip(frame, 1)

                h, w = frame.shape[:2]
                rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
                result = hands.process(rgb)

                if result.multi_hand_landmarks:
                    pts = np.concatenate([
                        hand_points(hl.landmark, w, h) for hl in result.multi_hand_landmarks
                    ])
                    velocity = self.tracker.update(pts)
                    label = f"HANDS x{len(result.multi_hand_landmarks)} v={velocity:.2f}"
                    hand_present = True
                else:
                    velocity = self.tracker.update(None)
                    label = "NO_HAND"
                    hand_present = False

                # publish the clean frame; overlays below only go to the debug window
                self._publish(hand_present, velocity, label, frame.copy())

                if self.show_camera:
                    for hl in result.multi_hand_landmarks or []:
                        drawer.draw_landmarks(frame, hl, mp_hands.HAND_CONNECTIONS)
                    cv2.putText(frame, cam_info, (10, 24), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)
                    cv2.putText(frame, label, (10, 52), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 255, 0), 2)
                    cv2.imshow(WINDOW_NAME, frame)
                    k = cv2.waitKey(1) & 0xFF
                    if k in (ord('q'), ord('Q')):
                        cv2.destroyWindow(WINDOW_NAME)
                        self.show_camera = False

            cap.release()
            hands.close()
            if self.show_camera:
                cv2.destroyAllWindows()

        except Exception as e:
            import traceback
            self._publish(False, 0.0, "WORKER_EXCEPTION")
            print("[SensorWorker] Exception:", e)
            traceback.print_exc()
            return

# config.py
import os

import cv2
from dotenv import load_dotenv

load_dotenv()

# Camera: these indices are tried in order
CAM_INDEX_CANDIDATES = [0, 1, 2]

# Camera backends: tried in order
CAP_BACKENDS = [
    ("DSHOW", cv2.CAP_DSHOW),
    ("MSMF", cv2.CAP_MSMF),
    ("DEFAULT", None),
]

CAM_W, CAM_H = 640, 360
MIRROR = True

SHOW_CAMERA = True  # True: show the raw camera window (Q closes it, tracking keeps running)

# Motion sensor (velocity = landmark displacement / hand size, scaled)
VELOCITY_SCALE = 10.0
VELOCITY_SMOOTHING = 0.35     # EMA weight of the newest sample
MAX_NUM_HANDS = 2

# Frames sent to the interpreter
FRAME_WIDTH = 320
JPEG_QUALITY = 50
MIN_FRAME_BYTES = 100         # anything smaller is not a usable image

# Trigger policy (seconds, velocity on the sensor scale)
TICK_SEC = 0.03
THRESHOLD_START = 0.5         # decisive movement starts a recording
THRESHOLD_SILENCE = 0.03      # bar practically empty
SILENCE_DURATION = 1.5        # stay still this long and the sign is done
HANDS_LOST_BUFFER = 0.4       # ignore tracking flicker (motion blur)
MAX_RECORDING_DURATION = 10.0
CAPTURE_INTERVAL = 0.07
MAX_SESSION_FRAMES = 25
MIN_EXIT_FRAMES = 2
MIN_DISPATCH_FRAMES = 3
BURST_SIZE = 4

# Rolling context
CONTEXT_STALE_SEC = 15.0
CONTEXT_MAX_WORDS = 30
NO_SIGNAL = "..."

# Dispatch
RATE_LIMIT_COOLDOWN = 10.0
SETTLE_DELAY = 0.3

# Interpreter
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_TEMPERATURE = 0.4
DEMO_MODE = os.getenv("DEMO_MODE", "0").lower() in ("1", "true", "yes")

LANGUAGES = [
    ("Spanish", "ES", "Español"),
    ("English", "EN", "English"),
    ("Portuguese", "PT", "Português"),
]
DEFAULT_LANGUAGE = "Spanish"

# Window
WIN_W, WIN_H = 720, 420
UI_FPS = 60

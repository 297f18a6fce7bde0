# gesture/types.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AppState(str, Enum):
    IDLE = "idle"
    CAPTURING = "capturing"
    ANALYZING = "analyzing"
    SUCCESS = "success"
    ERROR = "error"


class TriggerReason(str, Enum):
    HANDS_EXIT = "HANDS_EXIT_CONFIRMED"
    SILENCE = "SILENCE_TIMEOUT"
    MAX_DURATION = "MAX_DURATION"


@dataclass
class SensorSample:
    hand_present: bool = False
    velocity: float = 0.0
    timestamp: float = 0.0


@dataclass
class TranslationResult:
    text: str
    confidence: str = "Low"      # High/Medium/Low
    target_language: str = ""


@dataclass
class UiState:
    """Everything the window draws. Written by the capture machine under its lock."""
    app_state: AppState = AppState.IDLE
    result: Optional[TranslationResult] = None
    language: str = ""
    active: bool = False         # a request is outstanding
    rate_limited: bool = False
    paused: bool = False
    recording: bool = False
    silence_pending: bool = False
    velocity: float = 0.0
    frame_count: int = 0
    last_trigger: str = ""       # reason of the most recent dispatched utterance

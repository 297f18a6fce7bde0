# capture/session.py
import dataclasses
import threading
import time
from dataclasses import dataclass, field
from typing import List, Optional

import config
from capture.context import ContextReconciler
from capture.dispatch import DispatchController, Ticket, spawn_thread
from capture.sampler import sample_burst
from capture.silence import SilenceTimer
from gesture.types import AppState, TranslationResult, TriggerReason, UiState
from gesture.utils import HandsLostBuffer
from service.errors import is_quota_error


@dataclass
class CaptureConfig:
    start_threshold: float = config.THRESHOLD_START
    silence_threshold: float = config.THRESHOLD_SILENCE
    silence_sec: float = config.SILENCE_DURATION
    hands_lost_sec: float = config.HANDS_LOST_BUFFER
    max_recording_sec: float = config.MAX_RECORDING_DURATION
    capture_interval: float = config.CAPTURE_INTERVAL
    max_frames: int = config.MAX_SESSION_FRAMES
    min_exit_frames: int = config.MIN_EXIT_FRAMES
    min_dispatch_frames: int = config.MIN_DISPATCH_FRAMES
    context_stale_sec: float = config.CONTEXT_STALE_SEC
    context_max_words: int = config.CONTEXT_MAX_WORDS
    rate_limit_cooldown: float = config.RATE_LIMIT_COOLDOWN
    settle_delay: float = config.SETTLE_DELAY


@dataclass
class RecordingSession:
    recording: bool = False
    started_at: float = 0.0
    last_capture_at: float = 0.0
    frames: List[bytes] = field(default_factory=list)

    def start(self, frame: bytes, now: float):
        self.recording = True
        self.started_at = now
        self.last_capture_at = now
        self.frames = [frame]

    def add(self, frame: bytes, now: float, cap: int):
        self.frames.append(frame)
        if len(self.frames) > cap:
            del self.frames[1]   # frame 0 anchors the gesture
        self.last_capture_at = now

    def clear(self):
        self.recording = False
        self.started_at = 0.0
        self.frames = []


class CaptureMachine:
    """
    Turns per-tick (presence, velocity) readings into utterances.

    IDLE -> RECORDING on decisive motion; RECORDING ends on confirmed hand
    exit, a sustained pause or the duration ceiling. Each ending samples a
    burst, builds the context and hands both to the dispatcher. All state,
    including the UiState the window draws, is guarded by `self.lock`, which
    the dispatch callback takes as well.
    """

    def __init__(self, sensor, camera, interpreter, language: str = config.DEFAULT_LANGUAGE,
                 cfg: Optional[CaptureConfig] = None, clock=time.time, spawn=None):
        self.cfg = cfg or CaptureConfig()
        self.sensor = sensor
        self.camera = camera
        self.clock = clock
        self.lock = threading.RLock()

        self.hands_lost = HandsLostBuffer(self.cfg.hands_lost_sec)
        self.silence = SilenceTimer(self.cfg.silence_threshold, self.cfg.silence_sec)
        self.session = RecordingSession()
        self.context = ContextReconciler(clock(), self.cfg.context_stale_sec, self.cfg.context_max_words)
        self.dispatcher = DispatchController(interpreter, self.cfg.rate_limit_cooldown, spawn or spawn_thread)

        self.language = language
        self.paused = False
        self._settle_at = 0.0
        self.ui = UiState(language=language)

    # ---- external controls ----

    def snapshot(self) -> UiState:
        with self.lock:
            return dataclasses.replace(self.ui)

    def pause(self):
        with self.lock:
            self.paused = True
            self._reset_session()
            self.dispatcher.abandon()
            self._settle_at = 0.0
            self.ui.paused = True
            self.ui.active = False
            self.ui.app_state = AppState.IDLE
            self._sync_ui()
        print("[CaptureMachine] Paused")

    def resume(self):
        with self.lock:
            self.paused = False
            self.ui.paused = False
            self.ui.app_state = AppState.IDLE
        print("[CaptureMachine] Resumed")

    def toggle_pause(self):
        with self.lock:
            if self.paused:
                self.resume()
            else:
                self.pause()

    def set_language(self, language: str):
        with self.lock:
            if language == self.language:
                return
            self.language = language
            self.context.reset()
            self.ui.language = language
            self.ui.result = None
        print(f"[CaptureMachine] Target language -> {language}")

    # ---- tick loop ----

    def tick(self, now: Optional[float] = None):
        if now is None:
            now = self.clock()

        with self.lock:
            self._housekeeping(now)
            if self.paused or not self.dispatcher.ready(now):
                return

            sample = self.sensor.poll()
            velocity = sample.velocity
            self.ui.velocity = velocity

            if not self.hands_lost.update(sample.hand_present, now):
                # hands gone longer than the flicker buffer
                if self.session.recording and len(self.session.frames) >= self.cfg.min_exit_frames:
                    self._trigger(TriggerReason.HANDS_EXIT, now)
                elif self.session.frames:
                    self._reset_session()
                    if self.ui.app_state == AppState.CAPTURING:
                        self.ui.app_state = AppState.IDLE
                self._sync_ui()
                return

            if self.session.recording:
                if now - self.session.last_capture_at > self.cfg.capture_interval:
                    frame = self.camera.capture_frame()
                    if frame:
                        self.session.add(frame, now, self.cfg.max_frames)

                if self.silence.update(velocity, now):
                    self._trigger(TriggerReason.SILENCE, now)
                elif now - self.session.started_at > self.cfg.max_recording_sec:
                    self._trigger(TriggerReason.MAX_DURATION, now)

            elif velocity > self.cfg.start_threshold:
                frame = self.camera.capture_frame()
                if frame:
                    self.session.start(frame, now)
                    self.ui.app_state = AppState.CAPTURING
                    print(f"[CaptureMachine] Recording started (v={velocity:.2f})")

            self._sync_ui()

    def _housekeeping(self, now: float):
        if self.ui.rate_limited and not self.dispatcher.rate_limited(now):
            self.ui.rate_limited = False
            print("[CaptureMachine] Cooldown over, listening again")

        if self._settle_at and now >= self._settle_at:
            self._settle_at = 0.0
            if not self.dispatcher.in_flight and not self.session.recording:
                self.ui.app_state = AppState.IDLE

    def _reset_session(self):
        self.session.clear()
        self.silence.cancel()
        self.hands_lost.reset()

    def _sync_ui(self):
        self.ui.recording = self.session.recording
        self.ui.frame_count = len(self.session.frames)
        self.ui.silence_pending = self.silence.pending

    # ---- trigger + dispatch ----

    def _trigger(self, reason: TriggerReason, now: float):
        self.silence.cancel()
        self.hands_lost.reset()

        if self.dispatcher.in_flight:
            return

        frames = self.session.frames
        payload = sample_burst(frames, self.cfg.min_dispatch_frames)
        if not payload:
            print(f"[CaptureMachine] Trigger [{reason.value}]: {len(frames)} frames, discarded as noise")
            self._reset_session()
            self.ui.app_state = AppState.IDLE
            return

        print(f"[CaptureMachine] Trigger [{reason.value}]: sending {len(payload)} of {len(frames)} frames")
        self._reset_session()
        self.ui.last_trigger = reason.value

        context = self.context.build(now)
        self.ui.app_state = AppState.ANALYZING
        self.ui.active = True
        self.dispatcher.submit(payload, self.language, context, self._on_done)

    def _on_done(self, ticket: Ticket, result: Optional[TranslationResult], error: Optional[BaseException]):
        with self.lock:
            now = self.clock()
            # always settle so an abandoned job still reopens the gate
            fresh = self.dispatcher.settle(ticket, error, now)
            if self.paused or not fresh:
                print("[CaptureMachine] Discarding response of an abandoned request")
                return

            self.ui.active = False
            if error is not None:
                if is_quota_error(error):
                    self.ui.rate_limited = True
                    print(f"[CaptureMachine] Rate limited, pausing dispatch for {self.cfg.rate_limit_cooldown:.0f}s")
                else:
                    print(f"[CaptureMachine] Interpreter error: {error}")
                self.ui.app_state = AppState.ERROR
            elif result is not None and ticket.language == self.language and self.context.is_signal(result.text):
                self.ui.result = result
                self.context.absorb(result.text, ticket.context, now)
                self.ui.app_state = AppState.SUCCESS
            else:
                self.ui.app_state = AppState.IDLE

            self._settle_at = now + self.cfg.settle_delay

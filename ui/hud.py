# ui/hud.py
import time

import pygame

from config import (
    WIN_W, WIN_H, UI_FPS, TICK_SEC, LANGUAGES, DEFAULT_LANGUAGE,
    THRESHOLD_START, THRESHOLD_SILENCE, NO_SIGNAL, RATE_LIMIT_COOLDOWN,
)
from capture.session import CaptureMachine
from gesture.types import AppState, UiState
from gesture.worker import SensorWorker

TEXTS = {
    "Spanish": {
        "waiting": "ESPERANDO SEÑAL", "detected": "DETECTADO", "searching": "Buscando manos...",
        "confidence": "Confianza", "apiLimit": "Pausa por límite de API",
        "paused": "SISTEMA PAUSADO", "resume": "REANUDAR", "pause": "PAUSAR",
    },
    "English": {
        "waiting": "WAITING FOR SIGNAL", "detected": "DETECTED", "searching": "Searching for hands...",
        "confidence": "Confidence", "apiLimit": "API Limit reached. Pausing",
        "paused": "SYSTEM PAUSED", "resume": "RESUME", "pause": "PAUSE",
    },
    "Portuguese": {
        "waiting": "AGUARDANDO SINAL", "detected": "DETECTADO", "searching": "Procurando mãos...",
        "confidence": "Confiança", "apiLimit": "Limite de API. Pausa",
        "paused": "SISTEMA PAUSADO", "resume": "RETOMAR", "pause": "PAUSAR",
    },
}

BG = (12, 12, 14)
NEON = (0, 243, 255)
DIM = (120, 120, 120)
TEXT = (230, 230, 230)
YELLOW = (250, 204, 21)
RED = (239, 68, 68)
BLUE = (96, 165, 250)
GREY = (107, 114, 128)

BAR_X, BAR_Y, BAR_W, BAR_H = 12, 60, 240, 8
METER_SLOTS = 8


def status_text(ui: UiState) -> str:
    if ui.active:
        return "THINKING"
    if ui.silence_pending:
        return "WAITING..."
    if ui.recording:
        return "RECORDING"
    return "IDLE"


def bar_color(ui: UiState):
    if ui.velocity > THRESHOLD_START:
        return NEON
    if ui.velocity > THRESHOLD_SILENCE:
        return BLUE
    return YELLOW if ui.silence_pending else GREY


def has_result(ui: UiState) -> bool:
    r = ui.result
    return r is not None and r.text != NO_SIGNAL and r.text.strip() != ""


def draw_hud(screen, font, big, ui: UiState, sensor_label: str, cam_info: str):
    t = TEXTS.get(ui.language, TEXTS["Spanish"])
    screen.fill(BG)

    # language tabs
    x = WIN_W - 12
    for i, (code, label, _) in reversed(list(enumerate(LANGUAGES))):
        color = NEON if code == ui.language else DIM
        surf = font.render(f"{i + 1}:{label}", True, color)
        x -= surf.get_width() + 14
        screen.blit(surf, (x, 10))

    screen.blit(font.render(f"State: {ui.app_state.value.upper()}", True, TEXT), (12, 10))
    screen.blit(font.render(f"Sensor: {sensor_label}", True, DIM), (12, 32))

    # velocity bar with silence/start marks
    pygame.draw.rect(screen, (40, 40, 44), pygame.Rect(BAR_X, BAR_Y, BAR_W, BAR_H))
    fill = int(min(1.0, ui.velocity * 0.3) * BAR_W)
    pygame.draw.rect(screen, bar_color(ui), pygame.Rect(BAR_X, BAR_Y, fill, BAR_H))
    for mark, color in ((THRESHOLD_SILENCE, RED), (THRESHOLD_START, NEON)):
        mx = BAR_X + int(min(1.0, mark * 0.3) * BAR_W)
        pygame.draw.line(screen, color, (mx, BAR_Y - 2), (mx, BAR_Y + BAR_H + 2))

    # recorded frames meter
    slot_w = BAR_W // METER_SLOTS
    for i in range(METER_SLOTS):
        color = RED if i < ui.frame_count else (30, 30, 34)
        pygame.draw.rect(screen, color, pygame.Rect(BAR_X + i * slot_w, BAR_Y + 14, slot_w - 2, 4))

    status = status_text(ui)
    status_color = {"THINKING": NEON, "WAITING...": YELLOW, "RECORDING": RED}.get(status, DIM)
    screen.blit(font.render(f"REC {status}", True, status_color), (BAR_X, BAR_Y + 24))
    if ui.last_trigger:
        screen.blit(font.render(f"last: {ui.last_trigger}", True, DIM), (BAR_X + BAR_W + 24, BAR_Y + 24))

    # result box
    box = pygame.Rect(12, 150, WIN_W - 24, 150)
    shown = has_result(ui)
    high = shown and ui.result.confidence == "High"
    border = (NEON if high else YELLOW) if shown else (50, 50, 54)
    pygame.draw.rect(screen, (20, 20, 24), box)
    pygame.draw.rect(screen, border, box, 2)

    header = t["detected"] if shown else t["waiting"]
    screen.blit(font.render(header, True, DIM), (box.x + 12, box.y + 10))
    if shown:
        screen.blit(big.render(ui.result.text, True, TEXT), (box.x + 12, box.y + 50))
        conf = font.render(f'{t["confidence"]}: {ui.result.confidence}', True, border)
        screen.blit(conf, (box.right - conf.get_width() - 12, box.y + 10))
    else:
        screen.blit(font.render(t["searching"], True, DIM), (box.x + 12, box.y + 70))

    if ui.app_state == AppState.ERROR:
        screen.blit(font.render("ERROR", True, RED), (box.x + 12, box.bottom - 28))

    if ui.rate_limited and not ui.paused:
        msg = font.render(f'{t["apiLimit"]} ({RATE_LIMIT_COOLDOWN:.0f}s)', True, YELLOW)
        screen.blit(msg, ((WIN_W - msg.get_width()) // 2, 120))

    if ui.paused:
        overlay = pygame.Surface((WIN_W, WIN_H), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        screen.blit(overlay, (0, 0))
        msg = big.render(t["paused"], True, TEXT)
        screen.blit(msg, ((WIN_W - msg.get_width()) // 2, WIN_H // 2 - 30))

    hint = f'SPACE={t["resume"] if ui.paused else t["pause"]} | C=camera | 1/2/3=language | ESC=quit'
    screen.blit(font.render(hint, True, DIM), (12, WIN_H - 48))
    screen.blit(font.render(cam_info, True, (90, 90, 90)), (12, WIN_H - 26))


def run_app(interpreter):
    pygame.init()
    screen = pygame.display.set_mode((WIN_W, WIN_H))
    pygame.display.set_caption("Sign Burst Translator - MediaPipe Hands")
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("Consolas", 18)
    big = pygame.font.SysFont("Consolas", 40)

    sensor = SensorWorker()
    sensor.start()
    print("[Main] SensorWorker started:", sensor.is_alive())

    machine = CaptureMachine(sensor, sensor, interpreter, language=DEFAULT_LANGUAGE)
    language_keys = {pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2}
    last_tick = 0.0

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                sensor.stop()
                pygame.quit()
                return
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    sensor.stop()
                    pygame.quit()
                    return
                if event.key == pygame.K_SPACE:
                    machine.toggle_pause()
                if event.key == pygame.K_c:
                    sensor.switch_camera()
                if event.key in language_keys and language_keys[event.key] < len(LANGUAGES):
                    machine.set_language(LANGUAGES[language_keys[event.key]][0])

        # fixed-cadence trigger loop; rendering runs faster
        now = time.time()
        if now - last_tick >= TICK_SEC:
            last_tick = now
            machine.tick(now)

        ui = machine.snapshot()
        with sensor.lock:
            label, cam_info = sensor.label, sensor.cam_info

        draw_hud(screen, font, big, ui, label, cam_info)
        pygame.display.flip()
        clock.tick(UI_FPS)

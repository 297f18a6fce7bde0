# sign_translator.py
from config import DEMO_MODE, GEMINI_API_KEY
from service.demo import DemoInterpreter
from service.gemini import GeminiInterpreter
from ui.hud import run_app


def make_interpreter():
    if DEMO_MODE or not GEMINI_API_KEY:
        print("[Main] Using scripted demo interpreter (set GEMINI_API_KEY and DEMO_MODE=0 for Gemini)")
        return DemoInterpreter()

    print("[Main] Using Gemini interpreter")
    return GeminiInterpreter()


def main():
    run_app(make_interpreter())


if __name__ == "__main__":
    main()

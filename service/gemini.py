# service/gemini.py
import json
from typing import Optional, Sequence

from google import genai
from google.genai import errors, types

from config import GEMINI_API_KEY, GEMINI_MODEL, GEMINI_TEMPERATURE, MIN_FRAME_BYTES, NO_SIGNAL
from gesture.types import TranslationResult
from service.errors import EmptyResponseError, InterpretationError, RateLimitError, is_quota_error

SYSTEM_INSTRUCTION = f"""
You are an expert Sign Language Translator.
Task: Analyze the sequence of images (video burst) and identify the sign being performed.

Context:
- The user is performing a sign.
- "Previous Context" is the text already translated.

Instructions:
1. Identify the sign clearly (e.g., "Hello", "Thank you", "Family").
2. Return ONLY the translation of the current gesture.
3. If the user is holding the SAME sign as the previous context, repeat the word.
4. If no clear sign is detected (hands down, blurry, nothing), return "{NO_SIGNAL}".

Return JSON.
"""

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "traduccion": types.Schema(type=types.Type.STRING),
        "confianza_modelo": types.Schema(type=types.Type.STRING),
        "target_language": types.Schema(type=types.Type.STRING),
    },
    required=["traduccion", "confianza_modelo", "target_language"],
)

CONFIDENCE = {
    "high": "High", "alta": "High",
    "medium": "Medium", "media": "Medium",
    "low": "Low", "baja": "Low",
}


def normalize_confidence(label) -> str:
    return CONFIDENCE.get(str(label or "").strip().lower(), "Low")


def parse_response(text: Optional[str], target_language: str) -> TranslationResult:
    if not text:
        raise EmptyResponseError("Empty response from Gemini")

    cleaned = text.replace("```json", "").replace("```", "").strip()
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InterpretationError(f"Malformed response: {cleaned[:80]!r}") from e

    if not isinstance(data, dict):
        raise InterpretationError(f"Unexpected response shape: {type(data).__name__}")

    return TranslationResult(
        text=str(data.get("traduccion") or data.get("translation") or ""),
        confidence=normalize_confidence(data.get("confianza_modelo") or data.get("confidence")),
        target_language=str(data.get("target_language") or target_language),
    )


class GeminiInterpreter:
    """Sends a frame burst plus the previous context to Gemini and reads back one translation."""

    def __init__(self, api_key: Optional[str] = GEMINI_API_KEY, model: str = GEMINI_MODEL,
                 temperature: float = GEMINI_TEMPERATURE, client=None):
        self.model = model
        self.temperature = temperature
        self.client = client if client is not None else genai.Client(api_key=api_key)

    def build_contents(self, frames: Sequence[bytes], target_language: str, context: str) -> list:
        parts = [
            types.Part.from_bytes(data=f, mime_type="image/jpeg")
            for f in frames
            if f and len(f) > MIN_FRAME_BYTES
        ]
        if not parts:
            raise InterpretationError("No valid frames to send")

        parts.append(
            f'Target Language: {target_language}.\n'
            f'Previous Context: "{context}".\n'
            f'Identify the sign.'
        )
        return parts

    def translate(self, frames: Sequence[bytes], target_language: str, context: str = "") -> TranslationResult:
        contents = self.build_contents(frames, target_language, context)

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION,
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                    temperature=self.temperature,
                ),
            )
        except errors.APIError as e:
            if is_quota_error(e):
                print("[Gemini] Quota exceeded:", e)
                raise RateLimitError(str(e)) from e
            print("[Gemini] API error:", e)
            raise InterpretationError(str(e)) from e
        except Exception as e:
            if is_quota_error(e):
                raise RateLimitError(str(e)) from e
            print("[Gemini] Request failed:", e)
            raise InterpretationError(str(e)) from e

        return parse_response(response.text, target_language)

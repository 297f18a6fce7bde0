import pytest

from service.demo import DemoInterpreter
from service.errors import EmptyResponseError, InterpretationError, RateLimitError
from service.gemini import GeminiInterpreter, normalize_confidence, parse_response

JPEG = b"\xff\xd8" + b"x" * 200


class Response:
    def __init__(self, text):
        self.text = text


class Models:
    def __init__(self, reply):
        self.reply = reply
        self.requests = []

    def generate_content(self, model, contents, config):
        self.requests.append((model, contents, config))
        if isinstance(self.reply, BaseException):
            raise self.reply
        return Response(self.reply)


class Client:
    def __init__(self, reply):
        self.models = Models(reply)


class QuotaError(Exception):
    code = 429


def test_parse_plain_and_fenced_json():
    raw = '{"traduccion": "Hola", "confianza_modelo": "Alta", "target_language": "Spanish"}'
    r = parse_response(raw, "Spanish")
    assert (r.text, r.confidence, r.target_language) == ("Hola", "High", "Spanish")

    r = parse_response("```json\n" + raw + "\n```", "Spanish")
    assert r.text == "Hola"


def test_parse_fills_missing_fields():
    r = parse_response('{"traduccion": "Hi"}', "English")
    assert r.confidence == "Low"
    assert r.target_language == "English"


def test_parse_rejects_bad_payloads():
    with pytest.raises(EmptyResponseError):
        parse_response("", "English")
    with pytest.raises(InterpretationError):
        parse_response("not json", "English")
    with pytest.raises(InterpretationError):
        parse_response("[1, 2]", "English")


def test_confidence_labels():
    assert normalize_confidence("HIGH") == "High"
    assert normalize_confidence("Media") == "Medium"
    assert normalize_confidence("baja") == "Low"
    assert normalize_confidence(None) == "Low"
    assert normalize_confidence("certain") == "Low"


def test_translate_sends_one_part_per_frame_plus_prompt():
    client = Client('{"traduccion": "Hello", "confianza_modelo": "High", "target_language": "English"}')
    interp = GeminiInterpreter(client=client, model="test-model")
    result = interp.translate([JPEG, JPEG, JPEG], "English", "Hi")
    assert result.text == "Hello"

    model, contents, config = client.models.requests[0]
    assert model == "test-model"
    assert len(contents) == 4
    assert 'Previous Context: "Hi"' in contents[-1]
    assert "Target Language: English" in contents[-1]
    assert config.response_mime_type == "application/json"


def test_translate_skips_tiny_frames():
    client = Client('{"traduccion": "Hello"}')
    interp = GeminiInterpreter(client=client)
    interp.translate([b"", b"tiny", JPEG], "English")
    _, contents, _ = client.models.requests[0]
    assert len(contents) == 2


def test_translate_without_valid_frames_fails_before_request():
    client = Client("{}")
    interp = GeminiInterpreter(client=client)
    with pytest.raises(InterpretationError):
        interp.translate([b"tiny"], "English")
    assert client.models.requests == []


def test_quota_failure_becomes_rate_limit():
    interp = GeminiInterpreter(client=Client(QuotaError("Too many requests")))
    with pytest.raises(RateLimitError):
        interp.translate([JPEG], "English")


def test_other_failure_becomes_interpretation_error():
    interp = GeminiInterpreter(client=Client(ConnectionError("reset by peer")))
    with pytest.raises(InterpretationError) as exc:
        interp.translate([JPEG], "English")
    assert not isinstance(exc.value, RateLimitError)


def test_demo_script_walks_the_timeline():
    clock = [1000.0]
    demo = DemoInterpreter(clock=lambda: clock[0], sleep=lambda s: None)

    r = demo.translate([], "English")
    assert (r.text, r.confidence) == ("...", "Low")

    clock[0] = 1005.0
    assert demo.translate([], "English").text == "Hello"
    clock[0] = 1010.0
    r = demo.translate([], "Portuguese")
    assert (r.text, r.confidence) == ("Olá. Como vai?", "High")
    clock[0] = 1025.0
    assert demo.translate([], "German").text == "Te amo"

    clock[0] = 1029.0                    # past the loop, starts over
    assert demo.translate([], "English").text == "..."

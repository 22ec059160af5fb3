import json

import pytest

from config import reset_config
from studyguide import create_app
from studyguide.services.study_guide import StudyGuideGenerator

_CONFIG_ENV_VARS = (
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "GEMINI_MODEL_NAME",
    "GEMINI_MAX_OUTPUT_TOKENS",
    "GEMINI_TEMPERATURE",
    "MAX_INPUT_CHARS",
    "MAX_PDF_BYTES",
    "MAX_CONTENT_LENGTH",
    "CORS_ALLOWED_ORIGINS",
    "SECRET_KEY",
    "PORT",
)

SAMPLE_STUDY_GUIDE = {
    "keyConcepts": ["Photosynthesis", "Chlorophyll"],
    "explanations": {
        "Photosynthesis": "Plants turn light, water and CO2 into glucose.",
        "Chlorophyll": "The pigment that absorbs light energy.",
    },
    "practiceQuestions": [
        {
            "question": "Where does photosynthesis happen?",
            "answer": "In the chloroplasts.",
        }
    ],
    "cheatSheet": "Light + water + CO2 -> glucose + O2",
}


class FakeModel:
    """Stands in for the Gemini call made by StudyGuideGenerator."""

    def __init__(self):
        self.reply = json.dumps(SAMPLE_STUDY_GUIDE)
        self.error = None
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture()
def app(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setattr("studyguide.services.study_guide.GENAI_AVAILABLE", True)
    app = create_app("testing")
    yield app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def sample_study_guide():
    return json.loads(json.dumps(SAMPLE_STUDY_GUIDE))


@pytest.fixture()
def fake_model(monkeypatch):
    model = FakeModel()
    monkeypatch.setattr(
        StudyGuideGenerator, "_invoke", lambda self, prompt: model(prompt)
    )
    return model

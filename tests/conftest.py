import pytest

from studio_bingo import create_app
from studio_bingo.config import BaseConfig

STUDIO_CODE = "letmein"


class TestConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret"
    DATABASE_URL = "sqlite://"
    ALLOW_ALL_GEO = True
    STUDIO_CODE = STUDIO_CODE
    OPENAI_API_KEY = "test"
    SCANNING_ENABLED = True
    CORS_ORIGINS = "*"


class FakeVision:
    """Stands in for the vision client; answers with whatever the test sets."""

    def __init__(self, configured=True):
        self.configured = configured
        self.marks = {"week": "week1", "marked_cells": [], "confidence": 0.9, "notes": ""}
        self.labels = [f"cell {i}" for i in range(25)]
        self.calls = []

    def detect_marks(self, image, mime_type):
        self.calls.append(("marks", image, mime_type))
        return self.marks

    def read_cell_labels(self, image, mime_type):
        self.calls.append(("labels", image, mime_type))
        return self.labels


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application
    application.extensions["engine"].dispose()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def session(flask_app):
    db_session = flask_app.extensions["session_factory"]()
    yield db_session
    db_session.close()


@pytest.fixture()
def vision(flask_app):
    fake = FakeVision()
    flask_app.extensions["vision_client"] = fake
    return fake


@pytest.fixture()
def admin_headers():
    return {"X-Studio-Code": STUDIO_CODE}

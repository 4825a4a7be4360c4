"""Shared fixtures: a fake RunwayML client and a TestClient wired to it."""

import os

import pytest
from fastapi.testclient import TestClient

from videogen.config import RunwayConfig
from videogen.main import app, get_pipeline, get_text_to_video_pipeline
from videogen.models.runway import RunwayEngine
from videogen.pipeline import ImageToVideoPipeline, TextToVideoPipeline

# Ensure tests never reach the real API
os.environ.setdefault("RUNWAYML_API_SECRET", "key_test_fake")


class FakeTask:
    def __init__(self, id, status="SUCCEEDED", output=None):
        self.id = id
        self.status = status
        self.output = output


class FakePending:
    def __init__(self, outcome):
        self.outcome = outcome
        self.timeout = None

    def wait_for_task_output(self, timeout=None):
        self.timeout = timeout
        if isinstance(self.outcome, BaseException):
            raise self.outcome
        return self.outcome


class FakeResource:
    """Mimics e.g. `client.text_to_image`: records create() params."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.create_error = None
        self.calls = []
        self.pending = []

    def create(self, **params):
        self.calls.append(params)
        if self.create_error is not None:
            raise self.create_error
        pending = FakePending(self.outcome)
        self.pending.append(pending)
        return pending


class FakeRunwayClient:
    def __init__(self):
        self.text_to_image = FakeResource(
            FakeTask("img-task-1", output=["https://cdn.example/image.png"])
        )
        self.image_to_video = FakeResource(
            FakeTask("vid-task-1", output=["https://cdn.example/video.mp4"])
        )
        self.text_to_video = FakeResource(
            FakeTask("t2v-task-1", output=["https://cdn.example/t2v.mp4"])
        )


@pytest.fixture
def fake_runway():
    return FakeRunwayClient()


@pytest.fixture
def engine(fake_runway):
    return RunwayEngine(RunwayConfig(task_timeout_sec=30), client=fake_runway)


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_pipeline] = lambda: ImageToVideoPipeline(engine)
    app.dependency_overrides[get_text_to_video_pipeline] = (
        lambda: TextToVideoPipeline(engine)
    )
    # the catch-all handler's response is asserted rather than re-raised
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()

import os

# Must be set before image_insight reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["GEMINI_API_KEY"] = ""
os.environ["FREEIMAGE_API_KEY"] = ""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from image_insight.application.ports.ai_provider import AIAnalysis
from image_insight.database import get_session
from image_insight.db import models  # noqa: F401
from image_insight.dependencies import get_ai_provider, get_image_host
from image_insight.main import app


class FakeImageHost:
    def __init__(self, url: str = "https://example.com/image.jpg", error: Optional[Exception] = None):
        self.url = url
        self.error = error
        self.calls: List[str] = []

    async def upload(self, image_base64: str) -> str:
        self.calls.append(image_base64)
        if self.error:
            raise self.error
        return self.url


class FakeAI:
    def __init__(self, description: str = "D", emotions: str = "M", tags=None, error: Optional[Exception] = None):
        self.description = description
        self.emotions = emotions
        self.tags = ["x", "y"] if tags is None else tags
        self.error = error
        self.calls: List[str] = []

    async def analyze(self, image_url: str) -> AIAnalysis:
        self.calls.append(image_url)
        if self.error:
            raise self.error
        return AIAnalysis(
            description=self.description,
            emotions=self.emotions,
            tags=list(self.tags),
            raw_response='{"description": "%s"}' % self.description,
        )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def image_host():
    return FakeImageHost()


@pytest.fixture
def ai_provider():
    return FakeAI()


@pytest.fixture
def client(engine, image_host, ai_provider):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_image_host] = lambda: image_host
    app.dependency_overrides[get_ai_provider] = lambda: ai_provider
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def signup(client: TestClient, email: str = "test@example.com", password: str = "password123") -> dict:
    res = client.post("/api/auth/signup", json={"email": email, "password": password})
    assert res.status_code == 201, res.text
    return res.json()


def auth_headers(client: TestClient, email: str = "test@example.com", password: str = "password123") -> dict:
    token = signup(client, email, password)["token"]
    return {"Authorization": f"Bearer {token}"}

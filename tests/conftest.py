"""
공용 테스트 설정.

앱 import 전에 DATABASE_URL을 메모리 sqlite로 바꾸고,
질문/피드백 생성기는 dependency_overrides로 가짜 구현을 주입한다.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENAI_API_KEY"] = ""
os.environ["LOCK_SCORED_SESSIONS"] = "false"
os.environ["REQUIRE_EXISTING_USER"] = "false"

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.db.base import Base, SessionLocal, engine
from app.deps import get_generator
from app.main import app
from app.services.generator import FallbackGenerator
from app.services.session_service import SessionLifecycleManager


class FakeGenerator:
    """호출 인자를 기록하고 예측 가능한 문자열을 돌려주는 생성기"""

    def __init__(self):
        self.question_calls = []
        self.feedback_calls = []

    def generate_question(self, topic, difficulty, previous_questions):
        self.question_calls.append((topic, difficulty, list(previous_questions)))
        return f"Q{len(previous_questions) + 1} about {topic} ({difficulty})"

    def generate_feedback(self, question, answer, topic, difficulty):
        self.feedback_calls.append((question, answer, topic, difficulty))
        return f"Feedback on: {answer}"


class FailingGenerator:
    def generate_question(self, topic, difficulty, previous_questions):
        raise RuntimeError("generator down")

    def generate_feedback(self, question, answer, topic, difficulty):
        raise RuntimeError("generator down")


class TickingClock:
    """호출할 때마다 1초씩 증가하는 시계 (createdAt 정렬 테스트용)"""

    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def manager(db, generator, clock):
    return SessionLifecycleManager(db, generator, clock=clock)


@pytest.fixture
def client(generator):
    app.dependency_overrides[get_generator] = lambda: generator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def fallback_client():
    app.dependency_overrides[get_generator] = lambda: FallbackGenerator()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client():
    app.dependency_overrides[get_generator] = lambda: FailingGenerator()
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def failing_generator():
    return FailingGenerator()

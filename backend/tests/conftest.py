import os
import random
import tempfile

import httpx
import pytest

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="cooklingo-log-"))
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cooklingo.db import Base
from cooklingo.quiz import WordRecord
from cooklingo.vocabulary_store import VocabularyStore
from cooklingo.workflow_client import WorkflowClient, WorkflowConfig


QUIZ_FIVE = {
    "quiz": [
        {"question": f"What does word{i} mean?", "choices": [f"right{i}", "wrong a", "wrong b", "wrong c"], "correct_answer_index": 0}
        for i in range(5)
    ]
}


def workflow_envelope(key, value):
    return {"data": {"outputs": {key: value}}}


def make_words(count, score_each=5, start=1):
    return [
        WordRecord(
            id=start + i,
            word=f"word{start + i}",
            translation=f"trans{start + i}",
            recognition=score_each,
            frequency=score_each,
            simplicity=score_each,
        )
        for i in range(count)
    ]


class RecordingHandler:
    def __init__(self, status=200, body=None, raw=None, exc=None):
        self.status = status
        self.body = body
        self.raw = raw
        self.exc = exc
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status, content=self.raw)
        return httpx.Response(self.status, json=self.body)


def make_client(handler, credential="test-key"):
    config = WorkflowConfig(endpoint="https://workflow.test/v1/workflows/run", credential=credential, user="tester")
    return WorkflowClient(config, transport=httpx.MockTransport(handler))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
    yield factory
    engine.dispose()


@pytest.fixture
def store(session_factory):
    db = session_factory()
    try:
        yield VocabularyStore(db)
    finally:
        db.close()

from __future__ import annotations

from typing import Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_quiz_client, get_store
from ..errors import SessionNotFound
from ..quiz import DifficultyTier
from ..quiz_session import QuizSession
from ..settings import settings
from ..vocabulary_store import VocabularyStore
from ..workflow_client import WorkflowClient


router = APIRouter(prefix="/quiz", tags=["quiz"])


_sessions: Dict[str, QuizSession] = {}


class GenerateRequest(BaseModel):
    tier: DifficultyTier = DifficultyTier.basic


class AnswerRequest(BaseModel):
    question_index: int
    choice_index: int


def _get_session(session_id: str) -> QuizSession:
    session = _sessions.get(session_id)
    if session is None:
        raise SessionNotFound("Quiz session not found or expired")
    return session


@router.post("/sessions")
def create_session():
    session = QuizSession(quiz_size=settings.quiz_size)
    _sessions[session.session_id] = session
    return session.snapshot()


@router.get("/sessions/{session_id}")
def get_session(session_id: str):
    return _get_session(session_id).snapshot()


@router.delete("/sessions/{session_id}")
def delete_session(session_id: str):
    _get_session(session_id)
    _sessions.pop(session_id, None)
    return {"deleted": True}


@router.post("/sessions/{session_id}/generate")
async def generate(
    session_id: str,
    req: GenerateRequest,
    store: VocabularyStore = Depends(get_store),
    client: WorkflowClient = Depends(get_quiz_client),
):
    session = _get_session(session_id)
    await session.generate(store.read_all, client, req.tier)
    return session.snapshot()


@router.post("/sessions/{session_id}/answers")
def answer(session_id: str, req: AnswerRequest):
    session = _get_session(session_id)
    session.record_answer(req.question_index, req.choice_index)
    return session.snapshot()


@router.post("/sessions/{session_id}/submit")
def submit(session_id: str):
    session = _get_session(session_id)
    session.submit()
    return session.snapshot()

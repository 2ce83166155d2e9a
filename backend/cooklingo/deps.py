from __future__ import annotations
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.orm import Session

from .db import get_db
from .vocabulary_store import VocabularyStore
from .workflow_client import WorkflowClient, WorkflowConfig


def get_store(db: Session = Depends(get_db)) -> VocabularyStore:
	return VocabularyStore(db)


async def get_quiz_client() -> AsyncIterator[WorkflowClient]:
	client = WorkflowClient(WorkflowConfig.for_quiz())
	try:
		yield client
	finally:
		await client.aclose()


async def get_recipe_client() -> AsyncIterator[WorkflowClient]:
	client = WorkflowClient(WorkflowConfig.for_recipe())
	try:
		yield client
	finally:
		await client.aclose()

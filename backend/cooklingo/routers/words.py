from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_store
from ..errors import WordNotFound
from ..vocabulary_store import VocabularyStore

router = APIRouter(prefix="/words", tags=["words"])


class WordOut(BaseModel):
	id: int
	word: str
	translation: str
	recognition: float
	frequency: float
	simplicity: float
	score: float
	tier: str


class ScoresRequest(BaseModel):
	recognition: int = Field(ge=0)
	frequency: int = Field(ge=0)
	simplicity: int = Field(ge=0)


def _out(record) -> WordOut:
	return WordOut(**record.model_dump(), score=record.score, tier=record.tier.value)


@router.get("", response_model=List[WordOut])
def list_words(store: VocabularyStore = Depends(get_store)):
	return [_out(w) for w in store.list_words()]


@router.put("/{word_id}/scores", response_model=WordOut)
def rate_word(word_id: int, req: ScoresRequest, store: VocabularyStore = Depends(get_store)):
	record = store.rate_word(word_id, recognition=req.recognition, frequency=req.frequency, simplicity=req.simplicity)
	if record is None:
		raise WordNotFound(f"Word {word_id} not found")
	return _out(record)

from __future__ import annotations
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Recipe, Word
from .quiz import WordRecord

logger = logging.getLogger(__name__)


def _to_record(row: Word) -> WordRecord:
	return WordRecord(
		id=row.id,
		word=row.word,
		translation=row.translation,
		recognition=row.recognition,
		frequency=row.frequency,
		simplicity=row.simplicity,
	)


class VocabularyStore:
	def __init__(self, db: Session) -> None:
		self.db = db

	def read_all(self) -> List[WordRecord]:
		rows = self.db.execute(select(Word).order_by(Word.id)).scalars().all()
		return [_to_record(r) for r in rows]

	def list_words(self) -> List[WordRecord]:
		rows = self.db.execute(select(Word).order_by(Word.word)).scalars().all()
		return [_to_record(r) for r in rows]

	def get(self, word_id: int) -> Optional[WordRecord]:
		row = self.db.get(Word, word_id)
		return _to_record(row) if row is not None else None

	def upsert_words(self, pairs: Iterable[Tuple[str, str]]) -> int:
		"""Insert new words, ignoring any whose text is already stored.

		Returns the number of rows inserted.
		"""
		batch: Dict[str, str] = {}
		for word, translation in pairs:
			word = (word or "").strip()
			if word and word not in batch:
				batch[word] = (translation or "").strip()
		if not batch:
			return 0
		existing = set(self.db.execute(select(Word.word).where(Word.word.in_(list(batch)))).scalars())
		fresh = [Word(word=w, translation=t) for w, t in batch.items() if w not in existing]
		self.db.add_all(fresh)
		self.db.commit()
		return len(fresh)

	def rate_word(self, word_id: int, *, recognition: int, frequency: int, simplicity: int) -> Optional[WordRecord]:
		row = self.db.get(Word, word_id)
		if row is None:
			return None
		row.recognition = recognition
		row.frequency = frequency
		row.simplicity = simplicity
		self.db.commit()
		self.db.refresh(row)
		return _to_record(row)

	def save_recipe(self, recipe: Dict[str, Any]) -> int:
		row = Recipe(recipe_text=json.dumps(recipe, ensure_ascii=False))
		self.db.add(row)
		self.db.commit()
		return row.id

	def list_recipes(self, limit: int = 20) -> List[Dict[str, Any]]:
		rows = self.db.execute(select(Recipe).order_by(Recipe.id.desc()).limit(limit)).scalars().all()
		out: List[Dict[str, Any]] = []
		for r in rows:
			try:
				recipe = json.loads(r.recipe_text)
			except json.JSONDecodeError:
				logger.warning("Skipping unreadable recipe row %s", r.id)
				continue
			out.append({"id": r.id, "created_at": r.created_at, "recipe": recipe})
		return out

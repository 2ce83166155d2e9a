from __future__ import annotations

import logging
import random
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ValidationError

from .errors import InsufficientData, UnexpectedResponseShape
from .workflow_client import extract_output

logger = logging.getLogger(__name__)


# Basic words score at least this much; everything below is advanced.
BASIC_MIN_SCORE = 12


class DifficultyTier(str, Enum):
    basic = "basic"
    advanced = "advanced"


class WordRecord(BaseModel):
    id: int
    word: str
    translation: str
    recognition: float = 0
    frequency: float = 0
    simplicity: float = 0

    @property
    def score(self) -> float:
        return self.recognition + self.frequency + self.simplicity

    @property
    def tier(self) -> DifficultyTier:
        return DifficultyTier.basic if self.score >= BASIC_MIN_SCORE else DifficultyTier.advanced


class QuizQuestion(BaseModel):
    question: str
    choices: List[str]
    correct_answer_index: int


def filter_by_tier(words: Iterable[WordRecord], tier: DifficultyTier) -> List[WordRecord]:
    return [w for w in words if w.tier == tier]


def sample_words(words: Sequence[WordRecord], count: int, rng: Optional[random.Random] = None) -> List[WordRecord]:
    """Pick ``count`` distinct words uniformly at random.

    A short pool aborts generation instead of producing a short quiz.
    """
    if len(words) < count:
        logger.info("Only %d candidate words available, %d required", len(words), count)
        raise InsufficientData(
            f"Not enough words for this difficulty yet ({len(words)} of {count}). Generate more recipes first."
        )
    return (rng or random).sample(list(words), count)


def format_word_list(words: Iterable[WordRecord]) -> str:
    return "\n".join(f"{w.word} ({w.translation})" for w in words)


def normalize_quiz(body: Any) -> List[QuizQuestion]:
    payload = extract_output(body, "quiz")
    # The workflow wraps the list as {"quiz": [...]}; accept a bare list too
    if isinstance(payload, dict):
        payload = payload.get("quiz")
    if not isinstance(payload, list):
        raise UnexpectedResponseShape("Quiz payload is missing its question list")
    try:
        return [QuizQuestion.model_validate(item) for item in payload]
    except ValidationError as err:
        raise UnexpectedResponseShape("Quiz question is missing required fields") from err


def shuffle_choices(question: QuizQuestion, rng: Optional[random.Random] = None) -> QuizQuestion:
    # Out-of-range indices are passed through untouched rather than guessed at
    if not 0 <= question.correct_answer_index < len(question.choices):
        logger.warning(
            "correct_answer_index %s outside %d choices for %r; leaving question unshuffled",
            question.correct_answer_index,
            len(question.choices),
            question.question,
        )
        return question
    correct = question.choices[question.correct_answer_index]
    choices = list(question.choices)
    (rng or random).shuffle(choices)
    # Duplicate choice text resolves to its first occurrence
    return question.model_copy(update={"choices": choices, "correct_answer_index": choices.index(correct)})

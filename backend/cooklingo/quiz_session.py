from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

from .errors import (
    GenerationInProgress,
    IncompleteAnswers,
    InvalidAnswer,
    InvalidQuizAction,
)
from .quiz import (
    DifficultyTier,
    QuizQuestion,
    WordRecord,
    filter_by_tier,
    format_word_list,
    normalize_quiz,
    sample_words,
    shuffle_choices,
)

logger = logging.getLogger(__name__)


class QuizState(str, Enum):
    idle = "idle"
    generating = "generating"
    ready = "ready"
    submitted = "submitted"


class QuizGenerator(Protocol):
    async def generate_quiz(self, word_list: str) -> Any: ...


class QuizSession:
    """One learner's quiz attempt.

    Every mutation goes through ``generate``, ``record_answer`` or ``submit``;
    a failed generation always lands back in ``idle`` with no quiz attached.
    """

    def __init__(self, quiz_size: int = 5, rng: Optional[random.Random] = None) -> None:
        self.session_id: str = uuid.uuid4().hex
        self.quiz_size = quiz_size
        self.state: QuizState = QuizState.idle
        self.tier: Optional[DifficultyTier] = None
        self.questions: List[QuizQuestion] = []
        self.answers: Dict[int, int] = {}
        self.updated_at: datetime = datetime.utcnow()
        self._rng = rng

    def _touch(self) -> None:
        self.updated_at = datetime.utcnow()

    def _reset(self, state: QuizState) -> None:
        self.state = state
        self.questions = []
        self.answers = {}

    async def generate(
        self,
        load_words: Callable[[], Sequence[WordRecord]],
        client: QuizGenerator,
        tier: DifficultyTier = DifficultyTier.basic,
    ) -> List[QuizQuestion]:
        if self.state == QuizState.generating:
            raise GenerationInProgress("A quiz is already being generated.")
        self._touch()
        # Any previous quiz is discarded as soon as a new one is requested
        self._reset(QuizState.generating)
        self.tier = tier
        try:
            candidates = filter_by_tier(load_words(), tier)
            picked = sample_words(candidates, self.quiz_size, self._rng)
            body = await client.generate_quiz(format_word_list(picked))
            questions = [shuffle_choices(q, self._rng) for q in normalize_quiz(body)]
        except BaseException:
            # CancelledError lands here too
            self._reset(QuizState.idle)
            raise
        self.questions = questions
        self.state = QuizState.ready
        self._touch()
        logger.info("Quiz %s ready with %d questions (%s)", self.session_id, len(questions), tier.value)
        return questions

    def record_answer(self, question_index: int, choice_index: int) -> None:
        if self.state != QuizState.ready:
            raise InvalidQuizAction("Answers can only be changed while a quiz is in progress.")
        if not 0 <= question_index < len(self.questions):
            raise InvalidAnswer(f"Question {question_index} does not exist.")
        if not 0 <= choice_index < len(self.questions[question_index].choices):
            raise InvalidAnswer(f"Choice {choice_index} does not exist for question {question_index}.")
        self.answers[question_index] = choice_index
        self._touch()

    def submit(self) -> int:
        if self.state != QuizState.ready:
            raise InvalidQuizAction("There is no quiz in progress to submit.")
        if len(self.answers) != len(self.questions):
            raise IncompleteAnswers("Please answer all questions.")
        self.state = QuizState.submitted
        self._touch()
        return self.score()

    def score(self) -> int:
        return sum(1 for i, q in enumerate(self.questions) if self.answers.get(i) == q.correct_answer_index)

    def choice_status(self, question_index: int, choice_index: int) -> str:
        selected = self.answers.get(question_index) == choice_index
        if self.state != QuizState.submitted:
            return "selected" if selected else "unselected"
        if self.questions[question_index].correct_answer_index == choice_index:
            return "correct"
        return "wrong" if selected else "neutral"

    def snapshot(self) -> Dict[str, Any]:
        submitted = self.state == QuizState.submitted
        questions = []
        for qi, q in enumerate(self.questions):
            questions.append(
                {
                    "question": q.question,
                    "choices": list(q.choices),
                    "choice_status": [self.choice_status(qi, ci) for ci in range(len(q.choices))],
                    "correct_answer_index": q.correct_answer_index if submitted else None,
                }
            )
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "tier": self.tier.value if self.tier else None,
            "questions": questions,
            "answers": {str(k): v for k, v in sorted(self.answers.items())},
            "score": self.score() if submitted else None,
            "total": len(self.questions),
        }

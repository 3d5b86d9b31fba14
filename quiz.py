from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, List, Optional, Union

from errors import GenerationFailed, InvalidQuizRequest
from generator import Question, generate_question, parse_difficulty
from problems import Difficulty

logger = logging.getLogger("math-quiz.quiz")

VALID_OPTION_COUNTS = (4, 6)
VALID_QUIZ_LENGTHS = (5, 10, 15)
DEFAULT_QUIZ_LENGTH = 10

# attempts per question before a GenerationFailed is surfaced
MAX_GENERATION_ATTEMPTS = 3

DIFFICULTY_MULTIPLIERS: Dict[Difficulty, float] = {
    Difficulty.easy: 1.0,
    Difficulty.normal: 1.1,
    Difficulty.hard: 1.3,
    Difficulty.genius: 1.5,
}


def _verify(q: Question, option_count: int) -> None:
    if (
        not q.id
        or not q.question_text
        or not q.correct_answer
        or len(q.options) != option_count
        or q.correct_answer not in q.options
    ):
        raise GenerationFailed(f"question {q.id or '?'} failed quiz verification")


def _is_choice(value: object, choices: tuple) -> bool:
    # "4" and 4.0 must not pass for 4
    return isinstance(value, int) and not isinstance(value, bool) and value in choices


def build_quiz(
    difficulty: Union[Difficulty, str],
    option_count: int,
    quiz_length: int = DEFAULT_QUIZ_LENGTH,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    level = parse_difficulty(difficulty)
    if not _is_choice(option_count, VALID_OPTION_COUNTS):
        raise InvalidQuizRequest("Invalid option count")
    if not _is_choice(quiz_length, VALID_QUIZ_LENGTHS):
        raise InvalidQuizRequest("Invalid quiz length")

    questions: List[Question] = []
    for n in range(quiz_length):
        for attempt in range(1, MAX_GENERATION_ATTEMPTS + 1):
            try:
                q = generate_question(level, option_count, rng=rng)
                _verify(q, option_count)
                questions.append(q)
                break
            except GenerationFailed as e:
                logger.warning(
                    "question %d/%d attempt %d failed: %s", n + 1, quiz_length, attempt, e
                )
                if attempt == MAX_GENERATION_ATTEMPTS:
                    raise
    logger.info(
        "built quiz: difficulty=%s options=%d length=%d", level.value, option_count, quiz_length
    )
    return questions


# --- Scoring -----------------------------------------------------------------------


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def calculate_points(difficulty: Union[Difficulty, str], correct: int) -> int:
    return _round_half_up(correct * DIFFICULTY_MULTIPLIERS[parse_difficulty(difficulty)])


def accuracy_percent(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    return _round_half_up(correct * 100 / total)


def longest_streak(results: Iterable[Dict[str, Any]]) -> int:
    best = run = 0
    for res in results:
        if res.get("correct"):
            run += 1
            best = max(best, run)
        else:
            run = 0
    return best

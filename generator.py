from __future__ import annotations

import logging
import math
import random
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from distractors import Proposer, synthesize_options
from errors import GenerationFailed, InvalidDifficulty
from problems import Category, Difficulty, Problem, build_problem, format_value

logger = logging.getLogger("math-quiz.generator")

CATEGORIES: Tuple[Category, ...] = tuple(Category)


@dataclass(frozen=True)
class Question:
    id: str
    question_text: str
    category: Category
    difficulty: Difficulty
    correct_answer: str
    options: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape handed to quiz clients."""
        return {
            "id": self.id,
            "questionText": self.question_text,
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "category": self.category.value,
        }


def parse_difficulty(value: Union[Difficulty, str]) -> Difficulty:
    try:
        return Difficulty(value)
    except (ValueError, TypeError):
        raise InvalidDifficulty(f"Invalid difficulty: {value!r}") from None


def _is_numeric(text: str) -> bool:
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


def _self_check(question: Question, option_count: int) -> None:
    violations: List[str] = []
    if not question.id:
        violations.append("missing id")
    if len(question.options) != option_count:
        violations.append(f"expected {option_count} options, got {len(question.options)}")
    if question.options.count(question.correct_answer) != 1:
        violations.append("correct answer must appear exactly once")
    if len(set(question.options)) != len(question.options):
        violations.append("duplicate options")
    bad = [o for o in (question.correct_answer, *question.options) if not _is_numeric(o)]
    if bad:
        violations.append(f"non-numeric values: {bad}")
    if violations:
        raise GenerationFailed(f"malformed question: {'; '.join(violations)}")


def assemble_question(
    problem: Problem,
    category: Category,
    difficulty: Difficulty,
    option_count: int,
    rng: random.Random,
    propose: Optional[Proposer] = None,
) -> Question:
    """Turn a built problem into a checked, shuffled Question."""
    options = synthesize_options(problem, difficulty, option_count, rng, propose=propose)
    rng.shuffle(options)
    question = Question(
        id=uuid.UUID(int=rng.getrandbits(128), version=4).hex,
        question_text=problem.text,
        category=category,
        difficulty=difficulty,
        correct_answer=format_value(problem.answer, problem.places),
        options=tuple(options),
    )
    _self_check(question, option_count)
    return question


def generate_question(
    difficulty: Union[Difficulty, str],
    option_count: int = 4,
    rng: Optional[random.Random] = None,
    category: Optional[Union[Category, str]] = None,
) -> Question:
    """
    Generate one multiple-choice math question.

    Each call is independent: the category is drawn uniformly unless pinned,
    and a fresh random source is used unless one is injected.

    Raises:
        InvalidDifficulty: difficulty is not easy / normal / hard / genius.
        GenerationFailed: options could not be completed, or the result
            failed its self-check.
    """
    level = parse_difficulty(difficulty)
    if rng is None:
        rng = random.Random()
    picked = Category(category) if category is not None else rng.choice(CATEGORIES)

    problem = build_problem(picked, level, rng)
    logger.debug("built %s/%s problem: %s", picked.value, level.value, problem.operation)
    return assemble_question(problem, picked, level, option_count, rng)

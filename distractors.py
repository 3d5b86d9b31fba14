from __future__ import annotations

import random
from typing import Any, Callable, Dict, List, Optional

from sympy import Integer, Rational, SympifyError, ceiling, sympify

from errors import GenerationFailed
from problems import (
    PI,
    Difficulty,
    Problem,
    format_value,
    is_finite_number,
    median,
    quantize,
    std_dev,
    variance,
)

# Minimum offset magnitude per tier; bigger answers widen the range further.
TIER_FLOOR: Dict[Difficulty, int] = {
    Difficulty.easy: 5,
    Difficulty.normal: 10,
    Difficulty.hard: 15,
    Difficulty.genius: 20,
}
SPREAD_RATIO = Rational(1, 10)

# Hard stop on proposals per question
MAX_ATTEMPTS = 500

Proposer = Callable[[random.Random], Any]


# Plausible wrong reasoning for each operation, fed the problem's operands.
_MISTAKES: Dict[str, Callable[..., List[Any]]] = {
    "add": lambda a, b: [a - b],
    "sub": lambda a, b: [a + b, b - a],
    "mul": lambda a, b: [a + b, a * (b - 1)],
    "div": lambda a, b: [a * b, a - b],
    "pow": lambda base, exp: [base * exp, base ** (exp - 1)],
    "root": lambda radicand, index: [Rational(radicand, index)],
    "mod": lambda a, b: [a // b, b - a % b],
    "percent": lambda p, n: [Rational(n, p), n - Rational(p * n, 100)],
    "nested": lambda a, b, c: [a + b * c, a * b + c],
    "linear": lambda m, c, rhs: [Rational(rhs + c, m), Rational(rhs, m)],
    "linear_both": lambda a, b, c, d: [Rational(d + b, a - c), Rational(d - b, a + c)],
    "quadratic": lambda k, r1, r2: [-max(r1, r2), min(r1, r2), r1 + r2],
    "circle_area": lambda r: [2 * PI * r, PI * r],
    "sphere_surface": lambda r: [PI * r**2, 4 * PI * r],
    "sphere_volume": lambda r: [PI * r**3, 4 * PI * r**2],
    "mean": lambda *data: [median(data)],
    "variance": lambda *data: [std_dev(data), variance(data, sample=True)],
    "std_dev": lambda *data: [variance(data), std_dev(data, sample=True)],
}


def mistake_values(problem: Problem) -> List[Any]:
    build = _MISTAKES.get(problem.operation)
    if build is None:
        return []
    return build(*problem.operands)


def spread_for(answer: Rational, difficulty: Difficulty, option_count: int = 0) -> int:
    # at least option_count so small non-negative answers leave room for every option
    return max(
        TIER_FLOOR[difficulty], int(ceiling(abs(answer) * SPREAD_RATIO)), option_count
    )


def random_offset_proposer(answer: Rational, places: int, spread: int) -> Proposer:
    step = 10**places

    def propose(rng: random.Random) -> Rational:
        return answer + Rational(rng.randint(-spread * step, spread * step), step)

    return propose


def _normalize(raw: Any, places: int) -> Optional[Rational]:
    try:
        value = sympify(raw)
    except (SympifyError, TypeError):
        return None
    if not is_finite_number(value):
        return None
    return quantize(value, places)


def synthesize_options(
    problem: Problem,
    difficulty: Difficulty,
    option_count: int,
    rng: random.Random,
    propose: Optional[Proposer] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> List[str]:
    """
    Return ``option_count`` display strings: the correct answer first, then
    unique distractors at the problem's precision.

    At genius tier the operation's mistake patterns are tried before random
    offsets. Raises GenerationFailed when ``max_attempts`` proposals do not
    yield enough valid, unique values.
    """
    answer = quantize(problem.answer, problem.places)
    if propose is None:
        propose = random_offset_proposer(
            answer, problem.places, spread_for(answer, difficulty, option_count)
        )

    pending = mistake_values(problem) if difficulty is Difficulty.genius else []
    values: List[Rational] = [answer]
    seen = {answer}
    attempts = 0

    while len(values) < option_count:
        if attempts >= max_attempts:
            raise GenerationFailed(
                f"only {len(values)} of {option_count} options after {attempts} attempts "
                f"({problem.operation or 'unknown'} operation)"
            )
        attempts += 1
        raw = pending.pop(0) if pending else propose(rng)
        candidate = _normalize(raw, problem.places)
        if candidate is None or candidate in seen:
            continue
        if problem.nonnegative and candidate < Integer(0):
            continue
        values.append(candidate)
        seen.add(candidate)

    return [format_value(v, problem.places) for v in values]

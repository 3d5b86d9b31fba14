# Problem builders: one per (category, difficulty) pair.
# Every builder draws from the injected random source and returns the exact
# answer alongside the operation and operands that produced it.

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from itertools import product
from typing import Any, Callable, Dict, Sequence, Tuple

from sympy import Integer, Rational, floor, nan, oo, sqrt, zoo
from sympy.core.expr import Expr


class Difficulty(str, Enum):
    easy = "easy"
    normal = "normal"
    hard = "hard"
    genius = "genius"


class Category(str, Enum):
    arithmetic = "arithmetic"
    algebra = "algebra"
    geometry = "geometry"
    statistics = "statistics"


PI = Rational(314, 100)  # π ≈ 3.14, as shown to the player


@dataclass(frozen=True)
class Problem:
    text: str
    answer: Expr
    places: int = 0  # decimals shown in the answer and every option
    operation: str = ""
    operands: Tuple[Any, ...] = ()
    nonnegative: bool = False


# --- Number helpers ----------------------------------------------------------------


def is_finite_number(value: Any) -> bool:
    if value in (oo, -oo, zoo, nan):
        return False
    if not getattr(value, "is_number", False):
        return False
    return value.is_finite is not False and value.is_real is not False


def quantize(value: Expr, places: int) -> Rational:
    """Round half away from zero to ``places`` decimals, keeping the result exact."""
    scale = 10**places
    scaled = value * scale
    half = Rational(1, 2)
    if scaled < 0:
        units = -floor(-scaled + half)
    else:
        units = floor(scaled + half)
    return Rational(int(units), scale)


def format_value(value: Expr, places: int) -> str:
    units = int(quantize(value, places) * 10**places)
    if places == 0:
        return str(units)
    sign = "-" if units < 0 else ""
    whole, frac = divmod(abs(units), 10**places)
    return f"{sign}{whole}.{frac:0{places}d}"


def _signed(n: int) -> str:
    if n > 0:
        return f" + {n}"
    if n < 0:
        return f" - {-n}"
    return ""


def _term(coef: int, var: str, leading: bool = False) -> str:
    if coef == 0:
        return ""
    mag = "" if abs(coef) == 1 else str(abs(coef))
    if leading:
        return f"{'-' if coef < 0 else ''}{mag}{var}"
    return f" {'-' if coef < 0 else '+'} {mag}{var}"


# --- Arithmetic --------------------------------------------------------------------


def binary_problem(op: str, a: int, b: int, places: int = 0) -> Problem:
    if op == "add":
        text, value = f"What is {a} + {b}?", Integer(a + b)
    elif op == "sub":
        text, value = f"What is {a} - {b}?", Integer(a - b)
    elif op == "mul":
        text, value = f"What is {a} × {b}?", Integer(a * b)
    elif op == "div":
        text, value = f"What is {a} ÷ {b}?", Rational(a, b)
    elif op == "mod":
        text, value = f"What is {a} \\bmod {b}?", Integer(a % b)
    elif op == "pow":
        text, value = f"What is {a}^{{{b}}}?", Integer(a) ** b
    elif op == "percent":
        text, value = f"What is {a}\\% of {b}?", Rational(a * b, 100)
    else:
        raise ValueError(f"unknown arithmetic operation: {op}")
    if places:
        text += f" (Round to {places} decimal places)"
    return Problem(text, value, places, op, (a, b))


def root_problem(root: int, index: int = 2) -> Problem:
    radicand = root**index
    if index == 2:
        text = f"What is \\sqrt{{{radicand}}}?"
    else:
        text = f"What is \\sqrt[{index}]{{{radicand}}}?"
    return Problem(text, Integer(root), 0, "root", (radicand, index))


def nested_problem(a: int, b: int, c: int) -> Problem:
    return Problem(f"What is ({a} + {b}) × {c}?", Integer((a + b) * c), 0, "nested", (a, b, c))


def _arithmetic_easy(rng: random.Random) -> Problem:
    op = rng.choice(("add", "sub"))
    return binary_problem(op, rng.randint(1, 20), rng.randint(1, 20))


def _arithmetic_normal(rng: random.Random) -> Problem:
    op = rng.choice(("add", "sub", "mul"))
    return binary_problem(op, rng.randint(10, 59), rng.randint(10, 59))


def _arithmetic_hard(rng: random.Random) -> Problem:
    op = rng.choice(("add", "sub", "mul", "div"))
    if op in ("add", "sub"):
        return binary_problem(op, rng.randint(50, 500), rng.randint(50, 500))
    a, b = rng.randint(10, 109), rng.randint(2, 11)
    return binary_problem(op, a, b, places=2 if op == "div" else 0)


GENIUS_OPERATIONS = ("add", "sub", "mul", "div", "pow", "root", "mod", "percent", "nested")


def _arithmetic_genius(rng: random.Random) -> Problem:
    op = rng.choice(GENIUS_OPERATIONS)
    if op in ("add", "sub"):
        return binary_problem(op, rng.randint(100, 9999), rng.randint(100, 9999))
    if op == "mul":
        return binary_problem(op, rng.randint(100, 999), rng.randint(10, 99))
    if op == "div":
        # answer first: the dividend is built from the quotient
        divisor, quotient = rng.randint(10, 99), rng.randint(10, 99)
        return binary_problem(op, divisor * quotient, divisor)
    if op == "pow":
        return binary_problem(op, rng.randint(2, 12), rng.randint(2, 4))
    if op == "root":
        index = rng.choice((2, 3))
        return root_problem(rng.randint(11, 30) if index == 2 else rng.randint(3, 12), index)
    if op == "mod":
        return binary_problem(op, rng.randint(100, 1099), rng.randint(3, 29))
    if op == "percent":
        # multiples of 5% of multiples of 20 are always whole
        return binary_problem(op, 5 * rng.randint(1, 19), 20 * rng.randint(5, 50))
    return nested_problem(rng.randint(10, 99), rng.randint(10, 99), rng.randint(2, 19))


# --- Algebra -----------------------------------------------------------------------


def linear_problem(m: int, c: int, x: int) -> Problem:
    """``m·x + c = rhs`` where ``x`` is the chosen solution."""
    rhs = m * x + c
    text = f"Solve for x: {_term(m, 'x', leading=True)}{_signed(c)} = {rhs}"
    return Problem(text, Integer(x), 0, "linear", (m, c, rhs))


def linear_both_problem(a: int, b: int, c: int, x: int) -> Problem:
    """``a·x + b = c·x + d``; requires ``a != c``."""
    d = (a - c) * x + b
    text = (
        f"Solve for x: {_term(a, 'x', leading=True)}{_signed(b)}"
        f" = {_term(c, 'x', leading=True)}{_signed(d)}"
    )
    return Problem(text, Integer(x), 0, "linear_both", (a, b, c, d))


def quadratic_problem(r1: int, r2: int, k: int = 1) -> Problem:
    """``k(x - r1)(x - r2) = 0`` expanded; the answer is the larger root."""
    b = -k * (r1 + r2)
    c = k * r1 * r2
    text = f"Solve for x: {_term(k, 'x^{2}', leading=True)}{_term(b, 'x')}{_signed(c)} = 0"
    if r1 != r2:
        text += " (give the larger root)"
    return Problem(text, Integer(max(r1, r2)), 0, "quadratic", (k, r1, r2))


def _algebra_easy(rng: random.Random) -> Problem:
    return linear_problem(1, rng.randint(1, 10), rng.randint(1, 10))


def _algebra_normal(rng: random.Random) -> Problem:
    m, x = rng.randint(2, 9), rng.randint(1, 12)
    return linear_problem(m, rng.choice((0, rng.randint(1, 20))), x)


def _algebra_hard(rng: random.Random) -> Problem:
    r1 = rng.randint(1, 12)
    return quadratic_problem(r1, rng.choice((-r1, rng.randint(-9, 9))))


def _algebra_genius(rng: random.Random) -> Problem:
    if rng.random() < 0.5:
        c = rng.randint(1, 9)
        a = c + rng.randint(1, 9)
        return linear_both_problem(a, rng.randint(-30, 30), c, rng.randint(-12, 12))
    return quadratic_problem(rng.randint(-9, 9), rng.randint(-9, 9), k=rng.randint(2, 6))


# --- Geometry ----------------------------------------------------------------------

_PI_NOTE = "(Use π ≈ 3.14)"

_SHAPES: Dict[str, Tuple[str, Callable[..., Expr], int]] = {
    "circle_area": (
        "What is the area of a circle with radius {0}? " + _PI_NOTE,
        lambda r: PI * r**2,
        2,
    ),
    "circle_circumference": (
        "What is the circumference of a circle with radius {0}? " + _PI_NOTE,
        lambda r: 2 * PI * r,
        2,
    ),
    "rectangle_area": (
        "What is the area of a rectangle with length {0} and width {1}?",
        lambda l, w: Integer(l * w),
        0,
    ),
    "rectangle_perimeter": (
        "What is the perimeter of a rectangle with length {0} and width {1}?",
        lambda l, w: Integer(2 * (l + w)),
        0,
    ),
    "cube_volume": (
        "What is the volume of a cube with side length {0}?",
        lambda a: Integer(a) ** 3,
        0,
    ),
    "cube_surface": (
        "What is the surface area of a cube with side length {0}?",
        lambda a: Integer(6 * a * a),
        0,
    ),
    "sphere_surface": (
        "What is the surface area of a sphere with radius {0}? " + _PI_NOTE,
        lambda r: 4 * PI * r**2,
        2,
    ),
    "sphere_volume": (
        "What is the volume of a sphere with radius {0}? (Use π ≈ 3.14, round to 2 decimal places)",
        lambda r: Rational(4, 3) * PI * r**3,
        2,
    ),
}


def shape_problem(kind: str, *dims: int) -> Problem:
    template, formula, places = _SHAPES[kind]
    return Problem(
        template.format(*dims), formula(*dims), places, kind, tuple(dims), nonnegative=True
    )


def _geometry_easy(rng: random.Random) -> Problem:
    if rng.random() < 0.5:
        return shape_problem("circle_area", rng.randint(1, 5))
    return shape_problem("rectangle_area", rng.randint(2, 12), rng.randint(2, 12))


def _geometry_normal(rng: random.Random) -> Problem:
    if rng.random() < 0.5:
        length = rng.randint(1, 20)
        return shape_problem("rectangle_perimeter", length, length + rng.randint(1, 10))
    return shape_problem("circle_circumference", rng.randint(1, 10))


def _geometry_hard(rng: random.Random) -> Problem:
    if rng.random() < 0.5:
        return shape_problem("cube_volume", rng.randint(3, 12))
    return shape_problem("cube_surface", rng.randint(3, 15))


def _geometry_genius(rng: random.Random) -> Problem:
    if rng.random() < 0.5:
        return shape_problem("sphere_surface", rng.randint(5, 14))
    return shape_problem("sphere_volume", rng.randint(3, 12))


# --- Statistics --------------------------------------------------------------------


def mean(data: Sequence[int]) -> Rational:
    return Rational(sum(data), len(data))


def median(data: Sequence[int]) -> Rational:
    s = sorted(data)
    mid = len(s) // 2
    if len(s) % 2:
        return Integer(s[mid])
    return Rational(s[mid - 1] + s[mid], 2)


def variance(data: Sequence[int], sample: bool = False) -> Rational:
    m = mean(data)
    ss = sum((Integer(v) - m) ** 2 for v in data)
    return ss / (len(data) - 1 if sample else len(data))


def std_dev(data: Sequence[int], sample: bool = False) -> Expr:
    return sqrt(variance(data, sample=sample))


# label, statistic, fixed places (None: 0 for whole values, else 2)
_STATS: Dict[str, Tuple[str, Callable[[Sequence[int]], Expr], Any]] = {
    "mean": ("mean", mean, None),
    "median": ("median", median, None),
    "variance": ("variance", variance, 2),
    "std_dev": ("standard deviation", std_dev, 2),
}


def stat_problem(kind: str, data: Sequence[int]) -> Problem:
    label, statistic, places = _STATS[kind]
    value = statistic(data)
    if places is None:
        places = 0 if value.is_integer else 2
    text = f"What is the {label} of {', '.join(str(v) for v in data)}?"
    if places:
        text += " (Round to 2 decimal places)"
    return Problem(text, value, places, kind, tuple(data), nonnegative=True)


def _statistics_easy(rng: random.Random) -> Problem:
    # symmetric around the centre, so the mean is whole
    centre = rng.randint(3, 10)
    d1, d2 = rng.randint(1, centre - 1), rng.randint(1, centre - 1)
    data = [centre - d1, centre + d1, centre - d2, centre + d2]
    rng.shuffle(data)
    return stat_problem("mean", data)


def _statistics_normal(rng: random.Random) -> Problem:
    kind = rng.choice(("median", "mean"))
    return stat_problem(kind, [rng.randint(1, 30) for _ in range(5)])


def _statistics_hard(rng: random.Random) -> Problem:
    return stat_problem("std_dev", [rng.randint(1, 10) for _ in range(5)])


def _statistics_genius(rng: random.Random) -> Problem:
    kind = rng.choice(("variance", "std_dev"))
    size = rng.choice((5, 6))
    return stat_problem(kind, [rng.randint(1, 20) for _ in range(size)])


# --- Dispatch ----------------------------------------------------------------------

Builder = Callable[[random.Random], Problem]

BUILDERS: Dict[Tuple[Category, Difficulty], Builder] = {
    (Category.arithmetic, Difficulty.easy): _arithmetic_easy,
    (Category.arithmetic, Difficulty.normal): _arithmetic_normal,
    (Category.arithmetic, Difficulty.hard): _arithmetic_hard,
    (Category.arithmetic, Difficulty.genius): _arithmetic_genius,
    (Category.algebra, Difficulty.easy): _algebra_easy,
    (Category.algebra, Difficulty.normal): _algebra_normal,
    (Category.algebra, Difficulty.hard): _algebra_hard,
    (Category.algebra, Difficulty.genius): _algebra_genius,
    (Category.geometry, Difficulty.easy): _geometry_easy,
    (Category.geometry, Difficulty.normal): _geometry_normal,
    (Category.geometry, Difficulty.hard): _geometry_hard,
    (Category.geometry, Difficulty.genius): _geometry_genius,
    (Category.statistics, Difficulty.easy): _statistics_easy,
    (Category.statistics, Difficulty.normal): _statistics_normal,
    (Category.statistics, Difficulty.hard): _statistics_hard,
    (Category.statistics, Difficulty.genius): _statistics_genius,
}


def _ensure_builders_cover_all_combinations() -> None:
    missing = [key for key in product(Category, Difficulty) if key not in BUILDERS]
    if missing:
        raise RuntimeError(f"No problem builder registered for: {missing}")


_ensure_builders_cover_all_combinations()


def build_problem(category: Category, difficulty: Difficulty, rng: random.Random) -> Problem:
    return BUILDERS[(category, difficulty)](rng)

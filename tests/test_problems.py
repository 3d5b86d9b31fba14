import random
import re

import pytest
from sympy import Integer, Rational, sqrt

from problems import (
    BUILDERS,
    Category,
    Difficulty,
    binary_problem,
    build_problem,
    format_value,
    linear_both_problem,
    linear_problem,
    quadratic_problem,
    shape_problem,
    stat_problem,
)


def test_every_category_difficulty_pair_has_a_builder():
    assert len(BUILDERS) == len(Category) * len(Difficulty)


@pytest.mark.parametrize(
    "value, places, expected",
    [
        (Integer(12), 0, "12"),
        (Integer(8), 2, "8.00"),
        (Rational(1, 3), 2, "0.33"),
        (Rational(5, 2), 0, "3"),
        (Rational(-5, 2), 0, "-3"),
        (Rational(-1, 1000), 2, "0.00"),
        (sqrt(2), 2, "1.41"),
    ],
)
def test_format_value(value, places, expected):
    assert format_value(value, places) == expected


def test_hard_division_rounds_to_two_places():
    p = binary_problem("div", 84, 6, places=2)
    assert p.text == "What is 84 ÷ 6? (Round to 2 decimal places)"
    assert format_value(p.answer, p.places) == "14.00"
    assert float(format_value(p.answer, p.places)) == 84 / 6


def test_unknown_arithmetic_operation():
    with pytest.raises(ValueError):
        binary_problem("bogus", 1, 2)


def test_linear_equation_substitutes_back():
    p = linear_problem(3, 7, 4)
    m = re.fullmatch(r"Solve for x: (\d+)x \+ (\d+) = (-?\d+)", p.text)
    assert m is not None
    assert int(m[1]) * 4 + int(m[2]) == int(m[3])
    assert format_value(p.answer, 0) == "4"


def test_generated_linear_equations_are_consistent():
    rng = random.Random(5)
    pattern = re.compile(r"Solve for x: (\d*)x(?: ([+-]) (\d+))? = (-?\d+)")
    for _ in range(100):
        p = build_problem(Category.algebra, Difficulty.normal, rng)
        m = pattern.fullmatch(p.text)
        assert m is not None, p.text
        coef = int(m[1]) if m[1] else 1
        const = int(m[3] or 0) * (-1 if m[2] == "-" else 1)
        assert coef * int(p.answer) + const == int(m[4])


def test_linear_both_sides():
    p = linear_both_problem(5, 3, 2, 4)
    assert p.text == "Solve for x: 5x + 3 = 2x + 15"
    assert p.answer == 4


def test_quadratic_text_and_larger_root():
    p = quadratic_problem(3, -3)
    assert p.text == "Solve for x: x^{2} - 9 = 0 (give the larger root)"
    assert p.answer == 3

    p = quadratic_problem(2, 5, k=2)
    assert p.text == "Solve for x: 2x^{2} - 14x + 20 = 0 (give the larger root)"
    assert 2 * 5**2 - 14 * 5 + 20 == 0
    assert p.answer == 5


@pytest.mark.parametrize(
    "kind, dims, expected",
    [
        ("circle_area", (5,), "78.50"),
        ("circle_circumference", (2,), "12.56"),
        ("rectangle_perimeter", (3, 5), "16"),
        ("cube_volume", (4,), "64"),
        ("sphere_surface", (5,), "314.00"),
        ("sphere_volume", (3,), "113.04"),
    ],
)
def test_shapes(kind, dims, expected):
    p = shape_problem(kind, *dims)
    assert p.nonnegative
    assert format_value(p.answer, p.places) == expected


@pytest.mark.parametrize(
    "kind, data, expected",
    [
        ("mean", [2, 4, 6, 8], "5"),
        ("mean", [1, 2, 2, 2], "1.75"),
        ("median", [3, 5, 7, 9, 11], "7"),
        ("std_dev", [1, 2, 3, 4, 5], "1.41"),
        ("variance", [2, 4, 6, 8, 10], "8.00"),
    ],
)
def test_statistics(kind, data, expected):
    p = stat_problem(kind, data)
    assert format_value(p.answer, p.places) == expected


def test_genius_arithmetic_answers_are_exact_integers():
    rng = random.Random(11)
    for _ in range(300):
        p = build_problem(Category.arithmetic, Difficulty.genius, rng)
        assert p.places == 0
        assert p.answer.is_integer, p.text


def test_easy_statistics_mean_is_whole():
    rng = random.Random(3)
    for _ in range(100):
        p = build_problem(Category.statistics, Difficulty.easy, rng)
        assert p.places == 0
        assert p.answer.is_integer

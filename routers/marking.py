from __future__ import annotations

import logging
import math
import re
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sympy import nan, oo, zoo
from sympy.parsing.sympy_parser import (
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from bank import get_question
from db import SessionLocal
from errors import InvalidDifficulty
from generator import Question, parse_difficulty
from models import GameResult
from quiz import VALID_QUIZ_LENGTHS, accuracy_percent, calculate_points, longest_streak
from schemas.marking import MarkRequest, MarkResponse, SubmitRequest, SubmitResponse

logger = logging.getLogger("math-quiz.marking")

router = APIRouter(tags=["marking"])

# --- Parsing / validation helpers ------------------------------------------------
LEN_LIMIT = 100
_INVALID_CHARS_MSG = (
    "Only numeric answers using digits, spaces, + - * / . and parentheses are allowed."
)
_NON_FINITE_MSG = "Answer is not finite (e.g., division by zero)."
_TOO_COMPLEX_MSG = "Answer is too complex."
# no ^ on purpose: answers never need powers, and big ones are expensive to evaluate
_ALLOWED_RE = re.compile(r"^[0-9+\-*/().\s]{1,100}$")

TRANSFORMS = standard_transformations + (implicit_multiplication_application,)

_MAX_OPS = 50
MAX_SUBMIT_ITEMS = max(VALID_QUIZ_LENGTHS)
TOLERANCE = 1e-9


def _validate_answer_text(s: Optional[str]) -> Optional[str]:
    if s is None or not isinstance(s, str) or not s.strip():
        return "Answer required."
    if len(s) > LEN_LIMIT:
        return "Answer too long (> 100)."
    if _ALLOWED_RE.fullmatch(s) is None:
        return _INVALID_CHARS_MSG
    return None


def _assert_finite_sym(val: Any) -> None:
    if getattr(val, "is_finite", None) is False or val in (oo, -oo, zoo, nan):
        raise ValueError(_NON_FINITE_MSG)


def _eval_numeric(expr: str) -> float:
    sym = parse_expr(expr, transformations=TRANSFORMS, evaluate=True)
    if hasattr(sym, "count_ops") and sym.count_ops() > _MAX_OPS:
        raise ValueError(_TOO_COMPLEX_MSG)
    _assert_finite_sym(sym)
    val = float(sym.evalf())
    if not math.isfinite(val):
        raise ValueError(_NON_FINITE_MSG)
    return val


def _result(ok: bool, correct: bool, feedback: str, expected: Optional[str]) -> Dict[str, Any]:
    return {
        "ok": ok,
        "correct": correct,
        "score": 1 if correct else 0,
        "feedback": feedback,
        "expected": expected,
    }


# --- Core marking -----------------------------------------------------------------


def _mark_one(q: Question, answer: str) -> Dict[str, Any]:
    expected = q.correct_answer

    msg = _validate_answer_text(answer)
    if msg:
        return _result(False, False, msg, expected)

    # Options are sent verbatim, so exact text is the common case
    if answer.strip() == expected:
        return _result(True, True, "", expected)

    try:
        user_val = _eval_numeric(answer)
    except ValueError as e:
        return _result(False, False, str(e), expected)
    except Exception:
        return _result(False, False, _INVALID_CHARS_MSG, expected)

    correct = math.isclose(user_val, float(expected), rel_tol=0, abs_tol=TOLERANCE)
    feedback = f"Correct; the listed answer is {expected}." if correct else ""
    return _result(True, correct, feedback, expected)


# --- Endpoints --------------------------------------------------------------------


@router.post("/mark", response_model=MarkResponse)
def mark(req: MarkRequest):
    q = get_question(req.id)
    if not q:
        return _result(False, False, "unknown question id", None)
    return _mark_one(q, req.answer)


@router.post("/quiz/submit", response_model=SubmitResponse)
def submit_quiz(req: SubmitRequest):
    try:
        level = parse_difficulty(req.difficulty)
    except InvalidDifficulty:
        raise HTTPException(status_code=400, detail="Invalid difficulty")

    if len(req.items) > MAX_SUBMIT_ITEMS:
        raise HTTPException(status_code=400, detail="Too many answers")
    ids = [it.id for it in req.items]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=400, detail="Duplicate question id")

    # scoring follows the difficulty the questions were issued at
    issued = {qid: get_question(qid) for qid in ids}
    if any(q is not None and q.difficulty is not level for q in issued.values()):
        raise HTTPException(status_code=400, detail="Difficulty does not match issued questions")

    t0 = time.perf_counter()
    results: List[Dict[str, Any]] = []
    correct_count = skipped = 0

    for it in req.items:
        q = issued[it.id]
        if not q:
            res = _result(False, False, "unknown question id", None)
        elif it.answer is None or not it.answer.strip():
            res = _result(True, False, "skipped", q.correct_answer)
            skipped += 1
        else:
            res = _mark_one(q, it.answer)
        results.append(
            {
                "id": it.id,
                "questionText": q.question_text if q else None,
                "correctAnswer": q.correct_answer if q else None,
                "userAnswer": it.answer,
                "response": res,
            }
        )
        if res["correct"]:
            correct_count += 1

    total = len(results)
    wrong = total - correct_count - skipped
    accuracy = accuracy_percent(correct_count, total)
    points = calculate_points(level, correct_count)
    streak = longest_streak(r["response"] for r in results)
    measured_ms = int(round((time.perf_counter() - t0) * 1000))
    duration_ms = req.duration_ms if req.duration_ms is not None else measured_ms

    result_id: Optional[int] = None
    try:
        with SessionLocal() as db:
            row = GameResult(
                difficulty=level.value,
                correct=correct_count,
                wrong=wrong,
                skipped=skipped,
                total=total,
                accuracy=accuracy,
                points_earned=points,
                streak=streak,
                duration_ms=duration_ms,
                items=results,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            result_id = row.id
    except SQLAlchemyError:
        logger.exception("could not persist game result")

    logger.info(
        "quiz submitted: difficulty=%s correct=%d/%d points=%d",
        level.value,
        correct_count,
        total,
        points,
    )
    return {
        "ok": True,
        "total": total,
        "correct": correct_count,
        "wrong": wrong,
        "skipped": skipped,
        "accuracy": accuracy,
        "points_earned": points,
        "streak": streak,
        "duration_ms": duration_ms,
        "results": results,
        "result_id": result_id,
    }

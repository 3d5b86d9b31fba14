from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from bank import get_question, remember_questions
from errors import GenerationFailed, InvalidDifficulty, InvalidQuizRequest
from quiz import build_quiz
from schemas.questions import QuestionOut, QuizRequest, QuizResponse

logger = logging.getLogger("math-quiz.quiz")

router = APIRouter(prefix="/quiz", tags=["quiz"])


@router.post("/questions", response_model=QuizResponse)
def create_quiz(req: QuizRequest):
    try:
        questions = build_quiz(req.difficulty, req.option_count, req.quiz_length)
    except InvalidDifficulty:
        raise HTTPException(status_code=400, detail="Invalid difficulty")
    except InvalidQuizRequest as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationFailed as e:
        logger.error("quiz generation failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to generate quiz questions")

    remember_questions(questions)
    return {"questions": [q.to_dict() for q in questions]}


@router.get("/questions/{qid}", response_model=QuestionOut)
def get_question_detail(qid: str):
    q = get_question(qid)
    if not q:
        raise HTTPException(status_code=404, detail="question not found")
    return q.to_dict()

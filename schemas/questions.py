# schemas/questions.py
from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuestionOut(CamelModel):
    id: str
    question_text: str
    options: List[str]
    correct_answer: str
    category: str


class QuizRequest(CamelModel):
    # checked by hand so bad values come back as 400, not 422
    difficulty: str
    option_count: Any = None
    quiz_length: Any = Field(default=10)


class QuizResponse(BaseModel):
    questions: List[QuestionOut]

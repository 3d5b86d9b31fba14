# schemas/marking.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from schemas.questions import CamelModel

# ---------- Mark single ----------


class MarkRequest(BaseModel):
    id: str
    answer: str


class MarkResponse(BaseModel):
    ok: bool
    correct: bool
    score: int
    feedback: str
    expected: Optional[str] = None


# ---------- Quiz submission ----------


class SubmitItem(BaseModel):
    id: str
    # None or blank means the question was skipped
    answer: Optional[str] = None


class SubmitItemResult(CamelModel):
    id: str
    # None when the id was not issued by this server
    question_text: Optional[str] = None
    correct_answer: Optional[str] = None
    user_answer: Optional[str] = None
    response: MarkResponse


class SubmitRequest(CamelModel):
    difficulty: str
    items: List[SubmitItem]
    # Client may send it; otherwise the server measures marking time.
    duration_ms: Optional[int] = None


class SubmitResponse(CamelModel):
    ok: bool
    total: int
    correct: int
    wrong: int
    skipped: int
    accuracy: int
    points_earned: int
    streak: int
    duration_ms: int
    results: List[SubmitItemResult]
    result_id: Optional[int] = None

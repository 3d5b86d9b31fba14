from datetime import datetime
from typing import Any

from pydantic import ConfigDict

from schemas.questions import CamelModel


class GameResultOut(CamelModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    created_at: datetime | None
    difficulty: str
    correct: int
    wrong: int
    skipped: int
    total: int
    accuracy: int
    points_earned: int
    streak: int
    duration_ms: int | None = None
    # usually excluded in list views
    items: list[Any] | None = None

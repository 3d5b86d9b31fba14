from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from bank import bank_size, clear_bank
from deps.auth import require_admin

logger = logging.getLogger("math-quiz.admin")

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.get("/bank")
def bank_status():
    return {"ok": True, "count": bank_size()}


@router.post("/clear-bank")
def clear_issued_questions():
    n = clear_bank()
    logger.info("cleared %d issued questions", n)
    return {"ok": True, "cleared": n}

from fastapi import APIRouter, Depends, HTTPException, Query

from db import SessionLocal
from deps.auth import require_client
from models import GameResult
from schemas.results import GameResultOut

router = APIRouter(prefix="/results", tags=["results"])


@router.get("/recent-list", dependencies=[Depends(require_client)])
def results_recent(limit: int = Query(default=20, ge=1, le=100)):
    with SessionLocal() as db:
        rows = db.query(GameResult).order_by(GameResult.created_at.desc()).limit(limit).all()

    # Reuse schema; exclude the potentially large per-question "items"
    items = [
        GameResultOut.model_validate(r).model_dump(by_alias=True, exclude={"items"}) for r in rows
    ]
    return {"ok": True, "items": items, "count": len(items)}


@router.get("/{result_id}", response_model=GameResultOut)
def get_result(result_id: int):
    # Public endpoint: results are shareable by id
    with SessionLocal() as db:
        r = db.get(GameResult, result_id)
        if not r:
            raise HTTPException(status_code=404, detail="Result not found")
        return GameResultOut.model_validate(r)

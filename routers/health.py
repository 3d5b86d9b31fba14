from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from alembic.config import Config
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from db import engine
from errors import QuestionGenerationError
from generator import generate_question
from problems import Difficulty

router = APIRouter(prefix="/health", tags=["health"])

_ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"


@router.get("/generator")
def health_generator():
    """Generate one question per difficulty; any failure is a 500."""
    samples = {}
    for level in Difficulty:
        try:
            q = generate_question(level, 4)
        except QuestionGenerationError as e:
            raise HTTPException(status_code=500, detail=f"generator_error: {level.value}: {e}")
        samples[level.value] = q.category.value
    return {"ok": True, "categories": samples}


@router.get("/db")
def health_db():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=500, detail=f"db_error: {type(e).__name__}: {e}")
    return {"ok": True}


def _alembic_heads() -> list[str]:
    cfg = Config(str(_ALEMBIC_INI))
    cfg.set_main_option("script_location", str(_ALEMBIC_INI.parent / "alembic"))
    return list(ScriptDirectory.from_config(cfg).get_heads())


def _db_revision() -> str | None:
    with engine.connect() as conn:
        try:
            return conn.execute(text("SELECT version_num FROM alembic_version")).scalar_one_or_none()
        except SQLAlchemyError:
            # table missing: schema was never migrated
            return None


@router.get("/migrations")
def health_migrations():
    try:
        heads = _alembic_heads()
    except (CommandError, OSError) as e:
        return {
            "ok": False,
            "error": f"alembic_scripts_unavailable: {e}",
            "code_heads": [],
            "db_version": None,
        }
    try:
        db_ver = _db_revision()
    except SQLAlchemyError as e:
        return {"ok": False, "error": f"db_connect_failed: {e}", "code_heads": heads, "db_version": None}

    synced = db_ver in heads
    return {"ok": synced, "synced": synced, "db_version": db_ver, "code_heads": heads}

import os
import tempfile
from pathlib import Path

# Must be set before db.py is imported anywhere
_DB_PATH = Path(tempfile.mkdtemp(prefix="math-quiz-")) / "test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["ADMIN_TOKEN"] = "secret"
os.environ["QUIZ_API_KEY"] = "client-key"

import pytest  # noqa: E402

import models  # noqa: E402,F401
from db import Base, engine  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _tables():
    Base.metadata.create_all(engine)
    yield
    engine.dispose()

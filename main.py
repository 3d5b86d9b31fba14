import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Routers
from routers.admin import router as admin_router
from routers.health import router as health_router
from routers.marking import router as marking_router
from routers.quiz import router as quiz_router
from routers.results import router as results_router

logger = logging.getLogger("math-quiz")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Math Quiz – Question API")

allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "https://math-quiz-next.vercel.app",
]
if os.getenv("CLIENT_URL"):
    allowed_origins.append(os.environ["CLIENT_URL"])

# Allow calls from the Next.js dev server and production site
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*", "x-api-key", "x-admin-token"],
)


@app.get("/")
def health_root():
    return {"ok": True}


app.include_router(quiz_router)  # /quiz/questions
app.include_router(marking_router)  # /mark, /quiz/submit
app.include_router(results_router)  # /results/...
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...

logger.info("Math Quiz API ready; CORS origins: %s", allowed_origins)

from __future__ import annotations

from fastapi import FastAPI

from lastgreen.log import setup_logging
from routes.resolve_routes import router as resolve_router

setup_logging()

# ------------------------------
# FastAPI App
# ------------------------------
app = FastAPI(
    title="Last Green SHA API",
    description="Resolve the newest commit on a branch that passed the CI gate",
    version="1.0.0",
)

app.include_router(resolve_router, prefix="/api", tags=["last-green"])

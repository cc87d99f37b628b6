from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .routers import estimate, pins

logger = logging.getLogger("roofquote")
logger.setLevel(settings.LOG_LEVEL)

app = FastAPI(
    title="Roofquote",
    description="Roofing takeoff, quantity and estimate pricing pipeline",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(estimate.router, prefix="/api")
app.include_router(pins.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "roofquote"}

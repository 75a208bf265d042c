"""FastAPI application entry point."""

import os

import uvicorn
from ddtrace import patch_all
from fastapi import FastAPI

from lecture_transcriber.api.routes import sessions_router
from lecture_transcriber.logging import setup_logging

patch_all()
setup_logging("lecture-transcriber-api")

app = FastAPI(title="Lecture Transcription API")
app.include_router(sessions_router)


def run():
    """Serves the API with uvicorn."""
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "4000")), log_config=None)

"""
Thesyn - FastAPI Backend Server

Research paper companion powered by Gemini:
- Analysis: summary, glossary and key insights at a chosen level
- Chat: follow-up questions grounded in the analyzed document
- Search: Google Search grounded lookups with sources
- Voice: text-to-speech readout and speech transcription
"""

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from thesyn import __version__
from thesyn.assistant import get_assistant
from thesyn.dashboard import dashboard_router, HealthStatus

logging.basicConfig(
    level=os.getenv("THESYN_LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Thesyn API",
    description="Research paper analysis, chat, search and voice backed by Gemini",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include dashboard router
app.include_router(dashboard_router)


# ==================== Timing Middleware ====================

@app.middleware("http")
async def add_timing_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration_ms = int((time.time() - start_time) * 1000)
    response.headers["X-Duration-Ms"] = str(duration_ms)
    return response


# ==================== Health Check ====================

@app.get("/health", response_model=HealthStatus)
async def health_check():
    assistant = get_assistant()
    return {
        "status": "healthy",
        "version": __version__,
        "gemini": "available" if assistant.is_available else "unconfigured",
    }


def main():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()

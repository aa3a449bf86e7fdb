"""
SwingCoach Backend API

Serves the swing analysis engine over HTTP. Clients run pose estimation
themselves and post the landmark frames of one recorded swing.

Development server:
    uvicorn main:app --reload --host 0.0.0.0 --port 8000

Interactive docs at /docs (Swagger UI) and /redoc.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import API_VERSION
from api.routes import router as api_router
from core.services.detectors import ALL_DETECTORS

# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Frontends allowed to call the API during development
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


# =============================================================================
# Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the engine setup on startup and a goodbye on shutdown."""
    logger.info(f"SwingCoach API {API_VERSION} ready, {len(ALL_DETECTORS)} fault detectors loaded")
    yield
    logger.info("SwingCoach API stopped")


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="SwingCoach API",
    description="""
    **Golf Swing Analysis Engine**

    Post the pose frames of a recorded swing and get back its phases,
    camera angle, club type, biomechanical metrics, a 0-100 score and the
    technique faults found.

    ## Endpoints

    - `GET /api/health` - Health check
    - `POST /api/analysis/frames` - Analyze a swing
    - `GET /api/mistakes` - Faults the analyzer can report

    ## Frame format

    33 landmarks per frame in body-part order, as `[x, y, z, visibility]`
    lists or as objects. Undetected landmarks carry visibility 0.
```json
    {"frameIndex": 0, "timestamp": 0.0, "landmarks": [[0.5, 0.2, 0.0, 0.99], ...]}
```
    """,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Root"])
async def root():
    """Service name, version and where to look next."""
    return {
        "name": "SwingCoach API",
        "version": API_VERSION,
        "description": "Golf Swing Analysis Engine",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.logging_config import setup_logging

# Routers
from .routers.health import router as health_router
from .routers.ingest import router as ingest_router
from .routers.analysis import router as analysis_router

# ---------------------------------------------------------
# Logging & App init
# ---------------------------------------------------------
setup_logging()

api = FastAPI(title=settings.project_name)

# ---------------------------------------------------------
# CORS middleware
# ---------------------------------------------------------
api.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------
# Routers
# ---------------------------------------------------------
api.include_router(health_router, prefix="/health", tags=["health"])
api.include_router(ingest_router, prefix="/ingest", tags=["ingest"])
api.include_router(analysis_router, prefix="/analysis", tags=["analysis"])


@api.get("/")
def root():
    return {
        "status": "ok",
        "project": settings.project_name,
    }


# Imported by tests and ASGI servers: from backend.analystpro.main import app
app = api

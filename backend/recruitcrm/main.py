"""RecruitCRM FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from recruitcrm.config import get_settings
from recruitcrm.recruiting.routers import candidates
from recruitcrm.services.job_queue import close_redis_pool


settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    yield
    # Shutdown
    await close_redis_pool()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Recruitment CRM - deduplicated candidate intake",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


# API routers
app.include_router(
    candidates.router,
    prefix=f"{settings.api_v1_prefix}/candidates",
    tags=["Candidates"],
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "recruitcrm.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )

"""FastAPI application entry point."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .api.routes import boards, patterns

# Get settings
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Hexagonal tile board engine: spiral refill and line/core/loop pattern detection",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(boards.router)
app.include_router(patterns.router)


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Hex Pull Board Engine API",
        "endpoints": {
            "create_board": "/api/boards",
            "board": "/api/boards/{board_id}",
            "tap": "/api/boards/{board_id}/tap",
            "pull": "/api/boards/{board_id}/pull",
            "collect": "/api/boards/{board_id}/collect",
            "clear": "/api/boards/{board_id}/clear",
            "stats": "/api/boards/{board_id}/stats",
            "text": "/api/boards/{board_id}/text",
            "detect": "/api/patterns/detect",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hexpull.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )

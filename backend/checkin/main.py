from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import uvicorn

from checkin.api.routes import attendees, health, scan
from checkin.core.config import settings
from checkin.core.logging import setup_logging
from checkin.services.scanner import PushScanCapability
from checkin.services.session import ScanSessionController

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    setup_logging()
    logger.info("🚀 Starting Attendee Check-in...")

    yield

    # Shutdown
    await app.state.controller.reset()
    logger.info("👋 Shutting down...")

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Single-event guest check-in: load a guest list, scan QR codes at the door",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # One session per process
    app.state.scanner = PushScanCapability()
    app.state.controller = ScanSessionController(capability=app.state.scanner)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["Health"])
    app.include_router(attendees.router, prefix=settings.API_PREFIX, tags=["Attendees"])
    app.include_router(scan.router, prefix=settings.API_PREFIX, tags=["Scan"])

    @app.get("/")
    async def root():
        """Root endpoint with API information"""
        return {
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "operational",
            "docs": "/docs",
            "endpoints": {
                "health": f"{settings.API_PREFIX}/health",
                "upload_list": f"{settings.API_PREFIX}/attendees/upload",
                "paste_list": f"{settings.API_PREFIX}/attendees/manual",
                "start_scan": f"{settings.API_PREFIX}/scan/start",
                "decoded_scan": f"{settings.API_PREFIX}/scan/decoded",
                "image_scan": f"{settings.API_PREFIX}/scan/image"
            }
        }

    return app

app = create_app()

def run():
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)

if __name__ == "__main__":
    run()

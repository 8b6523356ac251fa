"""
PlowTrack - Plow Inventory, Shipments & Parts Ledger
FastAPI Application Entry Point
"""
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from contextlib import asynccontextmanager

from app.core import settings, engine, Base, create_cache
from app.api.router import api_router
from app.jobs import ActivityCleanupScheduler

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

# Lifespan for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables if not exist
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.APP_NAME} starting on port {settings.APP_PORT}")
    
    scheduler = ActivityCleanupScheduler()
    try:
        scheduler.start()
    except Exception as e:
        logger.warning(f"Could not start scheduler: {e}")
    
    yield
    
    scheduler.stop()
    logger.info(f"{settings.APP_NAME} shutting down")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Plow Inventory, Shipments & Parts Ledger",
    version="1.0.0",
    lifespan=lifespan
)
app.state.cache = create_cache(ttl_seconds=settings.CACHE_TTL_SECONDS)

@app.exception_handler(RequestValidationError)
async def invalid_payload_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are a 400 with the field errors attached"""
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid payload", "errors": jsonable_encoder(exc.errors())}
    )

# Include routers
app.include_router(api_router, prefix="/api")

# Root redirect to API docs
@app.get("/")
async def root():
    return RedirectResponse(url="/docs")

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.APP_NAME}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )

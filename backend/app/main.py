"""
FastAPI application entry point
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .core.logging import setup_logging, get_logger
from .database import init_db
from .routes import reviews, workers, qr_tokens, badges

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.app_name} API started")
    yield


app = FastAPI(title=f"{settings.app_name} API", debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing fields are a plain 400 for API clients"""
    errors = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Missing or invalid fields", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


app.include_router(reviews.router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(workers.router, prefix="/api/workers", tags=["Workers"])
app.include_router(qr_tokens.router, prefix="/api/qr-tokens", tags=["QR Tokens"])
app.include_router(badges.router, prefix="/api/badges", tags=["Badges"])


@app.get("/health")
def health_check():
    return {"status": "ok", "app": settings.app_name}

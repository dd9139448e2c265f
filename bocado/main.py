"""FastAPI application entry point."""

from dotenv import load_dotenv

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

# Load environment variables from .env file
load_dotenv()

import structlog  # noqa: E402

from bocado.api.routes import router  # noqa: E402
from bocado.core.config import settings  # noqa: E402
from bocado.core.exceptions import BocadoError  # noqa: E402
from bocado.core.logging import configure_logging  # noqa: E402
from bocado.db.init_db import init_db  # noqa: E402

configure_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(title=settings.project_name)
app.include_router(router, prefix=settings.api_v1_prefix)


@app.exception_handler(BocadoError)
async def bocado_error_handler(request: Request, exc: BocadoError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_failed", path=request.url.path, code=exc.code, status=exc.status_code, detail=str(exc))
    return JSONResponse(status_code=exc.status_code, content={"error": exc.code, "detail": exc.message})


@app.on_event("startup")
def on_startup() -> None:
    """Initialize database artifacts."""
    init_db()


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Basic sanity endpoint."""
    return {"message": "Bocado API is running"}


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Health check endpoint for Docker."""
    return {"status": "healthy"}

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.api.deps import get_db
from app.api.v1.api import api_router
from app.core.logging_config import setup_log_queue_handler
from app.db.base_class import Base
from app.db.session import engine

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup sequence initiated...")

    queue_handler, log_listener = setup_log_queue_handler()
    log_listener.start()

    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database schema check successful during startup.")
    except Exception as e:
        logger.warning(f"Database schema check failed during startup: {type(e).__name__}: {e}")

    logger.info("Application startup complete. Ready to accept requests.")
    yield

    logger.info("Application shutdown sequence initiated...")
    log_listener.stop()
    logging.getLogger().removeHandler(queue_handler)
    logger.info("Application shutdown complete.")


app = FastAPI(
    title="CP Arena",
    lifespan=lifespan
)

app.add_middleware(ProxyHeadersMiddleware, trusted_hosts="*")
app.include_router(api_router, prefix="/api")


def _describe_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        message = error.get("msg", "Invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return "; ".join(messages) or "Invalid request."


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    detail = _describe_validation_error(exc)
    logger.warning(f"Validation error for {request.url}: {detail}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP Exception: {exc.status_code} for {request.url} - Detail: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled Internal Server Error for {request.url}:", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal server error occurred. Please try again later."}
    )


@app.get("/health")
async def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return {"status": "ok"}

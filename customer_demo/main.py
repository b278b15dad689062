import os
import time
import asyncio
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from customer_demo.config import settings
from customer_demo.api import customers
from customer_demo.console import routes as console
from customer_demo.database import Base, get_engine, connect_with_retry, check_database_health

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


async def initialize_db():
    """Background task to create tables once the database answers"""
    if os.getenv("SKIP_DB_INIT"):
        logger.info("Skipping database initialization (SKIP_DB_INIT set)")
        return

    logger.info("Waiting for the database...")
    if await asyncio.to_thread(connect_with_retry):
        try:
            # Models must be imported before create_all so Base knows about them
            import customer_demo.models.customer  # noqa: F401

            await asyncio.to_thread(Base.metadata.create_all, bind=get_engine())
            logger.info("Database schema is up to date.")
        except SQLAlchemyError as e:
            logger.error(f"SCHEMA ERROR: {e}", exc_info=True)
    else:
        logger.critical("DATABASE UNREACHABLE: background initialization failed.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Database initialization runs in the background so startup never blocks.
    """
    app.state.start_time = time.time()

    logger.info("Registered routes:")
    for route in app.routes:
        if hasattr(route, "path") and hasattr(route, "methods"):
            logger.info(f"  {sorted(route.methods)} {route.path}")

    init_task = asyncio.create_task(initialize_db())

    yield

    if not init_task.done():
        init_task.cancel()


# Create FastAPI app
app = FastAPI(
    title="Customer Management Demo",
    description="Customer record CRUD API with a server-rendered console",
    version=settings.APP_VERSION,
    lifespan=lifespan
)


def _field_name(loc) -> str:
    # ("body", "phoneNumber") -> "phoneNumber"; a bare ("body",) means the body itself
    parts = [str(part) for part in loc if part != "body"]
    return ".".join(parts) or "body"


def _field_message(error: dict) -> str:
    if error.get("type") == "missing":
        return "is required"
    ctx_error = error.get("ctx", {}).get("error")
    if isinstance(ctx_error, ValueError):
        return str(ctx_error)
    return error.get("msg", "is invalid")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report every invalid field at once with a 400"""
    errors = [
        {"field": _field_name(error.get("loc", ())), "message": _field_message(error)}
        for error in exc.errors()
    ]
    detail = "; ".join(f"{e['field']}: {e['message']}" for e in errors)
    logger.info(f"Validation failed for {request.method} {request.url.path}: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "errors": errors, "type": "ValidationError", "status": "error"}
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"DATABASE ERROR on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "The customer database is unavailable", "type": "DatabaseError", "status": "error"}
    )


# Global Exception Handler to prevent raw text "Internal Server Error"
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"GLOBAL ERROR: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": type(exc).__name__, "status": "error"}
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(customers.router)
app.include_router(console.router)


# Health check
@app.get("/api/health")
def health_check(response: Response):
    """Health check endpoint"""
    db_health = check_database_health()

    if not db_health:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return {
        "status": "healthy" if db_health else "unhealthy",
        "version": settings.APP_VERSION,
        "database": "connected" if db_health else "disconnected",
    }


# Root redirect to the console
@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/console")


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)

"""
Climate Champion Portal - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS and session middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Maps domain errors to structured error responses
5. Registers all API route handlers
6. Provides health check endpoint

The application follows a modular architecture:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: Business logic (auth gate, aggregation, leaderboard, scoring, files)
- store.py: Record store over the database session
- errors.py: Domain error taxonomy
- logging_config.py: Structured logging configuration
- database.py: Database connection management
"""

import time
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from portal import config
from portal.database import DATABASE_URL, create_tables
from portal.errors import PortalError, Unauthenticated
from portal.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from portal.routes import admin, leaderboard, students
from portal.services.auth import using_default_admin_credentials

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")
auth_logger = get_logger("auth")

# Auto-create tables for SQLite
if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite, creating tables directly")
    create_tables()

if using_default_admin_credentials():
    log_with_context(auth_logger, "WARNING",
        "Default admin credentials in use; set ADMIN_EMAIL and ADMIN_PASSWORD")

# ──────────────────────────────────────────────────────────────
# Create FastAPI application
# ──────────────────────────────────────────────────────────────
app = FastAPI(
    title="Climate Champion Portal",
    description=(
        "Students register, upload PDF submissions and follow their scores; "
        "admins score submissions and control leaderboard visibility."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)

# Signed-cookie sessions carry the bound principal
app.add_middleware(
    SessionMiddleware,
    secret_key=config.SESSION_SECRET,
    session_cookie="portal_session",
    same_site="lax",
    https_only=False
)


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
# ──────────────────────────────────────────────────────────────
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """
    Generate a request ID for every HTTP request, expose it in the
    X-Request-ID header, and log request start and completion with latency.
    """
    req_id = generate_request_id()
    request_id_var.set(req_id)

    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "user_agent": request.headers.get("user-agent", ""),
            "query_params": dict(request.query_params)
        })

    response = await call_next(request)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


# ──────────────────────────────────────────────────────────────
# Error mapping
# ──────────────────────────────────────────────────────────────
def is_browser_navigation(request: Request) -> bool:
    return request.method == "GET" and "text/html" in request.headers.get("accept", "")


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """
    Turn a domain error into ``{"error": message}`` with its status code.
    Unauthenticated page navigations are redirected to the login page instead.
    """
    if isinstance(exc, Unauthenticated) and is_browser_navigation(request):
        return RedirectResponse(exc.login_path, status_code=303)

    level = "ERROR" if exc.status_code >= 500 else "INFO"
    log_with_context(logger, level,
        f"{type(exc).__name__}: {exc.message}",
        extra_data={"path": request.url.path, "status_code": exc.status_code})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    log_with_context(logger, "INFO", "Request validation failed",
        extra_data={"path": request.url.path, "errors": len(exc.errors())})
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": jsonable_encoder(exc.errors())}
    )


# ──────────────────────────────────────────────────────────────
# Register API routes
# ──────────────────────────────────────────────────────────────
app.include_router(students.router, tags=["Students"])
app.include_router(leaderboard.router, tags=["Leaderboard"])
app.include_router(admin.router, tags=["Admin"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for container health checks and monitoring."""
    return {"status": "healthy", "service": "climate-portal-backend", "version": "1.0.0"}


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "Climate Champion Portal",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "register": "POST /register",
            "login": "POST /login",
            "logout": "POST /logout",
            "my_submissions": "GET /api/student/submissions",
            "upload": "POST /upload",
            "view_file": "GET /view-file/{submission_id}",
            "leaderboard": "GET /leaderboard",
            "admin_login": "POST /admin/login",
            "admin_students": "GET /admin/students",
            "assign_score": "POST /admin/assign-score",
            "leaderboard_status": "GET /admin/leaderboard-status",
            "toggle_leaderboard": "POST /admin/toggle-leaderboard",
            "admin_download": "GET /admin/download/{submission_id}"
        }
    }

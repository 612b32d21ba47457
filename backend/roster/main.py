"""
Student Registry - FastAPI Application Entry Point.

This is the main application module that:
1. Sets up structured JSON logging
2. Maps the domain classes and creates tables for SQLite
3. Implements request ID middleware (X-Request-ID header)
4. Registers the student API routes
5. Provides health check endpoint

Layout:
- models/: plain domain classes (Student, Grade, Badge, ...)
- orm/: table declarations and imperative mapping
- services/: repository and XML binding
- routes/: API endpoint handlers
"""

import time
from fastapi import FastAPI, Request

from roster.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from roster.routes import students
from roster.database import DATABASE_URL, create_tables

# Map domain classes onto the tables before any request is served
import roster.orm  # noqa: F401

# ──────────────────────────────────────────────────────────────
# Initialize structured logging BEFORE anything else
# ──────────────────────────────────────────────────────────────
setup_logging()
logger = get_logger("http")

# Auto-create tables for SQLite local development
if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite, creating tables directly")
    create_tables()

app = FastAPI(
    title="Student Registry",
    description=(
        "Student records with grades per discipline, an optional picture and "
        "badge, and XML export."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


# ──────────────────────────────────────────────────────────────
# Request ID Middleware
#
# Generates a unique UUID per incoming request, stores it in a
# context variable for log entries and returns it in X-Request-ID.
# ──────────────────────────────────────────────────────────────
@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
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


app.include_router(students.router, tags=["Students"])


@app.get("/health", tags=["Health"])
def health_check():
    """Health check endpoint for Docker health checks and monitoring."""
    return {"status": "healthy", "service": "student-registry", "version": "1.0.0"}


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": "Student Registry",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "create": "POST /api/students",
            "list": "GET /api/students",
            "detail": "GET /api/students/{id}",
            "grade": "PUT /api/students/{id}/grades/{discipline}",
            "xml": "GET /api/students/{id}/xml",
            "delete": "DELETE /api/students/{id}",
            "disciplines": "GET /api/disciplines"
        }
    }

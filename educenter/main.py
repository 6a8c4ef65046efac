# /educenter/main.py

# --- Core FastAPI Imports ---
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .core.exceptions import ServiceError, service_error_handler, validation_error_handler
from .core.logging_config import setup_logging

# --- Application-specific Router Imports ---
from .routers import (
    applications_router,
    archive_router,
    attendance_router,
    auth_router,
    budget_router,
    courses_router,
    debtors_router,
    groups_router,
    lessons_router,
    payments_router,
    roles_router,
    users_router,
)

# --- Service Imports for Startup Logic ---
from .db.database import SessionLocal
from .services import role_service
from .services.database_service import DatabaseService


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    session = SessionLocal()
    try:
        role_service.ensure_default_roles(DatabaseService(session))
    finally:
        session.close()
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="EduCenter Back-Office API",
    description="Students, teachers, groups, attendance, tuition payments and reports of an education center.",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Translation ---
app.add_exception_handler(ServiceError, service_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# --- API Router Inclusion ---
app.include_router(auth_router.router, prefix="/auth", tags=["Auth"])
app.include_router(users_router.router, prefix="/users", tags=["Users"])
app.include_router(roles_router.router, prefix="/roles", tags=["Roles"])
app.include_router(courses_router.router, prefix="/courses", tags=["Courses"])
app.include_router(groups_router.router, prefix="/groups", tags=["Groups"])
app.include_router(attendance_router.router, prefix="/attendance", tags=["Attendance"])
app.include_router(lessons_router.router, prefix="/lessons", tags=["Lessons"])
app.include_router(payments_router.router, prefix="/payments", tags=["Payments"])
app.include_router(budget_router.router, prefix="/budget", tags=["Budget"])
app.include_router(debtors_router.router, prefix="/debtors", tags=["Debtors"])
app.include_router(applications_router.router, prefix="/applications", tags=["Applications"])
app.include_router(archive_router.router, prefix="/archive", tags=["Archive"])


# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "EduCenter API is running!", "version": app.version}

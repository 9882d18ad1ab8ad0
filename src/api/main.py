"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from audit.dependencies import get_audit_emitter, shutdown_audit_emitter
from iam.bootstrap import bootstrap_iam
from iam.dependencies.user import get_role_repository, get_user_repository
from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    close_database_connections,
    create_schema,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_security_settings, get_settings
from infrastructure.version import __version__
from jobs.dependencies import build_job_service, get_job_repository
from jobs.presentation import router as jobs_router
from members.presentation import router as members_router


@asynccontextmanager
async def directory_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Schema creation and IAM bootstrap (roles, optional admin user)
    - Audit emitter start, and flush/stop on shutdown
    - Cleanup of expired jobs at startup
    - Database engine disposal on shutdown
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)

    await create_schema()

    security = get_security_settings()
    admin_password = security.bootstrap_admin_password
    await bootstrap_iam(
        user_repository=get_user_repository(),
        role_repository=get_role_repository(),
        admin_password=admin_password.get_secret_value() if admin_password else None,
        bcrypt_rounds=security.bcrypt_rounds,
    )

    await get_audit_emitter().start()
    await build_job_service(get_job_repository()).cleanup_old_jobs()

    try:
        yield
    finally:
        await shutdown_audit_emitter()
        await close_database_connections()


app = FastAPI(
    title="Member Directory API",
    description="Member directory with role-based access control and audit logging",
    version=__version__,
    lifespan=directory_lifespan,
)

app.include_router(iam_router)
app.include_router(members_router)
app.include_router(jobs_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}

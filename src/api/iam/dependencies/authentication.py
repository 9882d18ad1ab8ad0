"""HTTP Basic authentication resolving the request's Principal."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from audit.dependencies import get_audit_sink
from audit.ports import AuditSink
from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.services import AuthenticationService
from iam.dependencies.user import get_role_repository, get_user_repository
from iam.ports.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    InvalidCredentialsError,
    UserStoreUnavailableError,
)
from iam.ports.repositories import IRoleRepository, IUserRepository
from infrastructure.settings import get_security_settings
from shared_kernel.authorization import Principal

http_basic = HTTPBasic(auto_error=False)

_WWW_AUTHENTICATE = {"WWW-Authenticate": "Basic"}


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance.

    Returns:
        DefaultAuthenticationProbe instance for observability
    """
    return DefaultAuthenticationProbe()


def get_authentication_service(
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
    role_repo: Annotated[IRoleRepository, Depends(get_role_repository)],
    audit_sink: Annotated[AuditSink, Depends(get_audit_sink)],
    probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
) -> AuthenticationService:
    """Get AuthenticationService configured from security settings."""
    settings = get_security_settings()
    return AuthenticationService(
        user_repository=user_repo,
        role_repository=role_repo,
        audit_sink=audit_sink,
        max_failed_attempts=settings.max_failed_login_attempts,
        lockout_duration=settings.lockout_duration,
        probe=probe,
    )


async def get_current_principal(
    request: Request,
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
    credentials: Annotated[HTTPBasicCredentials | None, Depends(http_basic)] = None,
) -> Principal:
    """Authenticate the request with HTTP Basic credentials.

    Returns:
        Principal with the caller's resolved roles

    Raises:
        HTTPException 401: Missing or invalid credentials
        HTTPException 423: Account locked after repeated failures
        HTTPException 403: Account disabled
        HTTPException 503: User store unreachable
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers=_WWW_AUTHENTICATE,
        )

    ip_address = request.client.host if request.client else None
    try:
        return await service.authenticate(
            credentials.username, credentials.password, ip_address=ip_address
        )
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers=_WWW_AUTHENTICATE,
        ) from e
    except AccountLockedError as e:
        raise HTTPException(status_code=status.HTTP_423_LOCKED, detail=str(e)) from e
    except AccountDisabledError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e)) from e
    except UserStoreUnavailableError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication service unavailable",
        ) from e

import logging
import secrets
from functools import lru_cache

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials, OAuth2PasswordBearer

from app.core.config import settings
from app.core.context import OperationContext
from app.core.security import TokenService
from app.db.base import create_db_engine
from app.repositories.base import Store
from app.repositories.memory import MemoryStore
from app.repositories.sql import SQLStore

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/v1/volunteers/login")
stats_basic = HTTPBasic()


@lru_cache
def get_store() -> Store:
    """Return the process-wide store selected by configuration."""
    if settings.db_disabled:
        logger.info("Using in-memory store")
        return MemoryStore()

    logger.info("Using relational store")
    return SQLStore(create_db_engine(settings.database_url))


@lru_cache
def get_token_service() -> TokenService:
    return TokenService.from_settings(settings)


def get_operation_context() -> OperationContext:
    """Context bounding every store call made while serving one request."""
    return OperationContext.with_timeout(settings.request_timeout_seconds)


def get_current_email(
    token: str = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Get the email bound to the bearer token of the current request."""
    email = tokens.email_from_token(token)
    if email is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return email


def require_matching_email(
    email: str,
    current_email: str = Depends(get_current_email),
) -> str:
    """
    Require the token email to equal the ``email`` path parameter.

    Used by endpoints that act on behalf of a volunteer, so a volunteer can
    only change their own memberships.
    """
    if current_email != email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token does not match the requested volunteer",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_email


def require_stats_credentials(
    credentials: HTTPBasicCredentials = Depends(stats_basic),
) -> str:
    """Check HTTP Basic credentials for the stats API."""
    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), settings.stats_username.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), settings.stats_password.encode("utf-8")
    )
    if not (username_ok and password_ok):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username

"""Auth service: login (sign-up on first use) and current volunteer lookup."""

import logging

from app.core.context import OperationContext
from app.core.security import TokenService
from app.domain.models import Volunteer
from app.repositories.base import Store
from app.schemas.volunteer import Token, VolunteerOut

logger = logging.getLogger(__name__)


def login(
    store: Store,
    tokens: TokenService,
    ctx: OperationContext,
    email: str,
    password: str,
) -> Token:
    """
    Authenticate a volunteer by email and password, creating the account on
    first use, and return a JWT access token bound to the email.

    Raises:
        PasswordMismatchError: If the account exists with another password.
    """
    store.authenticate_or_create(ctx, email, password)

    access_token = tokens.create_access_token(email)
    logger.debug("Access token issued for %s", email)
    return Token(
        access_token=access_token,
        token_type="bearer",
        volunteer=VolunteerOut(email=email),
    )


def get_current_volunteer(store: Store, ctx: OperationContext, email: str) -> Volunteer:
    """
    Load the volunteer bound to an already verified token.

    Raises:
        NotFoundError: If the account no longer exists.
    """
    return store.get_volunteer_by_email(ctx, email)

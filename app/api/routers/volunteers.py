from fastapi import APIRouter, Depends

from app.api.deps import (
    get_current_email,
    get_operation_context,
    get_store,
    get_token_service,
)
from app.core.context import OperationContext
from app.core.security import TokenService
from app.repositories.base import Store
from app.schemas.volunteer import Token, VolunteerLogin, VolunteerOut
from app.services import auth as auth_service

router = APIRouter(prefix="/volunteers", tags=["volunteers"])


@router.post("/login", response_model=Token)
def login(
    credentials: VolunteerLogin,
    store: Store = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
    ctx: OperationContext = Depends(get_operation_context),
):
    """
    Login endpoint - returns JWT token.

    Used both to sign up and to log in: the account is created on the first
    login for an email. Later logins must present the same password.
    """
    return auth_service.login(store, tokens, ctx, credentials.email, credentials.password)


@router.get("/me", response_model=VolunteerOut)
def get_me(
    current_email: str = Depends(get_current_email),
    store: Store = Depends(get_store),
    ctx: OperationContext = Depends(get_operation_context),
):
    """Get current authenticated volunteer information."""
    volunteer = auth_service.get_current_volunteer(store, ctx, current_email)
    return VolunteerOut.model_validate(volunteer)

"""Session and account recovery endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from codelogs.api.dependencies import get_optional_user, get_session_token, set_session_cookie
from codelogs.config import get_settings
from codelogs.database import get_db
from codelogs.models.user import User
from codelogs.schemas.auth import (
    LoginResponse,
    LoginStatus,
    PasswordReset,
    RecoverRequest,
    RecoverResponse,
    UserLogin,
)
from codelogs.schemas.common import Envelope
from codelogs.services.auth import (
    authenticate_user,
    create_session,
    destroy_session,
    request_password_reset,
    reset_password,
)

settings = get_settings()

router = APIRouter(prefix=f"/{settings.api_namespace}", tags=["auth"])

RECOVER_MESSAGE = "If the details match an account, a password reset has been issued."


@router.get("/login", response_model=LoginStatus)
def login_status(
    current_user: Annotated[User | None, Depends(get_optional_user)],
):
    """Report whether the caller is logged in."""
    if current_user is None:
        return LoginStatus(logged_in=False)
    return LoginStatus(logged_in=True, username=current_user.username, user_id=current_user.id)


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str | None, Depends(get_session_token)],
):
    """Login with username and password; the session token is set as a cookie."""
    user = authenticate_user(db, credentials.username, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )

    # Replace any session the client already holds
    destroy_session(db, token)
    session = create_session(db, user)

    set_session_cookie(response, session.token)

    return LoginResponse(message="Login successful.", username=user.username, user_id=user.id)


@router.delete("/login", response_model=Envelope)
def logout(
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str | None, Depends(get_session_token)],
):
    """Logout. Safe to call without a session."""
    destroy_session(db, token)
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return Envelope(message="Logout successful.")


@router.post("/recover", response_model=RecoverResponse)
def recover(
    data: RecoverRequest,
    db: Annotated[Session, Depends(get_db)],
):
    """Start account recovery by issuing a password reset token.

    The response is the same whether or not an account matched.
    """
    reset_token = request_password_reset(db, data.email, data.username)

    # No mail delivery yet: the token is handed back directly outside production
    if settings.is_production:
        reset_token = None
    return RecoverResponse(message=RECOVER_MESSAGE, reset_token=reset_token)


@router.post("/recover/reset", response_model=Envelope)
def recover_reset(
    data: PasswordReset,
    db: Annotated[Session, Depends(get_db)],
):
    """Set a new password using a reset token. Existing sessions are revoked."""
    reset_password(db, data.token, data.password)
    return Envelope(message="Password has been reset. Please login.")

"""Authentication service: credentials, server-side sessions and password resets."""

import hashlib
import logging
import secrets
from datetime import UTC, datetime, timedelta

from fastapi import HTTPException, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from codelogs.config import get_settings
from codelogs.models.user import User, UserSession
from codelogs.schemas.auth import UserRegister

logger = logging.getLogger(__name__)

settings = get_settings()

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

RESET_TOKEN_PURPOSE = "password_reset"  # noqa: S105


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def get_user_by_username(db: Session, username: str) -> User | None:
    """Get a user by username."""
    return db.query(User).filter(User.username == username).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def find_conflicting_user(db: Session, username: str, email: str) -> User | None:
    """Get a user already holding ``username`` or ``email``."""
    return db.query(User).filter(or_(User.username == username, User.email == email)).first()


def create_user(db: Session, data: UserRegister) -> User:
    """Create a new user, rejecting a taken username or email with 409."""
    if find_conflicting_user(db, data.username, data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists.",
        )

    user = User(
        username=data.username,
        email=data.email,
        phone=data.phone,
        dob=data.dob,
        password_hash=get_password_hash(data.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists.",
        ) from None
    db.refresh(user)
    logger.info(f"Registered user {user.id} ({user.username})")
    return user


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """Authenticate a user by username and password.

    Unknown usernames still pay for a hash comparison so the two failure
    cases cannot be told apart by timing.
    """
    user = get_user_by_username(db, username)
    if not user:
        pwd_context.dummy_verify()
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def search_users(db: Session, query: str) -> list[User]:
    """Case-insensitive substring search on username."""
    q = db.query(User)
    if query:
        q = q.filter(User.username.ilike(f"%{escape_like(query)}%", escape="\\"))
    return q.order_by(User.username).all()


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# Sessions


def _session_expiry() -> datetime:
    return datetime.now(UTC) + timedelta(minutes=settings.session_ttl_minutes)


def create_session(db: Session, user: User) -> UserSession:
    """Open a server-side session for a user and return it."""
    session = UserSession(
        token=secrets.token_urlsafe(32),
        user_id=user.id,
        username=user.username,
        expires_at=_session_expiry(),
    )
    db.add(session)
    db.commit()
    db.refresh(session)
    logger.info(f"Opened session for user {user.id}")
    return session


def get_session_user(db: Session, token: str | None) -> User | None:
    """Resolve a session token to its user, or None if missing or expired."""
    if not token:
        return None

    session = (
        db.query(UserSession)
        .filter(UserSession.token == token, UserSession.expires_at > datetime.now(UTC))
        .first()
    )
    if session is None:
        return None

    if settings.session_sliding:
        session.expires_at = _session_expiry()
        db.commit()

    return session.user


def destroy_session(db: Session, token: str | None) -> None:
    """Delete a session. Unknown or missing tokens are ignored."""
    if not token:
        return
    deleted = db.query(UserSession).filter(UserSession.token == token).delete()
    db.commit()
    if deleted:
        logger.info("Closed session")


def revoke_user_sessions(db: Session, user_id: int) -> int:
    """Delete every session belonging to a user."""
    deleted = db.query(UserSession).filter(UserSession.user_id == user_id).delete()
    db.commit()
    return deleted


def purge_expired_sessions(db: Session) -> int:
    """Delete sessions past their expiry. Returns the number removed."""
    deleted = (
        db.query(UserSession)
        .filter(UserSession.expires_at <= datetime.now(UTC))
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted


# Password reset


def _password_fingerprint(user: User) -> str:
    # Binds a reset token to the hash it was issued against, so it is single-use
    return hashlib.sha256(user.password_hash.encode("utf-8")).hexdigest()[:32]


def create_reset_token(user: User) -> str:
    """Create a short-lived signed password reset token."""
    expire = datetime.now(UTC) + timedelta(minutes=settings.reset_token_expiration_minutes)
    to_encode = {
        "sub": str(user.id),
        "purpose": RESET_TOKEN_PURPOSE,
        "fp": _password_fingerprint(user),
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_reset_token(token: str) -> dict | None:
    """Decode and validate a reset token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    if payload.get("purpose") != RESET_TOKEN_PURPOSE:
        return None
    return payload


def request_password_reset(db: Session, email: str, username: str | None = None) -> str | None:
    """Issue a reset token when the email (and username, if given) match an account.

    Returns None when nothing matches; callers must not reveal which case occurred.
    """
    user = get_user_by_email(db, email)
    if user is None or (username and user.username != username):
        logger.info("Password reset requested for unmatched account")
        return None

    logger.info(f"Issued password reset token for user {user.id}")
    return create_reset_token(user)


def reset_password(db: Session, token: str, new_password: str) -> User:
    """Set a new password from a reset token and revoke existing sessions."""
    invalid = HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Invalid or expired reset token.",
    )

    payload = decode_reset_token(token)
    if payload is None:
        logger.warning("Rejected malformed or expired reset token")
        raise invalid

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if user is None or payload.get("fp") != _password_fingerprint(user):
        logger.warning("Rejected stale reset token")
        raise invalid

    user.password_hash = get_password_hash(new_password)
    db.commit()
    revoked = revoke_user_sessions(db, user.id)
    logger.info(f"Password reset for user {user.id}, revoked {revoked} sessions")
    return user

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt
from sqlmodel import Session, select

from .config import SECRET_KEY, TOKEN_ALGORITHM, TOKEN_EXPIRE_HOURS
from .enums import Role
from .errors import UnauthorizedError
from .models import User


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, built from the stored user on every request."""
    user_id: int
    email: str
    role: Role


def _password_bytes(password: str) -> bytes:
    # Bcrypt has a 72-byte limit on the password bytes
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]
    return password_bytes


def hash_password(password: str) -> str:
    """Hash a password using bcrypt. Truncates to 72 bytes for bcrypt compatibility."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt())
    # Return as string for database storage
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode('utf-8'))


def create_access_token(user: User, expires_in: Optional[timedelta] = None) -> str:
    """Issue a signed token for a user."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "iat": now,
        "exp": now + (expires_in or timedelta(hours=TOKEN_EXPIRE_HOURS)),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm=TOKEN_ALGORITHM)


def decode_access_token(token: str) -> int:
    """Validate a token and return the user id it was issued for."""
    try:
        payload = jwt.decode(
            token,
            SECRET_KEY,
            algorithms=[TOKEN_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    try:
        return int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token")


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user by email and password."""
    statement = select(User).where(User.email == email)
    user = db.exec(statement).first()

    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user

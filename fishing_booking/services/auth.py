"""
Accounts and access: bcrypt password hashes, bearer JWTs, and the FastAPI
dependencies that turn a token into a captain or a guest.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging
import os
import warnings

from dotenv import load_dotenv
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from fishing_booking.database import get_db
from fishing_booking.exceptions import Unauthorized
from fishing_booking.models.user import User, UserRole

# passlib probes bcrypt.__about__, gone from newer bcrypt builds
warnings.filterwarnings("ignore", ".*bcrypt version.*")
warnings.filterwarnings("ignore", ".*trapped.*error reading bcrypt version.*")

load_dotenv()

logger = logging.getLogger(__name__)

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS
)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def password_matches(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def issue_token(user: User, lifetime: Optional[timedelta] = None) -> str:
    """Signed bearer token naming the user and the role it was issued for."""
    expires_at = datetime.now(timezone.utc) + (
        lifetime or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    claims = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "exp": expires_at,
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)


def read_token(token: str) -> Optional[dict]:
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        return None
    if not str(claims.get("sub", "")).isdigit():
        return None
    return claims


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    user = db.query(User).filter(User.email == email).first()
    if user is None or not password_matches(password, user.hashed_password):
        logger.info(f"Login failed for {email}")
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    claims = read_token(token)
    if claims is None:
        raise credentials_exception

    user = db.query(User).filter(User.id == int(claims["sub"])).first()
    # A deleted account, or one whose email changed, invalidates old tokens
    if user is None or user.email != claims.get("email"):
        raise credentials_exception
    return user


def require_captain(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.CAPTAIN:
        raise Unauthorized("Only captains can perform this action.")
    return current_user


def require_guest(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.GUEST:
        raise Unauthorized("Only guests can perform this action.")
    return current_user
